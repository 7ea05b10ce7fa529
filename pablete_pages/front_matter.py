r"""Split content files into front matter and body.

A content file carries front matter when its first line is ``---``. The
block ends at the next line reading ``---`` (or ``...``) and is parsed as a
YAML mapping; everything after it is the document body, which is left
untouched for the rendering engine.

Example
-------
>>> from pablete_pages.front_matter import split_front_matter
>>> document = split_front_matter("---\ntitle: Adapter\n---\nBody\n")
>>> document.front_matter
{'title': 'Adapter'}
>>> document.body
'Body\n'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

from ._constants import FRONT_MATTER_DELIMITER
from .config import ParseError, SchemaError, deep_merge, load_yaml_text

OPENING_PATTERN = re.compile(r"\A---[ \t]*\r?\n")
FRONT_MATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(?P<block>.*?)^(?:---|\.\.\.)[ \t]*(?:\r?\n|\Z)",
    re.MULTILINE | re.DOTALL,
)


@dc.dataclass(slots=True)
class FrontMatterDocument:
    """Front matter and body of a single content file.

    Attributes
    ----------
    front_matter : dict[str, Any]
        Explicit values from the file's front-matter block.
    body : str
        Text following the closing delimiter.
    has_front_matter : bool
        False for files without an opening delimiter; the engine copies those
        verbatim instead of rendering them.
    """

    front_matter: dict[str, typ.Any]
    body: str
    has_front_matter: bool = True


def has_front_matter(text: str) -> bool:
    """Return True when ``text`` opens with a front-matter delimiter."""
    return bool(OPENING_PATTERN.match(text.lstrip("\ufeff")))


def split_front_matter(text: str, *, source: str = "<string>") -> FrontMatterDocument:
    """Separate the front-matter block from the document body.

    Parameters
    ----------
    text : str
        Full contents of a content file.
    source : str, optional
        Name used in error messages.

    Returns
    -------
    FrontMatterDocument
        Parsed front matter (empty when the block is empty) and body.

    Raises
    ------
    ParseError
        If the block is never closed or its YAML is malformed. ``line`` counts
        from the top of the file.
    SchemaError
        If the block holds something other than a mapping.
    """
    text = text.lstrip("\ufeff")
    if not OPENING_PATTERN.match(text):
        return FrontMatterDocument(front_matter={}, body=text, has_front_matter=False)

    match = FRONT_MATTER_PATTERN.match(text)
    if match is None:
        msg = (
            f"Front matter in {source} opens with '{FRONT_MATTER_DELIMITER}' "
            "but is never closed."
        )
        raise ParseError(msg, line=1, column=1)

    try:
        loaded = load_yaml_text(match.group("block"), source=source)
    except ParseError as exc:
        line = exc.line + 1 if exc.line is not None else None
        location = f" at line {line}, column {exc.column}" if line is not None else ""
        msg = f"Invalid front matter in {source}{location}."
        raise ParseError(msg, line=line, column=exc.column) from exc

    if loaded is None:
        loaded = {}
    if not isinstance(loaded, cabc.Mapping):
        msg = f"Front matter in {source} must be a mapping, got {type(loaded).__name__}."
        raise SchemaError(msg)
    return FrontMatterDocument(front_matter=dict(loaded), body=text[match.end() :])


def merge_front_matter(
    defaults: cabc.Mapping[str, typ.Any], front_matter: cabc.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Layer a file's explicit front matter over its resolved defaults.

    File-level keys always win over defaults with the same name.

    Examples
    --------
    >>> merge_front_matter({"layout": "post", "comments": False}, {"comments": True})
    {'layout': 'post', 'comments': True}
    """
    return deep_merge(defaults, front_matter)


__all__ = [
    "FRONT_MATTER_PATTERN",
    "FrontMatterDocument",
    "has_front_matter",
    "merge_front_matter",
    "split_front_matter",
]
