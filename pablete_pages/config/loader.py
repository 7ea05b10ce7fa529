"""Load ``_config.yml`` into a validated :class:`SiteConfig`."""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML
from ruamel.yaml.error import MarkedYAMLError, YAMLError

from .._constants import DEFAULT_PERMALINK
from .helpers import (
    _build_scope_rules,
    _optional_str,
    _required_str,
    _string_list,
    _validate_baseurl,
    _validate_permalink,
    _validate_plugins,
    _validate_remote_theme,
    _validate_timezone,
    _validate_url,
)
from .models import ParseError, SchemaError, SiteConfig

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset(
    {
        "title",
        "url",
        "baseurl",
        "owner",
        "email",
        "description",
        "subtitle",
        "permalink",
        "plugins",
        "gems",
        "include",
        "exclude",
        "remote_theme",
        "theme",
        "locale",
        "date_format",
        "timezone",
        "defaults",
    }
)


def _build_safe_yaml() -> YAML:
    loader = YAML(typ="safe")
    loader.version = (1, 2)
    return loader


def load_yaml_text(text: str, *, source: str) -> typ.Any:
    """Parse YAML text, translating loader failures into :class:`ParseError`.

    Parameters
    ----------
    text : str
        YAML document to parse.
    source : str
        Name used in error messages (usually the file path).

    Returns
    -------
    Any
        The parsed document, or ``None`` for an empty document.

    Raises
    ------
    ParseError
        If the text is not well-formed YAML or holds an impossible timestamp.
        ``line`` and ``column`` are 1-based when the loader reports a
        position.
    """
    try:
        return _build_safe_yaml().load(text)
    except MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        problem = exc.problem or exc.context or "malformed YAML"
        location = f" at line {line}, column {column}" if line is not None else ""
        msg = f"Could not parse {source}{location}: {problem}"
        raise ParseError(msg, line=line, column=column) from exc
    except YAMLError as exc:
        msg = f"Could not parse {source}: {exc}"
        raise ParseError(msg) from exc
    except ValueError as exc:
        # Timestamp-shaped scalars such as 2024-02-30 fail in the constructor.
        msg = f"Could not parse {source}: {exc}"
        raise ParseError(msg) from exc


def parse_site_config(
    text: str, *, source: str = "<string>", source_root: Path | None = None
) -> SiteConfig:
    """Parse and validate configuration text.

    Parameters
    ----------
    text : str
        Contents of a ``_config.yml`` file.
    source : str, optional
        Name used in error messages.
    source_root : Path or None, optional
        Site source directory. When given, every ``include`` entry must exist
        relative to it.

    Returns
    -------
    SiteConfig
        Immutable configuration record.

    Raises
    ------
    ParseError
        If the text is not well-formed YAML.
    SchemaError
        If ``title`` or ``url`` is missing, the permalink style is unknown, or
        any other field is malformed.

    Examples
    --------
    >>> config = parse_site_config("title: Blog\\nurl: https://example.com\\n")
    >>> config.title, config.permalink
    ('Blog', 'date')
    """
    loaded = load_yaml_text(text, source=source)
    if loaded is None:
        loaded = {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure of {source} must be a mapping."
        raise SchemaError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    title = _required_str(raw, "title")
    url = _validate_url(_required_str(raw, "url").strip())
    baseurl = _validate_baseurl(raw.get("baseurl"))
    permalink = _validate_permalink(raw.get("permalink"))

    plugins_raw = raw.get("plugins")
    if plugins_raw is None and raw.get("gems") is not None:
        logger.warning(
            "%s uses the deprecated 'gems' key; rename it to 'plugins'.", source
        )
        plugins_raw = raw.get("gems")
    plugins = _validate_plugins(_string_list(plugins_raw, key="plugins"))
    include = _string_list(raw.get("include"), key="include")
    exclude = _string_list(raw.get("exclude"), key="exclude")

    if source_root is not None:
        _check_includes_exist(include, source_root)

    extras = {key: value for key, value in raw.items() if key not in _KNOWN_KEYS}
    config = SiteConfig(
        title=title,
        url=url,
        baseurl=baseurl,
        permalink=permalink or DEFAULT_PERMALINK,
        owner=_optional_str(raw.get("owner")),
        email=_optional_str(raw.get("email")),
        description=_optional_str(raw.get("description")),
        subtitle=_optional_str(raw.get("subtitle")),
        plugins=plugins,
        include=include,
        exclude=exclude,
        remote_theme=_validate_remote_theme(raw.get("remote_theme")),
        theme=_optional_str(raw.get("theme")),
        locale=_optional_str(raw.get("locale")),
        date_format=_optional_str(raw.get("date_format")),
        timezone=_validate_timezone(raw.get("timezone")),
        defaults=_build_scope_rules(raw.get("defaults")),
        extras=extras,
        explicit=frozenset(raw),
    )
    logger.debug(
        "Loaded %s: %d plugin(s), %d default scope(s)",
        source,
        len(config.plugins),
        len(config.defaults),
    )
    return config


def load_site_config(path: Path, *, source_root: Path | None = None) -> SiteConfig:
    """Load the blog's ``_config.yml``.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file.
    source_root : Path or None, optional
        Site source directory used to check ``include`` entries; defaults to
        the directory holding ``path``.

    Returns
    -------
    SiteConfig
        Parsed site configuration.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ParseError
        If the file is not valid UTF-8 or not well-formed YAML.
    SchemaError
        If required settings are missing or invalid.

    Examples
    --------
    >>> from pathlib import Path
    >>> from pablete_pages.config import load_site_config
    >>> config = load_site_config(Path("_config.yml"))  # doctest: +SKIP
    >>> config.resolve_plugins()  # doctest: +SKIP
    ['jekyll-include-cache', 'jekyll-target-blank']
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Configuration file '{path}' is not valid UTF-8: {exc.reason}"
        raise ParseError(msg) from exc
    root = source_root if source_root is not None else path.parent
    return parse_site_config(text, source=str(path), source_root=root)


def _check_includes_exist(include: tuple[str, ...], source_root: Path) -> None:
    missing = [entry for entry in include if not (source_root / entry).exists()]
    if missing:
        listed = ", ".join(missing)
        msg = f"Included path(s) not found under '{source_root}': {listed}"
        raise SchemaError(msg)


__all__ = ["load_site_config", "load_yaml_text", "parse_site_config"]
