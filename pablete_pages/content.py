"""Discover the blog's posts, drafts, and pages the way the engine reads them.

Posts live in ``_posts`` directories and are named ``YYYY-MM-DD-title.md``;
drafts live in ``_drafts`` and carry no date in their name. Any other
Markdown or HTML file with front matter is a page. Entries starting with
``_`` or ``.`` and entries on the exclude list are skipped unless they are
listed under ``include`` in ``_config.yml``.

Each discovered file becomes a :class:`ContentDocument` whose ``data`` is the
file's front matter layered over the defaults resolved from the site
configuration, and whose ``url`` follows the permalink style.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import datetime as dt
import fnmatch
import logging
import os
import re
import typing as typ
import zoneinfo
from pathlib import Path, PurePath, PurePosixPath

from ._constants import DRAFTS_DIR, PAGE_EXTENSIONS, POSTS_DIR
from .config import ParseError, SchemaError, SiteConfig
from .front_matter import merge_front_matter, split_front_matter
from .permalinks import page_url, post_url

logger = logging.getLogger(__name__)

POST_FILENAME_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-(?P<title>.+)$"
)


@dc.dataclass(slots=True)
class ContentDocument:
    """A content file with its resolved front matter and URL.

    Attributes
    ----------
    relative_path : PurePosixPath
        Path relative to the site source root.
    content_type : str
        ``posts``, ``drafts`` or ``pages``.
    front_matter : dict[str, Any]
        Values written in the file itself.
    data : dict[str, Any]
        Front matter merged over the configured defaults.
    body : str
        Document text after the front-matter block.
    url : str
        Site-relative URL derived from the permalink style.
    date : datetime or None
        Publication date for posts and drafts.
    slug : str or None
        Title segment of a post filename.
    """

    relative_path: PurePosixPath
    content_type: str
    front_matter: dict[str, typ.Any]
    data: dict[str, typ.Any]
    body: str
    url: str
    date: dt.datetime | None = None
    slug: str | None = None

    @property
    def published(self) -> bool:
        """False when the front matter sets ``published: false``."""
        return self.data.get("published", True) is not False


def classify(relative_path: str | PurePath) -> str:
    """Return the content type implied by a file's location."""
    parents = PurePosixPath(PurePath(relative_path).as_posix()).parts[:-1]
    if POSTS_DIR in parents:
        return "posts"
    if DRAFTS_DIR in parents:
        return "drafts"
    return "pages"


def _matches_any(relative: str, patterns: cabc.Iterable[str]) -> bool:
    for pattern in patterns:
        cleaned = pattern.strip().strip("/")
        if not cleaned:
            continue
        if relative == cleaned or relative.startswith(f"{cleaned}/"):
            return True
        if fnmatch.fnmatchcase(relative, cleaned):
            return True
    return False


def is_filtered(relative_path: str | PurePath, config: SiteConfig) -> bool:
    """Return True when the engine would skip ``relative_path``."""
    relative = PurePosixPath(PurePath(relative_path).as_posix())
    text = relative.as_posix()
    if _matches_any(text, config.include):
        return False
    name = relative.name
    if name in (POSTS_DIR, DRAFTS_DIR):
        return False
    if name.startswith(("_", ".", "#")) or name.endswith("~"):
        return True
    return _matches_any(text, config.effective_exclude)


def _iter_source_files(source_root: Path, config: SiteConfig) -> cabc.Iterator[Path]:
    for current, dirnames, filenames in os.walk(source_root):
        current_path = Path(current)
        kept: list[str] = []
        for dirname in sorted(dirnames):
            relative = (current_path / dirname).relative_to(source_root)
            if is_filtered(relative, config):
                logger.debug("Skipping directory %s", relative.as_posix())
                continue
            kept.append(dirname)
        dirnames[:] = kept
        for filename in sorted(filenames):
            path = current_path / filename
            if is_filtered(path.relative_to(source_root), config):
                continue
            yield path


_DATE_FORMATS: tuple[str, ...] = ("%Y-%m-%d %H:%M:%S %z", "%Y-%m-%d %H:%M %z")


def _parse_date_text(text: str, *, source: str) -> dt.datetime:
    cleaned = text.strip()
    try:
        return dt.datetime.fromisoformat(cleaned.replace("Z", "+00:00"))
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return dt.datetime.strptime(cleaned, fmt)
        except ValueError:
            continue
    msg = f"Front matter 'date' in {source} is not a valid date: {text!r}"
    raise SchemaError(msg)


def _to_site_time(value: dt.datetime, timezone: str | None) -> dt.datetime:
    """Express an offset-aware time in the site's zone (UTC when unset)."""
    if value.tzinfo is None:
        return value
    zone = zoneinfo.ZoneInfo(timezone) if timezone else dt.timezone.utc
    return value.astimezone(zone).replace(tzinfo=None)


def _coerce_date(
    value: object, *, source: str, timezone: str | None = None
) -> dt.datetime:
    match value:
        case dt.datetime():
            return _to_site_time(value, timezone)
        case dt.date():
            return dt.datetime.combine(value, dt.time())
        case str() as text:
            return _to_site_time(_parse_date_text(text, source=source), timezone)
        case _:
            msg = f"Front matter 'date' in {source} must be a date, got {value!r}"
            raise SchemaError(msg)


def _categories(
    relative_path: PurePosixPath, data: cabc.Mapping[str, typ.Any]
) -> list[str]:
    """Collect categories from folders above ``_posts`` and front matter."""
    parts = relative_path.parts[:-1]
    marker = POSTS_DIR if POSTS_DIR in parts else DRAFTS_DIR
    folders = list(parts[: parts.index(marker)]) if marker in parts else []
    categories: list[str] = list(folders)
    raw = data.get("categories")
    if isinstance(raw, str):
        categories.extend(raw.split())
    elif isinstance(raw, list):
        categories.extend(str(item) for item in raw)
    single = data.get("category")
    if isinstance(single, str) and single.strip():
        categories.append(single.strip())
    return categories


def _post_identity(
    relative_path: PurePosixPath, content_type: str, path: Path
) -> tuple[dt.datetime, str]:
    stem = relative_path.stem
    match = POST_FILENAME_PATTERN.match(stem)
    if match:
        try:
            date = dt.datetime(
                int(match["year"]), int(match["month"]), int(match["day"])
            )
        except ValueError as exc:
            msg = f"Post {relative_path.as_posix()} has an invalid date in its name."
            raise SchemaError(msg) from exc
        return date, match["title"]
    if content_type == "drafts":
        return dt.datetime.fromtimestamp(path.stat().st_mtime), stem
    msg = (
        f"Post {relative_path.as_posix()} must be named "
        f"YYYY-MM-DD-title{relative_path.suffix}."
    )
    raise SchemaError(msg)


def load_document(
    source_root: Path, relative_path: str | PurePath, config: SiteConfig
) -> ContentDocument | None:
    """Read one content file and resolve its front matter and URL.

    Parameters
    ----------
    source_root : Path
        Site source directory.
    relative_path : str or PurePath
        Location of the file relative to ``source_root``.
    config : SiteConfig
        Loaded site configuration providing defaults and the permalink style.

    Returns
    -------
    ContentDocument or None
        ``None`` for pages without front matter, which the engine copies as
        static files.

    Raises
    ------
    ParseError
        If the file is not UTF-8 or its front matter is malformed.
    SchemaError
        If a post filename carries no valid date or the front matter is not a
        mapping.
    """
    relative = PurePosixPath(PurePath(relative_path).as_posix())
    path = source_root / relative
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"Content file '{relative.as_posix()}' is not valid UTF-8: {exc.reason}"
        raise ParseError(msg) from exc

    parsed = split_front_matter(text, source=relative.as_posix())
    content_type = classify(relative)
    if content_type == "pages" and not parsed.has_front_matter:
        return None

    defaults = config.resolve_defaults(relative, content_type)
    data = merge_front_matter(defaults, parsed.front_matter)
    permalink = data.get("permalink")
    if permalink is not None and not isinstance(permalink, str):
        msg = f"Front matter 'permalink' in {relative.as_posix()} must be a string."
        raise SchemaError(msg)

    if content_type == "pages":
        url = page_url(relative, style=config.permalink, permalink=permalink)
        return ContentDocument(
            relative_path=relative,
            content_type=content_type,
            front_matter=parsed.front_matter,
            data=data,
            body=parsed.body,
            url=url,
        )

    date, title = _post_identity(relative, content_type, path)
    if data.get("date") is not None:
        date = _coerce_date(
            data["date"], source=relative.as_posix(), timezone=config.timezone
        )
    slug = data.get("slug")
    url = post_url(
        permalink or config.permalink,
        date=date,
        title=title,
        categories=_categories(relative, data),
        slug=str(slug) if slug is not None else None,
    )
    return ContentDocument(
        relative_path=relative,
        content_type=content_type,
        front_matter=parsed.front_matter,
        data=data,
        body=parsed.body,
        url=url,
        date=date,
        slug=title,
    )


def discover_content(
    source_root: Path, config: SiteConfig, *, include_drafts: bool = False
) -> list[ContentDocument]:
    """Return every post, page, and (optionally) draft under ``source_root``.

    Posts whose filename lacks a date and documents marked
    ``published: false`` are skipped, as the engine skips them. Posts are
    returned newest first, followed by pages in path order.
    """
    posts: list[ContentDocument] = []
    pages: list[ContentDocument] = []
    for path in _iter_source_files(source_root, config):
        relative = PurePosixPath(path.relative_to(source_root).as_posix())
        if relative.suffix.lower() not in PAGE_EXTENSIONS:
            continue
        content_type = classify(relative)
        if content_type == "drafts" and not include_drafts:
            continue
        if content_type == "posts" and not POST_FILENAME_PATTERN.match(relative.stem):
            logger.warning("Ignoring %s: post names need a date prefix", relative)
            continue
        document = load_document(source_root, relative, config)
        if document is None:
            logger.debug("Treating %s as a static file", relative)
            continue
        if not document.published:
            logger.debug("Skipping unpublished %s", relative)
            continue
        if content_type == "pages":
            pages.append(document)
        else:
            posts.append(document)
    posts.sort(
        key=lambda doc: (doc.date or dt.datetime.min, doc.relative_path.as_posix()),
        reverse=True,
    )
    pages.sort(key=lambda doc: doc.relative_path.as_posix())
    return posts + pages


__all__ = [
    "POST_FILENAME_PATTERN",
    "ContentDocument",
    "classify",
    "discover_content",
    "is_filtered",
    "load_document",
]
