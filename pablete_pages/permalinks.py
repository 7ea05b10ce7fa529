"""Derive page URLs from permalink templates.

Templates use ``:name`` placeholders (``/:categories/:year/:month/:day/:title/``).
Named styles from ``_config.yml`` are expanded through
:data:`~pablete_pages._constants.PERMALINK_STYLES`; a front-matter
``permalink`` replaces the site-wide template for one file.

Examples
--------
>>> import datetime as dt
>>> post_url(
...     "/:categories/:year/:month/:day/:title/",
...     date=dt.datetime(2024, 3, 4),
...     title="replace-loop-with-pipeline",
...     categories=["Refactoring"],
... )
'/refactoring/2024/03/04/replace-loop-with-pipeline/'
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import re
from pathlib import PurePosixPath

from ._constants import OUTPUT_EXT, PERMALINK_STYLES

PLACEHOLDER_PATTERN = re.compile(r":([a-z_]+)")
_REPEATED_SLASHES = re.compile(r"/{2,}")


def slugify(text: str) -> str:
    """Lowercase ``text`` and collapse anything non-alphanumeric into hyphens."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug


def expand_template(template: str, placeholders: cabc.Mapping[str, str]) -> str:
    """Substitute known placeholders and normalize slashes.

    Unknown placeholders are left in place. Empty placeholders (for example a
    post without categories) leave no empty path segments behind.
    """

    def _replace(match: re.Match[str]) -> str:
        return placeholders.get(match.group(1), match.group(0))

    expanded = PLACEHOLDER_PATTERN.sub(_replace, template)
    expanded = _REPEATED_SLASHES.sub("/", f"/{expanded}")
    return expanded


def _date_placeholders(date: dt.datetime) -> dict[str, str]:
    iso_year, iso_week, _ = date.isocalendar()
    return {
        "year": date.strftime("%Y"),
        "short_year": date.strftime("%y"),
        "month": date.strftime("%m"),
        "i_month": str(date.month),
        "short_month": date.strftime("%b"),
        "long_month": date.strftime("%B"),
        "day": date.strftime("%d"),
        "i_day": str(date.day),
        "y_day": date.strftime("%j"),
        "week": f"{iso_week:02d}",
        "w_year": str(iso_year),
        "short_day": date.strftime("%a"),
        "long_day": date.strftime("%A"),
        "hour": date.strftime("%H"),
        "minute": date.strftime("%M"),
        "second": date.strftime("%S"),
    }


def post_url(
    template: str,
    *,
    date: dt.datetime,
    title: str,
    categories: cabc.Iterable[str] = (),
    slug: str | None = None,
    output_ext: str = OUTPUT_EXT,
) -> str:
    """Build the URL of a post from its date, title, and categories.

    Parameters
    ----------
    template : str
        Permalink style name or placeholder template.
    date : datetime
        Publication date of the post.
    title : str
        Title segment from the post filename (``YYYY-MM-DD-<title>.md``).
    categories : Iterable[str], optional
        Categories, lowercased and de-duplicated in order.
    slug : str or None, optional
        Explicit slug; defaults to ``title``.
    output_ext : str, optional
        Extension substituted for ``:output_ext``.
    """
    ordered: list[str] = []
    for category in categories:
        lowered = str(category).strip().lower()
        if lowered and lowered not in ordered:
            ordered.append(lowered)
    placeholders = _date_placeholders(date)
    placeholders.update(
        {
            "title": title,
            "slug": slugify(slug or title),
            "categories": "/".join(ordered),
            "output_ext": output_ext,
        }
    )
    return expand_template(PERMALINK_STYLES.get(template, template), placeholders)


def _page_suffix(style: str) -> str:
    template = PERMALINK_STYLES.get(style, style)
    if template.endswith("/"):
        return "/"
    if style in PERMALINK_STYLES or template.endswith(":output_ext"):
        return ":output_ext"
    return ""


def page_url(
    relative_path: str | PurePosixPath,
    *,
    style: str,
    permalink: str | None = None,
    output_ext: str = OUTPUT_EXT,
) -> str:
    """Build the URL of a standalone page.

    Pages ignore date placeholders: their template is ``/:path/:basename``
    followed by ``/`` under directory-style permalinks and by the output
    extension otherwise. ``index`` files map to their directory.

    Examples
    --------
    >>> page_url("_pages/about.md", style="pretty")
    '/_pages/about/'
    >>> page_url("docs/index.md", style="date")
    '/docs/'
    >>> page_url("_pages/about.md", style="pretty", permalink="/about/")
    '/about/'
    """
    path = PurePosixPath(relative_path)
    parent = "" if path.parent.as_posix() == "." else path.parent.as_posix()
    placeholders = {
        "path": parent,
        "basename": path.stem,
        "name": path.name,
        "output_ext": output_ext,
    }
    if permalink:
        return expand_template(permalink, placeholders)
    if path.stem == "index":
        return expand_template("/:path/", placeholders)
    return expand_template(f"/:path/:basename{_page_suffix(style)}", placeholders)


def absolute_url(site_url: str, url: str) -> str:
    """Join the site origin (including any base path) with a page URL."""
    return f"{site_url.rstrip('/')}/{url.lstrip('/')}"


__all__ = [
    "PLACEHOLDER_PATTERN",
    "absolute_url",
    "expand_template",
    "page_url",
    "post_url",
    "slugify",
]
