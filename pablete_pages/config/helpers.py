"""Validation helpers shared by the site configuration loader."""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ
import zoneinfo
from urllib.parse import urlsplit

from .._constants import PERMALINK_STYLES
from .models import SchemaError, ScopeRule

REMOTE_THEME_PATTERN = re.compile(
    r"^[A-Za-z0-9][A-Za-z0-9_.-]*/[A-Za-z0-9_.-]+(@[A-Za-z0-9_./-]+)?$"
)


def _optional_str(value: object | None) -> str | None:
    """Return the value as written, or None when unset."""
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _required_str(raw: cabc.Mapping[str, typ.Any], key: str) -> str:
    """Return a non-empty string for ``key`` or raise SchemaError."""
    if key not in raw or raw[key] is None:
        msg = f"Missing required setting '{key}'."
        raise SchemaError(msg)
    value = raw[key]
    if not isinstance(value, str) or not value.strip():
        msg = f"Setting '{key}' must be a non-empty string, got {value!r}."
        raise SchemaError(msg)
    return value


def _string_list(value: object, *, key: str) -> tuple[str, ...]:
    """Normalize a YAML scalar-or-sequence into a tuple of non-empty strings."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        msg = f"Setting '{key}' must be a list of strings, got {type(value).__name__}."
        raise SchemaError(msg)
    items: list[str] = []
    for index, entry in enumerate(value):
        if not isinstance(entry, str) or not entry.strip():
            msg = f"Entry {index} of '{key}' must be a non-empty string, got {entry!r}."
            raise SchemaError(msg)
        items.append(entry.strip())
    return tuple(items)


def _validate_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in {"http", "https"} or not parts.netloc:
        msg = f"Setting 'url' must be an absolute http(s) URL, got {url!r}."
        raise SchemaError(msg)
    return url


def _validate_baseurl(value: object) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        msg = f"Setting 'baseurl' must be a string, got {value!r}."
        raise SchemaError(msg)
    baseurl = value.strip()
    if baseurl and not baseurl.startswith("/"):
        msg = f"Setting 'baseurl' must start with '/', got {baseurl!r}."
        raise SchemaError(msg)
    return baseurl


def _validate_permalink(value: object) -> str | None:
    """Return a recognized permalink style or custom template."""
    if value is None:
        return None
    if not isinstance(value, str):
        msg = f"Setting 'permalink' must be a string, got {value!r}."
        raise SchemaError(msg)
    permalink = value.strip()
    if permalink in PERMALINK_STYLES or permalink.startswith("/"):
        return permalink
    known = ", ".join(sorted(PERMALINK_STYLES))
    msg = (
        f"Unknown permalink style {permalink!r}. "
        f"Use one of {known} or a template starting with '/'."
    )
    raise SchemaError(msg)


def _validate_timezone(value: object) -> str | None:
    """Return an IANA zone name such as ``Europe/Madrid``."""
    name = _optional_str(value)
    if name is None:
        return None
    try:
        zoneinfo.ZoneInfo(name.strip())
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
        msg = f"Setting 'timezone' must be an IANA zone name, got {name!r}."
        raise SchemaError(msg) from exc
    return name.strip()


def _validate_plugins(plugins: tuple[str, ...]) -> tuple[str, ...]:
    seen: set[str] = set()
    for name in plugins:
        if name in seen:
            msg = f"Plugin '{name}' is listed more than once."
            raise SchemaError(msg)
        seen.add(name)
    return plugins


def _validate_remote_theme(value: object) -> str | None:
    theme = _optional_str(value)
    if theme is None or not theme.strip():
        return None
    theme = theme.strip()
    if theme.startswith(("http://", "https://")) or REMOTE_THEME_PATTERN.match(theme):
        return theme
    msg = f"Setting 'remote_theme' must look like 'owner/name[@ref]', got {theme!r}."
    raise SchemaError(msg)


def _build_scope_rule(index: int, payload: object) -> ScopeRule:
    """Build a ScopeRule from one entry of the ``defaults`` sequence."""
    if not isinstance(payload, cabc.Mapping):
        msg = f"Entry {index} of 'defaults' must be a mapping."
        raise SchemaError(msg)
    scope = payload.get("scope")
    if not isinstance(scope, cabc.Mapping):
        msg = f"Entry {index} of 'defaults' is missing a 'scope' mapping."
        raise SchemaError(msg)
    values = payload.get("values")
    if not isinstance(values, cabc.Mapping):
        msg = f"Entry {index} of 'defaults' is missing a 'values' mapping."
        raise SchemaError(msg)

    path = scope.get("path", "")
    if path is None:
        path = ""
    if not isinstance(path, str):
        msg = f"Scope path of 'defaults' entry {index} must be a string."
        raise SchemaError(msg)
    content_type = _optional_str(scope.get("type"))
    return ScopeRule(path=path, type=content_type, values=dict(values))


def _build_scope_rules(value: object) -> tuple[ScopeRule, ...]:
    if value is None:
        return ()
    if not isinstance(value, list):
        msg = "Setting 'defaults' must be a list of scope rules."
        raise SchemaError(msg)
    return tuple(_build_scope_rule(index, entry) for index, entry in enumerate(value))


__all__ = [
    "REMOTE_THEME_PATTERN",
    "_build_scope_rule",
    "_build_scope_rules",
    "_optional_str",
    "_required_str",
    "_string_list",
    "_validate_baseurl",
    "_validate_permalink",
    "_validate_plugins",
    "_validate_remote_theme",
    "_validate_url",
]
