"""Typed dataclasses describing the blog's site configuration."""

from __future__ import annotations

import collections.abc as cabc
import copy
import dataclasses as dc
import fnmatch
import re
import types
import typing as typ
from pathlib import PurePath, PurePosixPath

from .._constants import DEFAULT_EXCLUDES, DEFAULT_PERMALINK, PERMALINK_STYLES
from .merge import deep_merge

_GLOB_CHARS = re.compile(r"[*?\[]")
_TYPE_ALIASES: dict[str, frozenset[str]] = {
    "drafts": frozenset({"drafts", "posts"}),
}


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


class ParseError(SiteConfigError):
    """Raised when configuration or front-matter text is not well-formed YAML."""

    def __init__(
        self, message: str, *, line: int | None = None, column: int | None = None
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class SchemaError(SiteConfigError):
    """Raised when well-formed configuration is missing or misuses a field."""


def _read_only(values: cabc.Mapping[str, typ.Any]) -> cabc.Mapping[str, typ.Any]:
    if isinstance(values, types.MappingProxyType):
        return values
    return types.MappingProxyType(dict(values))


def _normalize_content_path(path: str | PurePath) -> str:
    text = PurePath(path).as_posix() if isinstance(path, PurePath) else str(path)
    text = text.replace("\\", "/").strip()
    while text.startswith("./"):
        text = text[2:]
    return text.strip("/")


def _path_in_scope(scope_path: str, candidate: str) -> bool:
    """Return True when ``candidate`` lives at or under ``scope_path``."""
    scope = _normalize_content_path(scope_path)
    if not scope:
        return True
    if _GLOB_CHARS.search(scope):
        if fnmatch.fnmatchcase(candidate, scope):
            return True
        return any(
            fnmatch.fnmatchcase(parent.as_posix(), scope)
            for parent in PurePosixPath(candidate).parents
            if parent.as_posix() != "."
        )
    return candidate == scope or candidate.startswith(f"{scope}/")


@dc.dataclass(slots=True, frozen=True)
class ScopeRule:
    """Default front-matter values applied to files within a scope.

    Attributes
    ----------
    path : str
        Source-relative directory, file, or glob. Empty matches every file.
    type : str or None
        Content type (``posts``, ``drafts``, ``pages``); ``None`` matches any.
    values : Mapping[str, Any]
        Front-matter values contributed by this rule, held read-only.
    """

    path: str = ""
    type: str | None = None
    values: cabc.Mapping[str, typ.Any] = dc.field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _read_only(self.values))

    def matches(self, path: str | PurePath, content_type: str) -> bool:
        """Return True when a file at ``path`` of ``content_type`` is in scope."""
        if self.type is not None:
            accepted = _TYPE_ALIASES.get(content_type, frozenset({content_type}))
            if self.type not in accepted:
                return False
        return _path_in_scope(self.path, _normalize_content_path(path))


@dc.dataclass(slots=True, frozen=True)
class SiteConfig:
    """Validated, read-only view of ``_config.yml``.

    ``explicit`` names the keys the source text set, so a record can be dumped
    back without dropping values that equal the engine defaults. It takes no
    part in equality.
    """

    title: str
    url: str
    baseurl: str = ""
    owner: str | None = None
    email: str | None = None
    description: str | None = None
    subtitle: str | None = None
    permalink: str = DEFAULT_PERMALINK
    plugins: tuple[str, ...] = ()
    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    remote_theme: str | None = None
    theme: str | None = None
    locale: str | None = None
    date_format: str | None = None
    timezone: str | None = None
    defaults: tuple[ScopeRule, ...] = ()
    extras: cabc.Mapping[str, typ.Any] = dc.field(default_factory=dict)
    explicit: frozenset[str] = dc.field(
        default=frozenset(), compare=False, repr=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "extras", _read_only(self.extras))

    def resolve_defaults(
        self, path: str | PurePath, content_type: str
    ) -> dict[str, typ.Any]:
        """Merge the values of every scope rule matching a content file.

        Rules are applied in declaration order, so a later rule overrides an
        earlier one when both set the same key. Keys set by only one matching
        rule are all kept. A file matched by no rule yields an empty mapping.

        Parameters
        ----------
        path : str or PurePath
            Source-relative path of the content file (``_posts/x.md``).
        content_type : str
            ``posts``, ``drafts`` or ``pages``.

        Returns
        -------
        dict[str, Any]
            Fresh mapping; mutating it never alters the configuration.

        Examples
        --------
        >>> config = SiteConfig(
        ...     title="Blog",
        ...     url="https://example.com",
        ...     defaults=(
        ...         ScopeRule(type="posts", values={"layout": "post"}),
        ...         ScopeRule(type="pages", values={"layout": "single"}),
        ...     ),
        ... )
        >>> config.resolve_defaults("_posts/2024-01-01-hello.md", "posts")
        {'layout': 'post'}
        """
        resolved: dict[str, typ.Any] = {}
        for rule in self.defaults:
            if rule.matches(path, content_type):
                resolved = deep_merge(resolved, rule.values)
        return resolved

    def resolve_plugins(self) -> list[str]:
        """Return the plugin identifiers in the order they were declared."""
        return list(self.plugins)

    @property
    def site_url(self) -> str:
        """Canonical origin joined with the base path, without a trailing slash."""
        return f"{self.url.rstrip('/')}{self.baseurl.rstrip('/')}"

    @property
    def effective_exclude(self) -> tuple[str, ...]:
        """Engine default excludes followed by the configured ones."""
        extra = tuple(item for item in self.exclude if item not in DEFAULT_EXCLUDES)
        return DEFAULT_EXCLUDES + extra

    @property
    def theme_source(self) -> str | None:
        """Theme the engine will use; a remote theme wins over a local gem."""
        return self.remote_theme or self.theme

    @property
    def permalink_template(self) -> str:
        """Expand a named permalink style into its placeholder template."""
        return PERMALINK_STYLES.get(self.permalink, self.permalink)

    def get(self, key: str, default: typ.Any = None) -> typ.Any:
        """Look up an arbitrary configuration key, including theme extras.

        Mappings and lists come back as copies.
        """
        if key in _FIELD_NAMES:
            return getattr(self, key)
        return copy.deepcopy(self.extras.get(key, default))


_FIELD_NAMES = frozenset(field.name for field in dc.fields(SiteConfig)) - {
    "extras",
    "explicit",
}


__all__ = [
    "ParseError",
    "SchemaError",
    "ScopeRule",
    "SiteConfig",
    "SiteConfigError",
]
