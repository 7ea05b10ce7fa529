"""Serialize a :class:`SiteConfig` back into ``_config.yml`` form."""

from __future__ import annotations

import io
import typing as typ

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap, CommentedSeq

from .._constants import DEFAULT_PERMALINK

if typ.TYPE_CHECKING:
    from .models import ScopeRule, SiteConfig

_SCALAR_FIELDS: tuple[str, ...] = (
    "title",
    "subtitle",
    "owner",
    "email",
    "description",
    "url",
    "baseurl",
    "permalink",
)
_TRAILING_SCALARS: tuple[str, ...] = (
    "remote_theme",
    "theme",
    "locale",
    "date_format",
    "timezone",
)


def _build_roundtrip_yaml() -> YAML:
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.width = 120
    yaml.indent(mapping=2, sequence=4, offset=2)
    return yaml


def _string_seq(items: tuple[str, ...]) -> CommentedSeq:
    return CommentedSeq(list(items))


def _scope_rule_mapping(rule: ScopeRule) -> CommentedMap:
    scope = CommentedMap()
    scope["path"] = rule.path
    if rule.type is not None:
        scope["type"] = rule.type
    entry = CommentedMap()
    entry["scope"] = scope
    entry["values"] = CommentedMap(rule.values)
    return entry


def site_config_to_mapping(config: SiteConfig) -> CommentedMap:
    """Return an ordered mapping mirroring the layout of ``_config.yml``.

    Scalars the source set explicitly are always written, even when they
    equal the engine default or are empty.
    """
    document = CommentedMap()
    for key in _SCALAR_FIELDS:
        value = getattr(config, key)
        if key in config.explicit:
            document[key] = value
        elif key == "permalink" and value == DEFAULT_PERMALINK:
            continue
        elif value is not None and value != "":
            document[key] = value
    if config.plugins:
        document["plugins"] = _string_seq(config.plugins)
    if config.include:
        document["include"] = _string_seq(config.include)
    if config.exclude:
        document["exclude"] = _string_seq(config.exclude)
    for key in _TRAILING_SCALARS:
        value = getattr(config, key)
        if value is not None or key in config.explicit:
            document[key] = value
    for key, value in config.extras.items():
        document[key] = value
    if config.defaults:
        document["defaults"] = CommentedSeq(
            _scope_rule_mapping(rule) for rule in config.defaults
        )
    return document


def dump_site_config(config: SiteConfig) -> str:
    """Render ``config`` as YAML text that loads back to an equal record.

    Examples
    --------
    >>> from pablete_pages.config import parse_site_config
    >>> config = parse_site_config("title: Blog\\nurl: https://example.com\\n")
    >>> print(dump_site_config(config), end="")
    title: Blog
    url: https://example.com
    """
    buffer = io.StringIO()
    _build_roundtrip_yaml().dump(site_config_to_mapping(config), buffer)
    return buffer.getvalue()


__all__ = ["dump_site_config", "site_config_to_mapping"]
