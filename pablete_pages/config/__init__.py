"""Load and validate the blog's ``_config.yml``.

This subpackage parses the site configuration consumed by the static-site
engine, validates the settings the engine cannot run without (``title``,
``url``, the permalink style, plugin and include lists), and produces an
immutable :class:`SiteConfig`. The record resolves per-content-type
front-matter defaults through :meth:`SiteConfig.resolve_defaults` and reports
the plugin list in declared order through :meth:`SiteConfig.resolve_plugins`.

Examples
--------
>>> from pathlib import Path
>>> from pablete_pages.config import load_site_config
>>> site = load_site_config(Path("_config.yml"))  # doctest: +SKIP
>>> site.resolve_defaults("_posts/2024-05-01-adapter.md", "posts")  # doctest: +SKIP
{'layout': 'post', 'author_profile': False, ...}
"""

from .loader import load_site_config, load_yaml_text, parse_site_config
from .merge import deep_merge
from .models import ParseError, SchemaError, ScopeRule, SiteConfig, SiteConfigError
from .serializer import dump_site_config, site_config_to_mapping

__all__ = [
    "ParseError",
    "SchemaError",
    "ScopeRule",
    "SiteConfig",
    "SiteConfigError",
    "deep_merge",
    "dump_site_config",
    "load_site_config",
    "load_yaml_text",
    "parse_site_config",
    "site_config_to_mapping",
]
