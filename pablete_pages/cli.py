"""Cyclopts CLI entrypoint for checking and inspecting the blog's configuration.

The ``pages`` console script defined here validates ``_config.yml`` before a
build, reports the plugins the engine will activate, and shows the front
matter a content file ends up with once the configured defaults are applied.
Typical usage is running ``pages check`` locally or in CI before handing the
site to the static-site engine.

Examples
--------
Validate the configuration in the current directory:

>>> from pablete_pages.cli import main
>>> main()  # doctest: +SKIP

Show the defaults a post receives:

>>> from pablete_pages.cli import app
>>> app(["defaults", "_posts/2024-03-04-adapter.md"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter
from ruamel.yaml import YAML

from ._constants import CONTENT_TYPES, DEFAULT_CONFIG_FILE
from .config import SchemaError, SiteConfigError, load_site_config
from .content import classify, discover_content, load_document
from .permalinks import absolute_url

DEFAULT_CONFIG = Path(DEFAULT_CONFIG_FILE)
LOG_LEVEL_ENV = "PAGES_LOG_LEVEL"

app = App(name="pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _print_yaml(data: typ.Mapping[str, typ.Any]) -> None:
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.dump(dict(data), sys.stdout)


def _source_root(config: Path, source: Path | None) -> Path:
    return source if source is not None else config.parent


@app.command(help="Validate the site configuration and summarize it.")
def check(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    source: typ.Annotated[
        Path | None,
        Parameter(help="Site source directory (defaults to the config's folder)"),
    ] = None,
) -> None:
    """Load ``_config.yml`` and print a short summary.

    Parameters
    ----------
    config : Path, optional
        Path to the configuration file (overridable via ``INPUT_CONFIG``).
    source : Path or None, optional
        Site source directory used to check ``include`` entries.

    Raises
    ------
    SiteConfigError
        If the configuration cannot be parsed or fails validation.
    """
    site = load_site_config(config, source_root=_source_root(config, source))
    print(f"ok {_format_path(config)}")
    print(f"title: {site.title}")
    print(f"site: {site.site_url}")
    print(f"permalink: {site.permalink}")
    print(f"theme: {site.theme_source or '(none)'}")
    print(f"plugins: {len(site.plugins)}")
    print(f"default scopes: {len(site.defaults)}")


@app.command(help="List the plugins the engine activates, in order.")
def plugins(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print each configured plugin on its own line, in declared order."""
    site = load_site_config(config)
    for name in site.resolve_plugins():
        print(name)


@app.command(help="Show the default front matter resolved for a content path.")
def defaults(
    path: str,
    *,
    content_type: typ.Annotated[
        str | None,
        Parameter(name="--type", help="Content type: posts, drafts or pages"),
    ] = None,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print the merged defaults for ``path`` as YAML.

    Parameters
    ----------
    path : str
        Source-relative path of a content file; it does not need to exist.
    content_type : str or None, optional
        Content type; inferred from the path when omitted.
    config : Path, optional
        Path to the configuration file.

    Raises
    ------
    SchemaError
        If ``content_type`` is not a known content type.
    """
    resolved_type = content_type or classify(path)
    if resolved_type not in CONTENT_TYPES:
        known = ", ".join(CONTENT_TYPES)
        msg = f"Unknown content type '{resolved_type}'. Use one of {known}."
        raise SchemaError(msg)
    site = load_site_config(config)
    values = site.resolve_defaults(path, resolved_type)
    if not values:
        print(f"# no defaults apply to {path} ({resolved_type})")
        return
    _print_yaml(values)


@app.command(help="Show the merged front matter and URL of a content file.")
def inspect(
    file: Path,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    source: typ.Annotated[
        Path | None,
        Parameter(help="Site source directory (defaults to the config's folder)"),
    ] = None,
) -> None:
    """Print the data the engine would see for ``file``.

    Parameters
    ----------
    file : Path
        Content file, relative to the source directory or absolute within it.
    config : Path, optional
        Path to the configuration file.
    source : Path or None, optional
        Site source directory.

    Raises
    ------
    SchemaError
        If ``file`` is absolute and lies outside the source directory.
    """
    root = _source_root(config, source)
    site = load_site_config(config, source_root=root)
    relative = file
    if file.is_absolute():
        try:
            relative = file.resolve().relative_to(root.resolve())
        except ValueError as exc:
            msg = f"{file} is not inside the site source {_format_path(root)}."
            raise SchemaError(msg) from exc
    document = load_document(root, relative, site)
    if document is None:
        print(f"{_format_path(root / relative)} has no front matter (static file)")
        return
    print(f"# {document.content_type}: {absolute_url(site.site_url, document.url)}")
    _print_yaml(document.data)


@app.command(name="list", help="List discovered posts and pages with their URLs.")
def list_content(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to site config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    source: typ.Annotated[
        Path | None,
        Parameter(help="Site source directory (defaults to the config's folder)"),
    ] = None,
    drafts: typ.Annotated[
        bool, Parameter(help="Include files from _drafts")
    ] = False,
) -> None:
    """Print ``<type> <url> <path>`` for every content file the engine renders."""
    root = _source_root(config, source)
    site = load_site_config(config, source_root=root)
    for document in discover_content(root, site, include_drafts=drafts):
        print(
            f"{document.content_type}\t{document.url}\t"
            f"{document.relative_path.as_posix()}"
        )


def _configure_logging() -> None:
    level_name = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main() -> None:
    """Invoke the Cyclopts application that powers the `pages` console command.

    Configuration errors abort with a message on stderr and exit status 1, so
    a CI build stops before the engine runs with a broken ``_config.yml``.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    _configure_logging()
    try:
        app()
    except (SiteConfigError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
