"""Configuration tooling for the Pablete Codes blog.

This package loads and validates the blog's ``_config.yml``, resolves the
front-matter defaults each post or page receives, and exposes the ``pages``
console command used to check a site before the static-site engine builds it.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from pablete_pages import main
>>> main()  # doctest: +SKIP
>>> callable(main)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
