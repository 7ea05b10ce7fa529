"""Common literal values used across pablete_pages.

These constants keep filenames, permalink styles, and the engine's default
exclusion rules centralized so the loader, content discovery, and tests can
import the same values without drifting. Intended for internal use within the
pablete_pages package.

Examples
--------
>>> from pablete_pages import _constants
>>> _constants.PERMALINK_STYLES["pretty"]
'/:categories/:year/:month/:day/:title/'
>>> "node_modules/" in _constants.DEFAULT_EXCLUDES
True
"""

DEFAULT_CONFIG_FILE = "_config.yml"
DEFAULT_PERMALINK = "date"

PERMALINK_STYLES: dict[str, str] = {
    "date": "/:categories/:year/:month/:day/:title:output_ext",
    "pretty": "/:categories/:year/:month/:day/:title/",
    "ordinal": "/:categories/:year/:y_day/:title:output_ext",
    "weekdate": "/:categories/:year/W:week/:short_day/:title:output_ext",
    "none": "/:categories/:title:output_ext",
}

DEFAULT_EXCLUDES: tuple[str, ...] = (
    ".sass-cache/",
    ".jekyll-cache/",
    "gemfiles/",
    "Gemfile",
    "Gemfile.lock",
    "node_modules/",
    "vendor/bundle/",
    "vendor/cache/",
    "vendor/gems/",
    "vendor/ruby/",
)

POSTS_DIR = "_posts"
DRAFTS_DIR = "_drafts"

CONTENT_TYPES: tuple[str, ...] = ("posts", "drafts", "pages")
MARKDOWN_EXTENSIONS: frozenset[str] = frozenset(
    {".md", ".markdown", ".mkdown", ".mkdn", ".mkd"}
)
PAGE_EXTENSIONS: frozenset[str] = MARKDOWN_EXTENSIONS | {".html", ".htm"}
OUTPUT_EXT = ".html"

FRONT_MATTER_DELIMITER = "---"
