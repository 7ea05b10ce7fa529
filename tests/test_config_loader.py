"""Unit tests for loading and validating ``_config.yml``.

These tests cover the required settings, the permalink, URL and list
validators, YAML syntax errors, and the serializer round trip. They also load
the repository's own ``_config.yml`` to make sure the live blog configuration
stays valid.

Usage
-----
Run ``pytest tests/test_config_loader.py -v``. Only pytest's built-in
``tmp_path`` fixture is required.
"""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from pablete_pages.config import (
    ParseError,
    SchemaError,
    dump_site_config,
    load_site_config,
    parse_site_config,
)

REPO_CONFIG = Path(__file__).resolve().parents[1] / "_config.yml"

MINIMAL = "title: Blog\nurl: https://example.com\n"


def test_minimal_config_loads_with_engine_defaults() -> None:
    """Only title and url are required; everything else has a default."""
    config = parse_site_config(MINIMAL)

    assert config.title == "Blog", f"expected title 'Blog', got {config.title!r}"
    assert config.url == "https://example.com"
    assert config.baseurl == "", f"expected empty baseurl, got {config.baseurl!r}"
    assert config.permalink == "date", (
        f"expected the 'date' permalink style by default, got {config.permalink!r}"
    )
    assert config.plugins == ()
    assert config.defaults == ()


@pytest.mark.parametrize(
    ("text", "missing"),
    [
        ("url: https://example.com\n", "title"),
        ("title: Blog\n", "url"),
        ("title: ''\nurl: https://example.com\n", "title"),
        ("", "title"),
    ],
)
def test_missing_required_setting_is_a_schema_error(text: str, missing: str) -> None:
    """Absent or empty title/url must abort the load."""
    with pytest.raises(SchemaError, match=missing):
        parse_site_config(text)


@pytest.mark.parametrize("style", ["date", "pretty", "ordinal", "weekdate", "none"])
def test_builtin_permalink_styles_are_accepted(style: str) -> None:
    """Every built-in permalink style name is recognized."""
    config = parse_site_config(f"{MINIMAL}permalink: {style}\n")
    assert config.permalink == style


def test_custom_permalink_template_is_accepted() -> None:
    """Templates starting with a slash are a recognized custom strategy."""
    config = parse_site_config(f"{MINIMAL}permalink: /blog/:year/:title/\n")
    assert config.permalink_template == "/blog/:year/:title/"


def test_unknown_permalink_style_is_rejected() -> None:
    """Names outside the known styles are schema errors."""
    with pytest.raises(SchemaError, match="permalink"):
        parse_site_config(f"{MINIMAL}permalink: fancy\n")


@pytest.mark.parametrize(
    "url", ["example.com", "/relative/path", "ftp://example.com", "https://"]
)
def test_url_must_be_absolute_http(url: str) -> None:
    """The canonical origin needs an http(s) scheme and a host."""
    with pytest.raises(SchemaError, match="url"):
        parse_site_config(f"title: Blog\nurl: {url}\n")


def test_baseurl_must_start_with_slash() -> None:
    """A base path without a leading slash is rejected."""
    with pytest.raises(SchemaError, match="baseurl"):
        parse_site_config(f"{MINIMAL}baseurl: blog\n")


def test_site_url_joins_origin_and_base_path() -> None:
    """site_url strips trailing slashes from both parts."""
    config = parse_site_config("title: Blog\nurl: https://example.com/\nbaseurl: /blog/\n")
    assert config.site_url == "https://example.com/blog", (
        f"unexpected site_url {config.site_url!r}"
    )


def test_malformed_yaml_is_a_parse_error_with_position() -> None:
    """Unterminated flow collections surface as ParseError with a location."""
    with pytest.raises(ParseError) as excinfo:
        parse_site_config("title: Blog\nurl: https://example.com\nplugins: [a, b\n")

    assert excinfo.value.line is not None, "expected the error line to be reported"
    assert excinfo.value.line >= 3, (
        f"expected the error on or after line 3, got {excinfo.value.line}"
    )


def test_duplicate_keys_are_a_parse_error() -> None:
    """Repeating a top-level key is not well-formed configuration."""
    with pytest.raises(ParseError):
        parse_site_config("title: One\ntitle: Two\nurl: https://example.com\n")


def test_top_level_sequence_is_rejected() -> None:
    """The document must be a mapping."""
    with pytest.raises(SchemaError, match="mapping"):
        parse_site_config("- title\n- url\n")


def test_plugins_keep_declared_order() -> None:
    """resolve_plugins returns the list exactly as written."""
    config = parse_site_config(f"{MINIMAL}plugins:\n  - b-plugin\n  - a-plugin\n")
    assert config.resolve_plugins() == ["b-plugin", "a-plugin"], (
        f"expected declared order, got {config.resolve_plugins()!r}"
    )


def test_duplicate_plugin_is_rejected() -> None:
    """Listing a plugin twice is a configuration mistake."""
    with pytest.raises(SchemaError, match="more than once"):
        parse_site_config(f"{MINIMAL}plugins: [jekyll-feed, jekyll-feed]\n")


def test_plugin_entries_must_be_strings() -> None:
    """Non-string plugin entries are schema errors."""
    with pytest.raises(SchemaError, match="plugins"):
        parse_site_config(f"{MINIMAL}plugins:\n  - 3\n")


def test_legacy_gems_key_is_used_when_plugins_absent(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """The deprecated 'gems' key still activates plugins, with a warning."""
    config = parse_site_config(f"{MINIMAL}gems: [jekyll-feed]\n")

    assert config.resolve_plugins() == ["jekyll-feed"]
    assert "deprecated 'gems'" in caplog.text, "expected a deprecation warning"


def test_include_accepts_a_single_string() -> None:
    """A scalar include is treated as a one-item list."""
    config = parse_site_config(f"{MINIMAL}include: _pages\n")
    assert config.include == ("_pages",)


def test_include_paths_must_exist_under_source_root(tmp_path: Path) -> None:
    """Included paths are checked when the source root is known."""
    (tmp_path / "_pages").mkdir()
    text = f"{MINIMAL}include: [_pages, _missing]\n"

    with pytest.raises(SchemaError, match="_missing"):
        parse_site_config(text, source_root=tmp_path)

    config = parse_site_config(f"{MINIMAL}include: [_pages]\n", source_root=tmp_path)
    assert config.include == ("_pages",)


def test_exclude_extends_engine_defaults() -> None:
    """Configured excludes are appended to the engine's default list."""
    config = parse_site_config(f"{MINIMAL}exclude: [notes/]\n")
    assert config.effective_exclude[-1] == "notes/"
    assert "node_modules/" in config.effective_exclude


@pytest.mark.parametrize(
    "theme",
    ["mmistakes/minimal-mistakes", "owner/theme@v4.24.0", "https://example.com/t.zip"],
)
def test_remote_theme_references_are_accepted(theme: str) -> None:
    """owner/name references, optional refs, and URLs are all valid."""
    config = parse_site_config(f"{MINIMAL}remote_theme: {theme}\n")
    assert config.theme_source == theme


def test_malformed_remote_theme_is_rejected() -> None:
    """A bare word is not a theme reference."""
    with pytest.raises(SchemaError, match="remote_theme"):
        parse_site_config(f"{MINIMAL}remote_theme: minimal\n")


def test_remote_theme_wins_over_local_theme() -> None:
    """When both are set the remote theme is the one in use."""
    config = parse_site_config(
        f"{MINIMAL}theme: minima\nremote_theme: mmistakes/minimal-mistakes\n"
    )
    assert config.theme_source == "mmistakes/minimal-mistakes"


@pytest.mark.parametrize(
    "defaults_block",
    [
        "defaults: {layout: post}\n",
        "defaults:\n  - values: {layout: post}\n",
        "defaults:\n  - scope: {type: posts}\n",
        "defaults:\n  - scope: {path: 3}\n    values: {}\n",
    ],
)
def test_malformed_default_rules_are_rejected(defaults_block: str) -> None:
    """Every default rule needs a scope mapping and a values mapping."""
    with pytest.raises(SchemaError, match="defaults"):
        parse_site_config(MINIMAL + defaults_block)


def test_unknown_keys_are_kept_as_extras() -> None:
    """Theme options outside the schema stay available to templates."""
    config = parse_site_config(f"{MINIMAL}atom_feed:\n  hide: true\n")
    assert config.extras == {"atom_feed": {"hide": True}}
    assert config.get("atom_feed") == {"hide": True}
    assert config.get("title") == "Blog"


def test_load_site_config_requires_existing_file(tmp_path: Path) -> None:
    """A missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_site_config(tmp_path / "_config.yml")


def test_load_site_config_rejects_non_utf8(tmp_path: Path) -> None:
    """Invalid byte sequences are parse errors."""
    path = tmp_path / "_config.yml"
    path.write_bytes(b"title: \xff\xfe\nurl: https://example.com\n")
    with pytest.raises(ParseError, match="UTF-8"):
        load_site_config(path)


def test_repository_config_is_valid() -> None:
    """The blog's own _config.yml loads with its plugins and defaults."""
    config = load_site_config(REPO_CONFIG)

    assert "Pablete Codes" in config.title
    assert config.owner == "Pablo Alonso"
    assert config.permalink == "pretty"
    assert config.site_url == "https://alonsogarciapablo.github.io"
    assert config.resolve_plugins() == ["jekyll-include-cache", "jekyll-target-blank"]
    assert config.include == ("_pages",)
    assert config.remote_theme == "mmistakes/minimal-mistakes"
    assert config.date_format == "%B %-d, %Y"
    assert config.extras["enable_copy_code_button"] is True
    assert len(config.defaults) == 2, (
        f"expected post and page default rules, got {len(config.defaults)}"
    )


def test_round_trip_preserves_scalar_fields() -> None:
    """Dumping and reloading yields an identical record."""
    original = parse_site_config(
        dedent(
            """
            title: Blog
            owner: Someone
            email: someone@example.com
            description: Notes about code.
            url: https://example.com
            baseurl: /blog
            permalink: pretty
            plugins: [jekyll-feed, jekyll-seo-tag]
            locale: en
            date_format: "%B %-d, %Y"
            defaults:
              - scope:
                  path: ""
                  type: posts
                values:
                  layout: post
            """
        )
    )
    reloaded = parse_site_config(dump_site_config(original))

    assert reloaded == original, "expected the round trip to preserve every field"


def test_round_trip_of_repository_config() -> None:
    """The live configuration survives serialization unchanged."""
    original = load_site_config(REPO_CONFIG)
    reloaded = parse_site_config(dump_site_config(original))
    assert reloaded == original


def test_impossible_calendar_date_is_a_parse_error() -> None:
    """Timestamp-shaped values that are not real dates fail as parse errors."""
    with pytest.raises(ParseError, match="day is out of range"):
        parse_site_config(MINIMAL + "launched: 2024-02-30\n")


def test_round_trip_keeps_explicit_scalar_text() -> None:
    """Values equal to the engine defaults and quoted whitespace are written back."""
    text = dedent(
        """
        title: '  Blog  '
        url: https://example.com
        baseurl: ''
        permalink: date
        """
    ).lstrip()
    config = parse_site_config(text)

    dumped = dump_site_config(config)
    lines = dumped.splitlines()

    assert config.title == "  Blog  ", f"expected quoted spaces kept, got {config.title!r}"
    assert "title: '  Blog  '" in lines, f"title lost its spaces in {dumped!r}"
    assert "baseurl: ''" in lines, f"empty baseurl dropped from {dumped!r}"
    assert "permalink: date" in lines, f"explicit permalink dropped from {dumped!r}"
    assert parse_site_config(dumped) == config


def test_unset_defaults_are_not_written() -> None:
    """Keys the source never set stay out of the dumped text."""
    assert dump_site_config(parse_site_config(MINIMAL)) == MINIMAL


def test_extras_cannot_be_changed_through_the_record() -> None:
    """Lookups hand out copies and the extras mapping itself is read-only."""
    config = parse_site_config(MINIMAL + "atom_feed:\n  hide: true\n")

    feed = config.get("atom_feed")
    feed["hide"] = False

    assert config.get("atom_feed") == {"hide": True}
    with pytest.raises(TypeError):
        config.extras["atom_feed"] = {}  # type: ignore[index]


def test_scope_rule_values_are_read_only() -> None:
    """Default values cannot be rebound once the record is built."""
    config = parse_site_config(
        MINIMAL + "defaults:\n  - scope: {path: ''}\n    values: {layout: post}\n"
    )
    with pytest.raises(TypeError):
        config.defaults[0].values["layout"] = "page"  # type: ignore[index]


def test_timezone_must_be_a_known_zone() -> None:
    """IANA names load; anything else is a schema error."""
    assert parse_site_config(MINIMAL + "timezone: Europe/Madrid\n").timezone == (
        "Europe/Madrid"
    )
    with pytest.raises(SchemaError, match="timezone"):
        parse_site_config(MINIMAL + "timezone: Mars/Olympus_Mons\n")
