"""Unit tests for scope-rule matching and front-matter default resolution."""

from __future__ import annotations

from pathlib import PurePosixPath
from textwrap import dedent

import pytest

from pablete_pages.config import ScopeRule, SiteConfig, parse_site_config
from pablete_pages.front_matter import merge_front_matter

BLOG_DEFAULTS = dedent(
    """
    title: Blog
    url: https://example.com
    defaults:
      - scope: {path: "", type: posts}
        values: {layout: post, comments: false}
      - scope: {path: "", type: pages}
        values: {layout: single}
    """
)


def _config(*rules: ScopeRule) -> SiteConfig:
    return SiteConfig(title="Blog", url="https://example.com", defaults=rules)


def test_posts_and_pages_receive_their_scoped_defaults() -> None:
    """Type-scoped rules apply only to their own content type."""
    config = parse_site_config(BLOG_DEFAULTS)

    post = config.resolve_defaults("_posts/2024-01-01-hello.md", "posts")
    page = config.resolve_defaults("_pages/about.md", "pages")

    assert post == {"layout": "post", "comments": False}, f"unexpected {post!r}"
    assert page == {"layout": "single"}, f"unexpected {page!r}"


def test_file_front_matter_wins_over_defaults() -> None:
    """Explicit front matter overrides same-named defaults."""
    config = parse_site_config(BLOG_DEFAULTS)
    defaults = config.resolve_defaults("_posts/2024-01-01-hello.md", "posts")

    merged = merge_front_matter(defaults, {"comments": True})

    assert merged == {"layout": "post", "comments": True}, f"unexpected {merged!r}"


def test_no_matching_scope_yields_empty_mapping() -> None:
    """Files outside every scope get no defaults at all."""
    config = _config(
        ScopeRule(path="_posts", type="posts", values={"layout": "post"}),
        ScopeRule(path="docs", values={"layout": "doc"}),
    )
    assert config.resolve_defaults("about.md", "pages") == {}


def test_later_rules_override_earlier_ones_and_keep_other_keys() -> None:
    """Overlapping scopes merge in declaration order."""
    config = _config(
        ScopeRule(values={"layout": "default", "share": True}),
        ScopeRule(type="posts", values={"layout": "post", "comments": False}),
        ScopeRule(path="_posts/announcements", values={"comments": True}),
    )

    resolved = config.resolve_defaults(
        "_posts/announcements/2024-02-02-launch.md", "posts"
    )

    assert resolved == {"layout": "post", "share": True, "comments": True}, (
        f"unexpected merge result {resolved!r}"
    )


def test_declaration_order_not_specificity_decides() -> None:
    """A broad rule declared last still wins on key collision."""
    config = _config(
        ScopeRule(path="_posts", type="posts", values={"layout": "narrow"}),
        ScopeRule(values={"layout": "broad"}),
    )
    assert config.resolve_defaults("_posts/2024-01-01-x.md", "posts") == {
        "layout": "broad"
    }


@pytest.mark.parametrize(
    ("scope_path", "candidate", "expected"),
    [
        ("", "anything/at/all.md", True),
        ("_posts", "_posts/2024-01-01-x.md", True),
        ("_posts/", "_posts/2024-01-01-x.md", True),
        ("/_posts", "_posts/2024-01-01-x.md", True),
        ("_posts/ref", "_posts/refactoring/2024-01-01-x.md", False),
        ("_pages/about.md", "_pages/about.md", True),
        ("_pages/*.md", "_pages/about.md", True),
        ("_pages/*.md", "_posts/2024-01-01-x.md", False),
        ("projects/*", "projects/alpha/index.md", True),
        ("./_pages", "./_pages/about.md", True),
    ],
)
def test_scope_path_matching(scope_path: str, candidate: str, expected: bool) -> None:
    """Paths match exactly, as directory prefixes, or as globs."""
    rule = ScopeRule(path=scope_path, values={"hit": True})
    assert rule.matches(candidate, "pages") is expected, (
        f"scope {scope_path!r} vs {candidate!r}: expected {expected}"
    )


def test_scope_accepts_pure_paths() -> None:
    """PurePath inputs are matched by their POSIX form."""
    rule = ScopeRule(path="_pages", values={})
    assert rule.matches(PurePosixPath("_pages/about.md"), "pages")


def test_drafts_pick_up_post_defaults() -> None:
    """Drafts belong to the posts collection."""
    config = _config(
        ScopeRule(type="posts", values={"layout": "post"}),
        ScopeRule(type="drafts", values={"draft_banner": True}),
    )

    assert config.resolve_defaults("_drafts/idea.md", "drafts") == {
        "layout": "post",
        "draft_banner": True,
    }
    assert config.resolve_defaults("_posts/2024-01-01-x.md", "posts") == {
        "layout": "post"
    }


def test_nested_values_merge_key_by_key() -> None:
    """Nested mappings from several rules are combined."""
    config = _config(
        ScopeRule(values={"header": {"overlay_color": "#333"}}),
        ScopeRule(type="posts", values={"header": {"teaser": "/img/t.png"}}),
    )
    resolved = config.resolve_defaults("_posts/2024-01-01-x.md", "posts")
    assert resolved == {"header": {"overlay_color": "#333", "teaser": "/img/t.png"}}


def test_resolved_defaults_do_not_alias_configuration() -> None:
    """Mutating a result never leaks back into the record."""
    config = _config(ScopeRule(values={"header": {"image": "a.png"}}))

    first = config.resolve_defaults("x.md", "pages")
    first["header"]["image"] = "changed.png"
    first["extra"] = 1

    assert config.resolve_defaults("x.md", "pages") == {"header": {"image": "a.png"}}


def test_resolve_plugins_returns_a_fresh_list() -> None:
    """Callers can mutate the plugin list without touching the record."""
    config = SiteConfig(title="Blog", url="https://example.com", plugins=("a", "b"))

    plugins = config.resolve_plugins()
    plugins.append("c")

    assert config.resolve_plugins() == ["a", "b"]
