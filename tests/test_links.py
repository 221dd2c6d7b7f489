from __future__ import annotations

import pytest

from docmesh.links.extract import (
    extract_headings,
    extract_internal_links,
    extract_links,
    extract_title,
    is_internal_target,
)
from docmesh.links.resolve import resolve_link, split_anchor


def test_extracts_multiple_links_per_line_with_positions() -> None:
    text = "intro\nSee [A](a.md) and [B](../b.md) here"
    links = extract_links(text)
    assert [(link.text, link.target, link.line) for link in links] == [
        ("A", "a.md", 2),
        ("B", "../b.md", 2),
    ]
    assert links[0].start == 4
    assert links[0].end == 4 + len("[A](a.md)")


def test_captures_optional_title() -> None:
    (link,) = extract_links('[Docs](https://example.com "Home page")')
    assert link.target == "https://example.com"
    assert link.title == "Home page"
    assert not link.is_internal


@pytest.mark.parametrize(
    ("target", "internal"),
    [
        ("guide.md", True),
        ("/api/ref.md", True),
        ("http://example.com", False),
        ("https://example.com", False),
        ("mailto:ops@example.com", False),
        ("#section", False),
    ],
)
def test_internal_classification(target: str, internal: bool) -> None:
    assert is_internal_target(target) is internal


def test_links_spanning_lines_are_not_recognised() -> None:
    assert extract_links("[split\ntext](a.md)") == []


def test_extract_internal_links_filters_external() -> None:
    text = "[a](a.md) [b](https://b.example) [c](#c)"
    assert [link.target for link in extract_internal_links(text)] == ["a.md"]


def test_headings_and_title() -> None:
    text = "intro\n# Title\n## Section\nbody"
    headings = extract_headings(text)
    assert [(item.level, item.text, item.line) for item in headings] == [
        (1, "Title", 2),
        (2, "Section", 3),
    ]
    assert extract_title(text) == "Title"
    assert extract_title("no headings") is None


def test_split_anchor() -> None:
    assert split_anchor("a.md#top") == ("a.md", "top")
    assert split_anchor("a.md") == ("a.md", None)


def test_resolve_relative_target() -> None:
    resolved = resolve_link("../api/ref.md", "security/auth.md")
    assert resolved.path == "api/ref.md"
    assert not resolved.escapes_root


def test_resolve_root_anchored_target() -> None:
    assert resolve_link("/api/ref.md", "a/b/c.md").path == "api/ref.md"


def test_resolve_collapses_dot_segments() -> None:
    assert resolve_link("./x/../y.md", "docs/a.md").path == "docs/y.md"


def test_resolve_strips_anchor() -> None:
    resolved = resolve_link("guide.md#install", "quickstart/index.md")
    assert resolved.path == "quickstart/guide.md"
    assert resolved.anchor == "install"


def test_resolve_same_file_reference() -> None:
    resolved = resolve_link("#top", "a.md")
    assert resolved.same_file
    assert resolved.path is None


def test_resolve_marks_targets_above_root() -> None:
    resolved = resolve_link("../../outside.md", "a/b.md")
    assert resolved.escapes_root
    assert resolved.raw == "../../outside.md"
