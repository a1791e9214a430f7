import logging

import pytest

from md_to_telegraph import resolve_link
from md_to_telegraph.services.link_resolver import normalize_link_path


def never_called(path: str) -> str:
    raise AssertionError(f"resolver called with {path}")


@pytest.mark.parametrize(
    "href",
    [
        "https://x.com",
        "http://x.com/readme.md",
        "#sec",
        "#notes.md",
        "mailto:test@example.com",
        "tel:123-456-7890",
    ],
)
def test_non_document_targets_are_unchanged(href):
    assert resolve_link(href, "README.md", never_called) == href


def test_relative_link_is_resolved():
    assert resolve_link("./a.md", "README.md", lambda p: "URL" if p == "a.md" else p) == "URL"


def test_unresolved_link_keeps_href_and_warns(caplog):
    with caplog.at_level(logging.WARNING, logger="md_to_telegraph.services.link_resolver"):
        assert resolve_link("./missing.md", "README.md", lambda p: p) == "./missing.md"
    assert "Could not resolve internal link: ./missing.md from README.md" in caplog.text


def test_empty_resolver_result_counts_as_unresolved(caplog):
    with caplog.at_level(logging.WARNING):
        assert resolve_link("./missing.md", "README.md", lambda p: "") == "./missing.md"
    assert "Could not resolve internal link" in caplog.text


def test_needs_base_path_and_resolver():
    assert resolve_link("./guide.md") == "./guide.md"
    assert resolve_link("./guide.md", "README.md") == "./guide.md"
    assert resolve_link("./guide.md", None, never_called) == "./guide.md"


def test_non_markdown_relative_link_is_unchanged():
    assert resolve_link("./image.png", "README.md", never_called) == "./image.png"


def test_backslashes_are_normalized():
    seen = []

    def resolver(path: str) -> str:
        seen.append(path)
        return "https://pub.example/Guide-Normalized"

    assert resolve_link("docs\\guide.md", "README.md", resolver) == "https://pub.example/Guide-Normalized"
    assert seen == ["docs/guide.md"]


def test_resolver_errors_propagate():
    def broken(path: str) -> str:
        raise KeyError(path)

    with pytest.raises(KeyError):
        resolve_link("./a.md", "README.md", broken)


@pytest.mark.parametrize(
    "href,base_path,expected",
    [
        ("./docs/guide.md", "README.md", "docs/guide.md"),
        ("../README.md", "docs/guide.md", "README.md"),
        ("../../api/reference.md", "docs/guides/tutorial.md", "api/reference.md"),
        ("/config/settings.md", "docs/guide.md", "config/settings.md"),
        ("sibling.md", "docs/guide.md", "docs/sibling.md"),
        ("./guide.md#section?param=value", "README.md", "guide.md"),
        ("guide.md?plain=1", "README.md", "guide.md"),
    ],
)
def test_normalize_link_path(href, base_path, expected):
    assert normalize_link_path(href, base_path) == expected
