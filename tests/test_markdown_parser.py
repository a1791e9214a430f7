import pytest

from md_to_telegraph import convert_markdown_to_nodes, strip_frontmatter
from md_to_telegraph.services.block_converter import nodes_to_payload
from md_to_telegraph.services.markdown_parser import extract_title, parse_markdown_to_nodes


def payload(markdown: str, *args):
    return nodes_to_payload(convert_markdown_to_nodes(markdown, *args))


@pytest.mark.parametrize("markdown", ["", "\n\n", "   ", "```", "#", ">", "---", "**", "[x](", "`"])
def test_any_input_converts(markdown):
    assert isinstance(convert_markdown_to_nodes(markdown), list)


def test_first_h1_is_skipped():
    assert payload("# Title\n\nBody") == [{"tag": "p", "children": ["Body"]}]


def test_h2_is_kept():
    assert payload("## Sub\n\nBody") == [
        {"tag": "h3", "children": ["Sub"]},
        {"tag": "p", "children": ["Body"]},
    ]


def test_heading_levels():
    result = payload("# H1 Title\n## H2 Title\n### H3 Title\n###### Deep\n# Second H1")
    assert result == [
        {"tag": "h3", "children": ["H2 Title"]},
        {"tag": "h4", "children": ["H3 Title"]},
        {"tag": "h4", "children": ["Deep"]},
        {"tag": "h3", "children": ["Second H1"]},
    ]


def test_h1_skip_resets_between_calls():
    assert payload("# One") == []
    assert payload("# One") == []


def test_code_block():
    assert payload("```\nline1\nline2\n```") == [{"tag": "pre", "children": ["line1\nline2"]}]


def test_code_block_keeps_indentation_and_markup():
    markdown = '```python\ndef hello():\n    print("**world**")\n    return True\n```'
    assert payload(markdown) == [
        {"tag": "pre", "children": ['def hello():\n    print("**world**")\n    return True']}
    ]


def test_unclosed_code_block_takes_the_rest():
    assert payload("```\na\n\n# not a heading") == [{"tag": "pre", "children": ["a\n\n# not a heading"]}]


def test_empty_code_block_is_dropped():
    assert payload("```\n```\nafter") == [{"tag": "p", "children": ["after"]}]


def test_blockquotes_are_not_merged():
    result = payload("> one\n> two\n>three")
    assert result == [
        {"tag": "blockquote", "children": ["one"]},
        {"tag": "blockquote", "children": ["two"]},
        {"tag": "blockquote", "children": ["three"]},
    ]


def test_paragraph_with_inline_formatting():
    result = payload("This is **bold** and *italic* text with `code`.")
    assert result == [
        {
            "tag": "p",
            "children": [
                "This is ",
                {"tag": "strong", "children": ["bold"]},
                " and ",
                {"tag": "em", "children": ["italic"]},
                " text with ",
                {"tag": "code", "children": ["code"]},
                ".",
            ],
        }
    ]


def test_each_line_is_a_paragraph():
    assert payload("first\nsecond") == [
        {"tag": "p", "children": ["first"]},
        {"tag": "p", "children": ["second"]},
    ]


def test_internal_link_scenario(guide_resolver):
    result = payload("Check [guide](./docs/guide.md) for more.", "README.md", guide_resolver)
    assert result == [
        {
            "tag": "p",
            "children": [
                "Check ",
                {"tag": "a", "attrs": {"href": "https://pub.example/Guide-123"}, "children": ["guide"]},
                " for more.",
            ],
        }
    ]


def test_frontmatter_removed_before_parsing():
    assert payload("---\ntitle: Test\n---\n\n# Real Content") == []
    assert payload("---\ntitle: Test\n---\n\nText") == [{"tag": "p", "children": ["Text"]}]


def test_strip_frontmatter():
    assert strip_frontmatter("---\ntitle: Test\nauthor: John\n---\n\n# Content") == "# Content"
    assert strip_frontmatter("# Just content here") == "# Just content here"


def test_strip_frontmatter_without_closing_marker():
    content = "---\ntitle: Test\n# Content without closing dashes"
    assert strip_frontmatter(content) == content


def test_strip_frontmatter_is_idempotent():
    content = "---\ntitle: Test\n---\n\n# Content\n\nBody"
    once = strip_frontmatter(content)
    assert strip_frontmatter(once) == once


def test_parse_does_not_strip_frontmatter():
    nodes = parse_markdown_to_nodes("---\ntitle: x\n---")
    assert [n.tag for n in nodes] == ["p", "p", "p"]


def test_extract_title_from_heading():
    assert extract_title("intro\n# My Page\n", "docs/x.md") == "My Page"


def test_extract_title_from_frontmatter():
    assert extract_title("---\ntitle: 'Quoted Title'\n---\nbody", "docs/x.md") == "Quoted Title"


def test_extract_title_from_file_name():
    assert extract_title("no heading", "docs/getting-started.md") == "Getting Started"
