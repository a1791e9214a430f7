from md_to_telegraph.services.block_converter import nodes_to_content_json, nodes_to_payload, nodes_to_text
from md_to_telegraph.services.html_parser import map_html_tag, parse_html_to_nodes
from md_to_telegraph.services.markdown_parser import convert_markdown_to_nodes


def test_tag_map():
    assert map_html_tag("b") == "strong"
    assert map_html_tag("I") == "em"
    assert map_html_tag("h1") == "h3"
    assert map_html_tag("h6") == "h4"
    assert map_html_tag("strike") == "s"
    assert map_html_tag("div") is None
    assert map_html_tag("table") is None


def test_html_fragment_to_nodes():
    html = "<h1>Hello World</h1><p>This is <b>bold</b> text.</p>"
    assert nodes_to_payload(parse_html_to_nodes(html)) == [
        {"tag": "h3", "children": ["Hello World"]},
        {"tag": "p", "children": ["This is", {"tag": "strong", "children": ["bold"]}, "text."]},
    ]


def test_links_and_images_keep_their_target():
    html = '<p><a href="https://x.com" class="c">x</a><img src="/a.png" alt="a"></p>'
    assert nodes_to_payload(parse_html_to_nodes(html)) == [
        {
            "tag": "p",
            "children": [
                {"tag": "a", "attrs": {"href": "https://x.com"}, "children": ["x"]},
                {"tag": "img", "attrs": {"src": "/a.png"}},
            ],
        }
    ]


def test_unsupported_elements_become_text():
    assert nodes_to_payload(parse_html_to_nodes("<div><span>inside</span></div>")) == [
        {"tag": "p", "children": ["inside"]}
    ]


def test_list_structure_is_kept():
    html = "<ul>\n  <li>one</li>\n  <li>two</li>\n</ul>"
    assert nodes_to_payload(parse_html_to_nodes(html)) == [
        {"tag": "ul", "children": [{"tag": "li", "children": ["one"]}, {"tag": "li", "children": ["two"]}]}
    ]


def test_content_json_is_compact_utf8():
    nodes = convert_markdown_to_nodes("Привет **мир**")
    assert nodes_to_content_json(nodes) == '[{"tag": "p", "children": ["Привет ", {"tag": "strong", "children": ["мир"]}]}]'


def test_nodes_to_text():
    nodes = convert_markdown_to_nodes("## Intro\n\nSome **bold** words")
    assert nodes_to_text(nodes) == "Intro\nSome bold words"
