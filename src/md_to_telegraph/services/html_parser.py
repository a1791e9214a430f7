"""Parse an HTML fragment into Telegraph nodes.

Tags are mapped onto the Telegraph vocabulary (h1/h2 → h3, h5/h6 → h4, b → strong,
...). Elements Telegraph cannot show contribute only their text.
"""

from __future__ import annotations

from html.parser import HTMLParser
from typing import Union

from ..models import Node

HTML_TO_TELEGRAPH: dict[str, str] = {
    "p": "p",
    "br": "br",
    "strong": "strong",
    "b": "strong",
    "em": "em",
    "i": "em",
    "u": "u",
    "del": "s",
    "s": "s",
    "strike": "s",
    "code": "code",
    "pre": "pre",
    "a": "a",
    "h1": "h3",
    "h2": "h3",
    "h3": "h3",
    "h4": "h4",
    "h5": "h4",
    "h6": "h4",
    "blockquote": "blockquote",
    "figure": "figure",
    "img": "img",
    "video": "video",
    "iframe": "iframe",
    "figcaption": "figcaption",
    "ul": "ul",
    "ol": "ol",
    "li": "li",
}

_VOID_TAGS = {"br", "img", "hr", "input", "meta", "link", "source", "wbr"}
_KEPT_ATTRS = {"a": "href", "img": "src"}


def map_html_tag(tag: str) -> str | None:
    return HTML_TO_TELEGRAPH.get(tag.lower())


def parse_html_to_nodes(html: str) -> list[Node]:
    """Parse an HTML fragment; bare top-level text becomes a paragraph."""
    parser = _TelegraphHTMLParser()
    parser.feed(html.strip())
    parser.close()
    nodes: list[Node] = []
    for item in parser.get_children():
        if isinstance(item, str):
            nodes.append(Node(tag="p", children=[item]))
        else:
            nodes.append(item)
    return nodes


class _Element:
    def __init__(self, tag: str, attrs: dict[str, str]) -> None:
        self.tag = tag
        self.attrs = attrs
        self.children: list[Union[_Element, str]] = []


class _TelegraphHTMLParser(HTMLParser):
    """Build a lightweight element tree, then fold it into nodes."""

    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self._root = _Element("#root", {})
        self._stack: list[_Element] = [self._root]

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = _Element(tag.lower(), dict((k, v or "") for k, v in attrs))
        self._stack[-1].children.append(element)
        if element.tag not in _VOID_TAGS:
            self._stack.append(element)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        element = _Element(tag.lower(), dict((k, v or "") for k, v in attrs))
        self._stack[-1].children.append(element)

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        # Close up to the matching open element; stray end tags are ignored.
        for depth in range(len(self._stack) - 1, 0, -1):
            if self._stack[depth].tag == tag:
                del self._stack[depth:]
                return

    def handle_data(self, data: str) -> None:
        self._stack[-1].children.append(data)

    def get_children(self) -> list[Union[Node, str]]:
        out: list[Union[Node, str]] = []
        for child in self._root.children:
            converted = _convert(child)
            if converted is not None:
                out.append(converted)
        return out


def _convert(item: Union[_Element, str]) -> Union[Node, str, None]:
    if isinstance(item, str):
        text = item.strip()
        return text or None

    tag = map_html_tag(item.tag)
    if tag is None:
        text = _text_content(item).strip()
        return text or None

    children: list[Union[Node, str]] = []
    for child in item.children:
        converted = _convert(child)
        if converted is None:
            continue
        if tag == "code" and isinstance(converted, Node):
            converted = _text_content_of_node(converted)
        children.append(converted)

    attrs = None
    kept = _KEPT_ATTRS.get(item.tag)
    if kept and kept in item.attrs:
        attrs = {kept: item.attrs[kept]}
    return Node(tag=tag, attrs=attrs, children=children or None)


def _text_content(item: Union[_Element, str]) -> str:
    if isinstance(item, str):
        return item
    return "".join(_text_content(child) for child in item.children)


def _text_content_of_node(node: Node) -> str:
    if not node.children:
        return ""
    return "".join(c if isinstance(c, str) else _text_content_of_node(c) for c in node.children)
