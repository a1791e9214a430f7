"""Telegraph node tree → API payload.

``createPage``/``editPage`` take ``content`` as a JSON-encoded array of
``{"tag", "attrs", "children"}`` objects (plain strings for text).
"""

from __future__ import annotations

import json
from typing import Any, Iterable, Union

from ..models import Node


def nodes_to_payload(nodes: Iterable[Union[Node, str]]) -> list[Any]:
    """Plain dict/str form of a node sequence."""
    return [node.to_payload() if isinstance(node, Node) else node for node in nodes]


def nodes_to_content_json(nodes: Iterable[Union[Node, str]]) -> str:
    """The ``content`` field value for page create/edit calls."""
    return json.dumps(nodes_to_payload(nodes), ensure_ascii=False)


def nodes_to_text(nodes: Iterable[Union[Node, str]]) -> str:
    """Concatenated text of a node tree, blocks separated by newlines."""
    parts: list[str] = []
    for node in nodes:
        if isinstance(node, str):
            parts.append(node)
        elif node.children:
            parts.append(_inline_text(node.children))
    return "\n".join(p for p in parts if p)


def _inline_text(children: Iterable[Union[Node, str]]) -> str:
    out = ""
    for child in children:
        if isinstance(child, str):
            out += child
        elif child.children:
            out += _inline_text(child.children)
    return out
