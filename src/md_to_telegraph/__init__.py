"""Markdown to Telegraph: convert repository markdown into Telegraph pages."""

from .models import Node
from .services.markdown_parser import convert_markdown_to_nodes, strip_frontmatter
from .services.inline_parser import parse_inline
from .services.link_resolver import resolve_link

__all__ = [
    "Node",
    "convert_markdown_to_nodes",
    "parse_inline",
    "resolve_link",
    "strip_frontmatter",
]
