"""Markdown → Telegraph node tree.

A small, line-based block parser for the subset Telegraph can display:
headings, fenced code, blockquotes and paragraphs with inline styling.
Each non-blank line is its own block; consecutive quote lines stay separate.
"""

from __future__ import annotations

import re
from pathlib import PurePosixPath

from ..models import Node
from .inline_parser import parse_inline
from .link_resolver import LinkResolver

FRONTMATTER_MARKER = "---"
CODE_FENCE = "```"

_HEADING_RUN = re.compile(r"^#+")
_HEADING_PREFIX = re.compile(r"^#+\s*")
_QUOTE_PREFIX = re.compile(r"^> ?")
_TITLE_KEY = re.compile(r"^title:\s*(.+)$", re.MULTILINE)


def strip_frontmatter(content: str) -> str:
    """Drop a leading ``---`` metadata block; unclosed blocks are left alone."""
    if content.startswith(FRONTMATTER_MARKER):
        end = content.find(FRONTMATTER_MARKER, len(FRONTMATTER_MARKER))
        if end != -1:
            return content[end + len(FRONTMATTER_MARKER) :].strip()
    return content


def convert_markdown_to_nodes(
    markdown: str,
    base_path: str | None = None,
    link_resolver: LinkResolver | None = None,
) -> list[Node]:
    """Convert a whole markdown document into top-level Telegraph nodes.

    ``base_path`` is the document's workspace-relative path; together with
    ``link_resolver`` it lets links to other markdown files point at their
    published pages.
    """
    return parse_markdown_to_nodes(strip_frontmatter(markdown), base_path, link_resolver)


def parse_markdown_to_nodes(
    text: str,
    base_path: str | None = None,
    link_resolver: LinkResolver | None = None,
) -> list[Node]:
    """Segment preprocessed markdown into blocks.

    The first level-1 heading is skipped: the page title already shows it.
    """
    nodes: list[Node] = []
    lines = text.split("\n")
    skip_first_h1 = True
    i = 0
    while i < len(lines):
        stripped = lines[i].strip()
        if not stripped:
            i += 1
            continue
        # Heading
        if stripped.startswith("#"):
            i += 1
            level = _heading_level(stripped)
            if level == 1 and skip_first_h1:
                skip_first_h1 = False
                continue
            tag = "h3" if level <= 2 else "h4"
            nodes.append(Node(tag=tag, children=[_HEADING_PREFIX.sub("", stripped)]))
            continue
        # Code block
        if stripped.startswith(CODE_FENCE):
            code_lines: list[str] = []
            i += 1
            while i < len(lines) and not lines[i].strip().startswith(CODE_FENCE):
                code_lines.append(lines[i])
                i += 1
            if i < len(lines):
                i += 1
            if code_lines:
                nodes.append(Node(tag="pre", children=["\n".join(code_lines)]))
            continue
        # Blockquote
        if stripped.startswith(">"):
            nodes.append(Node(tag="blockquote", children=[_QUOTE_PREFIX.sub("", stripped)]))
            i += 1
            continue
        # Paragraph
        children = parse_inline(stripped, base_path, link_resolver)
        if children:
            nodes.append(Node(tag="p", children=children))
        i += 1
    return nodes


def _heading_level(line: str) -> int:
    run = _HEADING_RUN.match(line)
    return len(run.group(0)) if run else 1


def extract_title(content: str, file_path: str) -> str:
    """Page title: first ``# `` heading, else frontmatter ``title:``, else the file name."""
    for line in content.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith("# "):
            return trimmed[2:].strip()

    if content.startswith(FRONTMATTER_MARKER):
        end = content.find(FRONTMATTER_MARKER, len(FRONTMATTER_MARKER))
        if end != -1:
            found = _TITLE_KEY.search(content[len(FRONTMATTER_MARKER) : end])
            if found:
                return re.sub(r"^['\"]|['\"]$", "", found.group(1).strip())

    stem = PurePosixPath(file_path.replace("\\", "/")).name
    if stem.endswith(".md"):
        stem = stem[: -len(".md")]
    return " ".join(word[:1].upper() + word[1:] for word in stem.split("-"))
