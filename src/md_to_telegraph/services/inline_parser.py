"""Inline markup → Telegraph nodes.

Scans a span for the first occurrence of every inline pattern, keeps the one
starting earliest (ties go to the pattern listed first), emits it, and carries
on with the text after it. Matched spans other than inline code are parsed
again for nested styling.

This intentionally mirrors what Telegraph can render rather than CommonMark:
delimiters are not checked for balance, and whitespace-only text between
matches is dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

from ..models import Node
from .link_resolver import LinkResolver, resolve_link

# (tag, pattern) in precedence order.
_PATTERNS: list[tuple[str, re.Pattern[str]]] = [
    ("code", re.compile(r"`(.*?)`")),
    ("strong", re.compile(r"\*\*(.*?)\*\*")),
    ("em", re.compile(r"\*(.*?)\*")),
    ("em", re.compile(r"_(.*?)_")),
    ("a", re.compile(r"\[([^\]]+)\]\(([^)]+)\)")),
]


@dataclass(frozen=True)
class Match:
    """A located pattern occurrence within the span being parsed."""

    start: int
    end: int
    text: str
    tag: str
    priority: int
    href: str | None = None


def find_matches(text: str) -> list[Match]:
    """First occurrence of each pattern in ``text``, in precedence order."""
    found: list[Match] = []
    for priority, (tag, pattern) in enumerate(_PATTERNS):
        m = pattern.search(text)
        if m is None:
            continue
        found.append(
            Match(
                start=m.start(),
                end=m.end(),
                text=m.group(1),
                tag=tag,
                priority=priority,
                href=m.group(2) if tag == "a" else None,
            )
        )
    return found


def select_match(text: str) -> Match | None:
    """Earliest match; equal starts are decided by precedence."""
    matches = find_matches(text)
    if not matches:
        return None
    return min(matches, key=lambda m: (m.start, m.priority))


def parse_inline(
    text: str,
    base_path: str | None = None,
    link_resolver: LinkResolver | None = None,
) -> list[Union[Node, str]]:
    """Parse one span of inline markdown into text fragments and nodes."""
    out: list[Union[Node, str]] = []
    rest = text
    while True:
        match = select_match(rest)
        if match is None:
            if rest.strip():
                out.append(rest)
            return out
        before = rest[: match.start]
        if before.strip():
            out.append(before)
        out.append(_build_node(match, base_path, link_resolver))
        rest = rest[match.end :]


def _build_node(match: Match, base_path: str | None, link_resolver: LinkResolver | None) -> Node:
    if match.tag == "code":
        return Node(tag="code", children=[match.text])

    children = parse_inline(match.text, base_path, link_resolver)
    if not any(isinstance(child, Node) for child in children):
        children = [match.text]

    if match.tag == "a":
        href = resolve_link(match.href or "", base_path, link_resolver)
        return Node(tag="a", attrs={"href": href}, children=children)
    return Node(tag=match.tag, children=children)
