"""Link target resolution for markdown links.

External URLs and in-page/contact targets are kept as written. Relative
``*.md`` targets are normalized against the linking document's path and looked
up through a caller-supplied resolver (typically the published page mapping).
"""

from __future__ import annotations

import logging
import os
import posixpath
from typing import Callable

logger = logging.getLogger(__name__)

LinkResolver = Callable[[str], str]

_EXTERNAL_PREFIXES = ("http://", "https://")
_PASSTHROUGH_PREFIXES = ("#", "mailto:", "tel:")


def resolve_link(
    href: str,
    base_path: str | None = None,
    link_resolver: LinkResolver | None = None,
) -> str:
    """Return the href to embed for a link found in the document at ``base_path``."""
    if href.startswith(_EXTERNAL_PREFIXES):
        return href
    if href.startswith(_PASSTHROUGH_PREFIXES):
        return href

    if ".md" in href and base_path and link_resolver:
        target = normalize_link_path(href, base_path)
        resolved = link_resolver(target)
        if resolved and resolved != target:
            return resolved
        logger.warning("Could not resolve internal link: %s from %s", href, base_path)

    return href


def normalize_link_path(href: str, base_path: str) -> str:
    """Workspace-relative, forward-slash path of a document link target."""
    path_part = href.split("?", 1)[0].split("#", 1)[0]
    base_dir = posixpath.dirname(base_path.replace("\\", "/"))

    if path_part.startswith(("./", "../")):
        absolute = os.path.abspath(os.path.join(base_dir, path_part))
        resolved = os.path.relpath(absolute, os.getcwd())
    elif path_part.startswith("/"):
        resolved = path_part[1:]
    else:
        resolved = os.path.normpath(os.path.join(base_dir, path_part)) if path_part else path_part

    return resolved.replace("\\", "/")
