"""Input layer: find and read the workspace's markdown files."""

from __future__ import annotations

import fnmatch
import logging
from pathlib import Path, PurePosixPath

from ..models import MarkdownFile
from .markdown_parser import extract_title

logger = logging.getLogger(__name__)


def _is_excluded(relative_path: str, exclude_patterns: list[str]) -> bool:
    return any(fnmatch.fnmatch(relative_path, pattern) for pattern in exclude_patterns)


def _is_hidden(relative_path: str) -> bool:
    return any(part.startswith(".") for part in PurePosixPath(relative_path).parts)


def _read_text(path: Path) -> str:
    data = path.read_bytes()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("utf-8", errors="replace")


def find_markdown_files(
    workspace_root: str | Path,
    include_patterns: list[str] | None = None,
    exclude_patterns: list[str] | None = None,
) -> list[MarkdownFile]:
    """Glob ``include_patterns`` under the workspace, minus ``exclude_patterns``.

    Files come back in pattern order, then path order, each at most once.
    Dot-prefixed files and directories are never matched.
    """
    root = Path(workspace_root)
    include_patterns = include_patterns or ["**/*.md"]
    exclude_patterns = exclude_patterns or []
    files: list[MarkdownFile] = []
    seen: set[str] = set()

    for pattern in include_patterns:
        try:
            matched = sorted(root.glob(pattern))
            for path in matched:
                relative = path.relative_to(root).as_posix()
                if relative in seen or _is_hidden(relative) or _is_excluded(relative, exclude_patterns):
                    continue
                if not path.is_file():
                    continue
                content = _read_text(path)
                files.append(
                    MarkdownFile(
                        file_path=str(path),
                        relative_path=relative,
                        content=content,
                        title=extract_title(content, relative),
                    )
                )
                seen.add(relative)
        except (OSError, ValueError, NotImplementedError) as e:
            logger.warning("Failed to process pattern %s: %s", pattern, e)

    logger.info("Found %d markdown files", len(files))
    return files


def read_markdown_file(workspace_root: str | Path, file_path: str | Path) -> MarkdownFile:
    """Read one markdown file; errors are logged and re-raised."""
    path = Path(file_path)
    try:
        content = _read_text(path)
    except OSError as e:
        logger.error("Failed to read markdown file %s: %s", file_path, e)
        raise
    relative = path.resolve().relative_to(Path(workspace_root).resolve()).as_posix()
    return MarkdownFile(
        file_path=str(path),
        relative_path=relative,
        content=content,
        title=extract_title(content, str(path)),
    )
