"""Publish a workspace's markdown files to Telegraph.

Two passes: the first creates or updates one page per file so every file has a
URL; the second re-renders each page with links between markdown files
pointing at those URLs.
"""

from __future__ import annotations

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from ..models import ActionConfig, MarkdownFile, PageMapping, PublishResult, TelegraphPage
from .github_client import GitHubClient
from .input_layer import find_markdown_files
from .markdown_parser import convert_markdown_to_nodes
from .page_mappings import find_mapping, load_page_mappings, save_page_mappings
from .telegraph_client import create_account, create_page, edit_page, find_existing_page_by_title

logger = logging.getLogger(__name__)

# Event callback: (event_kind, data) -> None
EventCallback = Callable[[str, dict[str, Any]], None]

# In-memory task store for status and result
_task_store: dict[str, dict[str, Any]] = {}


def _last_modified(path: str) -> str:
    mtime = os.stat(path).st_mtime
    stamp = datetime.fromtimestamp(mtime, tz=timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _title(file: MarkdownFile) -> str:
    return file.title or file.relative_path


def _emit(on_event: EventCallback | None, kind: str, data: dict[str, Any]) -> None:
    if on_event is not None:
        on_event(kind, data)


def _resolve_token(config: ActionConfig) -> str:
    if config.access_token:
        logger.info("Using existing Telegraph access token")
        return config.access_token
    logger.info("Creating new Telegraph account...")
    account = create_account(config.account_name, config.author_name, config.author_url)
    return account.access_token


def _publish_file(
    file: MarkdownFile,
    existing: PageMapping | None,
    token: str,
    config: ActionConfig,
) -> TelegraphPage | None:
    nodes = convert_markdown_to_nodes(file.content)
    if not nodes:
        logger.warning("No content to convert in file: %s", file.relative_path)
        return None

    title = _title(file)
    if existing is not None:
        logger.info("Updating existing Telegraph page: %s", existing.telegraph_url)
        return edit_page(token, existing.telegraph_path, title, nodes, config.author_name, config.author_url)

    if config.replace_existing_pages and config.access_token:
        logger.info("Searching for existing Telegraph page with title: %s", title)
        page = find_existing_page_by_title(token, title)
        if page is not None:
            logger.info('Found existing page "%s" at %s. Replacing content...', page.title, page.url)
            return edit_page(token, page.path, title, nodes, config.author_name, config.author_url)
        logger.info("No existing page found. Creating new Telegraph page for: %s", file.relative_path)
    else:
        logger.info("Creating new Telegraph page for: %s", file.relative_path)
    return create_page(token, title, nodes, config.author_name, config.author_url)


def resolve_internal_links(
    files: list[MarkdownFile],
    mappings: list[PageMapping],
    token: str,
    config: ActionConfig,
) -> None:
    """Second pass: re-render published pages with internal links resolved."""
    url_by_path = {m.file_path: m.telegraph_url for m in mappings}

    def link_resolver(file_path: str) -> str:
        return url_by_path.get(file_path) or file_path

    for file in files:
        mapping = find_mapping(mappings, file.relative_path)
        if mapping is None:
            continue
        logger.info("Resolving internal links in: %s", file.relative_path)
        try:
            nodes = convert_markdown_to_nodes(file.content, file.relative_path, link_resolver)
            edit_page(token, mapping.telegraph_path, _title(file), nodes, config.author_name, config.author_url)
            logger.info("Updated internal links in: %s", mapping.telegraph_url)
        except Exception as e:
            logger.warning("Failed to resolve internal links in %s: %s", file.relative_path, e)


def _update_homepage(mappings: list[PageMapping], config: ActionConfig) -> None:
    if not config.one_entry_mode:
        return
    if len(mappings) != 1:
        logger.info(
            "One entry mode enabled but %d pages were created. Repository homepage URL will not be updated.",
            len(mappings),
        )
        return
    logger.info("One entry mode enabled and exactly one page created. Updating repository homepage URL...")
    try:
        github = GitHubClient()
        if not github.check_permissions():
            logger.warning(
                "GitHub token does not have sufficient permissions to update repository homepage URL. "
                "Please ensure the token has 'metadata: write' or 'contents: write' permissions."
            )
            return
        github.update_homepage(mappings[0].telegraph_url)
        logger.info("Repository homepage URL updated with Telegraph URL: %s", mappings[0].telegraph_url)
    except Exception as e:
        logger.warning("Failed to update repository homepage URL in one entry mode: %s", e)


def publish_workspace(
    config: ActionConfig,
    workspace_root: str | Path,
    on_event: EventCallback | None = None,
) -> PublishResult:
    """Publish every matching markdown file under ``workspace_root``."""
    if config.replace_existing_pages and not config.access_token:
        raise ValueError(
            "replace-existing-pages mode requires a consistent telegraph-token. "
            "Please provide a telegraph-token input to reuse existing pages."
        )

    root = Path(workspace_root)
    logger.info("Workspace root: %s", root)
    logger.info("Include patterns: %s", ", ".join(config.include_patterns))
    logger.info("Exclude patterns: %s", ", ".join(config.exclude_patterns))

    token = _resolve_token(config)
    mapping_file = root / config.output_file
    existing_mappings = load_page_mappings(mapping_file)
    mappings: list[PageMapping] = []

    files = find_markdown_files(root, config.include_patterns, config.exclude_patterns)
    if not files:
        logger.warning("No markdown files found matching the specified patterns")
        return PublishResult(pages_created=0, mapping_file=config.output_file)

    logger.info("Processing %d markdown files...", len(files))
    _emit(on_event, "progress", {"step": "publishing", "total": len(files)})
    for index, file in enumerate(files, start=1):
        logger.info("Processing: %s", file.relative_path)
        try:
            last_modified = _last_modified(file.file_path)
            existing = find_mapping(existing_mappings, file.relative_path)
            if existing is not None and existing.last_modified == last_modified:
                logger.info("Skipping unchanged file: %s", file.relative_path)
                mappings.append(existing)
                continue
            page = _publish_file(file, existing, token, config)
            if page is None:
                continue
            mappings.append(
                PageMapping(
                    file_path=file.relative_path,
                    telegraph_path=page.path,
                    telegraph_url=page.url,
                    last_modified=last_modified,
                )
            )
            logger.info("%s -> %s", file.relative_path, page.url)
            _emit(on_event, "page", {"file": file.relative_path, "url": page.url, "index": index})
        except Exception as e:
            logger.error("Failed to process %s: %s", file.relative_path, e)

    logger.info("Resolving internal markdown links...")
    _emit(on_event, "progress", {"step": "linking", "total": len(mappings)})
    resolve_internal_links(files, mappings, token, config)

    save_page_mappings(mapping_file, mappings)
    _update_homepage(mappings, config)

    logger.info("Successfully processed %d files", len(mappings))
    return PublishResult(pages_created=len(mappings), mapping_file=config.output_file, mappings=mappings)


def run_task(config: ActionConfig, workspace_root: str | Path, task_id: str | None = None) -> str:
    """Run a publish as a tracked task. Failures end up on the task, not raised."""
    task_id = task_id or str(uuid.uuid4())
    _task_store[task_id] = {"status": "running", "events": [], "result": None}

    def on_event(kind: str, data: dict[str, Any]) -> None:
        _task_store[task_id]["events"].append({"kind": kind, "data": data})

    try:
        outcome = publish_workspace(config, workspace_root, on_event=on_event)
        result = {
            "status": "success",
            "pages_created": outcome.pages_created,
            "mapping_file": outcome.mapping_file,
            "pages": {m.file_path: m.telegraph_url for m in outcome.mappings},
            "failure_reason": "",
        }
        on_event("progress", {"step": "done", "result": result})
        _task_store[task_id]["result"] = result
        _task_store[task_id]["status"] = "completed"
    except Exception as e:
        logger.error("Task %s failed: %s", task_id, e)
        on_event("error", {"message": str(e)})
        _task_store[task_id]["result"] = {"status": "failed", "failure_reason": str(e)}
        _task_store[task_id]["status"] = "failed"
    return task_id


def get_task(task_id: str) -> dict[str, Any] | None:
    return _task_store.get(task_id)


def list_tasks(page: int = 1, size: int = 20) -> dict[str, Any]:
    items = list(_task_store.items())
    items.reverse()
    total = len(items)
    start = (page - 1) * size
    end = start + size
    tasks = []
    for tid, data in items[start:end]:
        row = {"task_id": tid, "status": data.get("status", "unknown")}
        result = data.get("result")
        if result:
            row["pages_created"] = result.get("pages_created")
            row["failure_reason"] = result.get("failure_reason")
        tasks.append(row)
    return {"tasks": tasks, "total": total}
