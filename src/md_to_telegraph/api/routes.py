"""API routes: preview conversion, start publish tasks, follow their progress."""

from __future__ import annotations

import json
import uuid
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import AsyncGenerator

from fastapi import APIRouter, HTTPException
from sse_starlette.sse import EventSourceResponse

from ..models import (
    ActionConfig,
    ConvertRequest,
    ConvertResponse,
    PublishRequest,
    PublishResponse,
    TaskListResponse,
)
from ..services.block_converter import nodes_to_payload
from ..services.html_parser import parse_html_to_nodes
from ..services.markdown_parser import convert_markdown_to_nodes, extract_title
from ..services.run_pipeline import _task_store, get_task, list_tasks, run_task

router = APIRouter(prefix="/api", tags=["api"])
_executor = ThreadPoolExecutor(max_workers=4)


@router.post("/convert", response_model=ConvertResponse)
async def api_convert(body: ConvertRequest):
    """Convert markdown (or an HTML fragment) to Telegraph nodes without publishing."""
    if body.source_format == "html":
        nodes = parse_html_to_nodes(body.markdown)
        title = body.file_name
    else:
        resolver = (lambda path: body.links.get(path, path)) if body.links else None
        nodes = convert_markdown_to_nodes(body.markdown, body.base_path, resolver)
        title = extract_title(body.markdown, body.file_name)
    return ConvertResponse(title=title, nodes=nodes_to_payload(nodes))


@router.post("/publish", response_model=PublishResponse)
async def api_publish(body: PublishRequest):
    """Start publishing a workspace. Returns task_id; follow GET /api/tasks/{task_id}/stream."""
    if not Path(body.workspace_root).is_dir():
        raise HTTPException(400, f"Workspace not found: {body.workspace_root}")
    if body.replace_existing_pages and not body.telegraph_token:
        raise HTTPException(400, "replace_existing_pages requires telegraph_token")
    config = ActionConfig(
        account_name=body.account_name,
        author_name=body.author_name,
        author_url=body.author_url,
        include_patterns=body.include_patterns,
        exclude_patterns=body.exclude_patterns,
        output_file=body.output_file,
        access_token=body.telegraph_token,
        one_entry_mode=body.one_entry_mode,
        replace_existing_pages=body.replace_existing_pages,
    )
    task_id = uuid.uuid4().hex
    _task_store[task_id] = {"status": "running", "events": [], "result": None}
    _executor.submit(run_task, config, body.workspace_root, task_id=task_id)
    return PublishResponse(task_id=task_id)


@router.get("/tasks/{task_id}/stream")
async def api_task_stream(task_id: str):
    """SSE stream for task progress. Events: progress, page, result, error."""
    if not get_task(task_id):
        raise HTTPException(404, "Task not found")

    async def event_generator() -> AsyncGenerator[str, None]:
        import asyncio
        last_index = 0
        while True:
            t = get_task(task_id)
            if not t:
                break
            events = t.get("events", [])
            for ev in events[last_index:]:
                yield json.dumps(ev)
            last_index = len(events)
            status = t.get("status", "running")
            if status != "running":
                result = t.get("result")
                if result:
                    yield json.dumps({"kind": "result", "data": result})
                break
            await asyncio.sleep(0.3)

    return EventSourceResponse(event_generator())


@router.get("/tasks", response_model=TaskListResponse)
async def api_tasks_list(page: int = 1, size: int = 20):
    """List task history."""
    data = list_tasks(page=page, size=size)
    return TaskListResponse(**data)
