"""Persist file → Telegraph page mappings as a JSON file in the workspace."""

from __future__ import annotations

import json
import logging
from pathlib import Path

from ..models import PageMapping

logger = logging.getLogger(__name__)


def load_page_mappings(path: str | Path) -> list[PageMapping]:
    """Mappings from a previous run; a missing or broken file yields ``[]``."""
    path = Path(path)
    if not path.exists():
        return []
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return [PageMapping.model_validate(item) for item in raw]
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Failed to load existing mappings from %s: %s", path, e)
        return []


def save_page_mappings(path: str | Path, mappings: list[PageMapping]) -> None:
    path = Path(path)
    records = [m.model_dump(by_alias=True) for m in mappings]
    try:
        path.write_text(json.dumps(records, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        logger.error("Failed to save mappings to %s: %s", path, e)
        raise
    logger.info("Saved page mappings to %s", path)


def find_mapping(mappings: list[PageMapping], relative_path: str) -> PageMapping | None:
    for mapping in mappings:
        if mapping.file_path == relative_path:
            return mapping
    return None
