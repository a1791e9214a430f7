"""Load settings from environment (.env and env vars).

Action inputs arrive the way GitHub Actions passes them: ``INPUT_<NAME>`` with
the input name upper-cased (``account-name`` → ``INPUT_ACCOUNT-NAME``).
"""

from __future__ import annotations

import os
from pathlib import Path

from .models import ActionConfig

# Load .env from project root if present
_env_path = Path(__file__).resolve().parent.parent.parent / ".env"
if _env_path.exists():
    from dotenv import load_dotenv
    load_dotenv(_env_path)


def _str(key: str, default: str = "") -> str:
    return (os.environ.get(key) or "").strip() or default


def get_input(name: str, default: str = "") -> str:
    """Value of an action input, e.g. ``get_input("output-file")``."""
    return _str("INPUT_" + name.replace(" ", "_").upper(), default)


def _patterns(raw: str, default: list[str]) -> list[str]:
    if not raw:
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


def get_config() -> ActionConfig:
    return ActionConfig(
        account_name=get_input("account-name") or "GitHub Action",
        author_name=get_input("author-name") or "GitHub Action",
        author_url=get_input("author-url") or None,
        include_patterns=_patterns(get_input("include-patterns"), ["**/*.md"]),
        exclude_patterns=_patterns(get_input("exclude-patterns"), ["node_modules/**"]),
        output_file=get_input("output-file") or "telegraph-pages.json",
        access_token=get_input("telegraph-token") or None,
        one_entry_mode=get_input("one-entry-mode") == "true",
        replace_existing_pages=get_input("replace-existing-pages") == "true",
    )


def workspace_root() -> str:
    return _str("GITHUB_WORKSPACE") or os.getcwd()


def github_token() -> str:
    return _str("GITHUB_TOKEN") or get_input("github-token")


def github_repository() -> str:
    return _str("GITHUB_REPOSITORY")


def github_output_path() -> str:
    """File the GitHub runner collects step outputs from; empty outside Actions."""
    return _str("GITHUB_OUTPUT")
