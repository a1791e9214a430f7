"""Action entry point: publish the workspace's markdown files to Telegraph.

Usage:
  md-to-telegraph
  python -m md_to_telegraph.scripts.publish_docs

Env (GitHub Actions inputs):
  INPUT_TELEGRAPH-TOKEN (optional; a new account is created without it)
  INPUT_INCLUDE-PATTERNS, INPUT_EXCLUDE-PATTERNS, INPUT_OUTPUT-FILE
  INPUT_ONE-ENTRY-MODE, INPUT_REPLACE-EXISTING-PAGES
  GITHUB_WORKSPACE, GITHUB_OUTPUT, GITHUB_TOKEN, GITHUB_REPOSITORY
"""

from __future__ import annotations

import logging

from ..config import get_config, github_output_path, workspace_root
from ..services.run_pipeline import publish_workspace

logger = logging.getLogger(__name__)


def set_outputs(outputs: dict[str, str]) -> None:
    """Append step outputs to $GITHUB_OUTPUT (no-op outside Actions)."""
    path = github_output_path()
    if not path:
        return
    with open(path, "a", encoding="utf-8") as fh:
        for key, value in outputs.items():
            fh.write(f"{key}={value}\n")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logger.info("Starting MD to Telegraph Action...")
    config = get_config()
    root = workspace_root()
    logger.info("Account name: %s", config.account_name)
    logger.info("One entry mode: %s", config.one_entry_mode)
    logger.info("Replace existing pages: %s", config.replace_existing_pages)
    try:
        result = publish_workspace(config, root)
    except Exception as e:
        logger.error("Action failed: %s", e)
        raise SystemExit(1) from e

    outputs = {"pages-created": str(result.pages_created), "mapping-file": result.mapping_file}
    set_outputs(outputs)
    print("pages-created:", outputs["pages-created"])
    print("mapping-file:", outputs["mapping-file"])


if __name__ == "__main__":
    main()
