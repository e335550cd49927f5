from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)


def target_path(root: str, rel: str) -> Path:
    return Path(root) / rel.lstrip("/")


def write_file(root: str, rel: str, contents: str, *, dry_run: bool = False) -> Path:
    p = target_path(root, rel)
    if dry_run:
        logger.info("Would write %s", str(p))
        return p
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(contents, encoding="utf-8")
    logger.info("Wrote %s", str(p))
    return p


def edit_file(root: str, rel: str, edit: Callable[[str], str], *, dry_run: bool = False) -> bool:
    """Apply a pure text edit to a file in the target tree.

    Returns True if the contents changed. The file must already exist: the
    edits only make sense against the packaged defaults.
    """

    p = target_path(root, rel)
    if dry_run:
        logger.info("Would edit %s", str(p))
        return False

    before = p.read_text(encoding="utf-8")
    after = edit(before)
    if after == before:
        logger.info("No change to %s", str(p))
        return False

    p.write_text(after, encoding="utf-8")
    logger.info("Edited %s", str(p))
    return True
