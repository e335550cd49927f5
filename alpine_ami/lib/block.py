from __future__ import annotations

import logging
import shlex
from typing import Dict, List

from ..errors import CommandError, PreconditionError
from .command import run_cmd

logger = logging.getLogger(__name__)


def parse_lsblk_pairs(text: str) -> List[Dict[str, str]]:
    """Parse `lsblk -P` output (KEY="value" pairs) into one dict per row."""

    rows: List[Dict[str, str]] = []
    for line in text.splitlines():
        if not line.strip():
            continue
        row: Dict[str, str] = {}
        for token in shlex.split(line):
            key, sep, value = token.partition("=")
            if sep:
                row[key] = value
        rows.append(row)
    return rows


def is_blank(rows: List[Dict[str, str]]) -> bool:
    # A row with no FSTYPE column at all is not trusted to be blank.
    return all(row.get("FSTYPE") == "" for row in rows)


def validate_block_device(dev: str) -> None:
    """Refuse anything that is not a block device without a filesystem.

    Read-only; runs before any destructive command, including in dry-run.
    """

    try:
        r = run_cmd(["lsblk", "-P", "--fs", dev])
    except CommandError as e:
        raise PreconditionError(f"'{dev}' is not a valid block device") from e

    rows = parse_lsblk_pairs(r.stdout)
    if not rows or not is_blank(rows):
        raise PreconditionError(f"Block device '{dev}' is not blank")

    logger.info("Block device %s is blank", dev)
