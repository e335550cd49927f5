from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import List

logger = logging.getLogger(__name__)


def sweep_candidates(target_root: str) -> List[Path]:
    """Files that must not ship or get regenerated on first boot."""

    root = Path(target_root)
    out: List[Path] = []
    cache = root / "var/cache/apk"
    if cache.is_dir():
        out.extend(sorted(cache.iterdir()))
    history = root / "root/.ash_history"
    if history.exists() or history.is_symlink():
        out.append(history)
    # Backups left behind by adduser/addgroup/passwd (passwd-, shadow-, ...).
    out.extend(sorted(p for p in (root / "etc").glob("*-") if p.is_file() or p.is_symlink()))
    return out


def sweep_image(target_root: str, *, dry_run: bool = False) -> List[str]:
    removed: List[str] = []
    for p in sweep_candidates(target_root):
        if dry_run:
            logger.info("Would remove %s", str(p))
            continue
        if p.is_dir() and not p.is_symlink():
            shutil.rmtree(p)
        else:
            p.unlink()
        removed.append(str(p))
    logger.info("Removed %d transient files", len(removed))
    return removed
