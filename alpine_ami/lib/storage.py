from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from .command import run_cmd

logger = logging.getLogger(__name__)


def make_filesystem(device: str, label: str, *, dry_run: bool = False) -> None:
    """Format device as ext4 and label it.

    Boot config refers to the label, never the device path or UUID: EBS
    volumes show up behind NVMe devices on some instance families.
    """

    run_cmd(["mkfs.ext4", device], dry_run=dry_run)
    run_cmd(["e2label", device, label], dry_run=dry_run)


def umount(path: str, *, strict: bool, dry_run: bool = False) -> None:
    r = run_cmd(["umount", path], check=strict, dry_run=dry_run)
    if r.returncode != 0:
        logger.warning("Failed to unmount %s (rc=%s)", path, r.returncode)


@contextmanager
def mounted(
    source: str,
    target: str,
    *,
    options: Sequence[str] = (),
    dry_run: bool = False,
) -> Iterator[str]:
    """Mount source at target for the duration of the block.

    Unmount is strict on a clean exit and best-effort when unwinding an
    error, so the original error is the one that surfaces.
    """

    run_cmd(["mount", *options, source, target], dry_run=dry_run)
    try:
        yield target
    except BaseException:
        umount(target, strict=False, dry_run=dry_run)
        raise
    else:
        umount(target, strict=True, dry_run=dry_run)


def ensure_mountpoint(target: str, *, dry_run: bool = False) -> None:
    p = Path(target)
    if p.is_dir():
        return
    if dry_run:
        logger.info("Would create %s", target)
        return
    p.mkdir(parents=True)
