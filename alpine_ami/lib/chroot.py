from __future__ import annotations

import logging
import shutil
from contextlib import ExitStack, contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from .command import CmdResult, run_cmd
from .storage import mounted

logger = logging.getLogger(__name__)


def chroot_cmd(target_root: str, argv: Sequence[str], *, dry_run: bool = False) -> CmdResult:
    """Run a command inside target root."""

    return run_cmd(["chroot", target_root, *argv], dry_run=dry_run)


def _install_resolv_conf(src: str, dst: Path, *, dry_run: bool) -> None:
    if dry_run:
        logger.info("Would install %s -> %s", src, str(dst))
        return
    dst.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, dst)
    dst.chmod(0o644)


@contextmanager
def chroot_environment(
    target_root: str,
    *,
    resolv_conf: str = "/etc/resolv.conf",
    dry_run: bool = False,
) -> Iterator[str]:
    """Make target_root usable with chroot for installer commands.

    Mounts proc, binds /dev and /sys, and drops in the host resolver. The
    resolver copy is needed for bootstrap only and never ships: it is
    removed on the way out, before the pseudo filesystems are unmounted
    in reverse order.
    """

    root = Path(target_root)
    resolv = root / "etc/resolv.conf"

    with ExitStack() as stack:
        stack.enter_context(mounted("none", str(root / "proc"), options=["-t", "proc"], dry_run=dry_run))
        stack.enter_context(mounted("/dev", str(root / "dev"), options=["--bind"], dry_run=dry_run))
        stack.enter_context(mounted("/sys", str(root / "sys"), options=["--bind"], dry_run=dry_run))

        _install_resolv_conf(resolv_conf, resolv, dry_run=dry_run)
        try:
            yield target_root
        finally:
            if not dry_run:
                resolv.unlink(missing_ok=True)
