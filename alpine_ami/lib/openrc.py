from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Mapping, Tuple

from ..errors import ProvisionError

logger = logging.getLogger(__name__)


def runlevel_links(runlevels: Mapping[str, Iterable[str]]) -> List[Tuple[str, str]]:
    """Plan the symlinks enabling services: (link relative to root, destination)."""

    links: List[Tuple[str, str]] = []
    for runlevel, services in runlevels.items():
        for svc in services:
            links.append((f"etc/runlevels/{runlevel}/{svc}", f"/etc/init.d/{svc}"))
    return links


def rc_add(target_root: str, runlevel: str, services: Iterable[str], *, dry_run: bool = False) -> None:
    for rel, dest in runlevel_links({runlevel: services}):
        link = Path(target_root) / rel
        if dry_run:
            logger.info("Would link %s -> %s", str(link), dest)
            continue

        link.parent.mkdir(parents=True, exist_ok=True)
        if link.is_symlink():
            if os.readlink(link) == dest:
                continue
            raise ProvisionError(f"{link} already links to {os.readlink(link)}, not {dest}")
        link.symlink_to(dest)
        logger.info(" * service %s added to runlevel %s", link.name, runlevel)
