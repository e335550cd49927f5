from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Sequence

from ..config import AmiConfig
from ..errors import ProvisionError
from .chroot import chroot_cmd
from .command import run_cmd
from .fetch import fetch_verified
from .files import write_file
from .textedit import render_repositories

logger = logging.getLogger(__name__)

KEYS_DIR = "etc/apk/keys"


def find_apk_binary(store: str) -> str:
    """Locate the static apk binary inside an extracted apk-tools tarball."""

    found = sorted(p for p in Path(store).rglob("apk") if p.is_file())
    if not found:
        raise ProvisionError(f"No apk binary found in {store}")
    if len(found) > 1:
        logger.warning("Multiple apk binaries in %s, using %s", store, str(found[0]))
    return str(found[0])


def fetch_apk_tools(cfg: AmiConfig, store: str, *, dry_run: bool = False) -> str:
    """Fetch, verify and unpack the static apk tools. Returns the apk path."""

    tarball = Path(store) / os.path.basename(cfg.apk_tools_url)
    if dry_run:
        logger.info("Would fetch %s -> %s", cfg.apk_tools_url, str(tarball))
        return str(Path(store) / "apk")

    fetch_verified(cfg.apk_tools_url, cfg.apk_tools_sha256, str(tarball), timeout=cfg.fetch_timeout)
    run_cmd(["tar", "-C", store, "-xf", str(tarball)])
    return find_apk_binary(store)


def setup_repositories(cfg: AmiConfig, target_root: str, *, dry_run: bool = False) -> None:
    if not dry_run:
        (Path(target_root) / KEYS_DIR).mkdir(parents=True, exist_ok=True)
    write_file(
        target_root,
        "etc/apk/repositories",
        render_repositories(cfg.mirror, cfg.alpine_release),
        dry_run=dry_run,
    )


def fetch_keys(cfg: AmiConfig, target_root: str, *, dry_run: bool = False) -> None:
    """Import Alpine's signing keys from the verified alpine-keys package."""

    if dry_run:
        logger.info("Would fetch %s and extract %s", cfg.alpine_keys_url, KEYS_DIR)
        return

    with tempfile.TemporaryDirectory(prefix="alpine-keys-") as tmp:
        keys_apk = fetch_verified(
            cfg.alpine_keys_url,
            cfg.alpine_keys_sha256,
            str(Path(tmp) / "alpine-keys.apk"),
            timeout=cfg.fetch_timeout,
        )
        run_cmd(["tar", "-C", target_root, "-xvf", keys_apk, KEYS_DIR])


def install_base(apk: str, target_root: str, *, dry_run: bool = False) -> None:
    run_cmd([apk, "add", "--root", target_root, "--update-cache", "--initdb", "alpine-base"], dry_run=dry_run)


def chroot_apk_add(
    target_root: str,
    packages: Sequence[str],
    *,
    no_scripts: bool = False,
    dry_run: bool = False,
) -> None:
    if not packages:
        return
    argv = ["apk", "--no-cache", "add"]
    if no_scripts:
        argv.append("--no-scripts")
    chroot_cmd(target_root, [*argv, *packages], dry_run=dry_run)
