from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Sequence

from ..errors import ProvisionError
from .chroot import chroot_cmd
from .files import edit_file, write_file
from .textedit import add_initfs_features, set_extlinux_options

logger = logging.getLogger(__name__)

ENA_MODULES = "kernel/drivers/net/ethernet/amazon\n"


def extlinux_options(label: str) -> Dict[str, str]:
    """Options written to update-extlinux.conf.

    ttyS0 backs EC2's "Get System Log", tty0 backs "Get Instance
    Screenshot". The timeout is short because the console is not interactive.
    """

    return {
        "root": f"LABEL={label}",
        "default_kernel_opts": '"console=ttyS0 console=tty0"',
        "serial_port": "ttyS0",
        "modules": "sd-mod,usb-storage,ext4",
        "default": "hardened",
        "timeout": "1",
    }


def installed_kernel_version(target_root: str) -> str:
    modules = Path(target_root) / "lib/modules"
    versions = sorted(p.name for p in modules.glob("*") if p.is_dir())
    if len(versions) != 1:
        raise ProvisionError(f"Expected exactly one kernel under {modules}, found {versions or 'none'}")
    return versions[0]


def create_initfs(target_root: str, features: Sequence[str], *, dry_run: bool = False) -> None:
    # NVMe and ENA are hard requirements of the 5 and i3 instance series and
    # harmless everywhere else.
    write_file(target_root, "etc/mkinitfs/features.d/ena.modules", ENA_MODULES, dry_run=dry_run)
    edit_file(
        target_root,
        "etc/mkinitfs/mkinitfs.conf",
        lambda text: add_initfs_features(text, features),
        dry_run=dry_run,
    )

    if dry_run:
        logger.info("Would run mkinitfs for the installed kernel")
        return

    version = installed_kernel_version(target_root)
    chroot_cmd(target_root, ["/sbin/mkinitfs", version])
    logger.info("Built initramfs for kernel %s", version)


def setup_extlinux(target_root: str, label: str, *, dry_run: bool = False) -> None:
    edit_file(
        target_root,
        "etc/update-extlinux.conf",
        lambda text: set_extlinux_options(text, extlinux_options(label)),
        dry_run=dry_run,
    )


def install_extlinux(target_root: str, *, dry_run: bool = False) -> None:
    chroot_cmd(target_root, ["/sbin/extlinux", "--install", "/boot"], dry_run=dry_run)
    chroot_cmd(target_root, ["/sbin/update-extlinux", "--warn-only"], dry_run=dry_run)
