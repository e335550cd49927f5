from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.bootloader import create_initfs, install_extlinux, setup_extlinux


class InstallBootloaderStep:
    step_id = "50_install_bootloader"
    title = "Configuring and enabling boot loader"

    def run(self, ctx: ProvisionCtx) -> None:
        create_initfs(ctx.target_root, ctx.cfg.initfs_features, dry_run=ctx.dry_run)
        setup_extlinux(ctx.target_root, ctx.cfg.fs_label, dry_run=ctx.dry_run)
        install_extlinux(ctx.target_root, dry_run=ctx.dry_run)
