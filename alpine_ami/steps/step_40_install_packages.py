from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.apk import chroot_apk_add
from ..lib.files import edit_file
from ..lib.textedit import add_user_to_prompt, disable_tty_gettys


class InstallPackagesStep:
    step_id = "40_install_packages"
    title = "Installing core packages"

    def run(self, ctx: ProvisionCtx) -> None:
        root = ctx.target_root
        chroot_apk_add(root, ctx.cfg.packages, dry_run=ctx.dry_run)
        chroot_apk_add(root, ctx.cfg.no_script_packages, no_scripts=True, dry_run=ctx.dry_run)

        edit_file(root, "etc/inittab", disable_tty_gettys, dry_run=ctx.dry_run)
        edit_file(root, "etc/profile", add_user_to_prompt, dry_run=ctx.dry_run)

        ctx.decisions["packages"] = list(ctx.cfg.packages)
