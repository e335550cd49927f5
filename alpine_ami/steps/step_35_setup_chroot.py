from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.chroot import chroot_environment


class SetupChrootStep:
    step_id = "35_setup_chroot"
    title = ""

    def run(self, ctx: ProvisionCtx) -> None:
        ctx.resources.enter_context(
            chroot_environment(ctx.target_root, resolv_conf=ctx.cfg.resolv_conf, dry_run=ctx.dry_run)
        )
