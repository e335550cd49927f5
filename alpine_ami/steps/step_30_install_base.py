from __future__ import annotations

from ..context import ProvisionCtx
from ..errors import ProvisionError
from ..lib.apk import install_base


class InstallBaseStep:
    step_id = "30_install_base"
    title = "Installing base system"

    def run(self, ctx: ProvisionCtx) -> None:
        if not ctx.apk:
            raise ProvisionError("apk tools missing; run fetch step first")
        install_base(ctx.apk, ctx.target_root, dry_run=ctx.dry_run)
