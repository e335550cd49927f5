from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.storage import make_filesystem, mounted


class MakeFilesystemStep:
    step_id = "20_make_filesystem"
    title = "Creating root filesystem"

    def run(self, ctx: ProvisionCtx) -> None:
        make_filesystem(ctx.device, ctx.cfg.fs_label, dry_run=ctx.dry_run)
        ctx.resources.enter_context(mounted(ctx.device, ctx.target_root, dry_run=ctx.dry_run))
        ctx.decisions["fs_label"] = ctx.cfg.fs_label
