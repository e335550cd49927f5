from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.block import validate_block_device
from ..lib.storage import ensure_mountpoint


class ValidateDeviceStep:
    step_id = "10_validate_device"
    title = ""

    def run(self, ctx: ProvisionCtx) -> None:
        validate_block_device(ctx.device)
        ensure_mountpoint(ctx.target_root, dry_run=ctx.dry_run)
