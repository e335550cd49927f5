from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.sweep import sweep_image

logger = logging.getLogger(__name__)


class CleanupStep:
    step_id = "90_cleanup"
    title = "All done, cleaning up"

    def run(self, ctx: ProvisionCtx) -> None:
        sweep_image(ctx.target_root, dry_run=ctx.dry_run)
        # Drops resolv.conf, unmounts sys/dev/proc, then the root filesystem.
        ctx.resources.close()
        logger.info("Unmounted %s", ctx.target_root)
