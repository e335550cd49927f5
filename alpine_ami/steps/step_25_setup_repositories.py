from __future__ import annotations

import logging

from ..context import ProvisionCtx
from ..lib.apk import fetch_keys, setup_repositories
from ..logging_utils import stage

logger = logging.getLogger(__name__)


class SetupRepositoriesStep:
    step_id = "25_setup_repositories"
    title = ""

    def run(self, ctx: ProvisionCtx) -> None:
        setup_repositories(ctx.cfg, ctx.target_root, dry_run=ctx.dry_run)

        stage(logger, "Fetching Alpine signing keys")
        fetch_keys(ctx.cfg, ctx.target_root, dry_run=ctx.dry_run)
