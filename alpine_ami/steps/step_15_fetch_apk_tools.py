from __future__ import annotations

import logging
import tempfile

from ..context import ProvisionCtx
from ..lib.apk import fetch_apk_tools

logger = logging.getLogger(__name__)


class FetchApkToolsStep:
    step_id = "15_fetch_apk_tools"
    title = "Fetching static APK tools"

    def run(self, ctx: ProvisionCtx) -> None:
        # The scratch dir lives until the pipeline finishes; install_base needs it.
        store = ctx.resources.enter_context(tempfile.TemporaryDirectory(prefix="apk-tools-"))
        ctx.apk = fetch_apk_tools(ctx.cfg, store, dry_run=ctx.dry_run)
        ctx.decisions["apk_tools"] = ctx.cfg.apk_tools_url
        logger.info("Using apk at %s", ctx.apk)
