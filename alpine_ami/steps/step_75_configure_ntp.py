from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.files import edit_file
from ..lib.textedit import set_ntp_server


class ConfigureNtpStep:
    step_id = "75_configure_ntp"
    title = ""

    def run(self, ctx: ProvisionCtx) -> None:
        server = ctx.cfg.ntp_server
        edit_file(ctx.target_root, "etc/chrony/chrony.conf", lambda t: set_ntp_server(t, server), dry_run=ctx.dry_run)
        ctx.decisions["ntp_server"] = server
