from __future__ import annotations

from ..config import runlevel_map
from ..context import ProvisionCtx
from ..lib.files import write_file
from ..lib.fstab import render_fstab, root_entry
from ..lib.openrc import rc_add
from ..lib.textedit import render_interfaces


class ConfigureSystemStep:
    step_id = "60_configure_system"
    title = "Configuring system"

    def run(self, ctx: ProvisionCtx) -> None:
        root = ctx.target_root
        write_file(root, "etc/fstab", render_fstab([root_entry(ctx.cfg.fs_label)]), dry_run=ctx.dry_run)
        write_file(root, "etc/network/interfaces", render_interfaces(), dry_run=ctx.dry_run)

        runlevels = runlevel_map(ctx.cfg)
        for runlevel, services in runlevels.items():
            rc_add(root, runlevel, services, dry_run=ctx.dry_run)
        ctx.decisions["runlevels"] = runlevels
