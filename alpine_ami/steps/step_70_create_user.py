from __future__ import annotations

from ..context import ProvisionCtx
from ..lib.users import allow_wheel_sudo, create_admin_user


class CreateUserStep:
    step_id = "70_create_user"
    title = ""

    def run(self, ctx: ProvisionCtx) -> None:
        allow_wheel_sudo(ctx.target_root, dry_run=ctx.dry_run)
        # No standard EC2 login name exists across AMIs; this is Alpine, so
        # the user is alpine unless configured otherwise.
        create_admin_user(ctx.target_root, ctx.cfg.username, dry_run=ctx.dry_run)
        ctx.decisions["username"] = ctx.cfg.username
