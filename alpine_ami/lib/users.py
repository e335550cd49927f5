from __future__ import annotations

import logging

from .chroot import chroot_cmd
from .files import edit_file
from .textedit import enable_wheel_nopasswd

logger = logging.getLogger(__name__)

ADMIN_GROUP = "wheel"


def allow_wheel_sudo(target_root: str, *, dry_run: bool = False) -> None:
    # Members of wheel may sudo without a password. SSH keys come from
    # tiny-ec2-bootstrap, and root stays without remote login.
    edit_file(target_root, "etc/sudoers", enable_wheel_nopasswd, dry_run=dry_run)


def create_admin_user(target_root: str, username: str, *, dry_run: bool = False) -> None:
    """Create the default login user, in its own group and in wheel."""

    chroot_cmd(target_root, ["/usr/sbin/addgroup", username], dry_run=dry_run)
    chroot_cmd(
        target_root,
        ["/usr/sbin/adduser", "-h", f"/home/{username}", "-s", "/bin/sh", "-G", username, "-D", username],
        dry_run=dry_run,
    )
    chroot_cmd(target_root, ["/usr/sbin/addgroup", username, ADMIN_GROUP], dry_run=dry_run)
    chroot_cmd(target_root, ["/usr/bin/passwd", "-u", username], dry_run=dry_run)
    logger.info("Created user %s (group %s, member of %s)", username, username, ADMIN_GROUP)
