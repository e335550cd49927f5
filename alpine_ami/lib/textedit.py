"""Line-oriented edits of stock Alpine config files.

Every function here is pure: text in, text out. Reading and writing the
files lives in files.py so these can be exercised without a target tree.
"""

from __future__ import annotations

import re
from typing import Iterable, Mapping, Sequence

_TTY_RE = re.compile(r"^tty\d")
_PS1_PREFIX = "export PS1='"
_FEATURES_RE = re.compile(r'^features="([^"]+)"', re.MULTILINE)
_WHEEL_NOPASSWD_RE = re.compile(r"%wheel .* NOPASSWD: .*")
_SERVER_RE = re.compile(r"^server .*$", re.MULTILINE)


def _map_lines(text: str, fn) -> str:
    return "".join(fn(line) for line in text.splitlines(keepends=True))


def disable_tty_gettys(inittab: str) -> str:
    """Comment out getty lines for physical ttys.

    They're inaccessible on EC2 anyhow. The ttyS0 getty stays because it
    does not match tty<digit>, so boot messages still reach the console log.
    """

    return _map_lines(inittab, lambda line: "#" + line if _TTY_RE.match(line) else line)


def add_user_to_prompt(profile: str) -> str:
    def edit(line: str) -> str:
        if line.startswith(_PS1_PREFIX):
            return _PS1_PREFIX + "\\u@" + line[len(_PS1_PREFIX):]
        return line

    return _map_lines(profile, edit)


def add_initfs_features(conf: str, features: Sequence[str]) -> str:
    if not features:
        return conf
    extra = " ".join(features)
    return _FEATURES_RE.sub(lambda m: f'features="{m.group(1)} {extra}"', conf)


def set_extlinux_options(text: str, options: Mapping[str, str]) -> str:
    """Set key=value options in update-extlinux.conf.

    Matches the key whether it is active or commented out (`# key=...`).
    The first option whose key matches a line wins for that line.
    """

    patterns = [(re.compile(rf"^[# ]*({re.escape(k)})=.*"), k, v) for k, v in options.items()]

    def edit(line: str) -> str:
        body = line.rstrip("\n")
        newline = line[len(body):]
        for pattern, key, value in patterns:
            if pattern.match(body):
                return f"{key}={value}{newline}"
        return line

    return _map_lines(text, edit)


def enable_wheel_nopasswd(sudoers: str) -> str:
    """Uncomment the `%wheel ... NOPASSWD: ...` rule and nothing else."""

    def edit(line: str) -> str:
        if _WHEEL_NOPASSWD_RE.search(line) and line.startswith("# "):
            return line[2:]
        return line

    return _map_lines(sudoers, edit)


def set_ntp_server(chrony_conf: str, server: str) -> str:
    return _SERVER_RE.sub(f"server {server}", chrony_conf)


def render_repositories(mirror: str, release: str, *, testing: bool = True) -> str:
    # @testing is only needed for aws-ena-driver-vanilla; drop it once that
    # package is released to a stable branch.
    mirror = mirror.rstrip("/")
    lines = [
        f"{mirror}/v{release}/main",
        f"{mirror}/v{release}/community",
    ]
    if testing:
        lines.append(f"@testing {mirror}/edge/testing")
    return "\n".join(lines) + "\n"


def render_interfaces(dhcp_interfaces: Iterable[str] = ("eth0",)) -> str:
    lines = ["auto lo", "iface lo inet loopback"]
    for iface in dhcp_interfaces:
        lines += ["", f"auto {iface}", f"iface {iface} inet dhcp"]
    return "\n".join(lines) + "\n"
