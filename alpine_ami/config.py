from __future__ import annotations

import os
import re
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError

DEFAULT_ALPINE_RELEASE = "3.8"  # not tested against edge
DEFAULT_APK_TOOLS_URL = (
    "https://github.com/alpinelinux/apk-tools/releases/download/v2.10.0/apk-tools-2.10.0-x86_64-linux.tar.gz"
)
DEFAULT_APK_TOOLS_SHA256 = "77f2d256fcd5d6fdafadf43bb6a9c85c3da7bb471ee842dcd729175235cb9fed"
DEFAULT_ALPINE_KEYS_URL = "http://dl-cdn.alpinelinux.org/alpine/v3.8/main/x86_64/alpine-keys-2.1-r1.apk"
DEFAULT_ALPINE_KEYS_SHA256 = "f7832b848cedca482b145011cf516e82392f02a10713875cb09f39c7221c6f17"

# Most from alpine-iso's alpine-virt.packages.
#
# acct - installed by some configurations, so added here
# aws-ena-driver-vanilla - required for ENA enabled instances (still in edge/testing)
# e2fsprogs - required by init scripts to maintain ext4 volumes
# linux-vanilla - can't use virt because it's missing NVME support
# mkinitfs - required to build custom initfs
# sudo - to allow alpine user to become root, disallow root SSH logins
# tiny-ec2-bootstrap - to bootstrap system from EC2 metadata
DEFAULT_PACKAGES: Tuple[str, ...] = (
    "acct",
    "alpine-mirrors",
    "aws-ena-driver-vanilla@testing",
    "chrony",
    "e2fsprogs",
    "linux-vanilla",
    "mkinitfs",
    "openssh",
    "sudo",
    "tiny-ec2-bootstrap",
    "tzdata",
)

DEFAULT_RUNLEVELS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("default", ("sshd", "chronyd", "networking", "tiny-ec2-bootstrap")),
    ("sysinit", ("devfs", "dmesg", "mdev", "hwdrivers")),
    ("boot", ("modules", "hwclock", "swap", "hostname", "sysctl", "bootmisc", "syslog", "acpid")),
    ("shutdown", ("killprocs", "savecache", "mount-ro")),
)

# Instance-local NTP service in EC2, synchronized in-region.
EC2_NTP_SERVER = "169.254.169.123"

ENV_OVERRIDES = {
    "ALPINE_RELEASE": "alpine_release",
    "APK_TOOLS_URI": "apk_tools_url",
    "APK_TOOLS_SHA256": "apk_tools_sha256",
    "ALPINE_KEYS": "alpine_keys_url",
    "ALPINE_KEYS_SHA256": "alpine_keys_sha256",
}

_SHA256_RE = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True)
class AmiConfig:
    alpine_release: str = DEFAULT_ALPINE_RELEASE
    apk_tools_url: str = DEFAULT_APK_TOOLS_URL
    apk_tools_sha256: str = DEFAULT_APK_TOOLS_SHA256
    alpine_keys_url: str = DEFAULT_ALPINE_KEYS_URL
    alpine_keys_sha256: str = DEFAULT_ALPINE_KEYS_SHA256
    mirror: str = "http://dl-cdn.alpinelinux.org/alpine"
    target_root: str = "/mnt/target"
    fs_label: str = "/"
    packages: Tuple[str, ...] = DEFAULT_PACKAGES
    no_script_packages: Tuple[str, ...] = ("syslinux",)
    initfs_features: Tuple[str, ...] = ("nvme", "ena")
    username: str = "alpine"
    ntp_server: str = EC2_NTP_SERVER
    runlevels: Tuple[Tuple[str, Tuple[str, ...]], ...] = field(default=DEFAULT_RUNLEVELS)
    resolv_conf: str = "/etc/resolv.conf"
    fetch_timeout: float = 10.0

    def as_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            if f.name == "runlevels":
                v = {rl: list(svcs) for rl, svcs in v}
            elif isinstance(v, tuple):
                v = list(v)
            out[f.name] = v
        return out


def _as_str_tuple(key: str, value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    if not isinstance(value, (list, tuple)):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(str(v) for v in value)


def _coerce(raw: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize a YAML/env mapping into AmiConfig keyword arguments."""

    known = {f.name for f in fields(AmiConfig)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    out: Dict[str, Any] = {}
    for key, value in raw.items():
        if value is None:
            raise ConfigError(f"{key} must have a value")
        if key in {"packages", "no_script_packages", "initfs_features"}:
            out[key] = _as_str_tuple(key, value)
        elif key == "runlevels":
            if not isinstance(value, Mapping):
                raise ConfigError("runlevels must map runlevel names to service lists")
            out[key] = tuple((str(rl), _as_str_tuple(f"runlevels.{rl}", svcs)) for rl, svcs in value.items())
        elif key == "fetch_timeout":
            try:
                out[key] = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"fetch_timeout must be a number, got {value!r}") from e
        elif key in {"apk_tools_sha256", "alpine_keys_sha256"}:
            out[key] = str(value).strip().lower()
        else:
            out[key] = str(value)
    return out


def validate_config(cfg: AmiConfig) -> AmiConfig:
    for name in ("apk_tools_sha256", "alpine_keys_sha256"):
        value = getattr(cfg, name)
        if not _SHA256_RE.match(value):
            raise ConfigError(f"{name} must be a hex SHA-256 digest, got {value!r}")
    if not cfg.packages:
        raise ConfigError("packages must not be empty")
    if not cfg.username:
        raise ConfigError("username must not be empty")
    if cfg.fetch_timeout <= 0:
        raise ConfigError("fetch_timeout must be positive")
    return cfg


def load_yaml_config(path: str) -> Dict[str, Any]:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError("config file must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"{path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"{path} must contain a mapping/object")
    return raw


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> AmiConfig:
    """Build the run's configuration once.

    Later layers win: built-in defaults, then the YAML file, then the
    environment overrides, then explicit keyword overrides.
    """

    environ = os.environ if environ is None else environ

    cfg = AmiConfig()
    if path:
        cfg = replace(cfg, **_coerce(load_yaml_config(path)))

    from_env = {attr: environ[var] for var, attr in ENV_OVERRIDES.items() if environ.get(var)}
    if from_env:
        cfg = replace(cfg, **_coerce(from_env))

    if overrides:
        cfg = replace(cfg, **_coerce(overrides))

    return validate_config(cfg)


def runlevel_map(cfg: AmiConfig) -> Dict[str, List[str]]:
    return {rl: list(svcs) for rl, svcs in cfg.runlevels}
