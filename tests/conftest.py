from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional

import pytest
import requests

from alpine_ami.config import ENV_OVERRIDES
from alpine_ami.lib import command, fetch

APK_TOOLS_URL = "https://example.test/apk-tools-2.10.0-x86_64-linux.tar.gz"
ALPINE_KEYS_URL = "https://example.test/alpine-keys-2.1-r1.apk"
APK_TOOLS_BODY = b"static apk tools tarball"
ALPINE_KEYS_BODY = b"alpine keys package"
KERNEL_VERSION = "4.14.69-0-vanilla"

BLANK_LSBLK = 'NAME="xvdf" FSTYPE="" LABEL="" UUID="" MOUNTPOINT=""\n'

STOCK_FILES = {
    "etc/inittab": (
        "::sysinit:/sbin/openrc sysinit\n"
        "tty1::respawn:/sbin/getty 38400 tty1\n"
        "tty2::respawn:/sbin/getty 38400 tty2\n"
        "#ttyS0::respawn:/sbin/getty -L ttyS0 115200 vt100\n"
    ),
    "etc/profile": "export CHARSET=UTF-8\nexport PS1='\\h:\\w\\$ '\n",
    "etc/mkinitfs/mkinitfs.conf": 'features="ata base ide scsi usb virtio ext4"\n',
    "etc/update-extlinux.conf": (
        "overwrite=1\n"
        'default_kernel_opts="quiet"\n'
        "modules=sd-mod,usb-storage,ext3,ext4\n"
        "root=\n"
        "#serial_port=\n"
        "timeout=3\n"
        "default=grsec\n"
    ),
    "etc/sudoers": (
        "root ALL=(ALL) ALL\n"
        "# %wheel ALL=(ALL) ALL\n"
        "# %wheel ALL=(ALL) NOPASSWD: ALL\n"
    ),
    "etc/chrony/chrony.conf": "server pool.ntp.org iburst\ninitstepslew 10 pool.ntp.org\n",
    "var/cache/apk/APKINDEX.00740ba1.tar.gz": "index",
    "root/.ash_history": "ls\n",
    "etc/passwd-": "root:x:0:0:root:/root:/bin/ash\n",
}


def sha256(body: bytes) -> str:
    return hashlib.sha256(body).hexdigest()


class FakeSystem:
    """Stands in for the host tools called through run_cmd.

    Records every argv and reproduces the side effects later steps rely
    on: extracted tarballs, an installed base tree, a kernel, mounts.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.mounted: List[str] = []
        self.lsblk_output = BLANK_LSBLK
        self.lsblk_rc = 0
        self.fail_on: Optional[Callable[[List[str]], bool]] = None

    def __call__(self, argv, **kwargs):
        argv = list(argv)
        self.calls.append(argv)

        if self.fail_on is not None and self.fail_on(argv):
            return subprocess.CompletedProcess(argv, 1, "", "simulated failure")

        tool = argv[0]
        stdout = ""
        if tool == "lsblk":
            if self.lsblk_rc:
                return subprocess.CompletedProcess(argv, self.lsblk_rc, "", "not a block device")
            stdout = self.lsblk_output
        elif tool == "tar" and "-xf" in argv:
            apk = Path(argv[2]) / "apk-tools-2.10.0" / "sbin" / "apk"
            apk.parent.mkdir(parents=True, exist_ok=True)
            apk.write_text("#!/bin/true\n")
        elif tool == "tar" and "-xvf" in argv:
            keys = Path(argv[2]) / "etc/apk/keys"
            keys.mkdir(parents=True, exist_ok=True)
            (keys / "alpine-devel@lists.alpinelinux.org-4a6a0840.rsa.pub").write_text("key\n")
        elif tool.endswith("/apk") and "--initdb" in argv:
            self._seed_base(Path(argv[argv.index("--root") + 1]))
        elif tool == "chroot" and argv[2:5] == ["apk", "--no-cache", "add"] and "--no-scripts" not in argv:
            (Path(argv[1]) / "lib/modules" / KERNEL_VERSION).mkdir(parents=True, exist_ok=True)
        elif tool == "mount":
            self.mounted.append(argv[-1])
        elif tool == "umount" and argv[-1] in self.mounted:
            self.mounted.remove(argv[-1])

        return subprocess.CompletedProcess(argv, 0, stdout, "")

    @staticmethod
    def _seed_base(root: Path) -> None:
        for d in ("proc", "dev", "sys", "etc/network", "etc/mkinitfs/features.d"):
            (root / d).mkdir(parents=True, exist_ok=True)
        for rel, text in STOCK_FILES.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(text)

    def tools(self) -> List[str]:
        return [c[0] for c in self.calls]

    def find(self, *prefix: str) -> List[List[str]]:
        return [c for c in self.calls if c[: len(prefix)] == list(prefix)]


class FakeResponse:
    def __init__(self, body: bytes, status: int = 200) -> None:
        self.body = body
        self.status_code = status

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size: int = 1):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i : i + chunk_size]


class FakeWeb:
    def __init__(self, payloads: Dict[str, bytes]) -> None:
        self.payloads = dict(payloads)
        self.requested: List[str] = []

    def get(self, url, timeout=None, stream=False):
        self.requested.append(url)
        assert timeout, "downloads must be bounded by a timeout"
        if url not in self.payloads:
            raise requests.ConnectionError(f"cannot reach {url}")
        return FakeResponse(self.payloads[url])


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ENV_OVERRIDES:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def system(monkeypatch) -> FakeSystem:
    fake = FakeSystem()
    monkeypatch.setattr(command.subprocess, "run", fake)
    return fake


@pytest.fixture
def web(monkeypatch) -> FakeWeb:
    fake = FakeWeb({APK_TOOLS_URL: APK_TOOLS_BODY, ALPINE_KEYS_URL: ALPINE_KEYS_BODY})
    monkeypatch.setattr(fetch.requests, "get", fake.get)
    return fake


@pytest.fixture
def host_resolv(tmp_path) -> Path:
    p = tmp_path / "host-resolv.conf"
    p.write_text("nameserver 10.0.0.2\n")
    return p


@pytest.fixture
def overrides(tmp_path, host_resolv) -> Dict[str, str]:
    return {
        "target_root": str(tmp_path / "target"),
        "resolv_conf": str(host_resolv),
        "apk_tools_url": APK_TOOLS_URL,
        "apk_tools_sha256": sha256(APK_TOOLS_BODY),
        "alpine_keys_url": ALPINE_KEYS_URL,
        "alpine_keys_sha256": sha256(ALPINE_KEYS_BODY),
    }
