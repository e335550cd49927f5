from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

FSTAB_HEADER = "# <fs>\t\t<mountpoint>\t<type>\t<opts>\t\t\t\t<dump/pass>"


@dataclass(frozen=True)
class FstabEntry:
    spec: str
    mountpoint: str
    fstype: str
    options: str = "defaults"
    dump: int = 0
    passno: int = 0

    def render(self) -> str:
        return f"{self.spec}\t\t{self.mountpoint}\t\t\t\t{self.fstype}\t{self.options}\t{self.dump} {self.passno}"


def root_entry(label: str) -> FstabEntry:
    return FstabEntry(
        spec=f"LABEL={label}",
        mountpoint="/",
        fstype="ext4",
        options="defaults,noatime",
        dump=1,
        passno=1,
    )


def render_fstab(entries: Iterable[FstabEntry]) -> str:
    lines = [FSTAB_HEADER]
    lines.extend(e.render() for e in entries)
    return "\n".join(lines) + "\n"
