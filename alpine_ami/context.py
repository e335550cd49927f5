from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .config import AmiConfig


@dataclass
class ProvisionCtx:
    """Everything a step needs: the fixed config plus what earlier steps produced.

    `resources` owns the mounts and scratch directories. The pipeline
    closes it on every exit path, so a step that acquires something
    enters it here instead of releasing it itself.
    """

    cfg: AmiConfig
    device: str
    dry_run: bool = False
    resources: ExitStack = field(default_factory=ExitStack)
    apk: Optional[str] = None
    decisions: Dict[str, Any] = field(default_factory=dict)

    @property
    def target_root(self) -> str:
        return self.cfg.target_root
