from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Protocol, Sequence

from .context import ProvisionCtx
from .logging_utils import stage

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single provisioning step."""

    step_id: str
    title: str

    def run(self, ctx: ProvisionCtx) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]


def run_pipeline(
    *,
    ctx: ProvisionCtx,
    steps: Sequence[Step],
    state: Dict[str, Any],
) -> PipelineResult:
    """Run steps in order, stopping at the first failure.

    Resources entered on ctx.resources are released in reverse order on
    both success and failure; the failing step's exception is re-raised
    after teardown.
    """

    ran: List[str] = []
    exe = state.setdefault("execution", {})
    completed = exe.setdefault("completed_steps", [])

    with ctx.resources:
        for step in steps:
            exe["current_step"] = step.step_id
            if step.title:
                stage(logger, step.title)
            logger.debug("Running step %s", step.step_id)
            step.run(ctx)
            ran.append(step.step_id)
            completed.append(step.step_id)

    exe["current_step"] = None
    exe["decisions"] = dict(ctx.decisions)
    return PipelineResult(ran_steps=ran)
