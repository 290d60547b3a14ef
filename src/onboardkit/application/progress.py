"""Progress tracking across the seven workflow phases."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from onboardkit.domain.interfaces import ProgressListenerInterface
from onboardkit.domain.models import PhaseOutcome, WorkflowPhase

if TYPE_CHECKING:
    from onboardkit.domain.models import PhaseResult


class PhaseStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class PhaseRecord:
    phase: WorkflowPhase
    status: PhaseStatus = PhaseStatus.PENDING
    outcome: PhaseOutcome | None = None
    message: str = ""
    elapsed: float = 0.0


class ProgressTracker(ProgressListenerInterface):
    """Records the status of every phase and forwards events.

    Phases before the resume point stay PENDING; they were completed by an
    earlier invocation.
    """

    def __init__(self, forward_to: ProgressListenerInterface | None = None) -> None:
        self._forward_to = forward_to
        self._records = {phase: PhaseRecord(phase) for phase in WorkflowPhase}

    def phase_started(self, phase: WorkflowPhase) -> None:
        self._records[phase] = replace(self._records[phase], status=PhaseStatus.RUNNING)
        if self._forward_to:
            self._forward_to.phase_started(phase)

    def phase_finished(
        self, phase: WorkflowPhase, result: PhaseResult, elapsed: float
    ) -> None:
        if not result.success:
            status, message = PhaseStatus.FAILED, result.error or ""
        elif result.outcome.is_skip:
            status, message = PhaseStatus.SKIPPED, result.summary
        else:
            status, message = PhaseStatus.COMPLETED, result.summary

        self._records[phase] = PhaseRecord(
            phase=phase,
            status=status,
            outcome=result.outcome,
            message=message,
            elapsed=elapsed,
        )
        if self._forward_to:
            self._forward_to.phase_finished(phase, result, elapsed)

    def records(self) -> tuple[PhaseRecord, ...]:
        return tuple(self._records[phase] for phase in WorkflowPhase)

    def count(self, status: PhaseStatus) -> int:
        return sum(1 for r in self._records.values() if r.status == status)

    def summary(self) -> str:
        """Return e.g. "Completed: 5/7 (2 skipped)"."""
        done = self.count(PhaseStatus.COMPLETED) + self.count(PhaseStatus.SKIPPED)
        text = f"Completed: {done}/{len(WorkflowPhase)}"
        skipped = self.count(PhaseStatus.SKIPPED)
        if skipped:
            text += f" ({skipped} skipped)"
        return text
