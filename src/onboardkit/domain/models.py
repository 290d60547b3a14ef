"""
Domain models for the onboarding workflow.

All models are immutable (frozen dataclasses) and use tuples for sequences.
Spec payloads are plain JSON-compatible mappings in the camelCase shape of the
onboarding spec document; their schema lives with the spec loader adapter.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from enum import Enum, IntEnum
from typing import Any

CHECKPOINT_VERSION = "1.0"

# JSON-compatible spec document (camelCase keys)
SpecDocument = Mapping[str, Any]


# =============================================================================
# WORKFLOW PHASES
# =============================================================================


class WorkflowPhase(IntEnum):
    """The seven fixed, ordered pipeline stages."""

    AUTH_CHECK = 1
    SPEC_CHECK = 2
    REPAIR = 3
    ENHANCEMENT = 4
    GENERATION = 5
    REFINEMENT = 6
    FINALIZE = 7

    @property
    def display_name(self) -> str:
        return _PHASE_NAMES[self]

    @property
    def description(self) -> str:
        return _PHASE_DESCRIPTIONS[self]

    @classmethod
    def first(cls) -> WorkflowPhase:
        return cls.AUTH_CHECK

    @classmethod
    def last(cls) -> WorkflowPhase:
        return cls.FINALIZE


_PHASE_NAMES = {
    WorkflowPhase.AUTH_CHECK: "Auth Check",
    WorkflowPhase.SPEC_CHECK: "Spec Check",
    WorkflowPhase.REPAIR: "Repair",
    WorkflowPhase.ENHANCEMENT: "Enhancement",
    WorkflowPhase.GENERATION: "Generation",
    WorkflowPhase.REFINEMENT: "Refinement",
    WorkflowPhase.FINALIZE: "Finalize",
}

_PHASE_DESCRIPTIONS = {
    WorkflowPhase.AUTH_CHECK: "Verifying credentials",
    WorkflowPhase.SPEC_CHECK: "Validating specification",
    WorkflowPhase.REPAIR: "Fixing validation errors",
    WorkflowPhase.ENHANCEMENT: "Improving copy with AI",
    WorkflowPhase.GENERATION: "Generating screens and components",
    WorkflowPhase.REFINEMENT: "Optional AI refinement",
    WorkflowPhase.FINALIZE: "Writing files to disk",
}


class PhaseOutcome(str, Enum):
    """How a phase ended.

    Optional phases distinguish "nothing to do" from "user opted out" so
    progress reporting never has to re-derive the skip logic.
    """

    RAN = "ran"
    SKIPPED_NO_PRECONDITION = "skipped_no_precondition"
    SKIPPED_DISABLED = "skipped_disabled"
    FAILED = "failed"

    @property
    def is_skip(self) -> bool:
        return self in (
            PhaseOutcome.SKIPPED_NO_PRECONDITION,
            PhaseOutcome.SKIPPED_DISABLED,
        )


# =============================================================================
# VALIDATION / AI RESULTS
# =============================================================================


@dataclass(frozen=True)
class ValidationIssue:
    """A single schema violation reported by the spec loader."""

    path: tuple[str, ...]
    message: str
    code: str

    @property
    def location(self) -> str:
        return ".".join(self.path) if self.path else "(root)"


@dataclass(frozen=True)
class SpecValidation:
    """Outcome of parse-and-validate: either a spec or a set of issues."""

    spec: SpecDocument | None = None
    issues: tuple[ValidationIssue, ...] = ()

    @property
    def is_valid(self) -> bool:
        return self.spec is not None and not self.issues


@dataclass(frozen=True)
class SpecChange:
    """One field the AI repair changed."""

    path: str
    before: Any
    after: Any
    reason: str


@dataclass(frozen=True)
class RepairResult:
    """Result of an AI repair pass."""

    repaired_spec: SpecDocument
    changes: tuple[SpecChange, ...]
    explanation: str


class EnhancementKind(str, Enum):
    HEADLINE = "headline"
    SUBTEXT = "subtext"
    CTA = "cta"
    FEATURE = "feature"
    GENERAL = "general"


@dataclass(frozen=True)
class SpecEnhancement:
    """One piece of copy the AI enhancement rewrote."""

    path: str
    before: str
    after: str
    kind: EnhancementKind


@dataclass(frozen=True)
class EnhancementResult:
    """Result of an AI enhancement pass."""

    enhanced_spec: SpecDocument
    enhancements: tuple[SpecEnhancement, ...]
    explanation: str


@dataclass(frozen=True)
class RenderResult:
    """Files produced by the template renderer plus per-category counts."""

    files: Mapping[str, str]
    summary: Mapping[str, int]


# =============================================================================
# OUTPUT WRITING
# =============================================================================


@dataclass(frozen=True)
class FileWriteResult:
    path: str
    success: bool
    size: int = 0
    error: str | None = None


@dataclass(frozen=True)
class BatchWriteResult:
    """Per-file outcome of a batch write. Failures never abort the batch."""

    per_file: tuple[FileWriteResult, ...]

    @property
    def success_count(self) -> int:
        return sum(1 for r in self.per_file if r.success)

    @property
    def failure_count(self) -> int:
        return sum(1 for r in self.per_file if not r.success)

    @property
    def total_bytes(self) -> int:
        return sum(r.size for r in self.per_file if r.success)

    @property
    def failures(self) -> tuple[FileWriteResult, ...]:
        return tuple(r for r in self.per_file if not r.success)


# =============================================================================
# CREDENTIALS
# =============================================================================

TOKEN_EXPIRY_BUFFER_SECONDS = 300


@dataclass(frozen=True)
class Credential:
    """Stored access credential for an AI provider."""

    provider: str
    access_token: str
    refresh_token: str | None = None
    expires_at: float | None = None  # epoch seconds, None = never expires
    created_at: str = ""
    updated_at: str = ""

    def is_expired(
        self, now: float, buffer_seconds: int = TOKEN_EXPIRY_BUFFER_SECONDS
    ) -> bool:
        if self.expires_at is None:
            return False
        return now + buffer_seconds >= self.expires_at

    @property
    def can_refresh(self) -> bool:
        return bool(self.refresh_token)


# =============================================================================
# CHECKPOINT
# =============================================================================


@dataclass(frozen=True)
class CheckpointData:
    """Artifacts accumulated across phases.

    Every field is optional; None means "not produced yet". Merging is
    additive so a populated field is never erased within a run.
    """

    validated_spec: SpecDocument | None = None
    validation_errors: tuple[ValidationIssue, ...] | None = None
    repaired_spec: SpecDocument | None = None
    repair_result: RepairResult | None = None
    enhanced_spec: SpecDocument | None = None
    enhancement_result: EnhancementResult | None = None
    generated_files: Mapping[str, str] | None = None

    def merge(self, delta: CheckpointData | None) -> CheckpointData:
        """Return a copy with every non-None field of delta applied."""
        if delta is None:
            return self
        updates = {
            f.name: getattr(delta, f.name)
            for f in fields(delta)
            if getattr(delta, f.name) is not None
        }
        return replace(self, **updates) if updates else self

    @property
    def has_validation_errors(self) -> bool:
        return bool(self.validation_errors)

    def populated_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in fields(self) if getattr(self, f.name) is not None)


@dataclass(frozen=True)
class Checkpoint:
    """Durable record of workflow progress for a single spec file."""

    phase: WorkflowPhase
    spec_hash: str
    spec_path: str
    output_path: str
    timestamp: str  # ISO 8601
    data: CheckpointData = CheckpointData()
    version: str = CHECKPOINT_VERSION

    def advanced_to(self, phase: WorkflowPhase, timestamp: str) -> Checkpoint:
        return replace(self, phase=phase, timestamp=timestamp)

    def with_data(self, delta: CheckpointData | None, timestamp: str) -> Checkpoint:
        return replace(self, data=self.data.merge(delta), timestamp=timestamp)


@dataclass(frozen=True)
class CheckpointValidation:
    valid: bool
    errors: tuple[str, ...] = ()


# =============================================================================
# RUN CONFIGURATION / RESULTS
# =============================================================================


@dataclass(frozen=True)
class WorkflowOptions:
    """Run configuration consumed by the orchestrator and phases."""

    spec_path: str
    output_path: str
    ai_repair: bool = False
    ai_enhance: bool = False
    skip_refinement: bool = True
    dry_run: bool = False
    overwrite: bool = False
    verbose: bool = False


@dataclass(frozen=True)
class PhaseResult:
    """Uniform result returned by every phase.

    ``data`` is a delta merged into the checkpoint by the orchestrator. It may
    be set on failure too (e.g. validation errors found by Spec Check).
    """

    success: bool
    outcome: PhaseOutcome
    data: CheckpointData | None = None
    error: str | None = None
    summary: str = ""

    @classmethod
    def ran(cls, data: CheckpointData | None = None, summary: str = "") -> PhaseResult:
        return cls(success=True, outcome=PhaseOutcome.RAN, data=data, summary=summary)

    @classmethod
    def skipped(cls, outcome: PhaseOutcome, reason: str) -> PhaseResult:
        return cls(success=True, outcome=outcome, summary=reason)

    @classmethod
    def failed(cls, error: str, data: CheckpointData | None = None) -> PhaseResult:
        return cls(success=False, outcome=PhaseOutcome.FAILED, data=data, error=error)


@dataclass(frozen=True)
class ResumeDecision:
    should_resume: bool
    checkpoint: Checkpoint | None
    start_phase: WorkflowPhase
    reason: str = ""

    @classmethod
    def fresh(cls, reason: str = "") -> ResumeDecision:
        return cls(
            should_resume=False,
            checkpoint=None,
            start_phase=WorkflowPhase.first(),
            reason=reason,
        )


@dataclass(frozen=True)
class WorkflowResult:
    """Final outcome of an orchestrator run."""

    success: bool
    checkpoint: Checkpoint
    failed_phase: WorkflowPhase | None = None
    error: str | None = None
    cancelled: bool = False
