"""
Checkpoint rules for the onboarding workflow.

Implements:
- Spec fingerprinting (content hash used to detect changed input)
- Active-spec precedence (enhanced, then repaired, then validated)
- Checkpoint validation (minimum artifacts required to resume a phase)
- Human-readable formatting for checkpoint age, sizes and validation issues
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from datetime import datetime

from onboardkit.domain.models import (
    Checkpoint,
    CheckpointData,
    CheckpointValidation,
    SpecDocument,
    ValidationIssue,
    WorkflowPhase,
)

# =============================================================================
# FINGERPRINT
# =============================================================================


def compute_spec_hash(source: str) -> str:
    """Compute the SHA-256 fingerprint of spec source text.

    Args:
        source: Raw spec file contents.

    Returns:
        Hex-encoded SHA-256 hash string.
    """
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


# =============================================================================
# ACTIVE SPEC
# =============================================================================


def active_spec(data: CheckpointData) -> SpecDocument | None:
    """Resolve the spec every phase after Spec Check must treat as authoritative.

    The first non-empty of enhanced, repaired, validated wins.
    """
    for candidate in (data.enhanced_spec, data.repaired_spec, data.validated_spec):
        if candidate:
            return candidate
    return None


# =============================================================================
# CHECKPOINT VALIDATION
# =============================================================================


def validate_checkpoint(checkpoint: Checkpoint) -> CheckpointValidation:
    """Check that a checkpoint carries what its phase needs to continue.

    Rules are cumulative: a checkpoint at Generation must also satisfy the
    Spec Check and Repair rules.

    Args:
        checkpoint: Checkpoint loaded from a store.

    Returns:
        CheckpointValidation with one message per missing artifact.
    """
    errors: list[str] = []
    phase = checkpoint.phase
    data = checkpoint.data

    if phase not in set(WorkflowPhase):
        return CheckpointValidation(valid=False, errors=(f"Unknown phase: {phase}",))

    if phase >= WorkflowPhase.SPEC_CHECK:
        if data.validated_spec is None and data.validation_errors is None:
            errors.append(
                "Checkpoint is past Spec Check but has neither a validated spec "
                "nor validation errors"
            )

    if phase >= WorkflowPhase.REPAIR and data.has_validation_errors:
        if data.repaired_spec is None:
            errors.append(
                "Checkpoint is past Repair with validation errors but has no "
                "repaired spec"
            )

    if phase >= WorkflowPhase.GENERATION and not data.generated_files:
        errors.append("Checkpoint is past Generation but has no generated files")

    if phase == WorkflowPhase.FINALIZE and data.generated_files is None:
        errors.append("Checkpoint is at Finalize but has no generated files")

    return CheckpointValidation(valid=not errors, errors=tuple(errors))


# =============================================================================
# FORMATTING
# =============================================================================


def format_checkpoint_age(timestamp: str, now: datetime) -> str:
    """Describe how long ago a checkpoint was written ("5 minutes ago")."""
    try:
        saved = datetime.fromisoformat(timestamp)
    except ValueError:
        return "at an unknown time"
    if saved.tzinfo is None and now.tzinfo is not None:
        saved = saved.replace(tzinfo=now.tzinfo)

    seconds = int((now - saved).total_seconds())
    minutes, hours, days = seconds // 60, seconds // 3600, seconds // 86400

    if days > 0:
        return f"{days} day{'s' if days > 1 else ''} ago"
    if hours > 0:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    if minutes > 0:
        return f"{minutes} minute{'s' if minutes > 1 else ''} ago"
    return "just now"


def format_validation_issues(issues: Iterable[ValidationIssue]) -> str:
    lines = ["Validation failed with the following errors:", ""]
    for issue in issues:
        lines.append(f"  x {issue.location}")
        lines.append(f"     {issue.message}")
    lines.append("")
    lines.append("Please fix these errors and try again.")
    return "\n".join(lines)


def format_file_size(size: int) -> str:
    if size == 0:
        return "0 B"
    value = float(size)
    for unit in ("B", "KB", "MB", "GB"):
        if value < 1024 or unit == "GB":
            break
        value /= 1024
    return f"{round(value, 2):g} {unit}"


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s" if minutes else f"{secs}s"
