"""
Domain layer for onboardkit.

Contains the workflow model, checkpoint rules and ports, with no external
dependencies.
"""

from onboardkit.domain.exceptions import (
    AIProviderError,
    AuthError,
    FileSystemError,
    InternalError,
    OnboardKitError,
    SpecError,
)
from onboardkit.domain.interfaces import (
    CheckpointStoreInterface,
    SpecLoaderInterface,
    SpecOperationsInterface,
    TemplateRendererInterface,
)
from onboardkit.domain.models import (
    Checkpoint,
    CheckpointData,
    PhaseOutcome,
    PhaseResult,
    ResumeDecision,
    WorkflowOptions,
    WorkflowPhase,
    WorkflowResult,
)
from onboardkit.domain.workflow import (
    active_spec,
    compute_spec_hash,
    validate_checkpoint,
)

__all__ = [
    # Models
    "Checkpoint",
    "CheckpointData",
    "PhaseOutcome",
    "PhaseResult",
    "ResumeDecision",
    "WorkflowOptions",
    "WorkflowPhase",
    "WorkflowResult",
    # Rules
    "active_spec",
    "compute_spec_hash",
    "validate_checkpoint",
    # Interfaces
    "CheckpointStoreInterface",
    "SpecLoaderInterface",
    "SpecOperationsInterface",
    "TemplateRendererInterface",
    # Exceptions
    "AIProviderError",
    "AuthError",
    "FileSystemError",
    "InternalError",
    "OnboardKitError",
    "SpecError",
]
