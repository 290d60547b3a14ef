"""
OnboardKit: resumable generator for React Native onboarding flows.

Reads a markdown spec, validates it (optionally repairing and enhancing it
with an AI provider), renders an Expo project from templates and writes it
to disk. Progress is checkpointed after every phase so an interrupted run
resumes where it stopped.

Example:
    from onboardkit import OnboardingWorkflow, ResumePlanner, WorkflowOptions

    options = WorkflowOptions(spec_path="/abs/spec.md", output_path="/abs/out")
    decision = planner.plan(options.spec_path, options)
    result = OnboardingWorkflow(context).execute(options, decision)
"""

# Application layer (orchestration)
from onboardkit.application import (
    OnboardingWorkflow,
    PhaseContext,
    ProgressTracker,
    ResumePlanner,
)

# Domain exceptions
from onboardkit.domain.exceptions import AuthError, OnboardKitError, SpecError

# Domain models
from onboardkit.domain.models import (
    Checkpoint,
    CheckpointData,
    PhaseOutcome,
    PhaseResult,
    WorkflowOptions,
    WorkflowPhase,
    WorkflowResult,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Application
    "OnboardingWorkflow",
    "PhaseContext",
    "ProgressTracker",
    "ResumePlanner",
    # Models
    "Checkpoint",
    "CheckpointData",
    "PhaseOutcome",
    "PhaseResult",
    "WorkflowOptions",
    "WorkflowPhase",
    "WorkflowResult",
    # Exceptions
    "AuthError",
    "OnboardKitError",
    "SpecError",
]
