"""
Application layer for onboardkit.

Contains the phase implementations and the services that plan, drive and
checkpoint a workflow run.
"""

from onboardkit.application.checkpoint_service import CheckpointService
from onboardkit.application.phases import PHASES, PhaseContext
from onboardkit.application.progress import PhaseStatus, ProgressTracker
from onboardkit.application.resume_service import ResumePlanner
from onboardkit.application.workflow import OnboardingWorkflow

__all__ = [
    "CheckpointService",
    "OnboardingWorkflow",
    "PHASES",
    "PhaseContext",
    "PhaseStatus",
    "ProgressTracker",
    "ResumePlanner",
]
