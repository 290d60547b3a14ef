"""
Workflow orchestrator: runs phases in order and checkpoints after each.

The orchestrator is the only place the checkpoint changes. Phases return
deltas; the orchestrator merges them, advances the phase, and persists
before the next phase begins. Any failed phase stops the run with the
checkpoint retained at that phase so the next invocation can resume.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import replace
from typing import TYPE_CHECKING

from onboardkit.application.checkpoint_service import CheckpointService
from onboardkit.application.phases import PHASES, PhaseContext, PhaseFunction
from onboardkit.domain.exceptions import SpecError
from onboardkit.domain.models import (
    Checkpoint,
    PhaseResult,
    ResumeDecision,
    WorkflowOptions,
    WorkflowPhase,
    WorkflowResult,
)
from onboardkit.domain.workflow import compute_spec_hash

if TYPE_CHECKING:
    from onboardkit.domain.interfaces import ProgressListenerInterface

logger = logging.getLogger(__name__)

CANCELLED_MESSAGE = "Cancelled by user"


class OnboardingWorkflow:
    """
    Drives the seven phases from a start phase to Finalize.

    Example:
        workflow = OnboardingWorkflow(context, listener=tracker)
        decision = planner.plan(options.spec_path, options)
        result = workflow.execute(options, decision)
    """

    def __init__(
        self,
        context: PhaseContext,
        listener: ProgressListenerInterface | None = None,
        phases: Mapping[WorkflowPhase, PhaseFunction] | None = None,
    ):
        """
        Args:
            context: Collaborators passed to every phase
            listener: Optional progress listener
            phases: Phase implementations (defaults to the standard seven)
        """
        self._context = context
        self._listener = listener
        self._phases = phases or PHASES
        self._checkpoints = CheckpointService(context.checkpoint_store, context.clock)

    def execute(self, options: WorkflowOptions, decision: ResumeDecision) -> WorkflowResult:
        """Run from the decision's start phase, creating a checkpoint if needed."""
        if decision.should_resume and decision.checkpoint is not None:
            checkpoint = decision.checkpoint
            if checkpoint.output_path != options.output_path:
                logger.info(
                    "Output path changed from %s to %s",
                    checkpoint.output_path,
                    options.output_path,
                )
                checkpoint = replace(checkpoint, output_path=options.output_path)
            return self.run(options, checkpoint, decision.start_phase)
        return self.run(options, self._fresh_checkpoint(options), WorkflowPhase.first())

    def _fresh_checkpoint(self, options: WorkflowOptions) -> Checkpoint:
        try:
            spec_hash = compute_spec_hash(self._context.spec_loader.read(options.spec_path))
        except SpecError as e:
            # Spec Check reports the read failure; an empty hash never matches.
            logger.debug("Could not fingerprint spec: %s", e.message)
            spec_hash = ""
        return self._checkpoints.create_checkpoint(
            options.spec_path, options.output_path, spec_hash
        )

    def run(
        self,
        options: WorkflowOptions,
        checkpoint: Checkpoint,
        start_phase: WorkflowPhase,
    ) -> WorkflowResult:
        """
        Execute phases start_phase..FINALIZE.

        Args:
            options: Run options
            checkpoint: Starting checkpoint (fresh or resumed)
            start_phase: First phase to execute

        Returns:
            WorkflowResult with the final checkpoint value
        """
        for phase in WorkflowPhase:
            if phase < start_phase:
                continue

            result, cancelled = self._invoke(phase, checkpoint, options)

            if not result.success:
                checkpoint = self._checkpoints.record(checkpoint, phase, result.data)
                logger.info(
                    "Phase %s failed; checkpoint kept at phase %d",
                    phase.display_name,
                    phase,
                )
                return WorkflowResult(
                    success=False,
                    checkpoint=checkpoint,
                    failed_phase=phase,
                    error=result.error,
                    cancelled=cancelled,
                )

            if phase == WorkflowPhase.FINALIZE and not options.dry_run:
                # Finalize cleared the stored checkpoint; keep the final value in memory.
                timestamp = self._context.clock.now().isoformat()
                checkpoint = checkpoint.with_data(result.data, timestamp).advanced_to(
                    phase, timestamp
                )
            else:
                checkpoint = self._checkpoints.record(checkpoint, phase, result.data)

        return WorkflowResult(success=True, checkpoint=checkpoint)

    def _invoke(
        self, phase: WorkflowPhase, checkpoint: Checkpoint, options: WorkflowOptions
    ) -> tuple[PhaseResult, bool]:
        logger.debug("Starting phase %d (%s)", phase, phase.display_name)
        if self._listener:
            self._listener.phase_started(phase)

        started = self._context.clock.now()
        cancelled = False
        try:
            result = self._phases[phase](checkpoint, options, self._context)
        except KeyboardInterrupt:
            cancelled = True
            result = PhaseResult.failed(CANCELLED_MESSAGE)
        elapsed = (self._context.clock.now() - started).total_seconds()

        logger.debug(
            "Phase %s finished: %s (%.2fs)", phase.display_name, result.outcome.value, elapsed
        )
        if self._listener:
            self._listener.phase_finished(phase, result, elapsed)
        return result, cancelled
