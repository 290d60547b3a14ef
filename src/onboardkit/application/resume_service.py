"""Application service for deciding whether to resume a previous run.

A stored checkpoint is only reused when the spec it was written for is
byte-for-byte unchanged, it carries the artifacts its phase needs, and the
user agrees. Everything else starts fresh from the first phase.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from onboardkit.domain.exceptions import SpecError
from onboardkit.domain.models import ResumeDecision
from onboardkit.domain.workflow import (
    compute_spec_hash,
    format_checkpoint_age,
    validate_checkpoint,
)

if TYPE_CHECKING:
    from onboardkit.domain.interfaces import (
        CheckpointStoreInterface,
        ClockInterface,
        ResumePromptInterface,
        SpecLoaderInterface,
    )
    from onboardkit.domain.models import WorkflowOptions

logger = logging.getLogger(__name__)


class ResumePlanner:
    """Decides between resuming from a checkpoint and starting fresh."""

    def __init__(
        self,
        store: CheckpointStoreInterface,
        spec_loader: SpecLoaderInterface,
        prompt: ResumePromptInterface,
        clock: ClockInterface,
    ) -> None:
        self._store = store
        self._spec_loader = spec_loader
        self._prompt = prompt
        self._clock = clock

    def plan(self, spec_path: str, options: WorkflowOptions) -> ResumeDecision:
        """Plan where the next run starts.

        Args:
            spec_path: Absolute path of the spec file.
            options: Run options (currently only used for logging context).

        Returns:
            ResumeDecision; start_phase is the first phase unless resuming.
        """
        checkpoint = self._store.load(spec_path)
        if checkpoint is None:
            return ResumeDecision.fresh("No checkpoint found")

        try:
            current_hash = compute_spec_hash(self._spec_loader.read(spec_path))
        except SpecError as e:
            logger.warning("Cannot fingerprint spec, starting fresh: %s", e.message)
            return ResumeDecision.fresh(f"Spec unreadable: {e.message}")

        if current_hash != checkpoint.spec_hash:
            logger.warning(
                "Spec file has changed since the checkpoint was saved; "
                "discarding checkpoint"
            )
            self._store.clear(spec_path)
            return ResumeDecision.fresh("Spec changed since checkpoint")

        validation = validate_checkpoint(checkpoint)
        if not validation.valid:
            for error in validation.errors:
                logger.warning("Invalid checkpoint: %s", error)
            self._store.clear(spec_path)
            return ResumeDecision.fresh("Checkpoint is missing required data")

        age = format_checkpoint_age(checkpoint.timestamp, self._clock.now())
        if not self._prompt.confirm_resume(checkpoint, age):
            logger.info("Resume declined; starting fresh (output: %s)", options.output_path)
            return ResumeDecision.fresh("Resume declined")

        logger.info(
            "Resuming from phase %d (%s), saved %s",
            checkpoint.phase,
            checkpoint.phase.display_name,
            age,
        )
        return ResumeDecision(
            should_resume=True,
            checkpoint=checkpoint,
            start_phase=checkpoint.phase,
            reason=f"Resuming from {checkpoint.phase.display_name}",
        )
