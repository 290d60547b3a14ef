"""Application service for checkpoint operations.

Creates fresh checkpoints, threads phase results into them, and persists
every update through the checkpoint store port.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from onboardkit.domain.models import Checkpoint, CheckpointData, WorkflowPhase

if TYPE_CHECKING:
    from onboardkit.domain.interfaces import CheckpointStoreInterface, ClockInterface

logger = logging.getLogger(__name__)


class CheckpointService:
    """Application service for creating and updating checkpoints.

    Checkpoints are immutable; every update returns a new value that has
    already been written to the store.
    """

    def __init__(self, store: CheckpointStoreInterface, clock: ClockInterface) -> None:
        """Initialize checkpoint service.

        Args:
            store: Checkpoint persistence port.
            clock: Source of checkpoint timestamps.
        """
        self._store = store
        self._clock = clock

    def _timestamp(self) -> str:
        return self._clock.now().isoformat()

    def create_checkpoint(
        self, spec_path: str, output_path: str, spec_hash: str
    ) -> Checkpoint:
        """Create an empty checkpoint at the first phase (not persisted).

        Args:
            spec_path: Absolute path of the spec file.
            output_path: Absolute path of the output directory.
            spec_hash: Fingerprint of the spec source.

        Returns:
            A Checkpoint with no accumulated data.
        """
        return Checkpoint(
            phase=WorkflowPhase.first(),
            spec_hash=spec_hash,
            spec_path=spec_path,
            output_path=output_path,
            timestamp=self._timestamp(),
            data=CheckpointData(),
        )

    def record(
        self,
        checkpoint: Checkpoint,
        phase: WorkflowPhase,
        delta: CheckpointData | None = None,
    ) -> Checkpoint:
        """Merge a phase's data, set the phase, and persist.

        Args:
            checkpoint: Current checkpoint.
            phase: Phase that was just attempted.
            delta: Artifacts the phase produced (may be None).

        Returns:
            The persisted checkpoint.
        """
        timestamp = self._timestamp()
        updated = checkpoint.with_data(delta, timestamp).advanced_to(phase, timestamp)
        self._store.save(updated)
        logger.debug(
            "Checkpoint saved at phase %d (%s), data: %s",
            phase,
            phase.display_name,
            ", ".join(updated.data.populated_fields()) or "none",
        )
        return updated

    def load(self, spec_path: str) -> Checkpoint | None:
        return self._store.load(spec_path)

    def clear(self, spec_path: str) -> None:
        self._store.clear(spec_path)
        logger.debug("Checkpoint cleared for %s", spec_path)
