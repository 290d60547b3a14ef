"""
In-memory implementation of the checkpoint store.

Useful for testing and ephemeral runs.
"""

from onboardkit.domain.interfaces import CheckpointStoreInterface
from onboardkit.domain.models import Checkpoint


class InMemoryCheckpointStore(CheckpointStoreInterface):
    """Simple in-memory store keyed by spec path."""

    def __init__(self) -> None:
        self._checkpoints: dict[str, Checkpoint] = {}
        self.save_count = 0

    def save(self, checkpoint: Checkpoint) -> None:
        self._checkpoints[checkpoint.spec_path] = checkpoint
        self.save_count += 1

    def load(self, spec_path: str) -> Checkpoint | None:
        return self._checkpoints.get(spec_path)

    def clear(self, spec_path: str) -> None:
        self._checkpoints.pop(spec_path, None)

    def exists(self, spec_path: str) -> bool:
        return spec_path in self._checkpoints
