"""
Persistence adapters for checkpoints.
"""

from onboardkit.infrastructure.persistence.checkpoint import (
    FilesystemCheckpointStore,
    checkpoint_path_for,
    write_json_atomic,
)
from onboardkit.infrastructure.persistence.memory import InMemoryCheckpointStore

__all__ = [
    "FilesystemCheckpointStore",
    "InMemoryCheckpointStore",
    "checkpoint_path_for",
    "write_json_atomic",
]
