"""
Filesystem implementation of the checkpoint store.

Checkpoints live next to the spec they describe:

{spec_dir}/
    .onboardkit/
        checkpoints/
            {spec_stem}-{path_hash}.json

The path hash is derived from the absolute spec path, so several specs in the
same directory never share a checkpoint.
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
import uuid
from pathlib import Path

from onboardkit.domain.interfaces import CheckpointStoreInterface
from onboardkit.domain.models import Checkpoint
from onboardkit.infrastructure.persistence.serialization import (
    CheckpointFormatError,
    checkpoint_from_dict,
    checkpoint_to_dict,
)

logger = logging.getLogger(__name__)

STATE_DIRNAME = ".onboardkit"


def checkpoint_path_for(spec_path: str) -> Path:
    """Deterministic checkpoint location for a spec file."""
    spec = Path(spec_path).resolve()
    path_hash = hashlib.sha256(str(spec).encode("utf-8")).hexdigest()[:12]
    return spec.parent / STATE_DIRNAME / "checkpoints" / f"{spec.stem}-{path_hash}.json"


def write_json_atomic(path: Path, payload: object, mode: int = 0o666) -> None:
    """Write JSON via a uniquely named temp file and rename it into place.

    The temp file is created with ``mode`` (masked by the umask) before any
    content is written, and fsynced before the rename.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.{uuid.uuid4().hex[:8]}.tmp")
    try:
        fd = os.open(temp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, mode)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise


class FilesystemCheckpointStore(CheckpointStoreInterface):
    """Stores one JSON checkpoint per spec file."""

    def save(self, checkpoint: Checkpoint) -> None:
        path = checkpoint_path_for(checkpoint.spec_path)
        write_json_atomic(path, checkpoint_to_dict(checkpoint))
        logger.debug("Wrote checkpoint %s", path)

    def load(self, spec_path: str) -> Checkpoint | None:
        path = checkpoint_path_for(spec_path)
        if not path.exists():
            return None

        try:
            with open(path, encoding="utf-8") as f:
                return checkpoint_from_dict(json.load(f))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning("Ignoring unreadable checkpoint %s: %s", path, e)
        except (CheckpointFormatError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Ignoring malformed checkpoint %s: %s", path, e)
        return None

    def clear(self, spec_path: str) -> None:
        checkpoint_path_for(spec_path).unlink(missing_ok=True)

    def exists(self, spec_path: str) -> bool:
        return checkpoint_path_for(spec_path).exists()

    def path_for(self, spec_path: str) -> Path:
        return checkpoint_path_for(spec_path)
