"""
Filesystem output writer.

Every file is written to a uniquely named temp file beside its target and
renamed into place, so an interrupted run never leaves a half-written file
under its final name. A failing file is recorded and the batch continues.
"""

from __future__ import annotations

import logging
import os
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from onboardkit.domain.exceptions import DirectoryExistsError, FileSystemError
from onboardkit.domain.interfaces import OutputWriterInterface
from onboardkit.domain.models import BatchWriteResult, FileWriteResult
from onboardkit.infrastructure.persistence.checkpoint import write_json_atomic

logger = logging.getLogger(__name__)

METADATA_FILENAME = ".onboardkit-metadata.json"


def write_text_atomic(path: Path, content: str) -> int:
    """Write text atomically and return the number of bytes written."""
    data = content.encode("utf-8")
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_name(f"{path.name}.tmp-{uuid.uuid4().hex[:8]}")
    try:
        with open(temp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
    return len(data)


class FilesystemOutputWriter(OutputWriterInterface):
    """Writes generated files beneath an output root."""

    def prepare(self, root: str, *, overwrite: bool, dry_run: bool) -> None:
        path = Path(root)
        if path.exists():
            if not path.is_dir():
                raise FileSystemError(f"Output path is not a directory: {root}")
            if not overwrite:
                raise DirectoryExistsError(root)
            logger.info("Writing into existing directory %s", root)
            return
        if dry_run:
            logger.info("Dry run: would create %s", root)
            return
        try:
            path.mkdir(parents=True)
        except OSError as e:
            raise FileSystemError(f"Cannot create output directory {root}: {e}") from e

    def write_all(
        self, files: Mapping[str, str], root: str, *, dry_run: bool
    ) -> BatchWriteResult:
        base = Path(root).resolve()
        results: list[FileWriteResult] = []

        for relative, content in files.items():
            target = (base / relative).resolve()
            if not target.is_relative_to(base):
                results.append(
                    FileWriteResult(relative, False, error="Path escapes output directory")
                )
                continue

            if dry_run:
                results.append(FileWriteResult(relative, True, len(content.encode("utf-8"))))
                continue

            try:
                size = write_text_atomic(target, content)
            except OSError as e:
                logger.warning("Failed to write %s: %s", relative, e)
                results.append(FileWriteResult(relative, False, error=str(e)))
                continue
            results.append(FileWriteResult(relative, True, size))

        batch = BatchWriteResult(per_file=tuple(results))
        logger.debug(
            "Wrote %d files (%d failed, %d bytes)%s",
            batch.success_count,
            batch.failure_count,
            batch.total_bytes,
            " [dry run]" if dry_run else "",
        )
        return batch

    def write_metadata(
        self, root: str, metadata: Mapping[str, Any], *, dry_run: bool
    ) -> str | None:
        if dry_run:
            return None
        path = Path(root) / METADATA_FILENAME
        try:
            write_json_atomic(path, dict(metadata))
        except OSError as e:
            raise FileSystemError(f"Cannot write metadata file {path}: {e}") from e
        return str(path)
