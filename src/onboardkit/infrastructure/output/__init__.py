"""
Output writing for generated projects.
"""

from onboardkit.infrastructure.output.writer import (
    METADATA_FILENAME,
    FilesystemOutputWriter,
    write_text_atomic,
)

__all__ = ["METADATA_FILENAME", "FilesystemOutputWriter", "write_text_atomic"]
