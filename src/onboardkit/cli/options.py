"""Click option decorators shared by onboardkit commands."""

from __future__ import annotations

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

import click

DEFAULT_SPEC = "./spec.md"
DEFAULT_OUTPUT = "./onboardkit-output"

F = TypeVar("F", bound=Callable[..., Any])


def common_options(func: F) -> F:
    """
    Decorator adding options every spec-reading command accepts.

    Options added:
        --spec: Path to the spec markdown file
        --log-file: Path to log file
        -v/--verbose: Enable verbose logging
    """

    @click.option(
        "--spec",
        "spec_path",
        default=DEFAULT_SPEC,
        type=click.Path(dir_okay=False),
        help=f"Path to the spec markdown file (default: {DEFAULT_SPEC})",
    )
    @click.option(
        "--log-file",
        default=None,
        type=click.Path(),
        help="Path to log file",
    )
    @click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="Enable verbose (DEBUG) logging and full error details",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def output_options(func: F) -> F:
    """
    Decorator adding the options of every command that writes a project.

    Options added:
        --output: Output directory for the generated project
        --dry-run: Report what would be written without writing
        --overwrite: Write into an existing output directory
    """

    @click.option(
        "--output",
        "output_path",
        default=DEFAULT_OUTPUT,
        type=click.Path(file_okay=False),
        help=f"Output directory (default: {DEFAULT_OUTPUT})",
    )
    @click.option("--dry-run", is_flag=True, help="Show what would be written")
    @click.option("--overwrite", is_flag=True, help="Allow writing into an existing directory")
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def onboard_options(func: F) -> F:
    """
    Decorator adding the workflow options of ``onboardkit onboard``.

    Options added (besides those of ``output_options``):
        --ai-repair: Repair validation errors with AI
        --ai-enhance: Enhance copy with AI
        --skip-refinement/--refine: Toggle the refinement phase
        --resume/--no-resume: Answer the resume prompt up front
    """

    @output_options
    @click.option("--ai-repair", is_flag=True, help="Fix spec validation errors with AI")
    @click.option("--ai-enhance", is_flag=True, help="Improve spec copy with AI")
    @click.option(
        "--skip-refinement/--refine",
        default=True,
        help="Skip the refinement phase (default: skip)",
    )
    @click.option(
        "--resume/--no-resume",
        default=None,
        help="Resume from a saved checkpoint without asking",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
