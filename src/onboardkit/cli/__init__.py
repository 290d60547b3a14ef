"""Command line interface for onboardkit."""

from onboardkit.cli.main import cli

__all__ = ["cli"]
