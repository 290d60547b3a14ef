"""Rich console utilities for the onboardkit CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from onboardkit.domain.interfaces import ProgressListenerInterface, ResumePromptInterface
from onboardkit.domain.models import PhaseOutcome, WorkflowPhase

if TYPE_CHECKING:
    from onboardkit.application.progress import ProgressTracker
    from onboardkit.domain.models import Checkpoint, PhaseResult, WorkflowOptions

# Shared console instances
console = Console()
error_console = Console(stderr=True)


def print_header(title: str, subtitle: str | None = None) -> None:
    """Print a styled header panel."""
    content = Text(title, style="bold blue")
    if subtitle:
        content.append(f"\n{subtitle}", style="dim")
    console.print(Panel(content, expand=False))


def print_error(message: str, hint: str | None = None) -> None:
    """Print formatted error message to stderr."""
    content = Text(f"ERROR: {message}", style="bold red")
    if hint:
        content.append(f"\n\nHint: {hint}", style="yellow")
    error_console.print(Panel(content, title="Error", border_style="red"))


def print_warning(message: str) -> None:
    error_console.print(f"[yellow]![/yellow] {message}")


def print_success(message: str) -> None:
    """Print success message."""
    console.print(Panel(message, title="Success", border_style="green"))


def print_failure(message: str, details: str | None = None) -> None:
    """Print failure message."""
    content = Text(message, style="bold red")
    if details:
        content.append(f"\n{details}", style="dim")
    console.print(Panel(content, title="Failed", border_style="red"))


def print_run_info(options: WorkflowOptions, checkpoint_path: str) -> None:
    """Print run configuration table."""
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")

    table.add_row("Spec", options.spec_path)
    table.add_row("Output", options.output_path)
    table.add_row("Checkpoint", checkpoint_path)
    table.add_row("AI repair", "on" if options.ai_repair else "off")
    table.add_row("AI enhance", "on" if options.ai_enhance else "off")
    if options.dry_run:
        table.add_row("Mode", "dry run")

    console.print(table)


def print_phase_table(tracker: ProgressTracker) -> None:
    """Print the per-phase status table."""
    table = Table(show_header=True, box=None)
    table.add_column("#", style="cyan", width=3)
    table.add_column("Phase", style="magenta", width=12)
    table.add_column("Status", width=10)
    table.add_column("Details")

    styles = {"completed": "green", "skipped": "yellow", "failed": "red"}
    for record in tracker.records():
        style = styles.get(record.status.value, "dim")
        table.add_row(
            str(int(record.phase)),
            record.phase.display_name,
            f"[{style}]{record.status.value}[/{style}]",
            record.message.split("\n")[0][:80],
        )
    console.print(table)


class ConsoleProgress(ProgressListenerInterface):
    """Prints one line per phase as the workflow runs."""

    def phase_started(self, phase: WorkflowPhase) -> None:
        console.print(
            f"[cyan][{int(phase)}/{len(WorkflowPhase)}][/cyan] "
            f"[bold]{phase.display_name}[/bold] [dim]{phase.description}...[/dim]"
        )

    def phase_finished(
        self, phase: WorkflowPhase, result: PhaseResult, elapsed: float
    ) -> None:
        if not result.success:
            first_line = (result.error or "").split("\n")[0]
            console.print(f"    [red]x failed[/red] {first_line}")
        elif result.outcome == PhaseOutcome.RAN:
            console.print(f"    [green]ok[/green] {result.summary} [dim]({elapsed:.1f}s)[/dim]")
        else:
            console.print(f"    [yellow]- skipped[/yellow] {result.summary}")


class RichResumePrompt(ResumePromptInterface):
    """Asks on the terminal. Ctrl-C or EOF counts as "no"."""

    def confirm_resume(self, checkpoint: Checkpoint, age: str) -> bool:
        try:
            return Confirm.ask(
                f"Resume from {checkpoint.phase.display_name} (saved {age})?",
                default=True,
                console=console,
            )
        except (KeyboardInterrupt, EOFError):
            console.print()
            return False


class FixedResumePrompt(ResumePromptInterface):
    """Answers without asking (``--resume`` / ``--no-resume`` / no TTY)."""

    def __init__(self, answer: bool, announce: bool = True) -> None:
        self._answer = answer
        self._announce = announce

    def confirm_resume(self, checkpoint: Checkpoint, age: str) -> bool:
        if self._announce:
            verb = "Resuming" if self._answer else "Not resuming"
            console.print(
                f"[dim]{verb} from {checkpoint.phase.display_name} (saved {age})[/dim]"
            )
        return self._answer
