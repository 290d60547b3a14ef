"""
onboardkit command line.

Usage:
    onboardkit init --name "My App"
    onboardkit onboard --spec spec.md --output ./app [--ai-repair] [--ai-enhance]
    onboardkit validate --spec spec.md
    onboardkit generate --spec spec.md --output ./app [--dry-run]
    onboardkit checkpoint show --spec spec.md
    onboardkit checkpoint clear --spec spec.md
    onboardkit auth login --provider openai
    onboardkit auth status
    onboardkit auth logout --provider openai

The ``onboard`` command is resumable: if a run fails, re-running the same
command against an unchanged spec picks up at the failed phase. ``generate``
renders templates straight from a valid spec, without AI or checkpoints.
"""

from __future__ import annotations

import logging
import re
import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.table import Table

from onboardkit.application import (
    OnboardingWorkflow,
    PhaseContext,
    ProgressTracker,
    ResumePlanner,
)
from onboardkit.cli.console import (
    ConsoleProgress,
    FixedResumePrompt,
    RichResumePrompt,
    console,
    error_console,
    print_error,
    print_failure,
    print_header,
    print_phase_table,
    print_run_info,
    print_success,
)
from onboardkit.cli.logging_setup import setup_logging
from onboardkit.cli.options import (
    DEFAULT_SPEC,
    common_options,
    onboard_options,
    output_options,
)
from onboardkit.cli.settings import DEFAULT_PROVIDER, Settings, load_settings
from onboardkit.domain.exceptions import (
    AIAuthenticationError,
    FileSystemError,
    OnboardKitError,
)
from onboardkit.domain.interfaces import (
    ClockInterface,
    CredentialStoreInterface,
    ResumePromptInterface,
)
from onboardkit.domain.models import Credential, WorkflowOptions, WorkflowResult
from onboardkit.domain.workflow import (
    compute_spec_hash,
    format_checkpoint_age,
    format_duration,
    format_file_size,
    format_validation_issues,
    validate_checkpoint,
)
from onboardkit.infrastructure.auth import FileCredentialStore, OAuthTokenRefresher
from onboardkit.infrastructure.clock import SystemClock
from onboardkit.infrastructure.llm import AISpecOperations, OpenAIChatProvider
from onboardkit.infrastructure.llm.openai_provider import OpenAIProviderConfig
from onboardkit.infrastructure.output import FilesystemOutputWriter
from onboardkit.infrastructure.persistence import FilesystemCheckpointStore
from onboardkit.infrastructure.persistence.checkpoint import checkpoint_path_for
from onboardkit.infrastructure.rendering import JinjaTemplateRenderer
from onboardkit.infrastructure.spec import MarkdownSpecLoader
from onboardkit.infrastructure.spec.schema import HEX_COLOR_PATTERN

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

RESUME_HINT = "Checkpoint saved. Run the command again to resume."

ContextFactory = Callable[[Settings, ClockInterface], PhaseContext]


# =============================================================================
# Wiring
# =============================================================================


def token_source(
    credentials: CredentialStoreInterface, clock: ClockInterface
) -> Callable[[], str]:
    """Return a callable yielding the first unexpired access token."""

    def source() -> str:
        now = clock.now().timestamp()
        for provider in credentials.list_providers():
            credential = credentials.get(provider)
            if credential is not None and not credential.is_expired(now):
                return credential.access_token
        raise AIAuthenticationError("No valid credential available for the AI provider")

    return source


def build_context(settings: Settings, clock: ClockInterface) -> PhaseContext:
    """Assemble the production collaborators."""
    credentials = FileCredentialStore(settings.home)
    refresher = (
        OAuthTokenRefresher(
            settings.token_url,
            clock,
            client_id=settings.client_id,
            timeout=settings.timeout,
        )
        if settings.token_url
        else None
    )
    provider = OpenAIChatProvider(
        OpenAIProviderConfig(
            model=settings.model,
            base_url=settings.base_url,
            timeout=settings.timeout,
        ),
        token_source=token_source(credentials, clock),
    )
    return PhaseContext(
        credentials=credentials,
        token_refresher=refresher,
        spec_loader=MarkdownSpecLoader(),
        spec_operations=AISpecOperations(provider),
        renderer=JinjaTemplateRenderer(),
        writer=FilesystemOutputWriter(),
        checkpoint_store=FilesystemCheckpointStore(),
        clock=clock,
    )


def choose_resume_prompt(resume: bool | None) -> ResumePromptInterface:
    """``--resume``/``--no-resume`` answer up front; without a TTY we resume."""
    if resume is not None:
        return FixedResumePrompt(resume)
    if not sys.stdin.isatty():
        return FixedResumePrompt(True)
    return RichResumePrompt()


def handle_errors(func: F) -> F:
    """Render OnboardKitError as an error panel and exit 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except OnboardKitError as e:
            print_error(e.message, e.hint)
            raise SystemExit(1) from None

    return wrapper  # type: ignore[return-value]


def _clock(obj: dict[str, Any]) -> ClockInterface:
    clock = obj.get("clock")
    return clock if clock is not None else SystemClock()


def _credentials(obj: dict[str, Any], settings: Settings) -> CredentialStoreInterface:
    store = obj.get("credentials")
    return store if store is not None else FileCredentialStore(settings.home)


# =============================================================================
# CLI
# =============================================================================


@click.group()
@click.version_option(package_name="onboardkit")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Generate a React Native onboarding flow from a markdown spec."""
    ctx.ensure_object(dict)


@cli.command()
@common_options
@onboard_options
@click.pass_obj
@handle_errors
def onboard(
    obj: dict[str, Any],
    spec_path: str,
    output_path: str,
    ai_repair: bool,
    ai_enhance: bool,
    skip_refinement: bool,
    dry_run: bool,
    overwrite: bool,
    resume: bool | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Run the onboarding workflow, resuming a previous run when possible."""
    setup_logging(log_file=log_file, verbose=verbose)
    settings = load_settings(obj.get("env"))
    clock = _clock(obj)
    factory: ContextFactory = obj.get("context_factory") or build_context
    context = factory(settings, clock)

    options = WorkflowOptions(
        spec_path=str(Path(spec_path).resolve()),
        output_path=str(Path(output_path).resolve()),
        ai_repair=ai_repair,
        ai_enhance=ai_enhance,
        skip_refinement=skip_refinement,
        dry_run=dry_run,
        overwrite=overwrite,
        verbose=verbose,
    )

    print_header("OnboardKit", f"Onboarding flow from {spec_path}")
    print_run_info(options, str(checkpoint_path_for(options.spec_path)))

    planner = ResumePlanner(
        context.checkpoint_store,
        context.spec_loader,
        choose_resume_prompt(resume),
        clock,
    )
    decision = planner.plan(options.spec_path, options)
    logger.debug("Resume decision: %s", decision.reason)

    tracker = ProgressTracker(forward_to=ConsoleProgress())
    workflow = OnboardingWorkflow(context, listener=tracker)

    started = clock.now()
    result = workflow.execute(options, decision)
    elapsed = (clock.now() - started).total_seconds()

    console.print()
    print_phase_table(tracker)
    console.print(f"[dim]{tracker.summary()}[/dim]")

    if not result.success:
        phase = result.failed_phase.display_name if result.failed_phase else "Workflow"
        if result.cancelled:
            print_failure(f"{phase} cancelled", RESUME_HINT)
        else:
            print_error(f"{phase} failed:\n{result.error}", RESUME_HINT)
        raise SystemExit(1)

    _print_completion(result, options, elapsed)


def _print_completion(
    result: WorkflowResult, options: WorkflowOptions, elapsed: float
) -> None:
    data = result.checkpoint.data
    files = data.generated_files or {}
    total = sum(len(content.encode("utf-8")) for content in files.values())

    lines = [
        f"{'Would write' if options.dry_run else 'Generated'} {len(files)} files "
        f"({format_file_size(total)})",
        f"Output: {options.output_path}",
        f"Duration: {format_duration(elapsed)}",
    ]
    if data.repair_result is not None:
        lines.append(f"AI repairs: {len(data.repair_result.changes)}")
    if data.enhancement_result is not None:
        lines.append(f"AI enhancements: {len(data.enhancement_result.enhancements)}")
    if options.dry_run:
        lines.append("Dry run: nothing was written. Re-run without --dry-run to write.")
    print_success("\n".join(lines))


@cli.command()
@common_options
@handle_errors
def validate(spec_path: str, log_file: str | None, verbose: bool) -> None:
    """Check a spec against the schema without generating anything."""
    setup_logging(log_file=log_file, verbose=verbose)
    loader = MarkdownSpecLoader()
    validation = loader.parse_and_validate(loader.read(str(Path(spec_path).resolve())))

    if not validation.is_valid:
        error_console.print(format_validation_issues(validation.issues))
        raise SystemExit(1)

    spec = validation.spec or {}
    steps = len(spec.get("onboardingSteps", []))
    print_success(f"Spec is valid: {spec.get('projectName', '')} ({steps} onboarding steps)")


def _hex_color(ctx: click.Context, param: click.Parameter, value: str) -> str:
    if not re.match(HEX_COLOR_PATTERN, value):
        raise click.BadParameter(f"{value!r} is not a hex colour like #6366F1")
    return value


@cli.command()
@click.option(
    "--spec",
    "spec_path",
    default=DEFAULT_SPEC,
    type=click.Path(dir_okay=False),
    help=f"Where to write the new spec (default: {DEFAULT_SPEC})",
)
@click.option("--name", "project_name", prompt="What is your app name?", help="App name")
@click.option(
    "--primary",
    default="#6366F1",
    callback=_hex_color,
    help="Primary brand colour (hex)",
)
@click.option(
    "--secondary",
    default="#8B5CF6",
    callback=_hex_color,
    help="Secondary brand colour (hex)",
)
@click.option("--headline", default=None, help='Welcome headline (default: "Welcome to <name>")')
@click.option(
    "--subtext",
    default="Get started with the best experience",
    help="Welcome subtext",
)
@click.option(
    "--navigation",
    default="react-navigation",
    type=click.Choice(["react-navigation", "expo-router"]),
    help="Navigation library for the generated app",
)
@click.option("--force", is_flag=True, help="Overwrite an existing spec without asking")
@handle_errors
def init(
    spec_path: str,
    project_name: str,
    primary: str,
    secondary: str,
    headline: str | None,
    subtext: str,
    navigation: str,
    force: bool,
) -> None:
    """Write a starter spec to edit before generating."""
    project_name = project_name.strip()
    if not project_name:
        raise click.BadParameter("App name cannot be empty", param_hint="--name")

    path = Path(spec_path)
    if path.exists() and not force:
        if not click.confirm(f"{spec_path} already exists. Overwrite it?", default=False):
            console.print("Operation cancelled.")
            return

    content = JinjaTemplateRenderer().render_starter_spec(
        project_name,
        primary=primary,
        secondary=secondary,
        headline=headline,
        subtext=subtext,
        navigation=navigation,
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise FileSystemError(f"Cannot write {spec_path}: {e}") from e

    print_success(
        f"Created {spec_path}\n\n"
        "Next steps:\n"
        f"  1. Edit {spec_path} to customise your onboarding flow\n"
        f"  2. onboardkit validate --spec {spec_path}\n"
        f"  3. onboardkit generate --spec {spec_path}"
    )


@cli.command()
@common_options
@output_options
@click.pass_obj
@handle_errors
def generate(
    obj: dict[str, Any],
    spec_path: str,
    output_path: str,
    dry_run: bool,
    overwrite: bool,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Render templates straight from a valid spec: no AI, no checkpoint."""
    setup_logging(log_file=log_file, verbose=verbose)
    resolved_spec = str(Path(spec_path).resolve())
    resolved_output = str(Path(output_path).resolve())

    loader = MarkdownSpecLoader()
    source = loader.read(resolved_spec)
    validation = loader.parse_and_validate(source)
    if not validation.is_valid or validation.spec is None:
        error_console.print(format_validation_issues(validation.issues))
        print_error(
            "Spec is invalid",
            f'Fix the issues above, or run "onboardkit onboard --spec {spec_path} --ai-repair".',
        )
        raise SystemExit(1)

    spec = validation.spec
    renderer = JinjaTemplateRenderer()
    rendered = renderer.render(spec)
    prompts = renderer.render_design_prompts(spec)

    writer = FilesystemOutputWriter()
    writer.prepare(resolved_output, overwrite=overwrite, dry_run=dry_run)
    batch = writer.write_all(rendered.files, resolved_output, dry_run=dry_run)
    prompt_batch = writer.write_all(prompts, resolved_output, dry_run=dry_run)

    failures = batch.failures + prompt_batch.failures
    if failures:
        listing = "\n".join(f"  {r.path}: {r.error}" for r in failures)
        print_error(f"Failed to write {len(failures)} file(s):\n{listing}")
        raise SystemExit(1)

    writer.write_metadata(
        resolved_output,
        {
            "spec": spec.get("projectName", ""),
            "specPath": resolved_spec,
            "outputPath": resolved_output,
            "specHash": compute_spec_hash(source),
            "timestamp": _clock(obj).now().isoformat(),
            "aiRepaired": False,
            "aiEnhanced": False,
            "generated": sorted(rendered.files),
            "designPrompts": sorted(prompts),
        },
        dry_run=dry_run,
    )

    lines = [
        f"{'Would write' if dry_run else 'Generated'} {batch.success_count} files "
        f"({format_file_size(batch.total_bytes)})",
        f"Design prompts: {prompt_batch.success_count}",
        f"Output: {resolved_output}",
    ]
    if dry_run:
        lines.append("Dry run: nothing was written. Re-run without --dry-run to write.")
    print_success("\n".join(lines))


# =============================================================================
# checkpoint
# =============================================================================


@cli.group()
def checkpoint() -> None:
    """Inspect or discard the saved checkpoint for a spec."""


@checkpoint.command("show")
@common_options
@click.pass_obj
@handle_errors
def checkpoint_show(
    obj: dict[str, Any], spec_path: str, log_file: str | None, verbose: bool
) -> None:
    """Show the saved checkpoint, if any."""
    setup_logging(log_file=log_file, verbose=verbose)
    resolved = str(Path(spec_path).resolve())
    saved = FilesystemCheckpointStore().load(resolved)
    if saved is None:
        console.print(f"No checkpoint for {spec_path}")
        return

    validation = validate_checkpoint(saved)
    table = Table(show_header=False, box=None)
    table.add_column("Key", style="cyan")
    table.add_column("Value")
    table.add_row("Phase", f"{int(saved.phase)} ({saved.phase.display_name})")
    table.add_row("Saved", format_checkpoint_age(saved.timestamp, _clock(obj).now()))
    table.add_row("Spec hash", saved.spec_hash[:12])
    table.add_row("Output", saved.output_path)
    table.add_row("Data", ", ".join(saved.data.populated_fields()) or "-")
    table.add_row(
        "Valid",
        "[green]yes[/green]"
        if validation.valid
        else "[red]no[/red] " + "; ".join(validation.errors),
    )
    table.add_row("File", str(checkpoint_path_for(resolved)))
    console.print(table)


@checkpoint.command("clear")
@common_options
@handle_errors
def checkpoint_clear(spec_path: str, log_file: str | None, verbose: bool) -> None:
    """Delete the saved checkpoint so the next run starts fresh."""
    setup_logging(log_file=log_file, verbose=verbose)
    store = FilesystemCheckpointStore()
    resolved = str(Path(spec_path).resolve())
    if not store.exists(resolved):
        console.print(f"No checkpoint for {spec_path}")
        return
    store.clear(resolved)
    console.print(f"[green]Cleared checkpoint for {spec_path}[/green]")


# =============================================================================
# auth
# =============================================================================


@cli.group()
def auth() -> None:
    """Manage AI provider credentials."""


@auth.command("login")
@click.option("--provider", default=DEFAULT_PROVIDER, help="Provider name")
@click.option(
    "--token",
    prompt="Access token",
    hide_input=True,
    help="Access token (prompted when omitted)",
)
@click.option("--refresh-token", default=None, help="OAuth refresh token")
@click.option(
    "--expires-in",
    default=None,
    type=click.IntRange(min=1),
    help="Seconds until the access token expires",
)
@click.pass_obj
@handle_errors
def auth_login(
    obj: dict[str, Any],
    provider: str,
    token: str,
    refresh_token: str | None,
    expires_in: int | None,
) -> None:
    """Store a credential for an AI provider."""
    settings = load_settings(obj.get("env"))
    store = _credentials(obj, settings)
    now = _clock(obj).now()
    existing = store.get(provider)
    store.save(
        Credential(
            provider=provider,
            access_token=token.strip(),
            refresh_token=refresh_token,
            expires_at=now.timestamp() + expires_in if expires_in else None,
            created_at=existing.created_at if existing else now.isoformat(),
            updated_at=now.isoformat(),
        )
    )
    print_success(f"Saved credential for {provider}")


@auth.command("status")
@click.pass_obj
@handle_errors
def auth_status(obj: dict[str, Any]) -> None:
    """List stored credentials and whether they are usable."""
    settings = load_settings(obj.get("env"))
    store = _credentials(obj, settings)
    providers = store.list_providers()
    if not providers:
        console.print('Not authenticated. Run "onboardkit auth login".')
        raise SystemExit(1)

    now = _clock(obj).now().timestamp()
    table = Table(show_header=True, box=None)
    table.add_column("Provider", style="cyan")
    table.add_column("Status")
    table.add_column("Updated", style="dim")
    for provider in providers:
        credential = store.get(provider)
        if credential is None:
            status = "[red]unreadable[/red]"
        elif not credential.is_expired(now):
            status = "[green]valid[/green]"
        elif credential.can_refresh:
            status = "[yellow]expired (refreshable)[/yellow]"
        else:
            status = "[red]expired[/red]"
        table.add_row(provider, status, credential.updated_at if credential else "")
    console.print(table)


@auth.command("logout")
@click.option("--provider", default=DEFAULT_PROVIDER, help="Provider name")
@click.pass_obj
@handle_errors
def auth_logout(obj: dict[str, Any], provider: str) -> None:
    """Remove a stored credential."""
    settings = load_settings(obj.get("env"))
    store = _credentials(obj, settings)
    if store.get(provider) is None:
        console.print(f"No credential stored for {provider}")
        return
    store.delete(provider)
    console.print(f"[green]Removed credential for {provider}[/green]")


if __name__ == "__main__":
    cli()
