"""
The seven workflow phases.

Each phase is a plain function taking the current checkpoint, the run options
and a PhaseContext of collaborators, and returning a PhaseResult. Phases never
raise: every exception is converted to a failed result at the phase boundary.
Phases do not mutate the checkpoint; the data they return is merged by the
orchestrator.
"""

from __future__ import annotations

import logging
import traceback
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from functools import wraps
from typing import TYPE_CHECKING

from onboardkit.domain.exceptions import (
    AuthError,
    InternalError,
    OnboardKitError,
    SpecError,
)
from onboardkit.domain.models import (
    Checkpoint,
    CheckpointData,
    PhaseOutcome,
    PhaseResult,
    WorkflowOptions,
    WorkflowPhase,
)
from onboardkit.domain.workflow import (
    active_spec,
    format_file_size,
    format_validation_issues,
)

if TYPE_CHECKING:
    from onboardkit.domain.interfaces import (
        CheckpointStoreInterface,
        ClockInterface,
        CredentialStoreInterface,
        OutputWriterInterface,
        SpecLoaderInterface,
        SpecOperationsInterface,
        TemplateRendererInterface,
        TokenRefresherInterface,
    )

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PhaseContext:
    """Collaborators injected into every phase call."""

    credentials: CredentialStoreInterface
    token_refresher: TokenRefresherInterface | None
    spec_loader: SpecLoaderInterface
    spec_operations: SpecOperationsInterface | None
    renderer: TemplateRendererInterface
    writer: OutputWriterInterface
    checkpoint_store: CheckpointStoreInterface
    clock: ClockInterface


PhaseFunction = Callable[[Checkpoint, WorkflowOptions, PhaseContext], PhaseResult]


def phase_boundary(phase: WorkflowPhase) -> Callable[[PhaseFunction], PhaseFunction]:
    """Convert any exception escaping a phase into a failed PhaseResult.

    Expected failures (OnboardKitError) keep their message and hint. Anything
    else is reported as an internal error; the traceback is logged at DEBUG
    and only included in the message when verbose.
    """

    def decorator(func: PhaseFunction) -> PhaseFunction:
        @wraps(func)
        def wrapper(
            checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
        ) -> PhaseResult:
            try:
                return func(checkpoint, options, ctx)
            except OnboardKitError as e:
                logger.debug("%s failed: %s", phase.display_name, e.message)
                message = e.message
                if e.hint:
                    message = f"{message}\n\n{e.hint}"
                if options.verbose and isinstance(e, InternalError) and e.detail:
                    message = f"{message}\n\n{e.detail}"
                return PhaseResult.failed(message)
            except Exception as e:
                detail = traceback.format_exc()
                logger.debug("Unexpected error in %s:\n%s", phase.display_name, detail)
                error = InternalError(
                    f"Unexpected error in {phase.display_name}: "
                    f"{type(e).__name__}: {e}",
                    detail=detail,
                )
                message = error.message
                if options.verbose:
                    message = f"{message}\n\n{error.detail}"
                return PhaseResult.failed(message)

        return wrapper

    return decorator


def _require_ai(ctx: PhaseContext) -> SpecOperationsInterface:
    if ctx.spec_operations is None:
        raise AuthError(
            "AI operations are not configured.",
            hint='Run "onboardkit auth login" to connect an AI provider.',
        )
    return ctx.spec_operations


# =============================================================================
# PHASE 1: AUTH CHECK
# =============================================================================


@phase_boundary(WorkflowPhase.AUTH_CHECK)
def auth_check(
    checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
) -> PhaseResult:
    """Ensure at least one usable credential, refreshing an expired one."""
    providers = ctx.credentials.list_providers()
    if not providers:
        raise AuthError(
            "Not authenticated.",
            hint='Run "onboardkit auth login" to connect an AI provider.',
        )

    now = ctx.clock.now().timestamp()
    for provider in providers:
        credential = ctx.credentials.get(provider)
        if credential is None:
            continue
        if not credential.is_expired(now):
            return PhaseResult.ran(summary=f"Authenticated with {provider}")
        if not credential.can_refresh or ctx.token_refresher is None:
            logger.info("Credential for %s expired and cannot be refreshed", provider)
            continue

        logger.info("Refreshing expired token for %s", provider)
        try:
            refreshed = ctx.token_refresher.refresh(credential)
        except AuthError:
            ctx.credentials.delete(provider)
            raise
        ctx.credentials.save(refreshed)
        return PhaseResult.ran(summary=f"Refreshed token for {provider}")

    raise AuthError(
        "Authentication expired.",
        hint='Run "onboardkit auth login" to re-authenticate.',
    )


# =============================================================================
# PHASE 2: SPEC CHECK
# =============================================================================


@phase_boundary(WorkflowPhase.SPEC_CHECK)
def spec_check(
    checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
) -> PhaseResult:
    """Parse and validate the spec, deferring failures to Repair if enabled."""
    source = ctx.spec_loader.read(options.spec_path)
    validation = ctx.spec_loader.parse_and_validate(source)

    if validation.is_valid:
        return PhaseResult.ran(
            CheckpointData(validated_spec=validation.spec),
            summary="Spec is valid",
        )

    issues = validation.issues
    data = CheckpointData(validation_errors=issues)
    if options.ai_repair:
        return PhaseResult.ran(
            data, summary=f"Found {len(issues)} validation errors (will repair)"
        )

    return PhaseResult.failed(
        "Spec validation failed:\n"
        f"{format_validation_issues(issues)}\n\n"
        "Use --ai-repair to fix automatically.",
        data=data,
    )


# =============================================================================
# PHASE 3: REPAIR
# =============================================================================


@phase_boundary(WorkflowPhase.REPAIR)
def repair(
    checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
) -> PhaseResult:
    errors = checkpoint.data.validation_errors or ()
    if not errors:
        return PhaseResult.skipped(
            PhaseOutcome.SKIPPED_NO_PRECONDITION, "No validation errors"
        )
    if not options.ai_repair:
        return PhaseResult.skipped(
            PhaseOutcome.SKIPPED_DISABLED, "AI repair not enabled"
        )

    operations = _require_ai(ctx)
    raw_spec = ctx.spec_loader.parse(ctx.spec_loader.read(options.spec_path))
    result = operations.repair(raw_spec, errors)

    return PhaseResult.ran(
        CheckpointData(repaired_spec=result.repaired_spec, repair_result=result),
        summary=f"Fixed {len(result.changes)} issues",
    )


# =============================================================================
# PHASE 4: ENHANCEMENT
# =============================================================================


@phase_boundary(WorkflowPhase.ENHANCEMENT)
def enhancement(
    checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
) -> PhaseResult:
    if not options.ai_enhance:
        return PhaseResult.skipped(
            PhaseOutcome.SKIPPED_DISABLED, "AI enhancement not enabled"
        )

    spec = active_spec(checkpoint.data)
    if spec is None:
        raise SpecError("No valid spec available to enhance.")

    operations = _require_ai(ctx)
    result = operations.enhance(spec)

    return PhaseResult.ran(
        CheckpointData(enhanced_spec=result.enhanced_spec, enhancement_result=result),
        summary=f"Enhanced {len(result.enhancements)} fields",
    )


# =============================================================================
# PHASE 5: GENERATION
# =============================================================================


@phase_boundary(WorkflowPhase.GENERATION)
def generation(
    checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
) -> PhaseResult:
    spec = active_spec(checkpoint.data)
    if spec is None:
        raise SpecError(
            "No valid spec available for generation.",
            hint="Fix the spec validation errors or run with --ai-repair.",
        )

    rendered = ctx.renderer.render(spec)
    logger.debug("Render summary: %s", dict(rendered.summary))
    return PhaseResult.ran(
        CheckpointData(generated_files=dict(rendered.files)),
        summary=f"Generated {len(rendered.files)} files",
    )


# =============================================================================
# PHASE 6: REFINEMENT
# =============================================================================


@phase_boundary(WorkflowPhase.REFINEMENT)
def refinement(
    checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
) -> PhaseResult:
    if options.skip_refinement:
        return PhaseResult.skipped(
            PhaseOutcome.SKIPPED_DISABLED, "Refinement disabled"
        )
    return PhaseResult.skipped(
        PhaseOutcome.SKIPPED_NO_PRECONDITION, "Skipped (refinement not available)"
    )


# =============================================================================
# PHASE 7: FINALIZE
# =============================================================================


@phase_boundary(WorkflowPhase.FINALIZE)
def finalize(
    checkpoint: Checkpoint, options: WorkflowOptions, ctx: PhaseContext
) -> PhaseResult:
    """Write generated files, design prompts and metadata, then clear the checkpoint.

    A dry run reports what would be written and leaves the filesystem and the
    checkpoint untouched.
    """
    files = checkpoint.data.generated_files
    if not files:
        return PhaseResult.failed("No files to write")

    spec = active_spec(checkpoint.data)
    prompts = ctx.renderer.render_design_prompts(spec) if spec is not None else {}

    ctx.writer.prepare(
        options.output_path, overwrite=options.overwrite, dry_run=options.dry_run
    )
    batch = ctx.writer.write_all(files, options.output_path, dry_run=options.dry_run)
    prompt_batch = ctx.writer.write_all(
        prompts, options.output_path, dry_run=options.dry_run
    )

    failures = batch.failures + prompt_batch.failures
    if failures:
        listing = "\n".join(f"  {r.path}: {r.error}" for r in failures)
        return PhaseResult.failed(f"Failed to write {len(failures)} file(s):\n{listing}")

    ctx.writer.write_metadata(
        options.output_path,
        _build_metadata(checkpoint, options, ctx, files, prompts),
        dry_run=options.dry_run,
    )

    size = format_file_size(batch.total_bytes)
    written = f"{batch.success_count} files ({size})"
    if prompts:
        written = f"{written} and {prompt_batch.success_count} design prompts"
    if options.dry_run:
        return PhaseResult.ran(summary=f"Dry run: would write {written}")

    ctx.checkpoint_store.clear(options.spec_path)
    return PhaseResult.ran(summary=f"Wrote {written}")


def _build_metadata(
    checkpoint: Checkpoint,
    options: WorkflowOptions,
    ctx: PhaseContext,
    files: Mapping[str, str],
    prompts: Mapping[str, str],
) -> dict[str, object]:
    spec = active_spec(checkpoint.data) or {}
    return {
        "spec": spec.get("projectName", ""),
        "specPath": options.spec_path,
        "outputPath": options.output_path,
        "specHash": checkpoint.spec_hash,
        "timestamp": ctx.clock.now().isoformat(),
        "aiRepaired": checkpoint.data.repair_result is not None,
        "aiEnhanced": checkpoint.data.enhancement_result is not None,
        "generated": sorted(files),
        "designPrompts": sorted(prompts),
    }


PHASES: Mapping[WorkflowPhase, PhaseFunction] = {
    WorkflowPhase.AUTH_CHECK: auth_check,
    WorkflowPhase.SPEC_CHECK: spec_check,
    WorkflowPhase.REPAIR: repair,
    WorkflowPhase.ENHANCEMENT: enhancement,
    WorkflowPhase.GENERATION: generation,
    WorkflowPhase.REFINEMENT: refinement,
    WorkflowPhase.FINALIZE: finalize,
}
