"""
Domain exceptions for the onboarding workflow.

Every error a phase can surface belongs to one of five kinds: authentication,
spec, AI provider, filesystem, or internal. Only some AI provider errors are
transient and worth retrying; everything else needs user action.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from onboardkit.domain.models import ValidationIssue


class OnboardKitError(Exception):
    """Base class for all expected onboardkit failures."""

    retryable = False

    def __init__(self, message: str, hint: str | None = None):
        """
        Args:
            message: Human-readable error message
            hint: Optional suggestion for the user on how to recover
        """
        super().__init__(message)
        self.message = message
        self.hint = hint


class ConfigurationError(OnboardKitError):
    """Raised when settings are missing or invalid."""


class AuthError(OnboardKitError):
    """Missing, expired or unrefreshable credential. Requires re-authentication."""


class SpecError(OnboardKitError):
    """The spec could not be read, parsed, or validated."""

    def __init__(
        self,
        message: str,
        issues: tuple[ValidationIssue, ...] = (),
        hint: str | None = None,
    ):
        super().__init__(message, hint)
        self.issues = issues


# =============================================================================
# AI PROVIDER
# =============================================================================


class AIProviderError(OnboardKitError):
    """Failure talking to the AI provider."""


class AINetworkError(AIProviderError):
    """Connection failure or 5xx response."""

    retryable = True


class AITimeoutError(AIProviderError):
    """The provider did not answer within the configured timeout."""

    retryable = True


class AIRateLimitError(AIProviderError):
    """HTTP 429. ``retry_after`` is the server's suggested wait in seconds."""

    retryable = True

    def __init__(self, message: str, retry_after: float | None = None):
        super().__init__(message, hint="Wait a moment and run the command again.")
        self.retry_after = retry_after


class AIAuthenticationError(AIProviderError):
    """The provider rejected the credential (401/403)."""

    def __init__(self, message: str):
        super().__init__(message, hint='Run "onboardkit auth login" to re-authenticate.')


class AIResponseError(AIProviderError):
    """The provider answered but the response could not be parsed."""

    def __init__(self, message: str, raw_response: str = ""):
        super().__init__(message)
        self.raw_response = raw_response


# =============================================================================
# FILESYSTEM / INTERNAL
# =============================================================================


class FileSystemError(OnboardKitError):
    """Permission problems, full disks, or other write failures."""


class DirectoryExistsError(FileSystemError):
    """The output directory exists and overwrite was not requested."""

    def __init__(self, path: str):
        super().__init__(
            f"Output directory already exists: {path}",
            hint="Use --overwrite to replace it or choose a different --output.",
        )
        self.path = path


class InternalError(OnboardKitError):
    """Unexpected defect. Full detail is only shown in verbose mode."""

    def __init__(self, message: str, detail: str = ""):
        super().__init__(message, hint="Re-run with --verbose for details.")
        self.detail = detail
