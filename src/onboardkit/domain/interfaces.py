"""
Domain interfaces (Ports) for the onboarding workflow.

These abstract base classes define the contracts the workflow engine relies on.
Adapters in the infrastructure layer implement them; the engine never touches
files, networks or clocks directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from onboardkit.domain.models import (
        BatchWriteResult,
        Checkpoint,
        Credential,
        EnhancementResult,
        PhaseResult,
        RenderResult,
        RepairResult,
        SpecDocument,
        SpecValidation,
        ValidationIssue,
        WorkflowPhase,
    )


class ClockInterface(ABC):
    """Port for the current time. Injected so tests stay deterministic."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        pass


class CheckpointStoreInterface(ABC):
    """
    Port for checkpoint persistence.

    One checkpoint per spec file. Implementations must write atomically so a
    crash never leaves a torn record under the checkpoint path.
    """

    @abstractmethod
    def save(self, checkpoint: Checkpoint) -> None:
        """Persist the checkpoint, replacing any previous one for its spec."""
        pass

    @abstractmethod
    def load(self, spec_path: str) -> Checkpoint | None:
        """
        Load the checkpoint for a spec file.

        Returns:
            The checkpoint, or None when absent or unreadable
        """
        pass

    @abstractmethod
    def clear(self, spec_path: str) -> None:
        """Remove the checkpoint. Does nothing if none exists."""
        pass

    @abstractmethod
    def exists(self, spec_path: str) -> bool:
        pass


class SpecLoaderInterface(ABC):
    """Port for reading, parsing and validating spec documents."""

    @abstractmethod
    def read(self, spec_path: str) -> str:
        """
        Read raw spec source text.

        Raises:
            SpecError: If the file cannot be read
        """
        pass

    @abstractmethod
    def parse(self, source: str) -> dict[str, Any]:
        """Parse source text into an unvalidated spec document."""
        pass

    @abstractmethod
    def parse_and_validate(self, source: str) -> SpecValidation:
        """Parse and validate; schema violations are returned, not raised."""
        pass


class AIProviderInterface(ABC):
    """Port for a chat-style language model."""

    @abstractmethod
    def send_message(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        """
        Send a conversation and return the assistant's reply text.

        Args:
            messages: Conversation as role/content mappings
            temperature: Sampling temperature
            max_tokens: Upper bound on the reply length

        Raises:
            AIProviderError: On any provider failure
        """
        pass


class SpecOperationsInterface(ABC):
    """Port for AI-assisted spec repair and enhancement."""

    @abstractmethod
    def repair(
        self, spec: SpecDocument, errors: Sequence[ValidationIssue]
    ) -> RepairResult:
        """Fix validation errors in a spec."""
        pass

    @abstractmethod
    def enhance(self, spec: SpecDocument) -> EnhancementResult:
        """Improve the copy of a valid spec."""
        pass


class TemplateRendererInterface(ABC):
    """Port for turning a spec into source files."""

    @abstractmethod
    def render(self, spec: SpecDocument) -> RenderResult:
        pass

    @abstractmethod
    def render_design_prompts(self, spec: SpecDocument) -> Mapping[str, str]:
        """Return one markdown design prompt per screen, keyed by relative path."""
        pass


class OutputWriterInterface(ABC):
    """Port for writing generated files to disk."""

    @abstractmethod
    def prepare(self, root: str, *, overwrite: bool, dry_run: bool) -> None:
        """
        Make sure the output directory can be written.

        Raises:
            DirectoryExistsError: If root exists and overwrite is False
        """
        pass

    @abstractmethod
    def write_all(
        self, files: Mapping[str, str], root: str, *, dry_run: bool
    ) -> BatchWriteResult:
        """Write every file atomically. One failure never stops the others."""
        pass

    @abstractmethod
    def write_metadata(
        self, root: str, metadata: Mapping[str, Any], *, dry_run: bool
    ) -> str | None:
        """Write the run metadata sidecar; returns its path (None on dry run)."""
        pass


class CredentialStoreInterface(ABC):
    """Port for stored provider credentials."""

    @abstractmethod
    def list_providers(self) -> list[str]:
        pass

    @abstractmethod
    def get(self, provider: str) -> Credential | None:
        pass

    @abstractmethod
    def save(self, credential: Credential) -> None:
        pass

    @abstractmethod
    def delete(self, provider: str) -> None:
        pass


class TokenRefresherInterface(ABC):
    """Port for exchanging a refresh token for a fresh access token."""

    @abstractmethod
    def refresh(self, credential: Credential) -> Credential:
        """
        Raises:
            AuthError: If the refresh is rejected or fails
        """
        pass


class ResumePromptInterface(ABC):
    """Port for asking whether to resume from a checkpoint."""

    @abstractmethod
    def confirm_resume(self, checkpoint: Checkpoint, age: str) -> bool:
        """Return True to resume. Cancelling counts as declining."""
        pass


class ProgressListenerInterface(ABC):
    """Port notified as the orchestrator moves through phases."""

    @abstractmethod
    def phase_started(self, phase: WorkflowPhase) -> None:
        pass

    @abstractmethod
    def phase_finished(
        self, phase: WorkflowPhase, result: PhaseResult, elapsed: float
    ) -> None:
        pass
