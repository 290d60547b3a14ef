"""
Infrastructure layer for onboardkit.

Contains adapters for external concerns (persistence, AI providers,
credentials, templates, output).
"""

from onboardkit.infrastructure.auth import FileCredentialStore, OAuthTokenRefresher
from onboardkit.infrastructure.clock import SystemClock
from onboardkit.infrastructure.llm import (
    AISpecOperations,
    MockProvider,
    OpenAIChatProvider,
)
from onboardkit.infrastructure.output import FilesystemOutputWriter
from onboardkit.infrastructure.persistence import (
    FilesystemCheckpointStore,
    InMemoryCheckpointStore,
)
from onboardkit.infrastructure.rendering import JinjaTemplateRenderer
from onboardkit.infrastructure.spec import MarkdownSpecLoader

__all__ = [
    # Persistence
    "FilesystemCheckpointStore",
    "InMemoryCheckpointStore",
    # AI
    "AISpecOperations",
    "MockProvider",
    "OpenAIChatProvider",
    # Adapters
    "FileCredentialStore",
    "FilesystemOutputWriter",
    "JinjaTemplateRenderer",
    "MarkdownSpecLoader",
    "OAuthTokenRefresher",
    "SystemClock",
]
