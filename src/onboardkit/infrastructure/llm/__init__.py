"""
AI provider adapters and spec operations.
"""

from onboardkit.infrastructure.llm.mock import MockProvider
from onboardkit.infrastructure.llm.openai_provider import (
    OpenAIChatProvider,
    OpenAIProviderConfig,
)
from onboardkit.infrastructure.llm.operations import AISpecOperations
from onboardkit.infrastructure.llm.retry import RetryPolicy, call_with_retry

__all__ = [
    "AISpecOperations",
    "MockProvider",
    "OpenAIChatProvider",
    "OpenAIProviderConfig",
    "RetryPolicy",
    "call_with_retry",
]
