"""
OpenAI-compatible chat provider.

Works with any endpoint speaking the OpenAI chat completions API. Provider
exceptions are translated into the domain's AI error taxonomy so the retry
policy can tell transient failures from permanent ones.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, cast

import openai
from openai import OpenAI

from onboardkit.domain.exceptions import (
    AIAuthenticationError,
    AINetworkError,
    AIProviderError,
    AIRateLimitError,
    AIResponseError,
    AITimeoutError,
)
from onboardkit.domain.interfaces import AIProviderInterface

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"


@dataclass
class OpenAIProviderConfig:
    """Configuration for OpenAIChatProvider.

    This typed config ensures unknown fields are rejected at construction time.
    """

    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0


def _retry_after(error: openai.APIStatusError) -> float | None:
    value = error.response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def translate_error(error: Exception) -> AIProviderError:
    """Map an openai exception onto the AI error taxonomy."""
    if isinstance(error, openai.APITimeoutError):
        return AITimeoutError(f"AI request timed out: {error}")
    if isinstance(error, openai.APIConnectionError):
        return AINetworkError(f"Could not reach AI provider: {error}")
    if isinstance(error, openai.RateLimitError):
        return AIRateLimitError("AI provider rate limit exceeded", _retry_after(error))
    if isinstance(error, openai.AuthenticationError | openai.PermissionDeniedError):
        return AIAuthenticationError(f"AI provider rejected the credential: {error}")
    if isinstance(error, openai.APIStatusError):
        if error.status_code >= 500:
            return AINetworkError(f"AI provider error {error.status_code}: {error}")
        return AIProviderError(f"AI request failed ({error.status_code}): {error}")
    return AIProviderError(f"AI request failed: {error}")


class OpenAIChatProvider(AIProviderInterface):
    """Sends conversations to an OpenAI-compatible chat endpoint."""

    config_class = OpenAIProviderConfig

    def __init__(
        self,
        config: OpenAIProviderConfig | None = None,
        token_source: Callable[[], str] | None = None,
        api_key: str | None = None,
    ):
        """
        Args:
            config: Typed configuration object
            token_source: Called on first use to obtain the API token
            api_key: Static API token (used when no token_source is given)
        """
        if token_source is None and api_key is None:
            raise ValueError("Either token_source or api_key is required")
        self._config = config or OpenAIProviderConfig()
        self._token_source = token_source
        self._api_key = api_key
        self._client: OpenAI | None = None

    def _get_client(self) -> OpenAI:
        if self._client is None:
            api_key = self._token_source() if self._token_source else self._api_key
            self._client = OpenAI(
                base_url=self._config.base_url,
                api_key=api_key,
                timeout=self._config.timeout,
                max_retries=0,  # retries are handled by the retry policy
            )
        return self._client

    def send_message(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        client = self._get_client()
        logger.debug(
            "Sending %d messages to %s (model=%s)",
            len(messages),
            self._config.base_url,
            self._config.model,
        )
        try:
            response = client.chat.completions.create(
                model=self._config.model,
                messages=cast(Any, [dict(m) for m in messages]),
                temperature=temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as e:
            raise translate_error(e) from e

        if not response.choices:
            raise AIResponseError("AI provider returned no choices")
        content = response.choices[0].message.content or ""
        if not content.strip():
            raise AIResponseError("AI provider returned an empty response")
        return content
