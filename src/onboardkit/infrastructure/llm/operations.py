"""
AI spec operations: repair and enhancement over any chat provider.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from onboardkit.domain.interfaces import AIProviderInterface, SpecOperationsInterface
from onboardkit.domain.models import (
    EnhancementResult,
    RepairResult,
    SpecDocument,
    ValidationIssue,
)
from onboardkit.infrastructure.llm.prompts import (
    build_enhance_messages,
    build_repair_messages,
)
from onboardkit.infrastructure.llm.response_parser import (
    parse_enhance_response,
    parse_repair_response,
)
from onboardkit.infrastructure.llm.retry import RetryPolicy, call_with_retry

logger = logging.getLogger(__name__)

REPAIR_TEMPERATURE = 0.3
ENHANCE_TEMPERATURE = 0.7
MAX_TOKENS = 4096


class AISpecOperations(SpecOperationsInterface):
    """Repairs and enhances specs through an AI provider.

    Each provider request runs under the retry policy. Parsing happens after
    the request succeeds, so a malformed response is never retried.
    """

    def __init__(
        self,
        provider: AIProviderInterface,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], None] | None = None,
    ) -> None:
        self._provider = provider
        self._retry_policy = retry_policy or RetryPolicy()
        self._sleep = sleep

    def _send(self, messages: list[dict[str, str]], temperature: float) -> str:
        return call_with_retry(
            lambda: self._provider.send_message(
                messages, temperature=temperature, max_tokens=MAX_TOKENS
            ),
            self._retry_policy,
            sleep=self._sleep,
        )

    def repair(
        self, spec: SpecDocument, errors: Sequence[ValidationIssue]
    ) -> RepairResult:
        logger.info("Requesting AI repair for %d validation errors", len(errors))
        content = self._send(build_repair_messages(spec, errors), REPAIR_TEMPERATURE)
        result = parse_repair_response(content)
        logger.info("AI repair made %d changes", len(result.changes))
        return result

    def enhance(self, spec: SpecDocument) -> EnhancementResult:
        logger.info("Requesting AI enhancement")
        content = self._send(build_enhance_messages(spec), ENHANCE_TEMPERATURE)
        result = parse_enhance_response(content)
        logger.info("AI enhancement changed %d fields", len(result.enhancements))
        return result
