"""
Mock AI provider for testing without a network.

Returns predefined responses in sequence. A response may be an exception
instance, which is raised instead of returned.
"""

from collections.abc import Mapping, Sequence

from onboardkit.domain.interfaces import AIProviderInterface


class MockProvider(AIProviderInterface):
    """Returns predefined responses for testing."""

    def __init__(self, responses: list[str | Exception]):
        """
        Args:
            responses: Response strings (or errors to raise) in call order
        """
        self._responses = responses
        self._call_count = 0
        self.requests: list[list[dict[str, str]]] = []

    def send_message(
        self,
        messages: Sequence[Mapping[str, str]],
        *,
        temperature: float = 0.7,
        max_tokens: int = 4096,
    ) -> str:
        """Return the next predefined response."""
        if self._call_count >= len(self._responses):
            raise RuntimeError("MockProvider exhausted responses")

        self.requests.append([dict(m) for m in messages])
        response = self._responses[self._call_count]
        self._call_count += 1

        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return self._call_count

    def reset(self) -> None:
        self._call_count = 0
        self.requests.clear()
