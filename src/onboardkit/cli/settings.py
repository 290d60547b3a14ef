"""Settings loaded from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from onboardkit.domain.exceptions import ConfigurationError
from onboardkit.infrastructure.llm.openai_provider import DEFAULT_BASE_URL, DEFAULT_MODEL

DEFAULT_PROVIDER = "openai"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Environment variables:
        ONBOARDKIT_HOME: Directory for credentials (default ~/.onboardkit)
        ONBOARDKIT_MODEL: Chat model name
        ONBOARDKIT_BASE_URL: OpenAI-compatible API base URL
        ONBOARDKIT_TIMEOUT: AI request timeout in seconds
        ONBOARDKIT_TOKEN_URL: OAuth token endpoint used to refresh tokens
        ONBOARDKIT_CLIENT_ID: OAuth client id sent with refresh requests
    """

    home: Path
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0
    token_url: str | None = None
    client_id: str | None = None


def _parse_timeout(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as e:
        raise ConfigurationError(f"ONBOARDKIT_TIMEOUT must be a number, got {raw!r}") from e
    if value <= 0:
        raise ConfigurationError("ONBOARDKIT_TIMEOUT must be positive")
    return value


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from environment variables.

    Args:
        env: Mapping to read from (defaults to os.environ)

    Returns:
        Settings instance

    Raises:
        ConfigurationError: If a variable has an invalid value
    """
    env = os.environ if env is None else env
    home = env.get("ONBOARDKIT_HOME") or str(Path.home() / ".onboardkit")
    return Settings(
        home=Path(home).expanduser(),
        model=env.get("ONBOARDKIT_MODEL") or DEFAULT_MODEL,
        base_url=env.get("ONBOARDKIT_BASE_URL") or DEFAULT_BASE_URL,
        timeout=_parse_timeout(env["ONBOARDKIT_TIMEOUT"])
        if env.get("ONBOARDKIT_TIMEOUT")
        else 60.0,
        token_url=env.get("ONBOARDKIT_TOKEN_URL") or None,
        client_id=env.get("ONBOARDKIT_CLIENT_ID") or None,
    )
