"""
File-backed credential storage.

All providers share one JSON file, written atomically and readable only by
the current user:

{home}/credentials.json
    {"version": "1.0", "credentials": {"openai": {...}}}
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from onboardkit.domain.exceptions import ConfigurationError
from onboardkit.domain.interfaces import CredentialStoreInterface
from onboardkit.domain.models import Credential
from onboardkit.infrastructure.persistence.checkpoint import write_json_atomic

logger = logging.getLogger(__name__)

CREDENTIALS_FILENAME = "credentials.json"
CREDENTIALS_MODE = 0o600
HOME_MODE = 0o700


def credential_to_dict(credential: Credential) -> dict[str, Any]:
    return {
        "provider": credential.provider,
        "accessToken": credential.access_token,
        "refreshToken": credential.refresh_token,
        "expiresAt": credential.expires_at,
        "createdAt": credential.created_at,
        "updatedAt": credential.updated_at,
    }


def credential_from_dict(data: dict[str, Any]) -> Credential:
    return Credential(
        provider=data["provider"],
        access_token=data["accessToken"],
        refresh_token=data.get("refreshToken"),
        expires_at=data.get("expiresAt"),
        created_at=data.get("createdAt", ""),
        updated_at=data.get("updatedAt", ""),
    )


class FileCredentialStore(CredentialStoreInterface):
    """Stores credentials in {home}/credentials.json."""

    def __init__(self, home: str | Path):
        self._path = Path(home) / CREDENTIALS_FILENAME

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Credentials file is unreadable: {self._path}: {e}",
                hint='Delete it and run "onboardkit auth login" again.',
            ) from e
        credentials = data.get("credentials", {}) if isinstance(data, dict) else {}
        return credentials if isinstance(credentials, dict) else {}

    def _write(self, credentials: dict[str, dict[str, Any]]) -> None:
        self._path.parent.mkdir(mode=HOME_MODE, parents=True, exist_ok=True)
        write_json_atomic(
            self._path,
            {"version": "1.0", "credentials": credentials},
            mode=CREDENTIALS_MODE,
        )

    def list_providers(self) -> list[str]:
        return sorted(self._read())

    def get(self, provider: str) -> Credential | None:
        data = self._read().get(provider)
        if data is None:
            return None
        try:
            return credential_from_dict(data)
        except (KeyError, TypeError) as e:
            logger.warning("Ignoring malformed credential for %s: %s", provider, e)
            return None

    def save(self, credential: Credential) -> None:
        credentials = self._read()
        credentials[credential.provider] = credential_to_dict(credential)
        self._write(credentials)

    def delete(self, provider: str) -> None:
        credentials = self._read()
        if credentials.pop(provider, None) is not None:
            self._write(credentials)


class InMemoryCredentialStore(CredentialStoreInterface):
    """Credential store for tests and ephemeral runs."""

    def __init__(self, credentials: list[Credential] | None = None) -> None:
        self._credentials = {c.provider: c for c in credentials or []}

    def list_providers(self) -> list[str]:
        return sorted(self._credentials)

    def get(self, provider: str) -> Credential | None:
        return self._credentials.get(provider)

    def save(self, credential: Credential) -> None:
        self._credentials[credential.provider] = credential

    def delete(self, provider: str) -> None:
        self._credentials.pop(provider, None)
