"""
Credential storage and token refresh.
"""

from onboardkit.infrastructure.auth.credentials import (
    FileCredentialStore,
    InMemoryCredentialStore,
)
from onboardkit.infrastructure.auth.refresh import OAuthTokenRefresher

__all__ = [
    "FileCredentialStore",
    "InMemoryCredentialStore",
    "OAuthTokenRefresher",
]
