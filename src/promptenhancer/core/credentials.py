"""API key lookup.

Secret persistence belongs to the host; the pipeline only reads a key.
"""

import logging
import os
from typing import Dict, Optional, Protocol


logger = logging.getLogger(__name__)

DEFAULT_KEY_NAME = "openaiApiKey"


class CredentialStore(Protocol):
    """Read/write access to stored secrets."""

    def get(self, name: str = DEFAULT_KEY_NAME) -> Optional[str]:
        ...

    def store(self, name: str, value: str) -> None:
        ...


class MemoryCredentialStore:
    """Process-local secret store."""

    def __init__(self, secrets: Optional[Dict[str, str]] = None):
        self._secrets: Dict[str, str] = dict(secrets or {})

    def get(self, name: str = DEFAULT_KEY_NAME) -> Optional[str]:
        return self._secrets.get(name)

    def store(self, name: str, value: str) -> None:
        self._secrets[name] = value


class EnvironmentCredentialStore:
    """Reads the API key from an environment variable (``OPENAI_API_KEY`` by default)."""

    def __init__(self, env_var: str = "OPENAI_API_KEY"):
        self.env_var = env_var

    def get(self, name: str = DEFAULT_KEY_NAME) -> Optional[str]:
        return os.environ.get(self.env_var)

    def store(self, name: str, value: str) -> None:
        os.environ[self.env_var] = value


def resolve_api_key(
    store: Optional[CredentialStore] = None,
    configured: Optional[str] = None,
    name: str = DEFAULT_KEY_NAME,
) -> Optional[str]:
    """
    Resolve the API key.

    Priority order:
    1. Value held by the credential store
    2. Plaintext key from configuration
    3. None

    Args:
        store: Secret store to consult first
        configured: Plaintext fallback from settings
        name: Secret name in the store

    Returns:
        The API key, or None if none is available
    """
    if store is not None:
        value = store.get(name)
        if value and value.strip():
            logger.debug("Using API key from credential store")
            return value.strip()

    if configured and configured.strip():
        logger.debug("Using API key from configuration")
        return configured.strip()

    return None
