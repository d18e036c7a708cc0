"""Secure credential storage using the system keychain.

The provider API key is kept out of the config file whenever a keychain is
available (macOS Keychain, Windows Credential Locker, Linux Secret Service).

Usage:
    from gitscribe.credentials import CredentialStore, CredentialType

    store = CredentialStore()

    # Get a credential (checks env → keychain)
    key = store.get(CredentialType.API_KEY)

    # Store a credential
    store.set(CredentialType.API_KEY, key)
"""

from __future__ import annotations

import logging
import os
from enum import Enum

import keyring
import keyring.backends.fail
import keyring.errors

logger = logging.getLogger(__name__)

# Service name used for all keychain entries
SERVICE_NAME = "gitscribe"


class CredentialType(str, Enum):
    """Credential kinds gitscribe stores."""

    API_KEY = "api-key"


ENV_VAR_MAPPING: dict[str, str] = {
    "api-key": "GITSCRIBE_API_KEY",
}


def _key(credential_type: str | CredentialType) -> str:
    if isinstance(credential_type, CredentialType):
        return credential_type.value
    return credential_type


def env_var_for(credential_type: str | CredentialType) -> str:
    """Environment variable that overrides the keychain entry."""
    key = _key(credential_type)
    return ENV_VAR_MAPPING.get(key, f"GITSCRIBE_{key.upper().replace('-', '_')}")


class CredentialStore:
    """Credential storage with keychain and environment fallback.

    Priority order for credential resolution:
    1. Environment variable (for CI/automation)
    2. System keychain
    """

    def __init__(self, service_name: str = SERVICE_NAME) -> None:
        self.service_name = service_name

    def get(self, credential_type: str | CredentialType) -> str | None:
        """Get a credential, checking env → keychain.

        Args:
            credential_type: Type of credential

        Returns:
            The credential string, or None if not found
        """
        key = _key(credential_type)

        env_value = os.environ.get(env_var_for(key))
        if env_value:
            return env_value

        try:
            return keyring.get_password(self.service_name, key)
        except keyring.errors.KeyringError as e:
            # Keychain not available (e.g., headless CI without keychain)
            logger.debug("Keychain lookup for %s failed: %s", key, e)
            return None

    def set(self, credential_type: str | CredentialType, value: str) -> bool:
        """Store a credential in the system keychain.

        Args:
            credential_type: Type of credential
            value: The credential value to store

        Returns:
            True if stored successfully, False if keychain unavailable
        """
        key = _key(credential_type)
        try:
            keyring.set_password(self.service_name, key, value)
            return True
        except keyring.errors.KeyringError as e:
            logger.debug("Keychain write for %s failed: %s", key, e)
            return False

    def delete(self, credential_type: str | CredentialType) -> bool:
        """Delete a credential from the system keychain.

        Returns:
            True if deleted successfully, False otherwise
        """
        key = _key(credential_type)
        try:
            keyring.delete_password(self.service_name, key)
            return True
        except keyring.errors.PasswordDeleteError:
            # Password didn't exist
            return False
        except keyring.errors.KeyringError:
            return False

    def exists(self, credential_type: str | CredentialType) -> bool:
        """Check if a credential exists in env or keychain."""
        return self.get(credential_type) is not None

    def keychain_available(self) -> bool:
        """Check whether keyring found a usable system keychain."""
        return not isinstance(keyring.get_keyring(), keyring.backends.fail.Keyring)

    def backend_name(self) -> str:
        """Human-readable name of the active keyring backend."""
        backend = keyring.get_keyring()
        return str(getattr(backend, "name", type(backend).__name__))
