"""
Waitwhile API key lookup and storage in the system keyring.
"""

from __future__ import annotations

import logging
import os
from typing import Mapping, Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from ..domain.exceptions import ApiKeyError

logger = logging.getLogger(__name__)

KEYRING_SERVICE_NAME = "waitwhileslots"
API_KEY_ENV_VAR = "WAITWHILE_API_KEY"


class ApiKeyStore:
    """
    Resolves the API key for a waitlist.

    Lookup order: explicit config value, ``WAITWHILE_API_KEY``, keyring.
    """

    def __init__(self, waitlist_id: str, environ: Optional[Mapping[str, str]] = None):
        self.waitlist_id = waitlist_id
        self._environ = os.environ if environ is None else environ

    def resolve(self, configured: Optional[str] = None) -> str:
        """
        Return the API key to use.

        Raises:
            ApiKeyError: If no key is configured anywhere
        """
        if configured:
            return configured

        from_env = self._environ.get(API_KEY_ENV_VAR)
        if from_env:
            return from_env

        stored = self.load()
        if stored:
            return stored

        raise ApiKeyError(
            "No Waitwhile API key found. Set api_key in config.yaml, "
            f"export {API_KEY_ENV_VAR} or run 'waitwhileslots set-api-key'."
        )

    def load(self) -> Optional[str]:
        try:
            return keyring.get_password(KEYRING_SERVICE_NAME, self.waitlist_id)
        except KeyringError as exc:  # pragma: no cover - environment dependent
            logger.warning("Reading API key from keyring failed: %s", exc)
            return None

    def save(self, api_key: str) -> None:
        """
        Store the API key for this waitlist.

        Raises:
            ApiKeyError: If no keyring backend can store it
        """
        try:
            keyring.set_password(KEYRING_SERVICE_NAME, self.waitlist_id, api_key)
        except KeyringError as exc:
            raise ApiKeyError(f"Could not store API key in keyring: {exc}") from exc

    def clear(self) -> None:
        """Remove the stored key; a missing key is not an error."""
        try:
            keyring.delete_password(KEYRING_SERVICE_NAME, self.waitlist_id)
        except PasswordDeleteError:
            logger.debug("No stored API key for waitlist %s", self.waitlist_id)
        except KeyringError as exc:  # pragma: no cover - environment dependent
            logger.warning("Could not remove API key from keyring: %s", exc)
