"""
Storage for the OpenAI API key.

The generator only ever calls get(); set() and delete() back the
'set-key' and 'clear-key' commands.
"""

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from dotenv import get_key, set_key, unset_key

from config import CREDENTIAL_SETTINGS

logger = logging.getLogger(__name__)


class CredentialStore(ABC):
    """Named secrets: get/set/delete."""

    @abstractmethod
    def get(self, name):
        """Return the secret, or None when it is not stored."""

    @abstractmethod
    def set(self, name, secret):
        """Store a secret. Returns False when it could not be saved."""

    @abstractmethod
    def delete(self, name):
        """Remove a secret. Returns True when it is gone."""


class EnvFileCredentialStore(CredentialStore):
    """
    Keeps secrets in a .env file, like the one load_dotenv() reads.

    get() falls back to the process environment so a key exported in the
    shell works without running 'set-key' first.
    """

    def __init__(self, path=CREDENTIAL_SETTINGS["env_file"]):
        self.path = Path(path)

    def get(self, name):
        value = None
        if self.path.exists():
            value = get_key(self.path, name)
        if not value:
            value = os.environ.get(name)
        return value or None

    def set(self, name, secret):
        secret = (secret or "").strip()
        if not secret:
            return False
        try:
            self.path.touch(mode=0o600, exist_ok=True)
            success, _, _ = set_key(self.path, name, secret)
        except OSError as e:
            logger.error("Failed to save %s to %s: %s", name, self.path, e)
            return False
        return bool(success)

    def delete(self, name):
        if not self.path.exists() or get_key(self.path, name) is None:
            return True
        try:
            success, _ = unset_key(self.path, name)
        except OSError as e:
            logger.error("Failed to remove %s from %s: %s", name, self.path, e)
            return False
        return bool(success)


class MemoryCredentialStore(CredentialStore):
    """In-process store, handy for tests and embedding."""

    def __init__(self, secrets=None):
        self._secrets = dict(secrets or {})

    def get(self, name):
        return self._secrets.get(name)

    def set(self, name, secret):
        secret = (secret or "").strip()
        if not secret:
            return False
        self._secrets[name] = secret
        return True

    def delete(self, name):
        self._secrets.pop(name, None)
        return True
