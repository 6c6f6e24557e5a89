"""
Round-robin rotation over the configured API keys.
"""
import threading
from typing import Iterable

from .exceptions import ConfigurationError


class KeyRotationPool:
    """Hands out credentials in turn to spread rate-limit exposure."""

    def __init__(self, keys: Iterable[str], cursor: int = 0):
        self._keys = tuple(keys)
        self._cursor = cursor % len(self._keys) if self._keys else 0
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._keys)

    @property
    def cursor(self) -> int:
        """Index of the credential the next call will return."""
        return self._cursor

    def next(self) -> str:
        """
        Return the credential at the cursor and advance the cursor.

        Raises:
            ConfigurationError: If no credentials are configured
        """
        if not self._keys:
            raise ConfigurationError("No API credentials available")

        with self._lock:
            key = self._keys[self._cursor]
            self._cursor = (self._cursor + 1) % len(self._keys)
        return key
