"""Transient store port.

Expiring key-value entries. An entry whose expiry has passed reads as absent
and may be purged lazily by the adapter. A TTL of ``0`` means "never expires".
Expiry is measured with the adapter's injected `Clock`.
"""

from __future__ import annotations

import abc
from typing import Any


class TransientStore(abc.ABC):
    """Contract for an expiring key-value store."""

    @abc.abstractmethod
    def get(self, name: str) -> Any:
        """Return the live value stored under ``name`` or None if absent/expired."""

    @abc.abstractmethod
    def set(self, name: str, value: Any, ttl: float = 0) -> None:
        """Store ``value`` under ``name`` for ``ttl`` seconds (0 = no expiry).

        Raises:
            InvalidNameError: If ``name`` is not a valid transient name.
            InvalidValueError: If ``value`` cannot be stored.
            ValueError: If ``ttl`` is negative.
        """

    @abc.abstractmethod
    def delete(self, name: str) -> bool:
        """Delete a transient; returns True if a live entry was removed."""

    @abc.abstractmethod
    def expires_at(self, name: str) -> float | None:
        """Return the POSIX expiry time of a live entry.

        Returns None if the entry is absent, expired, or never expires.
        """
