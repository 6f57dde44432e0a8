"""Option store port.

A persistent name → value mapping for site options. Values are JSON
documents (``None`` is a legal value and is distinct from "absent" only
through `OptionStore.exists`).

Two write flavours exist:
- `update` stores an autoloaded option (small values read on every request);
- `update_raw` stores a non-autoloaded option (large blobs such as checksum
  maps) and `get_raw` reads it without going through any cache.

Adapters without a cache may implement raw and regular access identically,
but must still record the autoload flag.
"""

from __future__ import annotations

import abc
from typing import Any


class OptionStore(abc.ABC):
    """Contract for a persistent option store."""

    @abc.abstractmethod
    def get(self, name: str, default: Any = None) -> Any:
        """Return the value stored under ``name`` or ``default`` if absent."""

    @abc.abstractmethod
    def update(self, name: str, value: Any) -> bool:
        """Create or replace an autoloaded option.

        Returns:
            True if the stored value changed, False if it was already equal.

        Raises:
            InvalidNameError: If ``name`` is not a valid option name.
            InvalidValueError: If ``value`` cannot be stored.
        """

    @abc.abstractmethod
    def delete(self, name: str) -> bool:
        """Delete an option.

        Returns:
            True if an option was deleted, False if it did not exist.
        """

    @abc.abstractmethod
    def get_raw(self, name: str, default: Any = None) -> Any:
        """Return the value stored under ``name`` bypassing any cache."""

    @abc.abstractmethod
    def update_raw(self, name: str, value: Any) -> bool:
        """Create or replace a non-autoloaded option (see `update`)."""

    @abc.abstractmethod
    def exists(self, name: str) -> bool:
        """Return True if an option named ``name`` is stored."""

    @abc.abstractmethod
    def names(self) -> list[str]:
        """Return all option names, sorted."""
