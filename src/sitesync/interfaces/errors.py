"""Exceptions shared by the storage ports."""


class StoreError(Exception):
    """Base class for SITESYNC storage errors."""


class StoreUnavailableError(StoreError):
    """Operational/timeout/connection errors; callers may retry."""


class InvalidValueError(StoreError):
    """The value cannot be persisted (e.g. not JSON-serializable)."""


class InvalidNameError(StoreError, ValueError):
    """Option/transient names must be non-empty and at most 191 characters."""


MAX_NAME_LENGTH = 191


def validate_name(name: str) -> str:
    """Return ``name`` if it is a valid option/transient name.

    Raises:
        InvalidNameError: If the name is empty, whitespace-only or too long.
    """
    if not name or not name.strip():
        raise InvalidNameError("name must be non-empty")
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidNameError(f"name must be at most {MAX_NAME_LENGTH} characters")
    return name
