"""Domain-level errors."""


class DomainError(Exception):
    """Base class for SITESYNC domain errors."""


class UnserializableValueError(DomainError, TypeError):
    """A callable produced a value that has no stable serialized form."""

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Value of type {type(value).__name__} cannot be serialized for checksumming"
        )
        self.value = value
