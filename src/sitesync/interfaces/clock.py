"""Interface for clocks."""

import abc

# pylint: disable=too-few-public-methods


class Clock(abc.ABC):
    """Contract for a wall clock."""

    @abc.abstractmethod
    def now(self) -> float:
        """Return the current POSIX timestamp in seconds."""
