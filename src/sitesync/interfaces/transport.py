"""Transport port: delivers drained queue items to the remote sync service."""

from __future__ import annotations

import abc
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

# pylint: disable=too-few-public-methods


class TransportError(Exception):
    """Delivery failed; the items stay queued."""


@dataclass(frozen=True, slots=True)
class OutgoingAction:
    """A queue item after the ``before_send_<action>`` filter ran."""

    item_id: str
    action: str
    payload: Any


class Transport(abc.ABC):
    """Contract for delivering a batch of actions."""

    @abc.abstractmethod
    def send(self, actions: Sequence[OutgoingAction]) -> None:
        """Deliver ``actions`` in order.

        Raises:
            TransportError: If the batch could not be delivered.
        """
