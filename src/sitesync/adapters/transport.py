"""Transport adapters.

- `JsonLinesTransport` writes one JSON document per action to a text stream
  (stdout in the CLI), keeping output machine-readable.
- `InMemoryTransport` records the batches it receives, for tests.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import TextIO

from sitesync.domain.checksum import stable_serialize
from sitesync.domain.errors import UnserializableValueError
from sitesync.interfaces.transport import OutgoingAction, Transport, TransportError


class JsonLinesTransport(Transport):
    """Write each action as a JSON line to ``stream``."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream

    def send(self, actions: Sequence[OutgoingAction]) -> None:
        lines = []
        for action in actions:
            document = {
                "id": action.item_id,
                "action": action.action,
                "payload": action.payload,
            }
            try:
                lines.append(stable_serialize(document))
            except UnserializableValueError as e:
                raise TransportError(str(e)) from e
        try:
            for line in lines:
                self.stream.write(line + "\n")
            self.stream.flush()
        except (OSError, ValueError) as e:
            # ValueError: writing to a closed stream
            raise TransportError(str(e)) from e


class InMemoryTransport(Transport):
    """Record delivered batches in `batches`."""

    def __init__(self) -> None:
        self.batches: list[list[OutgoingAction]] = []

    def send(self, actions: Sequence[OutgoingAction]) -> None:
        # payloads must survive a JSON round trip like they would on the wire
        try:
            json.dumps([action.payload for action in actions])
        except (TypeError, ValueError) as e:
            raise TransportError(str(e)) from e
        self.batches.append(list(actions))

    @property
    def sent(self) -> list[OutgoingAction]:
        """All delivered actions, in delivery order."""
        return [action for batch in self.batches for action in batch]
