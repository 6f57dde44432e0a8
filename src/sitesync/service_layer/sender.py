"""Sender: drains the sync queue to a transport.

Each `Sender.do_sync` call:

1. fires ``before_send_queue_sync`` so modules can enqueue last-moment
   changes (the callables module runs its pass here);
2. peeks up to ``limit`` items, oldest first;
3. runs each item's args through the ``before_send_<action>`` filter. A
   filter returning ``False`` drops the item without sending it;
4. hands the batch to the transport and removes the items once it returns.

If the transport raises, the items stay queued.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sitesync.interfaces.transport import OutgoingAction, Transport
from sitesync.interfaces.unit_of_work import AbstractUnitOfWork

from .hooks import Hooks
from .modules.callables import BEFORE_SEND_QUEUE_SYNC_ACTION, before_send_filter

logger = logging.getLogger(__name__)

DEFAULT_SEND_LIMIT = 100


@dataclass(frozen=True)
class SendResult:
    """Outcome of one `Sender.do_sync` call."""

    sent: int
    skipped: int
    remaining: int


class Sender:
    """Send queued actions.

    Args:
        uow: Unit of work holding the queue; it must be open during `do_sync`.
        hooks: Hook bus carrying the before-send action and filters.
    """

    def __init__(self, uow: AbstractUnitOfWork, hooks: Hooks) -> None:
        self.uow = uow
        self.hooks = hooks

    def do_sync(self, transport: Transport, limit: int = DEFAULT_SEND_LIMIT) -> SendResult:
        self.hooks.do_action(BEFORE_SEND_QUEUE_SYNC_ACTION)

        items = self.uow.queue.peek(limit)
        outgoing = []
        skipped = []
        for item in items:
            payload = self.hooks.apply_filters(
                before_send_filter(item.action), item.args, item.item_id
            )
            if payload is False:
                skipped.append(item.item_id)
                continue
            outgoing.append(OutgoingAction(item.item_id, item.action, payload))

        if outgoing:
            transport.send(outgoing)
        self.uow.queue.remove([a.item_id for a in outgoing] + skipped)

        result = SendResult(
            sent=len(outgoing), skipped=len(skipped), remaining=self.uow.queue.size()
        )
        logger.info(
            "Sent %d action(s), skipped %d, %d remaining",
            result.sent,
            result.skipped,
            result.remaining,
        )
        return result
