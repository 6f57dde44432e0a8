"""Unit tests for the full sync driver."""

from sitesync.service_layer.full_sync import FullSyncStatus, enqueue_full_sync
from sitesync.service_layer.modules.base import Module

# pylint: disable=too-few-public-methods


class QuietModule(Module):
    """A module without full sync actions."""

    def name(self) -> str:
        return "quiet"


class ChunkedModule(Module):
    """A module that needs several rounds."""

    def name(self) -> str:
        return "chunked"

    def get_full_sync_actions(self):
        return ["full_sync_chunks"]

    def estimate_full_sync_actions(self, config):
        return 250

    def enqueue_full_sync_actions(self, config, max_items_to_enqueue, state):
        return max_items_to_enqueue, False


def test_modules_without_actions_are_skipped(open_uow, hooks, make_callables):
    """Only modules with full sync actions take part."""
    status = enqueue_full_sync([QuietModule(open_uow, hooks), make_callables({})])

    assert status.enqueued == {"functions": 1}
    assert status.estimated == {"functions": 1}
    assert status.is_finished


def test_unfinished_modules_are_reported(open_uow, hooks):
    """Progress is tracked per module."""
    status = enqueue_full_sync([ChunkedModule(open_uow, hooks)], max_items_to_enqueue=100)

    assert status.enqueued == {"chunked": 100}
    assert status.estimated == {"chunked": 250}
    assert not status.is_finished
    assert status.total_enqueued == 100


def test_empty_status_is_finished():
    """No modules means nothing left to do."""
    assert FullSyncStatus().is_finished
