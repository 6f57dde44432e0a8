"""Service layer for SITESYNC.

Orchestrates use cases: the hook bus, sync modules (change detection), the
listener that enqueues fired actions, the sender that drains the queue, and
the message bus that routes commands to handlers.

Dependency rule: may import `sitesync.domain` and `sitesync.interfaces`;
must not import `sitesync.adapters`, `sitesync.bootstrap` or entrypoints.
"""
