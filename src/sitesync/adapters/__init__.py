"""Adapters (infrastructure) for SITESYNC.

Provide concrete implementations of the interfaces (option/transient stores,
the sync queue, clocks, ID generators, execution context, transports), plus
persistence mapping and related wiring (engines, metadata, migrations).

Dependency rule: may import `sitesync.interfaces` and `sitesync.domain`;
neither of those may import this package.
"""
