"""Interfaces (application boundary) for SITESYNC.

Defines framework-free application contracts: ABCs and small DTOs shared by
the service layer and adapters (key-value stores, the sync queue, clocks, ID
generators, execution context, identity switching, transports).
Business rules stay out of this package.

Dependency rule: this package is independent; do not import from other
`sitesync.*` packages. It may be imported by `sitesync.service_layer`,
`sitesync.adapters`, and `sitesync.bootstrap`.
"""
