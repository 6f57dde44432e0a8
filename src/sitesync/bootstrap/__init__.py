"""Bootstrap (composition root) for SITESYNC.

Assembles the application at runtime: wires concrete adapters (unit of work,
clock, identity, transport) to the sync modules and the service-layer
handlers, registers the modules' hooks, and returns an `AppContainer` for
entrypoints.

Import rules:
- Entry points import *this* package (not adapters/service_layer/interfaces/domain).
- This package may import: `sitesync.adapters`, `sitesync.service_layer`,
  `sitesync.interfaces`, `sitesync.domain`, and `sitesync.config`.
- Inner layers must not import `sitesync.bootstrap`.
"""

from .bootstrap import AppContainer, bootstrap

__all__ = ["AppContainer", "bootstrap"]
