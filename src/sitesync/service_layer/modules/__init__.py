"""Sync modules.

A sync module owns one slice of site state: it decides what changed, fires
the actions that the listener enqueues, and takes part in full syncs.
"""

from .base import Module
from .callables import Callables

__all__ = ["Callables", "Module"]
