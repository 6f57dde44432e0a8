"""SITESYNC

Tracks computed ("callable") site state and enqueues the values that changed
since the last pass for delivery to a remote sync service. Change detection is
checksum based and throttled by a time-locked debounce window.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
