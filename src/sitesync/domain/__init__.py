"""Domain layer for SITESYNC.

Pure, framework-free helpers that define how site state is compared and
normalized: stable serialization, checksums and URL scheme normalization.
Nothing here performs I/O.
"""
