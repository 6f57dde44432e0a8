"""Entry points for SITESYNC (currently the command-line interface)."""
