"""SITESYNC command-line interface."""
