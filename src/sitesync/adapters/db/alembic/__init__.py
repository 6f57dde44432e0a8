"""Alembic migration scripts for SITESYNC (loaded via `config.build_alembic_config`)."""
