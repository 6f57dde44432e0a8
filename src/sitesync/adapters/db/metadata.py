"""The `MetaData` every SITESYNC table attaches to.

Constraint names follow a fixed convention so migrations written by hand and
tables declared in `sitesync.adapters.stores.schema` agree on them:
``pk_<table>``, ``uq_<table>_<columns>``, ``ck_<table>_<name>`` and
``ix_<table>_<columns>``.
"""

from sqlalchemy import MetaData

NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "ix": "ix_%(table_name)s_%(column_0_N_label)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
