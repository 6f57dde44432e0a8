"""Stable serialization and checksums for callable values.

Values are compared by the checksum of their serialized form rather than by
equality: producers may return structures whose native comparison is
unreliable (ordering of mappings, sets, numeric values returned as text).

The serialized form is canonical JSON:
- mapping keys stringified as JSON does, then sorted; no insignificant whitespace;
- sets and frozensets become sorted lists;
- tuples become lists;
- dataclass instances become mappings of their fields;
- dates/times use ISO 8601; paths use their string form.

Checksums are unsigned 32-bit CRCs of the UTF-8 encoded serialized form.
"""

from __future__ import annotations

import dataclasses
import json
import zlib
from datetime import date, datetime, time
from pathlib import PurePath
from typing import Any

from .errors import UnserializableValueError


def _encode_default(value: Any) -> Any:
    if isinstance(value, (set, frozenset)):
        return sorted(value, key=stable_serialize)
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, PurePath):
        return str(value)
    raise UnserializableValueError(value)


def canonical_value(value: Any) -> Any:
    """Return ``value`` as plain JSON data (dicts, lists and scalars).

    Mapping keys become strings the way JSON writes them (``1`` -> ``"1"``,
    ``True`` -> ``"true"``), so mixed key types are accepted. The result is
    what gets checksummed and what is sent.

    Raises:
        UnserializableValueError: If the value (or a nested value) has no
            canonical form.
    """
    try:
        return json.loads(
            json.dumps(value, ensure_ascii=False, default=_encode_default)
        )
    except UnserializableValueError:
        raise
    except (TypeError, ValueError) as e:
        # unsupported key types, or circular references
        raise UnserializableValueError(value) from e


def stable_serialize(value: Any) -> str:
    """Serialize ``value`` to canonical JSON text."""
    return json.dumps(
        canonical_value(value),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def checksum(value: Any) -> int:
    """Return the checksum of ``value``'s stable serialized form."""
    return zlib.crc32(stable_serialize(value).encode("utf-8"))
