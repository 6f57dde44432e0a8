"""JSON value normalization shared by the store adapters.

Every adapter stores values as JSON documents, so a value read back is the
JSON round trip of the value written (tuples come back as lists, mapping keys
as strings). Normalizing on write keeps in-memory and database adapters
indistinguishable to callers.
"""

from __future__ import annotations

import json
from typing import Any

from sitesync.interfaces.errors import InvalidValueError


def to_json_value(value: Any) -> Any:
    """Return the JSON round trip of ``value``.

    Raises:
        InvalidValueError: If ``value`` is not JSON-serializable.
    """
    try:
        return json.loads(json.dumps(value, allow_nan=False))
    except (TypeError, ValueError) as e:
        raise InvalidValueError(str(e)) from e
