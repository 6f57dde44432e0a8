"""Global pytest fixtures for SITESYNC."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

# pylint: disable=unused-argument

pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.site",
]

TESTS_ROOT = Path(__file__).parent.resolve()

#: Default mark for every test under each top-level directory.
LAYER_MARKERS = {
    "unit": "unit",
    "contract": "contract",
    "integration": "integration",
    "functional": "functional",
    "e2e": "e2e",
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each item with its layer unless it already carries that mark."""
    for item in items:
        path = item.path.resolve()  # pytest>=8: pathlib.Path
        try:
            layer = path.relative_to(TESTS_ROOT).parts[0]
        except ValueError:
            continue
        if (marker_name := LAYER_MARKERS.get(layer)) is None:
            continue
        if not any(marker.name == marker_name for marker in item.iter_markers()):
            item.add_marker(getattr(pytest.mark, marker_name))


# Helper to route to an existing engine fixture by name
@pytest.fixture
def engine(request: pytest.FixtureRequest) -> Engine:
    """Indirection fixture to parametrize over engine-providing fixtures.

    Example:
        ```py
        @pytest.mark.parametrize("engine", ["sqlite_engine_memory", "sqlite_engine_file"], indirect=True)
        def test_something(engine): ...
        ```
    """
    return request.getfixturevalue(request.param)
