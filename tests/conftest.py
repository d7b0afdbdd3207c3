from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from goalplanner.bridge.goals_handlers import setup_goals_handlers
from goalplanner.bridge.ipc import Bridge
from goalplanner.db.schema import ensure_schema
from goalplanner.db.session import Store, open_store


@pytest.fixture()
def store(tmp_path: Path) -> Iterator[Store]:
    handle = open_store(tmp_path / "planner.db")
    ensure_schema(handle)
    yield handle
    handle.close()


@pytest.fixture()
def bridge(store: Store) -> Bridge:
    b = Bridge()
    setup_goals_handlers(b, store)
    return b
