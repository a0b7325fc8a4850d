#!/usr/bin/env python3
"""
Global pytest configuration and fixtures.

This module provides:
- A fixed "today" and a frozen clock so no test reads the wall clock
- Isolated TRACKIT_HOME per test
- Stores, gateways and a populated app for reuse
"""

import os
import shutil
import sys
import tempfile
from datetime import date
from typing import Generator, List, Tuple

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from trackit.app import TrackItApp
from trackit.habits.store import HabitStore
from trackit.storage.backends import MemoryStore
from trackit.storage.gateway import PersistenceGateway

from tests.helpers import NOW, TODAY, counter_ids


@pytest.fixture(autouse=True)
def isolated_home(monkeypatch) -> Generator[str, None, None]:
    """Point TRACKIT_HOME at a throwaway directory for every test."""
    temp_path = tempfile.mkdtemp(prefix="trackit_test_")
    monkeypatch.setenv("TRACKIT_HOME", temp_path)
    import trackit.core.paths
    trackit.core.paths._path_manager = None
    try:
        yield temp_path
    finally:
        trackit.core.paths._path_manager = None
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def temp_dir() -> Generator[str, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = tempfile.mkdtemp(prefix="trackit_tmp_")
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def store() -> HabitStore:
    return HabitStore(clock=lambda: NOW, id_factory=counter_ids())


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def gateway(memory_store) -> PersistenceGateway:
    return PersistenceGateway(memory_store)


@pytest.fixture
def events() -> List[Tuple[str, dict]]:
    return []


@pytest.fixture
def app(gateway, events) -> TrackItApp:
    app = TrackItApp(
        gateway,
        today=lambda: TODAY,
        clock=lambda: NOW,
        notify=lambda kind, payload: events.append((kind, payload)),
    )
    app.start()
    return app
