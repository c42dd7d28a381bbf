# Shared fixtures for the sorting core tests. Record builders live in
# factories.py so test modules can import them directly.

import pytest

from factories import T0, make_record
from sorting.backends import MemoryBackend
from sorting.clock import ManualClock
from sorting.config_store import SortingConfigStore
from sorting.notifier import ChangeNotifier
from sorting.registry import StrategyRegistry


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def strategies():
    return StrategyRegistry()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def store(backend, strategies, clock):
    s = SortingConfigStore(backend, registry=strategies, clock=clock)
    yield s
    s.close()


@pytest.fixture
def notifier(clock):
    return ChangeNotifier(clock)


@pytest.fixture
def records():
    return [
        make_record("Bravo", days=1, text="Second letter of the alphabet"),
        make_record("alpha", days=2, text="First letter"),
        make_record(
            "Charlie", days=0, text="Third", answers=("gamma", "delta"), correct=(True, False)
        ),
        make_record("bravo", days=3, text="Lowercase duplicate title"),
    ]
