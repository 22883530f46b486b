from __future__ import annotations

import pytest

from athenabench.config import BenchmarkConfig
from fakes import SANDBOX_URL, FakeClock, FakeDriver, fast_waits


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def make_config():
    def _make(**overrides) -> BenchmarkConfig:
        overrides.setdefault("base_url", SANDBOX_URL)
        overrides.setdefault("waits", fast_waits())
        return BenchmarkConfig(**overrides)

    return _make
