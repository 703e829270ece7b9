import sys
from pathlib import Path
import os

import pytest


# Ensure project src is on path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
for p in (ROOT, SRC):
    if str(p) not in sys.path:
        sys.path.insert(0, str(p))

# Keep tests offline: no fact-check credentials, no history file, no jitter
os.environ["FACT_CHECK_API_KEY"] = ""
os.environ["HISTORY_PATH"] = ""
os.environ["SCORE_JITTER"] = "0"
os.environ["ANALYSIS_DELAY"] = "0"

from newscheck.config import Settings, get_settings  # noqa: E402


class ZeroJitter:
    def uniform(self, a, b):
        return 0.0


class FixedJitter:
    def __init__(self, value):
        self.value = value

    def uniform(self, a, b):
        return max(a, min(b, self.value))


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture(autouse=True)
def _fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings(_env_file=None, fact_check_api_key="test-key", score_jitter=0)


@pytest.fixture
def zero_jitter():
    return ZeroJitter()


@pytest.fixture
def fake_clock():
    return FakeClock()
