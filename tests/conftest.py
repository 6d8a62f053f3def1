import os
import sys
from pathlib import Path

import pytest

# Add the src tree to sys.path so tests run without an editable install
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

# Keep config loading hermetic: never pick up a developer's config.toml
os.environ.setdefault("WA2DC_CONFIG", str(Path(__file__).resolve().parent / "missing-config.toml"))


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
