"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from joyo.core.cards import build_catalog
from joyo.delivery.cues import CueEmitter
from joyo.delivery.scheduler import EventScheduler
from joyo.delivery.state_store import MemoryBlobStore, ProgressRepository
from joyo.engine.context import SessionContext
from joyo.gesture.landmarks import BodyPoint, LandmarkSet, Point
from joyo.study.progress import ProgressTracker


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


class FakeClock:
    """Millisecond clock advanced by hand."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


class RecordingSink:
    """Cue sink that keeps every cue it receives."""

    def __init__(self):
        self.cues = []

    def emit(self, cue):
        self.cues.append(cue)

    @property
    def kinds(self):
        return [c.kind.value for c in self.cues]


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def catalog():
    """Twelve small cards, k01..k12."""
    kanji = "一二三四五六七八九十百千"
    return build_catalog(
        {
            "id": f"k{i + 1:02d}",
            "char": ch,
            "on": [f"オン{i + 1}"],
            "kun": [f"くん{i + 1}"],
            "examples": [f"{ch}例"],
        }
        for i, ch in enumerate(kanji)
    )


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return MemoryBlobStore()


@pytest.fixture
def repository(store):
    return ProgressRepository(store, key="kanji_mastery_progress")


@pytest.fixture
def tracker(repository):
    return ProgressTracker(repository)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def scheduler(clock):
    return EventScheduler(clock=clock)


@pytest.fixture
def ctx(catalog, tracker, scheduler, sink, rng):
    """Session context on the home screen with fake time and a seeded shuffle."""
    return SessionContext(
        catalog=catalog,
        tracker=tracker,
        scheduler=scheduler,
        cues=CueEmitter(sink),
        rng=rng,
    )


NEUTRAL_POSE = {
    BodyPoint.NOSE: (0.50, 0.20),
    BodyPoint.LEFT_SHOULDER: (0.60, 0.35),
    BodyPoint.RIGHT_SHOULDER: (0.40, 0.35),
    BodyPoint.LEFT_ELBOW: (0.62, 0.50),
    BodyPoint.RIGHT_ELBOW: (0.38, 0.50),
    BodyPoint.LEFT_WRIST: (0.60, 0.65),
    BodyPoint.RIGHT_WRIST: (0.40, 0.65),
    BodyPoint.LEFT_HIP: (0.57, 0.70),
    BodyPoint.RIGHT_HIP: (0.43, 0.70),
}


@pytest.fixture
def make_pose():
    """
    Build a LandmarkSet from a neutral standing pose (arms hanging, person's
    left side at larger x) with selected points moved.

    Usage: make_pose(left_wrist=(0.6, 0.1))
    """

    def _make(**moved):
        coords = dict(NEUTRAL_POSE)
        for name, xy in moved.items():
            coords[BodyPoint(name)] = xy
        return LandmarkSet({name: Point(x, y) for name, (x, y) in coords.items()})

    return _make
