"""Shared test fixtures for glyphdeck tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest
from PySide6.QtTest import QTest
from PySide6.QtWidgets import QApplication

from glyphdeck.app.state import SectionChannel
from glyphdeck.config import NavigatorSettings
from glyphdeck.model.sections import sections_from_descriptors


@pytest.fixture(scope="session", autouse=True)
def qapp():
    """One offscreen QApplication for the whole session; timers need it."""
    app = QApplication.instance() or QApplication([])
    yield app


def wait(ms: int) -> None:
    """Run the Qt event loop for ms milliseconds."""
    QTest.qWait(ms)


class FakeClock:
    """Manually advanced clock returning seconds."""
    def __init__(self, start: float = 100.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSurface:
    """Drawing surface that records presented frames."""
    def __init__(self, width: int = 1000, height: int = 800):
        self._width = width
        self._height = height
        self.frames = []

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def present(self, frame) -> None:
        self.frames.append(frame)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def surface():
    return FakeSurface()


@pytest.fixture()
def channel():
    ch = SectionChannel()
    yield ch
    ch.clear()


@pytest.fixture()
def received(channel):
    """List collecting every change published on the channel."""
    events = []
    channel.subscribe(events.append)
    return events


@pytest.fixture()
def three_sections():
    """A(left), B(right), C(left)."""
    return sections_from_descriptors([
        {"id": "A", "side": "left"},
        {"id": "B", "side": "right"},
        {"id": "C", "side": "left"},
    ])


@pytest.fixture()
def fast_settings():
    """Short timer windows so lock and debounce tests finish quickly."""
    return NavigatorSettings(lock_ms=60, wheel_reset_ms=40)
