"""Pytest configuration and fixtures."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field

import pytest

from scriptdesk.config import ScriptDeskSettings, reset_settings, set_settings


@dataclass
class ManualHandle:
    """Timer handle returned by ``ManualScheduler``."""

    due: float
    callback: Callable[[], None]
    cancelled: bool = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass
class ManualScheduler:
    """Deterministic scheduler driven by ``advance``."""

    now: float = 0.0
    handles: list[ManualHandle] = field(default_factory=list)

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self.now + delay, callback)
        self.handles.append(handle)
        return handle

    @property
    def pending(self) -> list[ManualHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        """Move the clock forward, firing due callbacks in order."""
        target = self.now + seconds
        while True:
            due = sorted(
                (h for h in self.pending if h.due <= target), key=lambda h: h.due
            )
            if not due:
                break
            handle = due[0]
            handle.cancelled = True
            self.now = handle.due
            handle.callback()
        self.now = target


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers",
        "unit: mark test as unit test",
    )


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Run every test against default settings, ignoring the environment."""
    for name in ("SCRIPTDESK_LOG_LEVEL", "SCRIPTDESK_DEBUG", "SCRIPTDESK_CONFIG"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    set_settings(ScriptDeskSettings())
    yield
    reset_settings()


@pytest.fixture
def scheduler() -> ManualScheduler:
    """Provide a manually advanced scheduler."""
    return ManualScheduler()


@pytest.fixture
def sample_fountain() -> str:
    """Short screenplay in canonical form."""
    return (
        "Title: Coffee Run\n"
        "Author: Jane Writer\n"
        "\n"
        "INT. COFFEE SHOP - DAY #1#\n"
        "\n"
        "A busy coffee shop.\n"
        "\n"
        "ALICE\n"
        "(muttering)\n"
        "This code has to work.\n"
        "\n"
        "BOB ^\n"
        "It will.\n"
        "\n"
        "CUT TO:\n"
        "\n"
        "EXT. PARKING LOT - NIGHT\n"
        "\n"
        "ALICE\n"
        "Finally.\n"
    )
