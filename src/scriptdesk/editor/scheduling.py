"""Cancelable delayed callbacks for debounced editor work."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Protocol

from scriptdesk.exceptions import ScriptDeskError


class TaskHandle(Protocol):
    """A scheduled callback that can still be cancelled."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Schedules callbacks after a delay in seconds."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TaskHandle: ...


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop."""

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Initialize the scheduler.

        Args:
            loop: Event loop to use; defaults to the loop running now

        Raises:
            ScriptDeskError: If no loop is given and none is running
        """
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise ScriptDeskError(
                    message="No running event loop for the editor scheduler",
                    hint=(
                        "Create the editor inside a running asyncio loop, pass "
                        "an explicit loop, or inject your own Scheduler"
                    ),
                ) from e
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    def call_later(
        self, delay: float, callback: Callable[[], None]
    ) -> asyncio.TimerHandle:
        return self._loop.call_later(max(delay, 0.0), callback)
