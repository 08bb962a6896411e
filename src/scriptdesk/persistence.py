"""Persistence contract and the caller-side sequential save queue."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol

from scriptdesk.config import get_logger
from scriptdesk.exceptions import PersistenceError
from scriptdesk.models import Document

logger = get_logger(__name__)


class PersistenceAdapter(Protocol):
    """Stores the full ordered document.

    Implementations return True on success and either return False or raise
    ``PersistenceError`` on failure.
    """

    def save(self, document: Document) -> bool: ...


class SaveStatus(str, Enum):
    """Save lifecycle reported to status callbacks."""

    SAVING = "saving"
    SAVED = "saved"
    FAILED = "failed"


SaveStatusCallback = Callable[[SaveStatus, PersistenceError | None], None]


class SequentialSaveQueue:
    """Serialize saves so that only one is in flight at a time.

    Submitting while a save runs queues the document; a later submission
    replaces a queued document that has not started yet. Callers whose
    document was superseded receive the result of the save that replaced it.
    """

    def __init__(self, save: Callable[[Document], Awaitable[bool]]) -> None:
        """Initialize the queue.

        Args:
            save: Async function storing a document
        """
        self._save = save
        self._queued: Document | None = None
        self._waiters: list[asyncio.Future[bool]] = []
        self._worker: asyncio.Task[None] | None = None
        self.superseded = 0

    @property
    def busy(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def submit(self, document: Document) -> bool:
        """Queue a document for saving and wait for the save covering it.

        Args:
            document: Document to store

        Returns:
            Result of the save that stored this document or a newer one

        Raises:
            PersistenceError: If that save failed
        """
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[bool] = loop.create_future()
        if self._queued is not None:
            self.superseded += 1
            logger.debug("Superseded queued save", element_count=len(self._queued))
        self._queued = document
        self._waiters.append(waiter)
        if not self.busy:
            self._worker = loop.create_task(self._drain())
        return await waiter

    async def join(self) -> None:
        """Wait until every queued save has finished."""
        while self._worker is not None and not self._worker.done():
            await asyncio.wait({self._worker})

    async def _drain(self) -> None:
        while self._queued is not None:
            document, waiters = self._queued, self._waiters
            self._queued, self._waiters = None, []
            try:
                result = await self._save(document)
            except PersistenceError as e:
                self._resolve(waiters, error=e)
            except Exception as e:
                error = PersistenceError(
                    message="Save failed",
                    element_count=len(document),
                    original_error=e,
                )
                self._resolve(waiters, error=error)
            else:
                self._resolve(waiters, result=result)

    @staticmethod
    def _resolve(
        waiters: list[asyncio.Future[bool]],
        result: bool = False,
        error: PersistenceError | None = None,
    ) -> None:
        for waiter in waiters:
            if waiter.done():
                continue
            if error is not None:
                waiter.set_exception(error)
            else:
                waiter.set_result(result)
