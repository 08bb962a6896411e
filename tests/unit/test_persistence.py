"""Tests for the sequential save queue."""

import asyncio

import pytest

from scriptdesk.exceptions import PersistenceError
from scriptdesk.models import ScriptElement
from scriptdesk.persistence import SequentialSaveQueue


def doc(content):
    return [ScriptElement(id=content, content=content)]


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


class TestSequentialSaveQueue:
    """Test save serialization."""

    @pytest.mark.asyncio
    async def test_single_save(self):
        saved = []

        async def save(document):
            saved.append(document)
            return True

        queue = SequentialSaveQueue(save)
        assert await queue.submit(doc("a"))
        assert saved == [doc("a")]
        assert not queue.busy

    @pytest.mark.asyncio
    async def test_queued_document_is_superseded(self):
        saved = []
        gate = asyncio.Event()

        async def save(document):
            saved.append(document)
            await gate.wait()
            return True

        queue = SequentialSaveQueue(save)
        first = asyncio.create_task(queue.submit(doc("a")))
        await settle()
        second = asyncio.create_task(queue.submit(doc("b")))
        third = asyncio.create_task(queue.submit(doc("c")))
        await settle()
        assert queue.busy
        assert saved == [doc("a")]

        gate.set()
        results = await asyncio.gather(first, second, third)
        assert results == [True, True, True]
        assert saved == [doc("a"), doc("c")]
        assert queue.superseded == 1

    @pytest.mark.asyncio
    async def test_failure_raises_persistence_error(self):
        async def save(document):
            raise OSError("disk full")

        queue = SequentialSaveQueue(save)
        with pytest.raises(PersistenceError) as exc_info:
            await queue.submit(doc("a"))
        assert exc_info.value.element_count == 1
        assert isinstance(exc_info.value.original_error, OSError)

    @pytest.mark.asyncio
    async def test_failed_save_does_not_block_next(self):
        calls = []

        async def save(document):
            calls.append(document)
            if len(calls) == 1:
                raise PersistenceError("first save failed")
            return True

        queue = SequentialSaveQueue(save)
        with pytest.raises(PersistenceError):
            await queue.submit(doc("a"))
        assert await queue.submit(doc("b"))

    @pytest.mark.asyncio
    async def test_join_waits_for_worker(self):
        gate = asyncio.Event()

        async def save(document):
            await gate.wait()
            return True

        queue = SequentialSaveQueue(save)
        task = asyncio.create_task(queue.submit(doc("a")))
        await settle()
        assert queue.busy
        gate.set()
        await queue.join()
        assert not queue.busy
        assert await task

    @pytest.mark.asyncio
    async def test_join_on_idle_queue_returns(self):
        async def save(document):
            return True

        queue = SequentialSaveQueue(save)
        await queue.join()
        assert not queue.busy
        assert await queue.submit(doc("a"))
        await queue.join()
        assert not queue.busy
