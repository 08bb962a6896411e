"""Tests for the editor controller's debounced effects and persistence."""

import asyncio

import pytest

from scriptdesk.config import ScriptDeskSettings
from scriptdesk.editor import (
    Blur,
    ContentChanged,
    EditorController,
    Focus,
    KeyDown,
    Load,
)
from scriptdesk.exceptions import PersistenceError, ScriptDeskError
from scriptdesk.models import ElementType, ScriptElement
from scriptdesk.persistence import SaveStatus
from scriptdesk.smarttype import (
    ClosedExactMatch,
    Idle,
    Showing,
    SmartTypeCategory,
    SmartTypeIndex,
)

PROJECT = "project-1"


class RecordingAdapter:
    """Persistence adapter that remembers what it was asked to save."""

    def __init__(self, result=True, error=None):
        self.saved = []
        self.result = result
        self.error = error

    def save(self, document):
        self.saved.append(document)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def settings():
    return ScriptDeskSettings(
        suggestion_debounce_ms=150,
        suggestion_debounce_scene_ms=50,
        suggestion_debounce_immediate_ms=0,
        persistence_debounce_ms=800,
    )


@pytest.fixture
def index():
    index = SmartTypeIndex()
    for name in ["ALICE", "ALICIA", "BOB"]:
        index.add_entry(PROJECT, SmartTypeCategory.CHARACTER, name)
    index.add_entry(PROJECT, SmartTypeCategory.LOCATION, "KITCHEN")
    index.add_entry(PROJECT, SmartTypeCategory.LOCATION, "KIOSK")
    return index


@pytest.fixture
def adapter():
    return RecordingAdapter()


@pytest.fixture
def make_controller(scheduler, settings, index, adapter):
    def factory(*specs, **kwargs):
        document = [
            ScriptElement(id=f"e{i}", type=element_type, content=content)
            for i, (element_type, content) in enumerate(specs, start=1)
        ]
        options = {
            "persistence": adapter,
            "index": index,
            "scheduler": scheduler,
            "settings": settings,
        }
        options.update(kwargs)
        return EditorController(PROJECT, document, **options)

    return factory


class TestSuggestionDebounce:
    """Test the suggestion timer."""

    def test_character_suggestions_are_immediate(self, make_controller, scheduler):
        controller = make_controller((ElementType.CHARACTER, ""))
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "AL"))
        assert controller.suggestion_pending
        scheduler.advance(0)
        menu = controller.state.autocomplete
        assert isinstance(menu, Showing)
        assert menu.suggestions == ("ALICE", "ALICIA")

    def test_last_keystroke_wins(self, make_controller, scheduler):
        controller = make_controller((ElementType.SCENE_HEADING, ""))
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "INT. K"))
        scheduler.advance(0.1)
        controller.dispatch(ContentChanged("e1", "INT. KIT"))
        scheduler.advance(0.1)
        assert isinstance(controller.state.autocomplete, Idle)
        scheduler.advance(0.1)
        menu = controller.state.autocomplete
        assert isinstance(menu, Showing)
        assert menu.suggestions == ("KITCHEN",)
        assert len([h for h in scheduler.handles if h.cancelled]) >= 2

    def test_exact_match_keeps_menu_closed(self, make_controller, scheduler):
        controller = make_controller((ElementType.CHARACTER, ""))
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "BOB"))
        scheduler.advance(0)
        assert controller.state.autocomplete == ClosedExactMatch("BOB")

    def test_timer_ignores_element_that_lost_focus(self, make_controller, scheduler):
        controller = make_controller(
            (ElementType.SCENE_HEADING, ""), (ElementType.ACTION, "")
        )
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "INT. K"))
        controller.dispatch(Focus("e2"))
        scheduler.advance(1)
        assert isinstance(controller.state.autocomplete, Idle)

    def test_accepting_reinforces_index(self, make_controller, scheduler, index):
        controller = make_controller((ElementType.CHARACTER, ""))
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "AL"))
        scheduler.advance(0)
        assert controller.dispatch(KeyDown("Enter", 2))
        assert controller.document[0].content == "ALICE"
        alice = next(e for e in index.data(PROJECT).characters if e.value == "ALICE")
        assert alice.frequency == 2

    def test_index_failure_never_blocks_typing(self, make_controller, scheduler):
        class Broken:
            def get_suggestions(self, *args, **kwargs):
                raise RuntimeError("offline")

            def add_entry(self, *args, **kwargs):
                raise RuntimeError("offline")

        controller = make_controller((ElementType.CHARACTER, ""), index=Broken())
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "AL"))
        scheduler.advance(0)
        assert isinstance(controller.state.autocomplete, Idle)
        assert controller.document[0].content == "AL"


class TestPersistence:
    """Test debounced saving."""

    def test_saves_after_quiet_period(self, make_controller, scheduler, adapter):
        controller = make_controller((ElementType.ACTION, ""))
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "H"))
        scheduler.advance(0.5)
        controller.dispatch(ContentChanged("e1", "Hi"))
        scheduler.advance(0.5)
        assert adapter.saved == []
        scheduler.advance(0.4)
        assert len(adapter.saved) == 1
        assert adapter.saved[0][0].content == "Hi"
        assert not controller.has_unsaved_changes

    def test_saved_document_is_enriched(self, make_controller, scheduler, adapter):
        controller = make_controller(
            (ElementType.SCENE_HEADING, "INT. A"),
            (ElementType.CHARACTER, "BOB"),
            (ElementType.DIALOGUE, ""),
        )
        controller.dispatch(Focus("e3"))
        controller.dispatch(ContentChanged("e3", "Hello."))
        scheduler.advance(1)
        saved = adapter.saved[0]
        assert [e.sequence for e in saved] == [1, 2, 3]
        assert saved[2].character == "BOB"
        assert saved[2].scene_id == "e1"

    def test_focus_switch_does_not_cancel_save(
        self, make_controller, scheduler, adapter
    ):
        controller = make_controller((ElementType.ACTION, ""), (ElementType.ACTION, ""))
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "Typed"))
        controller.dispatch(Focus("e2"))
        assert controller.save_pending
        scheduler.advance(1)
        assert len(adapter.saved) == 1

    def test_flush_is_idempotent(self, make_controller, adapter):
        controller = make_controller((ElementType.ACTION, ""))
        controller.dispatch(ContentChanged("e1", "x"))
        assert controller.flush()
        assert controller.flush()
        assert len(adapter.saved) == 1

    def test_unchanged_document_not_saved(self, make_controller, scheduler, adapter):
        controller = make_controller((ElementType.ACTION, "x"))
        controller.dispatch(Focus("e1"))
        controller.dispatch(Blur())
        scheduler.advance(5)
        assert adapter.saved == []

    def test_close_flushes_synchronously(self, make_controller, scheduler, adapter):
        controller = make_controller((ElementType.ACTION, ""))
        controller.dispatch(Focus("e1"))
        controller.dispatch(ContentChanged("e1", "Last words"))
        assert controller.close()
        assert adapter.saved[-1][0].content == "Last words"
        assert controller.closed
        assert scheduler.pending == []

    def test_events_after_close_ignored(self, make_controller):
        controller = make_controller((ElementType.ACTION, ""))
        controller.close()
        assert not controller.dispatch(ContentChanged("e1", "x"))
        assert controller.document[0].content == ""

    def test_load_flushes_pending_edits(self, make_controller, adapter):
        controller = make_controller((ElementType.ACTION, ""))
        controller.dispatch(ContentChanged("e1", "unsaved"))
        controller.dispatch(Load([ScriptElement(content="other")]))
        assert adapter.saved[0][0].content == "unsaved"
        assert controller.document[0].content == "other"
        assert not controller.save_pending
        assert not controller.has_unsaved_changes

    def test_without_adapter(self, make_controller):
        controller = make_controller((ElementType.ACTION, ""), persistence=None)
        controller.dispatch(ContentChanged("e1", "x"))
        assert controller.flush()
        assert not controller.has_unsaved_changes


class TestSaveFailures:
    """Test how failed saves are surfaced."""

    def _run(self, make_controller, scheduler, adapter):
        statuses = []
        controller = make_controller(
            (ElementType.ACTION, ""),
            on_save_status=lambda status, error: statuses.append((status, error)),
        )
        controller.dispatch(ContentChanged("e1", "draft"))
        scheduler.advance(1)
        return controller, statuses

    def test_false_result(self, make_controller, scheduler):
        adapter = RecordingAdapter(result=False)
        controller, statuses = self._run(
            lambda *a, **k: make_controller(*a, persistence=adapter, **k),
            scheduler,
            adapter,
        )
        assert [s for s, _ in statuses] == [SaveStatus.SAVING, SaveStatus.FAILED]
        assert isinstance(controller.last_save_error, PersistenceError)
        assert controller.document[0].content == "draft"
        assert controller.has_unsaved_changes

    def test_adapter_raises(self, make_controller, scheduler):
        adapter = RecordingAdapter(error=OSError("disk full"))
        controller, statuses = self._run(
            lambda *a, **k: make_controller(*a, persistence=adapter, **k),
            scheduler,
            adapter,
        )
        error = controller.last_save_error
        assert isinstance(error, PersistenceError)
        assert isinstance(error.original_error, OSError)
        assert statuses[-1] == (SaveStatus.FAILED, error)

    def test_retry_after_failure(self, make_controller, scheduler):
        adapter = RecordingAdapter(result=False)
        controller, statuses = self._run(
            lambda *a, **k: make_controller(*a, persistence=adapter, **k),
            scheduler,
            adapter,
        )
        adapter.result = True
        assert controller.flush()
        assert controller.last_save_error is None
        assert statuses[-1] == (SaveStatus.SAVED, None)


@pytest.mark.asyncio
async def test_asyncio_scheduler_drives_saves(index):
    """The default scheduler runs debounced work on the running loop."""
    adapter = RecordingAdapter()
    settings = ScriptDeskSettings(persistence_debounce_ms=10)
    controller = EditorController(
        PROJECT,
        [ScriptElement(id="e1")],
        persistence=adapter,
        index=index,
        settings=settings,
    )
    controller.dispatch(ContentChanged("e1", "async"))
    assert adapter.saved == []
    await asyncio.sleep(0.1)
    assert len(adapter.saved) == 1


@pytest.mark.asyncio
async def test_asyncio_scheduler_debounces_bursts(index):
    """A burst of edits yields one save of the latest content."""
    adapter = RecordingAdapter()
    settings = ScriptDeskSettings(persistence_debounce_ms=20)
    controller = EditorController(
        PROJECT,
        [ScriptElement(id="e1")],
        persistence=adapter,
        index=index,
        settings=settings,
    )
    for content in ("a", "ab", "abc"):
        controller.dispatch(ContentChanged("e1", content))
    await asyncio.sleep(0.2)
    assert len(adapter.saved) == 1
    assert adapter.saved[0][0].content == "abc"


@pytest.mark.asyncio
async def test_close_cancels_asyncio_timer(index):
    adapter = RecordingAdapter()
    settings = ScriptDeskSettings(persistence_debounce_ms=20)
    controller = EditorController(
        PROJECT,
        [ScriptElement(id="e1")],
        persistence=adapter,
        index=index,
        settings=settings,
    )
    controller.dispatch(ContentChanged("e1", "bye"))
    assert controller.close()
    assert len(adapter.saved) == 1
    await asyncio.sleep(0.1)
    assert len(adapter.saved) == 1
    assert not controller.save_pending


def test_default_scheduler_requires_running_loop(index):
    """Without a loop the controller fails at construction, not on an edit."""
    with pytest.raises(ScriptDeskError) as exc_info:
        EditorController(PROJECT, [ScriptElement(id="e1")], index=index)
    assert "event loop" in exc_info.value.message
    assert exc_info.value.hint is not None


def test_history_limit_from_settings(make_controller):
    controller = make_controller(
        (ElementType.ACTION, ""),
        settings=ScriptDeskSettings(history_limit=2),
    )
    for content in ("a", "ab", "abc", "abcd"):
        controller.dispatch(ContentChanged("e1", content))
    assert controller.state.history.limit == 2
    assert len(controller.state.history.past) == 2
