"""Headless editor controller.

Owns the editor state, feeds events through the pure reducer and runs the
resulting effects: the suggestion debounce (one timer, last keystroke wins),
the coarser persistence debounce and SmartType reinforcement. Scheduled
callbacks always read the controller's current state when they fire.
"""

from __future__ import annotations

from scriptdesk.config import get_logger, get_settings
from scriptdesk.config.settings import ScriptDeskSettings
from scriptdesk.document.operations import enrich
from scriptdesk.editor.events import (
    CancelSuggestions,
    Effect,
    EditorEvent,
    Load,
    PreventDefault,
    ReinforceSuggestion,
    ScheduleSuggestions,
    SchedulePersistence,
    SuggestionsReady,
)
from scriptdesk.editor.reducer import apply
from scriptdesk.editor.scheduling import AsyncioScheduler, Scheduler, TaskHandle
from scriptdesk.editor.state import EditorState
from scriptdesk.exceptions import PersistenceError
from scriptdesk.models import Document
from scriptdesk.persistence import PersistenceAdapter, SaveStatus, SaveStatusCallback
from scriptdesk.smarttype.engine import compute_suggestions, debounce_ms, reinforce
from scriptdesk.smarttype.index import SmartTypeIndex, SuggestionIndex

logger = get_logger(__name__)


class EditorController:
    """Drive a screenplay document from keyboard-level events."""

    def __init__(
        self,
        project_id: str,
        document: Document | None = None,
        persistence: PersistenceAdapter | None = None,
        index: SuggestionIndex | None = None,
        scheduler: Scheduler | None = None,
        settings: ScriptDeskSettings | None = None,
        on_save_status: SaveStatusCallback | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            project_id: Project whose SmartType entries are used
            document: Initial document, treated as already saved
            persistence: Adapter receiving debounced saves
            index: SmartType index; a fresh in-memory index by default
            scheduler: Delayed-callback scheduler; asyncio by default
            settings: Debounce and limit settings; global settings by default
            on_save_status: Callback notified of save progress and failures

        Raises:
            ScriptDeskError: If no scheduler is given and no event loop is
                running
        """
        self.project_id = project_id
        self.settings = settings or get_settings()
        self.persistence = persistence
        self.index: SuggestionIndex = index if index is not None else SmartTypeIndex()
        self.scheduler: Scheduler = scheduler or AsyncioScheduler()
        self.on_save_status = on_save_status
        self.last_save_error: PersistenceError | None = None

        self._state = EditorState.from_document(
            document or [], history_limit=self.settings.history_limit
        )
        self._last_saved: Document = enrich(self._state.document)
        self._suggestion_timer: TaskHandle | None = None
        self._persistence_timer: TaskHandle | None = None
        self._closed = False

    @property
    def state(self) -> EditorState:
        return self._state

    @property
    def document(self) -> Document:
        return self._state.document

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def has_unsaved_changes(self) -> bool:
        return enrich(self._state.document) != self._last_saved

    @property
    def suggestion_pending(self) -> bool:
        return self._suggestion_timer is not None

    @property
    def save_pending(self) -> bool:
        return self._persistence_timer is not None

    def dispatch(self, event: EditorEvent) -> bool:
        """Apply an event and run its effects.

        Args:
            event: Editor input event

        Returns:
            True when the editor consumed the event (for keys: prevent the
            default handling)
        """
        if self._closed:
            logger.warning(
                "Ignoring event on closed editor", event=type(event).__name__
            )
            return False

        if isinstance(event, Load) and self.has_unsaved_changes:
            self.flush()

        self._state, effects = apply(self._state, event)

        if isinstance(event, Load):
            self._cancel_persistence()
            self._last_saved = enrich(self._state.document)

        return self._run_effects(effects)

    def flush(self) -> bool:
        """Save the current document now, skipping unchanged documents.

        Returns:
            True when the document is stored (or nothing needed saving)
        """
        self._cancel_persistence()

        current = self._state.document
        enriched = enrich(current)
        if enriched != current:
            self._state = self._state.evolve(
                history=self._state.history.replace_present(enriched)
            )

        if enriched == self._last_saved:
            logger.debug("Skipping save of unchanged document")
            return True
        if self.persistence is None:
            self._last_saved = enriched
            return True

        self._notify(SaveStatus.SAVING)
        try:
            saved = self.persistence.save(enriched)
        except PersistenceError as e:
            return self._save_failed(e)
        except Exception as e:
            return self._save_failed(
                PersistenceError(
                    message="Persistence adapter raised an error",
                    element_count=len(enriched),
                    original_error=e,
                )
            )
        if not saved:
            return self._save_failed(
                PersistenceError(
                    message="Persistence adapter reported a failed save",
                    element_count=len(enriched),
                )
            )

        self._last_saved = enriched
        self.last_save_error = None
        logger.info("Document saved", element_count=len(enriched))
        self._notify(SaveStatus.SAVED)
        return True

    def close(self) -> bool:
        """Tear down the editor, flushing unsaved edits synchronously.

        Returns:
            Result of the final flush
        """
        if self._closed:
            return self.last_save_error is None
        self._cancel_suggestions()
        saved = self.flush()
        self._closed = True
        logger.debug("Editor closed", saved=saved)
        return saved

    def _run_effects(self, effects: tuple[Effect, ...]) -> bool:
        handled = False
        for effect in effects:
            if isinstance(effect, ScheduleSuggestions):
                self._schedule_suggestions(effect.element_id)
            elif isinstance(effect, CancelSuggestions):
                self._cancel_suggestions()
            elif isinstance(effect, SchedulePersistence):
                self._schedule_persistence()
            elif isinstance(effect, ReinforceSuggestion):
                reinforce(self.index, self.project_id, effect.mode, effect.suggestion)
            elif isinstance(effect, PreventDefault):
                handled = True
        return handled

    def _schedule_suggestions(self, element_id: str) -> None:
        self._cancel_suggestions()
        element = self._state.element(element_id)
        if element is None:
            return
        delay = debounce_ms(element, self.settings)
        if delay is None:
            return
        self._suggestion_timer = self.scheduler.call_later(
            delay / 1000.0, lambda: self._fire_suggestions(element_id)
        )

    def _fire_suggestions(self, element_id: str) -> None:
        self._suggestion_timer = None
        if self._closed:
            return
        element = self._state.focused
        if element is None or element.id != element_id:
            return
        result = compute_suggestions(
            self.index, self.project_id, element, self.settings.suggestion_limit
        )
        self._state, effects = apply(self._state, SuggestionsReady(result))
        self._run_effects(effects)

    def _cancel_suggestions(self) -> None:
        if self._suggestion_timer is not None:
            self._suggestion_timer.cancel()
            self._suggestion_timer = None

    def _schedule_persistence(self) -> None:
        self._cancel_persistence()
        self._persistence_timer = self.scheduler.call_later(
            self.settings.persistence_debounce_seconds, self._fire_persistence
        )

    def _fire_persistence(self) -> None:
        self._persistence_timer = None
        if not self._closed:
            self.flush()

    def _cancel_persistence(self) -> None:
        if self._persistence_timer is not None:
            self._persistence_timer.cancel()
            self._persistence_timer = None

    def _save_failed(self, error: PersistenceError) -> bool:
        self.last_save_error = error
        logger.error(
            "Failed to save document",
            element_count=error.element_count,
            error=error.message,
        )
        self._notify(SaveStatus.FAILED, error)
        return False

    def _notify(self, status: SaveStatus, error: PersistenceError | None = None) -> None:
        if self.on_save_status is not None:
            self.on_save_status(status, error)
