"""Pure editor reducer.

``apply(state, event)`` returns the next state and the side effects the
controller must run. The reducer never performs I/O and never schedules work
itself, so any presentation layer can drive it by message passing.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from scriptdesk.config import get_logger
from scriptdesk.document.history import History
from scriptdesk.document.operations import (
    Cursor,
    EditResult,
    blur_element,
    clear_scene_number,
    commit_content,
    cycle_type,
    find_index,
    generate_from_scenes,
    merge_with_previous,
    resequence,
    set_type,
    split_element,
)
from scriptdesk.editor.events import (
    AcceptSuggestion,
    AutoFormat,
    Blur,
    CancelSuggestions,
    ClearSceneNumber,
    ContentChanged,
    Effect,
    EditorEvent,
    Focus,
    GenerateFromScenes,
    KeyDown,
    Load,
    PreventDefault,
    Redo,
    ReinforceSuggestion,
    ScheduleSuggestions,
    SchedulePersistence,
    SetType,
    SuggestionsReady,
    Undo,
)
from scriptdesk.editor.state import EditorState
from scriptdesk.models import ELEMENT_TYPE_ORDER
from scriptdesk.parser.fountain_serializer import auto_format
from scriptdesk.smarttype.autocomplete import (
    ClosedExactMatch,
    CloseAfterSelection,
    CloseExactMatch,
    HideMenu,
    ResetOnEdit,
    SelectNext,
    SelectPrevious,
    Showing,
    ShowSuggestions,
    transition,
)
from scriptdesk.smarttype.engine import SUGGESTING_TYPES, apply_suggestion

logger = get_logger(__name__)

Transition = tuple[EditorState, tuple[Effect, ...]]

TYPE_SHORTCUTS = {
    str(number): element_type
    for number, element_type in enumerate(ELEMENT_TYPE_ORDER, start=1)
}


def _record(
    state: EditorState, result: EditResult, effects: list[Effect]
) -> EditorState:
    """Commit an edit result to history and move the caret."""
    if result.changed:
        state = state.evolve(history=state.history.set(result.document))
        effects.append(SchedulePersistence())
    if result.cursor is not None:
        state = state.evolve(focused_id=result.cursor.element_id, cursor=result.cursor)
    return state


def _close_menu(state: EditorState, effects: list[Effect]) -> EditorState:
    effects.append(CancelSuggestions())
    return state.evolve(autocomplete=transition(state.autocomplete, HideMenu()))


def _on_load(state: EditorState, event: Load) -> Transition:
    loaded = EditorState.from_document(event.document, state.history.limit)
    return loaded, (CancelSuggestions(),)


def _leave_focus(state: EditorState, effects: list[Effect]) -> EditorState:
    """Blur-normalize the focused element and close the menu."""
    if state.focused_id is not None:
        state = _record(state, blur_element(state.document, state.focused_id), effects)
    return _close_menu(state, effects)


def _on_focus(state: EditorState, event: Focus) -> Transition:
    element = state.element(event.element_id)
    if element is None:
        return state, ()
    effects: list[Effect] = []
    if state.focused_id != event.element_id:
        state = _leave_focus(state, effects)
    offset = len(element.content) if event.offset is None else event.offset
    state = state.evolve(
        focused_id=event.element_id, cursor=Cursor(event.element_id, offset)
    )
    return state, tuple(effects)


def _on_blur(state: EditorState, event: Blur) -> Transition:
    effects: list[Effect] = []
    state = _leave_focus(state, effects)
    return state.evolve(focused_id=None, cursor=None), tuple(effects)


def _on_content_changed(state: EditorState, event: ContentChanged) -> Transition:
    if state.element(event.element_id) is None:
        return state, ()

    effects: list[Effect] = []
    if state.focused_id != event.element_id:
        state, focus_effects = _on_focus(state, Focus(event.element_id))
        effects.extend(focus_effects)

    result = commit_content(state.document, event.element_id, event.content)
    state = _record(state, result, effects)

    element = state.element(event.element_id)
    if element is None:
        return state, tuple(effects)
    offset = len(element.content) if event.offset is None else event.offset
    offset = min(offset, len(element.content))
    state = state.evolve(cursor=Cursor(element.id, offset))

    menu = state.autocomplete
    if element.type not in SUGGESTING_TYPES:
        return _close_menu(state, effects), tuple(effects)
    if isinstance(menu, ClosedExactMatch) and menu.content == element.content:
        return state, tuple(effects)

    state = state.evolve(autocomplete=transition(menu, ResetOnEdit()))
    effects.append(ScheduleSuggestions(element.id))
    return state, tuple(effects)


def _accept(state: EditorState, index: int | None) -> Transition:
    menu = state.autocomplete
    element = state.focused
    if not isinstance(menu, Showing) or element is None:
        return state, ()

    position = menu.selected_index if index is None else index
    if not 0 <= position < len(menu.suggestions):
        return state, ()
    suggestion = menu.suggestions[position]

    effects: list[Effect] = [CancelSuggestions()]
    content = apply_suggestion(element.content, menu.mode, suggestion)
    state = _record(state, commit_content(state.document, element.id, content), effects)
    updated = state.element(element.id)
    if updated is None:
        return state, tuple(effects)
    state = state.evolve(
        cursor=Cursor(element.id, len(updated.content)),
        autocomplete=transition(menu, CloseAfterSelection(element.id, menu.mode)),
    )
    effects.append(ReinforceSuggestion(menu.mode, suggestion))
    effects.append(PreventDefault())
    logger.debug(
        "Accepted suggestion", element_id=element.id, mode=menu.mode.value
    )
    return state, tuple(effects)


def _on_accept(state: EditorState, event: AcceptSuggestion) -> Transition:
    return _accept(state, event.index)


def _on_suggestions_ready(state: EditorState, event: SuggestionsReady) -> Transition:
    result = event.result
    element = state.focused
    if element is None or element.id != result.element_id:
        return state, ()
    if element.content != result.content or element.type not in SUGGESTING_TYPES:
        # Superseded by a newer keystroke
        return state, ()

    if result.exact_match:
        action: Any = CloseExactMatch(element.content)
    elif result.mode is not None and result.suggestions:
        action = ShowSuggestions(result.mode, result.suggestions)
    else:
        action = HideMenu()
    return state.evolve(autocomplete=transition(state.autocomplete, action)), ()


def _move_history(state: EditorState, history: History) -> Transition:
    if history is state.history:
        return state, (PreventDefault(),)
    effects: list[Effect] = []
    state = _close_menu(state.evolve(history=history), effects)
    if state.focused_id is not None and state.focused is None:
        state = state.evolve(focused_id=None, cursor=None)
    effects.extend([SchedulePersistence(), PreventDefault()])
    logger.debug(
        "History moved",
        can_undo=history.can_undo,
        can_redo=history.can_redo,
    )
    return state, tuple(effects)


def _on_undo(state: EditorState, event: Undo) -> Transition:
    return _move_history(state, state.history.undo())


def _on_redo(state: EditorState, event: Redo) -> Transition:
    return _move_history(state, state.history.redo())


def _navigate(state: EditorState, step: int, effects: list[Effect]) -> Transition:
    """Move focus to the neighbouring element in direction ``step``."""
    if state.focused_id is None:
        return state, ()
    current = find_index(state.document, state.focused_id)
    if current == -1:
        return state, ()
    target = current + step
    if not 0 <= target < len(state.document):
        return state, ()
    element = state.document[target]
    offset = len(element.content) if step < 0 else 0
    state, focus_effects = _on_focus(state, Focus(element.id, offset))
    effects.extend(focus_effects)
    effects.append(PreventDefault())
    return state, tuple(effects)


def _on_key_down(state: EditorState, event: KeyDown) -> Transition:
    element = state.focused
    if element is None:
        return state, ()

    menu = state.autocomplete
    if isinstance(menu, Showing):
        if event.key == "ArrowDown":
            next_menu = transition(menu, SelectNext())
            return state.evolve(autocomplete=next_menu), (PreventDefault(),)
        if event.key == "ArrowUp":
            next_menu = transition(menu, SelectPrevious())
            return state.evolve(autocomplete=next_menu), (PreventDefault(),)
        if event.key == "Enter":
            return _accept(state, None)
        if event.key == "Escape":
            effects: list[Effect] = [PreventDefault()]
            return _close_menu(state, effects), tuple(effects)

    effects = []
    if event.command:
        key = event.key.lower()
        if key == "z":
            return _on_redo(state, Redo()) if event.shift else _on_undo(state, Undo())
        if key in TYPE_SHORTCUTS:
            result = set_type(state.document, element.id, TYPE_SHORTCUTS[key])
            state = _record(state, result, effects)
            effects.append(PreventDefault())
            return state, tuple(effects)
        return state, ()

    if event.key == "Enter" and not event.shift:
        if not event.collapsed:
            return state, ()
        result = split_element(state.document, element.id, event.offset)
        state = _close_menu(_record(state, result, effects), effects)
        effects.append(PreventDefault())
        return state, tuple(effects)

    if event.key == "Backspace" and event.collapsed and event.offset == 0:
        result = merge_with_previous(state.document, element.id)
        if result.changed:
            state = _close_menu(_record(state, result, effects), effects)
        effects.append(PreventDefault())
        return state, tuple(effects)

    if event.key == "Tab":
        result = cycle_type(state.document, element.id, reverse=event.shift)
        state = _record(state, result, effects)
        updated = state.focused
        if updated is not None and updated.type not in SUGGESTING_TYPES:
            state = _close_menu(state, effects)
        effects.append(PreventDefault())
        return state, tuple(effects)

    if event.key == "ArrowUp" and event.offset == 0:
        return _navigate(state, -1, effects)
    if event.key == "ArrowDown" and event.offset >= len(element.content):
        return _navigate(state, 1, effects)

    return state, ()


def _on_clear_scene_number(state: EditorState, event: ClearSceneNumber) -> Transition:
    effects: list[Effect] = []
    result = clear_scene_number(state.document, event.element_id)
    return _record(state, result, effects), tuple(effects)


def _on_set_type(state: EditorState, event: SetType) -> Transition:
    effects: list[Effect] = []
    result = set_type(state.document, event.element_id, event.element_type)
    return _record(state, result, effects), tuple(effects)


def _on_auto_format(state: EditorState, event: AutoFormat) -> Transition:
    effects: list[Effect] = []
    state = _close_menu(state, effects)
    formatted = auto_format(state.document)
    if formatted == state.document:
        return state, tuple(effects)
    state = state.evolve(
        history=state.history.set(formatted), focused_id=None, cursor=None
    )
    effects.append(SchedulePersistence())
    return state, tuple(effects)


def _on_generate(state: EditorState, event: GenerateFromScenes) -> Transition:
    effects: list[Effect] = []
    state = _close_menu(state, effects)
    generated = generate_from_scenes(event.scenes)
    result = EditResult(document=generated, changed=generated != state.document)
    state = _record(state.evolve(focused_id=None, cursor=None), result, effects)
    return state, tuple(effects)


_HANDLERS: dict[type, Callable[[EditorState, Any], Transition]] = {
    Load: _on_load,
    Focus: _on_focus,
    Blur: _on_blur,
    ContentChanged: _on_content_changed,
    KeyDown: _on_key_down,
    AcceptSuggestion: _on_accept,
    SuggestionsReady: _on_suggestions_ready,
    ClearSceneNumber: _on_clear_scene_number,
    SetType: _on_set_type,
    AutoFormat: _on_auto_format,
    GenerateFromScenes: _on_generate,
    Undo: _on_undo,
    Redo: _on_redo,
}


def apply(state: EditorState, event: EditorEvent) -> Transition:
    """Apply one event to the editor state.

    Args:
        state: Current editor state
        event: Input event

    Returns:
        Tuple of (next state, effects to run)
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        logger.warning("Ignoring unknown editor event", event=type(event).__name__)
        return state, ()
    return handler(state, event)
