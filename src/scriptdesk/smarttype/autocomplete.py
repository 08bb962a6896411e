"""Autocomplete overlay state machine.

The overlay is either idle, showing a list of suggestions with one selected,
or closed because the typed text already matches (or a suggestion was just
accepted). Closed states remember what closed them so the same content does
not reopen the menu.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Union


class SuggestionMode(str, Enum):
    """What the open menu is suggesting."""

    PREFIX = "prefix"
    LOCATION = "location"
    TIME = "time"
    CHARACTER = "character"
    TRANSITION = "transition"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Showing:
    mode: SuggestionMode
    suggestions: tuple[str, ...]
    selected_index: int = 0

    @property
    def selected(self) -> str:
        return self.suggestions[self.selected_index]


@dataclass(frozen=True)
class ClosedExactMatch:
    content: str


@dataclass(frozen=True)
class ClosedSelection:
    element_id: str
    mode: SuggestionMode


AutocompleteState = Union[Idle, Showing, ClosedExactMatch, ClosedSelection]

IDLE = Idle()


@dataclass(frozen=True)
class ShowSuggestions:
    mode: SuggestionMode
    suggestions: tuple[str, ...]


@dataclass(frozen=True)
class SelectNext:
    pass


@dataclass(frozen=True)
class SelectPrevious:
    pass


@dataclass(frozen=True)
class HideMenu:
    pass


@dataclass(frozen=True)
class CloseExactMatch:
    content: str


@dataclass(frozen=True)
class CloseAfterSelection:
    element_id: str
    mode: SuggestionMode


@dataclass(frozen=True)
class ResetOnEdit:
    pass


AutocompleteAction = Union[
    ShowSuggestions,
    SelectNext,
    SelectPrevious,
    HideMenu,
    CloseExactMatch,
    CloseAfterSelection,
    ResetOnEdit,
]


def transition(
    state: AutocompleteState, action: AutocompleteAction
) -> AutocompleteState:
    """Compute the next overlay state.

    Selection moves wrap around and are ignored unless the menu is showing.

    Args:
        state: Current overlay state
        action: Action to apply

    Returns:
        The next overlay state
    """
    if isinstance(action, ShowSuggestions):
        if not action.suggestions:
            return IDLE
        return Showing(mode=action.mode, suggestions=tuple(action.suggestions))

    if isinstance(action, SelectNext):
        if not isinstance(state, Showing):
            return state
        index = (state.selected_index + 1) % len(state.suggestions)
        return replace(state, selected_index=index)

    if isinstance(action, SelectPrevious):
        if not isinstance(state, Showing):
            return state
        index = (state.selected_index - 1) % len(state.suggestions)
        return replace(state, selected_index=index)

    if isinstance(action, CloseExactMatch):
        return ClosedExactMatch(content=action.content)

    if isinstance(action, CloseAfterSelection):
        return ClosedSelection(element_id=action.element_id, mode=action.mode)

    if isinstance(action, ResetOnEdit):
        if isinstance(state, (ClosedExactMatch, ClosedSelection)):
            return IDLE
        return state

    # HideMenu
    return IDLE


def is_exact_match(suggestions: list[str] | tuple[str, ...], typed: str) -> bool:
    """Whether the only suggestion is what the user already typed."""
    if len(suggestions) != 1:
        return False
    return suggestions[0].upper() == typed.strip().upper()
