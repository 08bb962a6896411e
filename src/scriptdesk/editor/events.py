"""Editor input events and the side effects the reducer asks for."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from scriptdesk.models import Document, ElementType, SceneOutline
from scriptdesk.smarttype.autocomplete import SuggestionMode
from scriptdesk.smarttype.engine import SuggestionResult


@dataclass(frozen=True)
class Load:
    """Replace the whole document without recording history."""

    document: Document


@dataclass(frozen=True)
class Focus:
    element_id: str
    offset: int | None = None


@dataclass(frozen=True)
class Blur:
    pass


@dataclass(frozen=True)
class ContentChanged:
    """Full content of an element after a keystroke."""

    element_id: str
    content: str
    offset: int | None = None


@dataclass(frozen=True)
class KeyDown:
    """A key press in the focused element.

    ``offset`` is the caret position; ``collapsed`` is False while a text
    selection exists.
    """

    key: str
    offset: int = 0
    collapsed: bool = True
    shift: bool = False
    ctrl: bool = False
    meta: bool = False

    @property
    def command(self) -> bool:
        return self.ctrl or self.meta


@dataclass(frozen=True)
class AcceptSuggestion:
    """Accept the selected suggestion, or the one at ``index`` (mouse pick)."""

    index: int | None = None


@dataclass(frozen=True)
class SuggestionsReady:
    result: SuggestionResult


@dataclass(frozen=True)
class ClearSceneNumber:
    element_id: str


@dataclass(frozen=True)
class SetType:
    element_id: str
    element_type: ElementType


@dataclass(frozen=True)
class AutoFormat:
    pass


@dataclass(frozen=True)
class GenerateFromScenes:
    scenes: tuple[SceneOutline, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Undo:
    pass


@dataclass(frozen=True)
class Redo:
    pass


EditorEvent = Union[
    Load,
    Focus,
    Blur,
    ContentChanged,
    KeyDown,
    AcceptSuggestion,
    SuggestionsReady,
    ClearSceneNumber,
    SetType,
    AutoFormat,
    GenerateFromScenes,
    Undo,
    Redo,
]


@dataclass(frozen=True)
class ScheduleSuggestions:
    """(Re)start the suggestion debounce for an element; last keystroke wins."""

    element_id: str


@dataclass(frozen=True)
class CancelSuggestions:
    pass


@dataclass(frozen=True)
class SchedulePersistence:
    """The document changed; restart the persistence debounce."""


@dataclass(frozen=True)
class ReinforceSuggestion:
    mode: SuggestionMode
    suggestion: str


@dataclass(frozen=True)
class PreventDefault:
    """The key was consumed by the editor."""


Effect = Union[
    ScheduleSuggestions,
    CancelSuggestions,
    SchedulePersistence,
    ReinforceSuggestion,
    PreventDefault,
]
