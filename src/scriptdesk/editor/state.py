"""Editor state aggregate."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

from scriptdesk.document.history import History
from scriptdesk.document.operations import Cursor, find_index, resequence
from scriptdesk.models import Document, ScriptElement
from scriptdesk.smarttype.autocomplete import IDLE, AutocompleteState


@dataclass(frozen=True)
class EditorState:
    """Document history plus focus, caret and autocomplete overlay."""

    history: History = field(default_factory=History)
    focused_id: str | None = None
    cursor: Cursor | None = None
    autocomplete: AutocompleteState = IDLE

    @property
    def document(self) -> Document:
        return self.history.present

    @property
    def focused(self) -> ScriptElement | None:
        return self.element(self.focused_id) if self.focused_id else None

    def element(self, element_id: str) -> ScriptElement | None:
        index = find_index(self.document, element_id)
        return self.document[index] if index != -1 else None

    def evolve(self, **changes: object) -> EditorState:
        return replace(self, **changes)  # type: ignore[arg-type]

    @classmethod
    def from_document(
        cls, document: Document, history_limit: int | None = None
    ) -> EditorState:
        return cls(history=History.start(resequence(document), limit=history_limit))
