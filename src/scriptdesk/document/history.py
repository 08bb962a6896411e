"""Linear undo/redo history over document snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field

from scriptdesk.models import Document


@dataclass(frozen=True)
class History:
    """Immutable past/present/future snapshot stack.

    Snapshots are plain element lists; since elements are immutable they are
    shared between snapshots rather than copied. With a ``limit`` only the
    newest ``limit`` undo steps are kept.
    """

    present: Document = field(default_factory=list)
    past: tuple[Document, ...] = ()
    future: tuple[Document, ...] = ()
    limit: int | None = None

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 1:
            raise ValueError(f"History limit must be positive, got {self.limit}")

    @property
    def can_undo(self) -> bool:
        return bool(self.past)

    @property
    def can_redo(self) -> bool:
        return bool(self.future)

    def _push(self, past: tuple[Document, ...]) -> tuple[Document, ...]:
        if self.limit is not None and len(past) > self.limit:
            return past[-self.limit :]
        return past

    def set(self, document: Document) -> History:
        """Record a new present, clearing the redo stack.

        Setting a document structurally equal to the present is a no-op. The
        oldest snapshot is dropped once the limit is reached.
        """
        if document == self.present:
            return self
        return History(
            present=list(document),
            past=self._push((*self.past, self.present)),
            future=(),
            limit=self.limit,
        )

    def undo(self) -> History:
        """Step back one snapshot; no-op when there is nothing to undo."""
        if not self.past:
            return self
        return History(
            present=self.past[-1],
            past=self.past[:-1],
            future=(self.present, *self.future),
            limit=self.limit,
        )

    def redo(self) -> History:
        """Step forward one snapshot; no-op when there is nothing to redo."""
        if not self.future:
            return self
        return History(
            present=self.future[0],
            past=self._push((*self.past, self.present)),
            future=self.future[1:],
            limit=self.limit,
        )

    def replace_present(self, document: Document) -> History:
        """Swap the present without recording an undo step.

        Only for non-authoritative state such as derived back-references
        refreshed before a save; content edits always go through ``set``.
        """
        return History(
            present=list(document),
            past=self.past,
            future=self.future,
            limit=self.limit,
        )

    @classmethod
    def start(cls, document: Document, limit: int | None = None) -> History:
        """Create a history whose only snapshot is ``document``."""
        return cls(present=list(document), limit=limit)
