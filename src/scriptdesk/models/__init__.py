"""ScriptDesk Data Models.

This module defines the typed-block document model edited by the screenplay
engine. Elements are immutable; every edit operation produces new element
instances so that history snapshots can share unchanged elements safely.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ElementType(str, Enum):
    """Screenplay element types."""

    SCENE_HEADING = "scene_heading"
    ACTION = "action"
    CHARACTER = "character"
    DIALOGUE = "dialogue"
    PARENTHETICAL = "parenthetical"
    TRANSITION = "transition"


# Order used by Tab cycling and the Ctrl/Cmd+1..6 shortcuts
ELEMENT_TYPE_ORDER: tuple[ElementType, ...] = (
    ElementType.SCENE_HEADING,
    ElementType.ACTION,
    ElementType.CHARACTER,
    ElementType.DIALOGUE,
    ElementType.PARENTHETICAL,
    ElementType.TRANSITION,
)

UPPERCASE_TYPES: frozenset[ElementType] = frozenset(
    {ElementType.SCENE_HEADING, ElementType.CHARACTER, ElementType.TRANSITION}
)


def new_element_id() -> str:
    """Generate a fresh element id."""
    return str(uuid4())


class ScriptElement(BaseModel):
    """One typed block of the screenplay document."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        use_enum_values=False,
    )

    id: str = Field(default_factory=new_element_id)
    type: ElementType = ElementType.ACTION
    content: str = ""
    sequence: int = Field(default=1, ge=1)
    scene_id: str | None = Field(default=None, alias="sceneId")
    character: str | None = None
    dual: bool = False
    scene_number: str | None = Field(default=None, alias="sceneNumber")
    # Rendering hints owned by the presentation layer
    is_continued: bool | None = Field(default=None, alias="isContinued")
    continues_next: bool | None = Field(default=None, alias="continuesNext")

    def evolve(self, **changes: Any) -> ScriptElement:
        """Return a copy of this element with the given fields replaced."""
        return self.model_copy(update=changes)

    def to_storage(self) -> dict[str, Any]:
        """Serialize to the camelCase dictionary used by storage adapters."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


Document = list[ScriptElement]


class SceneOutline(BaseModel):
    """A scene from an external scene list, used for bulk script generation."""

    id: str = Field(default_factory=new_element_id)
    heading: str
    action_notes: list[str] = Field(default_factory=list, alias="actionNotes")
    sequence: int = 1

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("heading")
    @classmethod
    def heading_must_not_be_empty(cls, v: str) -> str:
        """Validate that the scene heading is not empty."""
        if not v or not v.strip():
            raise ValueError("Scene heading cannot be empty")
        return v.strip()


__all__ = [
    "ELEMENT_TYPE_ORDER",
    "UPPERCASE_TYPES",
    "Document",
    "ElementType",
    "SceneOutline",
    "ScriptElement",
    "new_element_id",
]
