"""Structural edit operations on a screenplay document.

Every operation is pure: it takes a document (a list of immutable
``ScriptElement`` objects) and returns an ``EditResult`` holding a new list.
Sequence numbers are recomputed after every structural change so that
``element.sequence == index + 1`` always holds for committed documents.
Unknown element ids leave the document untouched.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from scriptdesk.config import get_logger
from scriptdesk.document.rules import (
    DUAL_CARET,
    character_name,
    extract_scene_number,
    format_scene_heading,
    has_dual_caret,
    infer_type,
    next_element_type,
    strip_dual_caret,
)
from scriptdesk.models import (
    ELEMENT_TYPE_ORDER,
    UPPERCASE_TYPES,
    Document,
    ElementType,
    SceneOutline,
    ScriptElement,
    new_element_id,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class Cursor:
    """Caret position inside an element."""

    element_id: str
    offset: int


@dataclass(frozen=True)
class EditResult:
    """Outcome of an edit operation."""

    document: Document
    cursor: Cursor | None = None
    changed: bool = True


def _unchanged(document: Document) -> EditResult:
    return EditResult(document=document, cursor=None, changed=False)


def find_index(document: Document, element_id: str) -> int:
    """Index of the element with ``element_id`` or -1."""
    for index, element in enumerate(document):
        if element.id == element_id:
            return index
    return -1


def resequence(elements: Iterable[ScriptElement]) -> Document:
    """Renumber elements 1..N in list order.

    Elements whose sequence is already correct are reused as-is.
    """
    result: Document = []
    for position, element in enumerate(elements, start=1):
        if element.sequence != position:
            element = element.evolve(sequence=position)
        result.append(element)
    return result


def _with_type(element: ScriptElement, new_type: ElementType) -> ScriptElement:
    """Retype an element, keeping the per-type field invariants."""
    content = element.content
    if new_type in UPPERCASE_TYPES:
        content = content.upper()
    changes: dict[str, object] = {"type": new_type, "content": content}
    if new_type is not ElementType.CHARACTER:
        changes["dual"] = False
    if new_type is not ElementType.SCENE_HEADING:
        changes["scene_number"] = None
    return element.evolve(**changes)


def split_element(document: Document, element_id: str, position: int) -> EditResult:
    """Split an element at the cursor (Enter).

    The text after the cursor moves into a new element inserted right after
    the current one, typed by the Enter adjacency table. An empty character or
    dialogue line is retyped to action instead of being split.

    Args:
        document: Current document
        element_id: Id of the focused element
        position: Cursor offset within the element content

    Returns:
        Edit result with the cursor at the start of the new element
    """
    index = find_index(document, element_id)
    if index == -1:
        return _unchanged(document)

    current = document[index]
    if (
        current.type in (ElementType.CHARACTER, ElementType.DIALOGUE)
        and not current.content.strip()
    ):
        updated = list(document)
        updated[index] = _with_type(current, ElementType.ACTION)
        return EditResult(
            document=resequence(updated),
            cursor=Cursor(current.id, 0),
        )

    position = max(0, min(position, len(current.content)))
    before = current.content[:position]
    after = current.content[position:]
    if current.type is ElementType.CHARACTER and before.rstrip().endswith(
        DUAL_CARET
    ):
        before = strip_dual_caret(before)

    scene_id = (
        current.id if current.type is ElementType.SCENE_HEADING else current.scene_id
    )
    new_type = next_element_type(current.type)
    new_element = ScriptElement(
        id=new_element_id(),
        type=new_type,
        content=after.upper() if new_type in UPPERCASE_TYPES else after,
        sequence=index + 2,
        scene_id=scene_id,
    )

    updated = list(document)
    updated[index] = current.evolve(content=before)
    updated.insert(index + 1, new_element)
    return EditResult(
        document=resequence(updated),
        cursor=Cursor(new_element.id, 0),
    )


def merge_with_previous(document: Document, element_id: str) -> EditResult:
    """Merge an element into its predecessor (Backspace at offset 0).

    Returns:
        Edit result with the cursor at the join point, or an unchanged result
        for the first element
    """
    index = find_index(document, element_id)
    if index <= 0:
        return _unchanged(document)

    previous = document[index - 1]
    current = document[index]
    join_offset = len(previous.content)

    updated = list(document)
    updated[index - 1] = previous.evolve(content=previous.content + current.content)
    del updated[index]
    return EditResult(
        document=resequence(updated),
        cursor=Cursor(previous.id, join_offset),
    )


def cycle_type(
    document: Document, element_id: str, reverse: bool = False
) -> EditResult:
    """Cycle an element through the fixed type order (Tab / Shift+Tab)."""
    index = find_index(document, element_id)
    if index == -1:
        return _unchanged(document)

    current = document[index]
    step = -1 if reverse else 1
    position = ELEMENT_TYPE_ORDER.index(current.type)
    new_type = ELEMENT_TYPE_ORDER[(position + step) % len(ELEMENT_TYPE_ORDER)]
    return set_type(document, element_id, new_type)


def set_type(document: Document, element_id: str, new_type: ElementType) -> EditResult:
    """Force an element to a given type (Ctrl/Cmd+1..6)."""
    index = find_index(document, element_id)
    if index == -1:
        return _unchanged(document)

    current = document[index]
    retyped = _with_type(current, new_type)
    if retyped == current:
        return _unchanged(document)

    updated = list(document)
    updated[index] = retyped
    return EditResult(document=resequence(updated))


def normalize_committed(element: ScriptElement) -> ScriptElement:
    """Apply the per-type normalization run after every content change.

    Uppercases heading/cue/transition content, extracts a trailing scene
    number from headings and tracks the dual-dialogue caret on cues.
    """
    content = element.content
    changes: dict[str, object] = {}

    if element.type in UPPERCASE_TYPES:
        content = content.upper()

    if element.type is ElementType.SCENE_HEADING:
        content, scene_number = extract_scene_number(content)
        if scene_number is not None:
            changes["scene_number"] = scene_number

    if element.type is ElementType.CHARACTER:
        if has_dual_caret(content):
            changes["dual"] = True
        elif DUAL_CARET not in content:
            changes["dual"] = False

    changes["content"] = content
    return element.evolve(**changes)


def commit_content(document: Document, element_id: str, content: str) -> EditResult:
    """Store new content for an element after a keystroke.

    Runs the ordered promotion rules (transition, then scene heading) before
    normalizing the element for its resulting type.

    Args:
        document: Current document
        element_id: Id of the edited element
        content: Full element content after the keystroke

    Returns:
        Edit result; ``changed`` is False when nothing differs
    """
    index = find_index(document, element_id)
    if index == -1:
        return _unchanged(document)

    current = document[index]
    new_type = infer_type(content, current.type)
    if new_type is not current.type:
        logger.debug(
            "Promoted element type",
            element_id=element_id,
            from_type=current.type.value,
            to_type=new_type.value,
        )
        candidate = _with_type(current.evolve(content=content), new_type)
    else:
        candidate = current.evolve(content=content)

    committed = normalize_committed(candidate)
    if committed == current:
        return _unchanged(document)

    updated = list(document)
    updated[index] = committed
    return EditResult(document=resequence(updated))


def blur_element(document: Document, element_id: str) -> EditResult:
    """Normalize an element when it loses focus."""
    index = find_index(document, element_id)
    if index == -1:
        return _unchanged(document)

    current = document[index]
    if current.type not in UPPERCASE_TYPES:
        return _unchanged(document)

    if current.type is ElementType.SCENE_HEADING:
        content = format_scene_heading(current.content)
    else:
        content = current.content.upper()

    normalized = normalize_committed(current.evolve(content=content))
    if normalized == current:
        return _unchanged(document)

    updated = list(document)
    updated[index] = normalized
    return EditResult(document=updated)


def clear_scene_number(document: Document, element_id: str) -> EditResult:
    """Remove the scene number label of a heading, leaving its content."""
    index = find_index(document, element_id)
    if index == -1 or document[index].scene_number is None:
        return _unchanged(document)

    updated = list(document)
    updated[index] = document[index].evolve(scene_number=None)
    return EditResult(document=updated)


def enrich(document: Document) -> Document:
    """Fill derived back-references before persistence.

    Every element gets the id of the scene heading it belongs to (headings
    own themselves) and dialogue/parentheticals get the name of the speaking
    character. Sequence numbers are recomputed as well.
    """
    result: Document = []
    scene_id: str | None = None
    speaker: str | None = None

    for position, element in enumerate(document, start=1):
        changes: dict[str, object] = {"sequence": position}
        if element.type is ElementType.SCENE_HEADING:
            scene_id = element.id
            speaker = None
        elif element.type is ElementType.CHARACTER:
            speaker = character_name(element.content) or None
        elif element.type not in (ElementType.DIALOGUE, ElementType.PARENTHETICAL):
            speaker = None

        changes["scene_id"] = scene_id if scene_id is not None else element.scene_id
        if element.type in (ElementType.DIALOGUE, ElementType.PARENTHETICAL):
            changes["character"] = speaker
        elif element.type is not ElementType.CHARACTER:
            changes["character"] = None

        updated = element.evolve(**changes)
        result.append(element if updated == element else updated)
    return result


def generate_from_scenes(scenes: Iterable[SceneOutline]) -> Document:
    """Build a starter document from an external scene list.

    Each scene becomes an uppercased heading followed by one action element per
    non-blank action note.
    """
    elements: Document = []
    for scene in sorted(scenes, key=lambda s: s.sequence):
        content, scene_number = extract_scene_number(scene.heading.upper())
        elements.append(
            ScriptElement(
                type=ElementType.SCENE_HEADING,
                content=content,
                scene_id=scene.id,
                scene_number=scene_number,
            )
        )
        for note in scene.action_notes:
            if note.strip():
                elements.append(
                    ScriptElement(
                        type=ElementType.ACTION,
                        content=note.strip(),
                        scene_id=scene.id,
                    )
                )
    logger.info("Generated script from scene list", element_count=len(elements))
    return resequence(elements)
