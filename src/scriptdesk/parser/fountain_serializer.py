"""Canonical text serializer and Auto-Format.

The serializer normalizes each element while writing it and adds a force
marker whenever the parser's heuristics would read the block back as a
different type. This keeps ``serialize(parse(serialize(doc)))`` equal to
``serialize(doc)`` for every document.
"""

from __future__ import annotations

import re

from scriptdesk.config import get_logger
from scriptdesk.document.rules import (
    DUAL_CARET,
    format_scene_heading,
    has_dual_caret,
    is_scene_heading,
    is_transition,
)
from scriptdesk.models import Document, ElementType, ScriptElement
from scriptdesk.parser.fountain_models import TITLE_PAGE_ORDER, TitlePage
from scriptdesk.parser.fountain_parser import (
    FORCE_ACTION,
    FORCE_CHARACTER,
    FORCE_HEADING,
    FORCE_MARKERS,
    FORCE_TRANSITION,
    FountainParser,
    clean_lines,
    is_all_caps,
    is_parenthetical_line,
    normalize_newlines,
)

logger = get_logger(__name__)

SCENE_LABEL_RE = re.compile(r"[a-zA-Z0-9.\-]+")

SPEECH_TYPES = frozenset({ElementType.DIALOGUE, ElementType.PARENTHETICAL})


def _single_line(content: str) -> str:
    return " ".join(clean_lines(content))


def _heading_block(element: ScriptElement) -> str | None:
    text = format_scene_heading(_single_line(element.content).lstrip(". "))
    if not text:
        return None
    if element.scene_number and SCENE_LABEL_RE.fullmatch(element.scene_number):
        text = f"{text} #{element.scene_number}#"
    if is_scene_heading(text):
        return text
    return FORCE_HEADING + text


def _transition_block(element: ScriptElement) -> str | None:
    text = _single_line(element.content).upper()
    if not text:
        return None
    natural = (
        text[0] not in FORCE_MARKERS
        and is_all_caps(text)
        and is_transition(text)
        and not is_scene_heading(text)
    )
    return text if natural else FORCE_TRANSITION + text


def _cue_line(element: ScriptElement, has_body: bool) -> str | None:
    name = _single_line(element.content).upper()
    if not name:
        return None
    if element.dual and not has_dual_caret(name):
        name = f"{name} {DUAL_CARET}"
    forced = (
        not has_body
        or name[0] in FORCE_MARKERS
        or not is_all_caps(name)
        or is_scene_heading(name)
    )
    return FORCE_CHARACTER + name if forced else name


def _speech_lines(element: ScriptElement) -> list[str]:
    if element.type is ElementType.PARENTHETICAL:
        text = _single_line(element.content)
        if not text:
            return []
        return [text if is_parenthetical_line(text) else f"({text})"]
    return clean_lines(element.content)


def _needs_action_marker(paragraph: list[str]) -> bool:
    first = paragraph[0]
    if first[0] in FORCE_MARKERS or is_scene_heading(first):
        return True
    if len(paragraph) == 1:
        return is_all_caps(first) and is_transition(first)
    return is_all_caps(first)


def _action_blocks(content: str) -> list[str]:
    """Split action text into paragraphs, forcing any that read as another type."""
    blocks: list[str] = []
    paragraph: list[str] = []
    for raw in [*normalize_newlines(content).split("\n"), ""]:
        line = raw.strip()
        if line:
            paragraph.append(line)
            continue
        if paragraph:
            if _needs_action_marker(paragraph):
                paragraph[0] = FORCE_ACTION + paragraph[0]
            blocks.append("\n".join(paragraph))
            paragraph = []
    return blocks


class FountainSerializer:
    """Write documents as canonical screenplay text."""

    def serialize(self, document: Document) -> str:
        """Serialize a document to canonical text.

        Blank elements are dropped. Dialogue and parentheticals that do not
        follow a character cue are written as action.

        Args:
            document: Document to serialize

        Returns:
            Canonical text, one blank line between blocks and a trailing
            newline; empty for an empty document
        """
        blocks: list[str] = []
        index = 0
        while index < len(document):
            element = document[index]
            index += 1

            if element.type is ElementType.CHARACTER:
                body: list[str] = []
                while index < len(document) and document[index].type in SPEECH_TYPES:
                    body.extend(_speech_lines(document[index]))
                    index += 1
                cue = _cue_line(element, has_body=bool(body))
                if cue is not None:
                    blocks.append("\n".join([cue, *body]))
                elif body:
                    blocks.extend(_action_blocks("\n".join(body)))
            elif element.type is ElementType.SCENE_HEADING:
                heading = _heading_block(element)
                if heading is not None:
                    blocks.append(heading)
            elif element.type is ElementType.TRANSITION:
                transition = _transition_block(element)
                if transition is not None:
                    blocks.append(transition)
            elif element.type in SPEECH_TYPES:
                blocks.extend(_action_blocks("\n".join(_speech_lines(element))))
            else:
                blocks.extend(_action_blocks(element.content))

        if not blocks:
            return ""
        return "\n\n".join(blocks) + "\n"

    def serialize_script(
        self, document: Document, title_page: TitlePage | None = None
    ) -> str:
        """Serialize a document with an optional leading title page."""
        body = self.serialize(document)
        if title_page is None or title_page.is_empty():
            return body

        keys = [k for k in TITLE_PAGE_ORDER if k in title_page.values]
        keys += [k for k in title_page.values if k not in TITLE_PAGE_ORDER]
        lines = []
        for key in keys:
            value = _single_line(title_page.values[key])
            if value:
                lines.append(f"{key.title()}: {value}")
        header = "\n".join(lines)
        return f"{header}\n\n{body}" if body else f"{header}\n"


def serialize(document: Document) -> str:
    """Serialize a document to canonical text."""
    return FountainSerializer().serialize(document)


def serialize_script(document: Document, title_page: TitlePage | None = None) -> str:
    """Serialize a document with an optional title page."""
    return FountainSerializer().serialize_script(document, title_page)


def auto_format(document: Document) -> Document:
    """Normalize a document by round-tripping it through canonical text.

    Element ids are regenerated. Running it twice yields the same canonical
    text both times.
    """
    text = serialize(document)
    formatted = FountainParser().parse(text)
    logger.info(
        "Auto-formatted document",
        before_count=len(document),
        after_count=len(formatted),
    )
    return formatted
