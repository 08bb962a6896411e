"""Fountain-style canonical text parser.

Canonical text is a sequence of blank-line-delimited blocks. Only the first
line of a block decides its type; a leading force marker overrides the
heuristics:

``.`` scene heading, ``!`` action, ``@`` character cue, ``>`` transition.

Parsing never fails: anything unrecognized becomes an action element.
"""

from __future__ import annotations

import re
from typing import Any

from jouvence.parser import JouvenceParser

from scriptdesk.config import get_logger
from scriptdesk.document.operations import enrich, resequence
from scriptdesk.document.rules import (
    extract_scene_number,
    format_scene_heading,
    has_dual_caret,
    is_scene_heading,
    is_transition,
)
from scriptdesk.models import Document, ElementType, ScriptElement
from scriptdesk.parser.fountain_models import AUTHOR_KEYS, ParsedScript, TitlePage

logger = get_logger(__name__)

FORCE_HEADING = "."
FORCE_ACTION = "!"
FORCE_CHARACTER = "@"
FORCE_TRANSITION = ">"
FORCE_MARKERS = FORCE_HEADING + FORCE_ACTION + FORCE_CHARACTER + FORCE_TRANSITION

BONEYARD_PATTERN = re.compile(r"/\*.*?\*/", re.DOTALL)

TITLE_KEY_PATTERN = re.compile(
    r"^(title|credit|author|authors|writer|writers|written by|source|"
    r"draft date|date|contact|copyright|notes|episode|season|series|project)"
    r"\s*:",
    re.IGNORECASE,
)


def normalize_newlines(text: str) -> str:
    """Convert CRLF and CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def clean_lines(content: str) -> list[str]:
    """Split content into stripped, non-blank lines."""
    lines = (line.strip() for line in normalize_newlines(content).split("\n"))
    return [line for line in lines if line]


def is_all_caps(line: str) -> bool:
    """Whether a line has letters and no lowercase characters."""
    return any(ch.isalpha() for ch in line) and line == line.upper()


def is_parenthetical_line(line: str) -> bool:
    return line.startswith("(") and line.endswith(")")


def split_blocks(text: str) -> list[list[str]]:
    """Group stripped lines into blank-line-delimited blocks."""
    blocks: list[list[str]] = []
    current: list[str] = []
    for raw in normalize_newlines(text).split("\n"):
        line = raw.strip()
        if line:
            current.append(line)
        elif current:
            blocks.append(current)
            current = []
    if current:
        blocks.append(current)
    return blocks


class FountainParser:
    """Parse canonical screenplay text into typed elements."""

    def parse(self, text: str) -> Document:
        """Parse canonical text into a document.

        Args:
            text: Canonical (Fountain-like) screenplay text

        Returns:
            Document with fresh ids, sequence numbers, scene ids and linked
            characters
        """
        elements: list[ScriptElement] = []
        for block in split_blocks(text):
            elements.extend(self._parse_block(block))
        return enrich(resequence(elements))

    def parse_script(self, text: str) -> ParsedScript:
        """Parse a full Fountain script, including its title page.

        Boneyard comments are removed before parsing. A leading block of
        ``Key: value`` lines is read as the title page.

        Args:
            text: Raw Fountain text

        Returns:
            ParsedScript with elements and title page metadata
        """
        cleaned = self._apply_boneyard_workaround(normalize_newlines(text))
        title_block, body = self._split_title_page(cleaned)

        title_page = self._read_title_page(title_block) if title_block else TitlePage()
        metadata: dict[str, Any] = {
            key: value
            for key, value in title_page.values.items()
            if key != "title" and key not in AUTHOR_KEYS
        }
        for key in ("episode", "season"):
            if key in metadata:
                try:
                    metadata[key] = int(metadata[key])
                except (ValueError, TypeError):
                    logger.debug("Keeping non-numeric title value", key=key)

        elements = self.parse(body)
        logger.debug(
            "Parsed script",
            element_count=len(elements),
            has_title_page=bool(title_block),
        )
        return ParsedScript(
            elements=elements,
            title=title_page.title,
            author=title_page.author,
            metadata=metadata,
        )

    def _apply_boneyard_workaround(self, content: str) -> str:
        """Strip boneyard comments (``/* ... */``).

        jouvence 0.4.x can loop forever on some boneyard blocks, and boneyard
        text is never part of the screenplay body anyway.

        Args:
            content: Raw Fountain text

        Returns:
            Content with boneyard comments removed
        """
        return BONEYARD_PATTERN.sub("", content)

    def _split_title_page(self, text: str) -> tuple[str, str]:
        """Separate a leading title page block from the body."""
        stripped = text.lstrip("\n")
        first_line = stripped.split("\n", 1)[0].strip()
        if not TITLE_KEY_PATTERN.match(first_line):
            return "", text
        block, _, body = stripped.partition("\n\n")
        return block, body

    def _read_title_page(self, block: str) -> TitlePage:
        """Read title page key/values with jouvence."""
        try:
            doc = JouvenceParser().parseString(block + "\n\n")
        except (ValueError, TypeError, AttributeError, RuntimeError) as e:
            logger.warning("Could not read title page", error=str(e))
            return TitlePage()
        values = {
            str(key).lower(): str(value).strip()
            for key, value in (doc.title_values or {}).items()
        }
        return TitlePage(values)

    def _parse_block(self, lines: list[str]) -> list[ScriptElement]:
        """Classify one block by its first line."""
        first, rest = lines[0], lines[1:]

        if first.startswith(FORCE_HEADING) and not first.startswith(".."):
            return [self._heading(first[1:].strip()), *self._parse_rest(rest)]
        if first.startswith(FORCE_ACTION):
            forced = [line for line in (first[1:].strip(), *rest) if line]
            return [self._action(forced)]
        if first.startswith(FORCE_CHARACTER):
            return self._speech(first[1:].strip(), rest)
        if first.startswith(FORCE_TRANSITION):
            return [self._transition(first[1:].strip()), *self._parse_rest(rest)]

        if is_scene_heading(first):
            return [self._heading(first), *self._parse_rest(rest)]
        if not rest and is_all_caps(first) and is_transition(first):
            return [self._transition(first)]
        if rest and is_all_caps(first):
            return self._speech(first, rest)
        return [self._action(lines)]

    def _parse_rest(self, rest: list[str]) -> list[ScriptElement]:
        return self._parse_block(rest) if rest else []

    def _heading(self, line: str) -> ScriptElement:
        content, scene_number = extract_scene_number(line)
        return ScriptElement(
            type=ElementType.SCENE_HEADING,
            content=format_scene_heading(content),
            scene_number=scene_number,
        )

    def _transition(self, line: str) -> ScriptElement:
        return ScriptElement(type=ElementType.TRANSITION, content=line.upper())

    def _action(self, lines: list[str]) -> ScriptElement:
        return ScriptElement(type=ElementType.ACTION, content="\n".join(lines))

    def _speech(self, cue: str, body: list[str]) -> list[ScriptElement]:
        """Build a character cue followed by its dialogue and parentheticals."""
        name = cue.upper()
        elements = [
            ScriptElement(
                type=ElementType.CHARACTER,
                content=name,
                dual=has_dual_caret(name),
            )
        ]
        dialogue: list[str] = []
        for line in body:
            if is_parenthetical_line(line):
                if dialogue:
                    elements.append(self._dialogue(dialogue))
                    dialogue = []
                elements.append(
                    ScriptElement(type=ElementType.PARENTHETICAL, content=line)
                )
            else:
                dialogue.append(line)
        if dialogue:
            elements.append(self._dialogue(dialogue))
        return elements

    def _dialogue(self, lines: list[str]) -> ScriptElement:
        return ScriptElement(type=ElementType.DIALOGUE, content="\n".join(lines))


def parse(text: str) -> Document:
    """Parse canonical text into a document."""
    return FountainParser().parse(text)


def parse_script(text: str) -> ParsedScript:
    """Parse a Fountain script including its title page."""
    return FountainParser().parse_script(text)
