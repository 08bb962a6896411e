"""Screenplay formatting rules shared by live editing and the Fountain parser.

Type inference is an ordered rule table evaluated top to bottom on every
content commit; the first matching rule decides the type, even when the element
already has that type, so committing the same content twice never flips it.
Rule order matters: a line such as ``INT. STAIRWELL - CUT TO:`` is a
transition, not a scene heading, because the transition rule is listed first.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from scriptdesk.models import ElementType

# INT./EXT. style prefixes, longest alternatives first
SCENE_PREFIX = r"(INT\.?/?\s?EXT\.?|EXT\.?/?\s?INT\.?|INT\.?|EXT\.?|I/?E\.?)"

# Prefix followed by whitespace or end of text (used for type promotion)
SCENE_HEADING_RE = re.compile(rf"^{SCENE_PREFIX}(?=\s|$)", re.IGNORECASE)

SCENE_NUMBER_RE = re.compile(r"\s#([a-zA-Z0-9.\-]+)#$")

TRANSITION_SUFFIX = " TO:"
FADE_OUT = "FADE OUT."

DUAL_CARET = "^"

_NEXT_TYPE: dict[ElementType, ElementType] = {
    ElementType.SCENE_HEADING: ElementType.ACTION,
    ElementType.CHARACTER: ElementType.DIALOGUE,
    ElementType.DIALOGUE: ElementType.CHARACTER,
    ElementType.PARENTHETICAL: ElementType.DIALOGUE,
    ElementType.TRANSITION: ElementType.SCENE_HEADING,
}

_CHARACTER_EXTENSION_RE = re.compile(r"\s*\(.*?\)\s*")


def next_element_type(current: ElementType) -> ElementType:
    """Type of the element created when Enter is pressed on ``current``."""
    return _NEXT_TYPE.get(current, ElementType.ACTION)


def is_scene_heading(text: str) -> bool:
    """Whether text starts with a recognized INT./EXT./I-E prefix."""
    return SCENE_HEADING_RE.match(text.upper()) is not None


def is_transition(text: str) -> bool:
    """Whether text reads as a transition under live auto-detection."""
    upper = text.upper()
    return upper.endswith(TRANSITION_SUFFIX) or upper == FADE_OUT


@dataclass(frozen=True)
class TypeRule:
    """A single type-inference rule."""

    name: str
    target: ElementType
    matches: Callable[[str], bool]


TYPE_RULES: tuple[TypeRule, ...] = (
    TypeRule("transition_suffix", ElementType.TRANSITION, is_transition),
    TypeRule("scene_heading_prefix", ElementType.SCENE_HEADING, is_scene_heading),
)


def infer_type(content: str, current: ElementType) -> ElementType:
    """Apply the promotion rule table to freshly committed content.

    Args:
        content: The element content after the keystroke
        current: The element's current type

    Returns:
        Target of the first matching rule, or ``current`` when no rule
        matches
    """
    for rule in TYPE_RULES:
        if rule.matches(content):
            return rule.target
    return current


def format_scene_heading(content: str) -> str:
    """Normalize a scene heading the way the editor does on blur.

    Uppercases, adds the period after a bare ``INT``/``EXT`` prefix and
    collapses whitespace around ``-`` separators. Hyphens inside words
    (``SELF-STORAGE``) are left alone.
    """
    formatted = content.upper()
    formatted = re.sub(r"^(INT|EXT)(\s)", r"\1.\2", formatted)
    formatted = re.sub(r"^(INT|EXT)$", r"\1.", formatted)
    formatted = re.sub(r"\s+-\s*|\s*-\s+", " - ", formatted)
    formatted = re.sub(r"\s+", " ", formatted)
    return formatted.strip()


def extract_scene_number(content: str) -> tuple[str, str | None]:
    """Split a trailing ``#label#`` scene number off a heading.

    Returns:
        Tuple of (content without the label, label or None)
    """
    match = SCENE_NUMBER_RE.search(content)
    if not match:
        return content, None
    return content[: match.start()], match.group(1)


def has_dual_caret(content: str) -> bool:
    """Whether a character cue carries the dual-dialogue caret."""
    return content.strip().endswith(DUAL_CARET)


def strip_dual_caret(content: str) -> str:
    """Remove a trailing dual-dialogue caret and the whitespace before it."""
    stripped = content.rstrip()
    if stripped.endswith(DUAL_CARET):
        return stripped[: -len(DUAL_CARET)].rstrip()
    return content


def character_name(cue: str) -> str:
    """Speaker name of a character cue without caret or extensions."""
    name = _CHARACTER_EXTENSION_RE.sub(" ", cue).replace(DUAL_CARET, "")
    return " ".join(name.split()).upper()
