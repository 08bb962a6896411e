"""Staged scene-heading parsing for SmartType.

A scene heading is typed in three stages:

1. no ``INT.``/``EXT.`` prefix yet: suggest prefixes
2. prefix typed: suggest bare locations
3. a ``" - "`` separator typed: suggest times of day
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from scriptdesk.document.rules import SCENE_PREFIX

SCENE_PREFIXES: tuple[str, ...] = ("INT.", "EXT.", "I/E")

_PREFIX_RE = re.compile(rf"^{SCENE_PREFIX}\s+", re.IGNORECASE)
_SEPARATOR_RE = re.compile(r"\s+-\s+")


@dataclass(frozen=True)
class SceneHeadingParts:
    """Result of staged scene-heading parsing."""

    stage: int
    prefix: str = ""
    location: str = ""
    time: str = ""


def parse_scene_heading(content: str) -> SceneHeadingParts:
    """Split partially typed heading text into its stage and parts.

    The location is everything between the prefix and the last ``" - "``
    separator, so locations may contain dashes themselves.

    Args:
        content: Current scene heading content

    Returns:
        Parsed parts; ``prefix`` keeps its trailing whitespace
    """
    match = _PREFIX_RE.match(content)
    if not match:
        return SceneHeadingParts(stage=1, location=content)

    prefix = match.group(0)
    rest = content[match.end() :]
    parts = _SEPARATOR_RE.split(rest)
    if len(parts) > 1:
        return SceneHeadingParts(
            stage=3,
            prefix=prefix,
            location=" - ".join(parts[:-1]),
            time=parts[-1],
        )
    return SceneHeadingParts(stage=2, prefix=prefix, location=rest)


def prefix_suggestions(content: str) -> list[str]:
    """Scene prefixes completing ``content``; empty once a prefix is complete."""
    typed = content.strip().upper()
    if not typed or typed in SCENE_PREFIXES:
        return []
    return [prefix for prefix in SCENE_PREFIXES if prefix.startswith(typed)]
