"""Document editing: formatting rules, structural operations and history."""

from __future__ import annotations

from .history import History
from .operations import (
    Cursor,
    EditResult,
    blur_element,
    clear_scene_number,
    commit_content,
    cycle_type,
    enrich,
    generate_from_scenes,
    merge_with_previous,
    resequence,
    set_type,
    split_element,
)

__all__ = [
    "Cursor",
    "EditResult",
    "History",
    "blur_element",
    "clear_scene_number",
    "commit_content",
    "cycle_type",
    "enrich",
    "generate_from_scenes",
    "merge_with_previous",
    "resequence",
    "set_type",
    "split_element",
]
