"""SmartType context-aware autocompletion."""

from __future__ import annotations

from .autocomplete import (
    IDLE,
    AutocompleteState,
    ClosedExactMatch,
    ClosedSelection,
    Idle,
    Showing,
    SuggestionMode,
    is_exact_match,
    transition,
)
from .engine import (
    SuggestionResult,
    apply_suggestion,
    compute_suggestions,
    debounce_ms,
    reinforce,
)
from .index import SmartTypeIndex, SuggestionIndex
from .models import SmartTypeCategory, SmartTypeData, SmartTypeEntry
from .stages import SCENE_PREFIXES, SceneHeadingParts, parse_scene_heading

__all__ = [
    "IDLE",
    "SCENE_PREFIXES",
    "AutocompleteState",
    "ClosedExactMatch",
    "ClosedSelection",
    "Idle",
    "SceneHeadingParts",
    "Showing",
    "SmartTypeCategory",
    "SmartTypeData",
    "SmartTypeEntry",
    "SmartTypeIndex",
    "SuggestionIndex",
    "SuggestionMode",
    "SuggestionResult",
    "apply_suggestion",
    "compute_suggestions",
    "debounce_ms",
    "is_exact_match",
    "parse_scene_heading",
    "reinforce",
    "transition",
]
