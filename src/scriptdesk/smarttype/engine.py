"""SmartType suggestion computation for a focused element."""

from __future__ import annotations

from dataclasses import dataclass

from scriptdesk.config import get_logger
from scriptdesk.config.settings import ScriptDeskSettings
from scriptdesk.models import ElementType, ScriptElement
from scriptdesk.smarttype.autocomplete import SuggestionMode, is_exact_match
from scriptdesk.smarttype.index import SuggestionIndex
from scriptdesk.smarttype.models import SmartTypeCategory
from scriptdesk.smarttype.stages import parse_scene_heading, prefix_suggestions

logger = get_logger(__name__)

SUGGESTING_TYPES = frozenset(
    {ElementType.SCENE_HEADING, ElementType.CHARACTER, ElementType.TRANSITION}
)

_MODE_CATEGORIES: dict[SuggestionMode, SmartTypeCategory] = {
    SuggestionMode.LOCATION: SmartTypeCategory.LOCATION,
    SuggestionMode.TIME: SmartTypeCategory.TIME_OF_DAY,
    SuggestionMode.CHARACTER: SmartTypeCategory.CHARACTER,
    SuggestionMode.TRANSITION: SmartTypeCategory.TRANSITION,
}


@dataclass(frozen=True)
class SuggestionQuery:
    """What to look up for the current element content."""

    mode: SuggestionMode
    text: str


@dataclass(frozen=True)
class SuggestionResult:
    """Suggestions computed for one element snapshot."""

    element_id: str
    content: str
    mode: SuggestionMode | None = None
    suggestions: tuple[str, ...] = ()
    exact_match: bool = False


def suggestion_query(element: ScriptElement) -> SuggestionQuery | None:
    """Work out the lookup for an element, or None when nothing is suggested."""
    content = element.content.upper()
    if element.type is ElementType.CHARACTER:
        query = SuggestionQuery(SuggestionMode.CHARACTER, content.strip())
    elif element.type is ElementType.TRANSITION:
        query = SuggestionQuery(SuggestionMode.TRANSITION, content.strip())
    elif element.type is ElementType.SCENE_HEADING:
        parts = parse_scene_heading(content)
        if parts.stage == 1:
            query = SuggestionQuery(SuggestionMode.PREFIX, content.strip())
        elif parts.stage == 2:
            query = SuggestionQuery(SuggestionMode.LOCATION, parts.location.strip())
        else:
            query = SuggestionQuery(SuggestionMode.TIME, parts.time.strip())
    else:
        return None
    return query if query.text else None


def debounce_ms(element: ScriptElement, settings: ScriptDeskSettings) -> int | None:
    """Suggestion debounce for an element, or None when it gets no suggestions.

    Character cues and transitions refresh immediately; scene headings use the
    short delay while a prefix or a time of day is typed and the regular delay
    for locations.
    """
    if element.type in (ElementType.CHARACTER, ElementType.TRANSITION):
        return settings.suggestion_debounce_immediate_ms
    if element.type is ElementType.SCENE_HEADING:
        stage = parse_scene_heading(element.content.upper()).stage
        if stage in (1, 3):
            return settings.suggestion_debounce_scene_ms
        return settings.suggestion_debounce_ms
    return None


def compute_suggestions(
    index: SuggestionIndex,
    project_id: str,
    element: ScriptElement,
    limit: int = 10,
) -> SuggestionResult:
    """Compute suggestions for the current content of an element.

    Index failures are logged and degrade to no suggestions. A single
    suggestion equal to what was typed is reported as an exact match so the
    menu stays closed.

    Args:
        index: Suggestion index to query
        project_id: Project whose entries are used
        element: Focused element
        limit: Maximum number of suggestions

    Returns:
        The suggestion result for this element snapshot
    """
    result = SuggestionResult(element_id=element.id, content=element.content)
    query = suggestion_query(element)
    if query is None:
        return result

    if query.mode is SuggestionMode.PREFIX:
        suggestions = prefix_suggestions(query.text)[:limit]
    else:
        try:
            suggestions = index.get_suggestions(
                project_id, _MODE_CATEGORIES[query.mode], query.text, limit
            )
        except Exception as e:
            logger.warning(
                "Suggestion lookup failed",
                project_id=project_id,
                mode=query.mode.value,
                error=str(e),
            )
            return result

    if is_exact_match(suggestions, query.text):
        return SuggestionResult(
            element_id=element.id,
            content=element.content,
            mode=query.mode,
            exact_match=True,
        )
    return SuggestionResult(
        element_id=element.id,
        content=element.content,
        mode=query.mode,
        suggestions=tuple(suggestions[:limit]),
    )


def apply_suggestion(content: str, mode: SuggestionMode, suggestion: str) -> str:
    """Rewrite element content with an accepted suggestion.

    Args:
        content: Current element content
        mode: Mode the menu was showing
        suggestion: Accepted value

    Returns:
        The new element content
    """
    if mode is SuggestionMode.PREFIX:
        return f"{suggestion} "
    if mode in (SuggestionMode.LOCATION, SuggestionMode.TIME):
        parts = parse_scene_heading(content.upper())
        prefix = parts.prefix.strip()
        if mode is SuggestionMode.LOCATION:
            return f"{prefix} {suggestion}"
        return f"{prefix} {parts.location.strip()} - {suggestion}"
    return suggestion


def reinforce(
    index: SuggestionIndex,
    project_id: str,
    mode: SuggestionMode,
    suggestion: str,
) -> None:
    """Record an accepted suggestion; prefix acceptances are not remembered."""
    category = _MODE_CATEGORIES.get(mode)
    if category is None:
        return
    try:
        index.add_entry(project_id, category, suggestion, False)
    except Exception as e:
        logger.warning(
            "Could not reinforce suggestion",
            project_id=project_id,
            mode=mode.value,
            error=str(e),
        )
