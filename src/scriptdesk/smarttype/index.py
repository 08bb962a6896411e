"""SmartType suggestion index.

Keeps, per project, the characters, locations, transitions and times of day
seen in a script and returns ranked prefix matches for them.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable, Iterable
from typing import Protocol

from pydantic import ValidationError

from scriptdesk.config import get_logger
from scriptdesk.document.rules import character_name
from scriptdesk.exceptions import SuggestionIndexError
from scriptdesk.models import ElementType, ScriptElement
from scriptdesk.smarttype.models import (
    DEFAULT_TIMES,
    DEFAULT_TRANSITIONS,
    SmartTypeCategory,
    SmartTypeData,
    SmartTypeEntry,
)
from scriptdesk.smarttype.stages import parse_scene_heading

logger = get_logger(__name__)


class SuggestionIndex(Protocol):
    """Contract for suggestion lookups used by the editor."""

    def get_suggestions(
        self,
        project_id: str,
        category: SmartTypeCategory,
        query_prefix: str,
        limit: int = 10,
    ) -> list[str]:
        """Return ranked values starting with ``query_prefix``."""
        ...

    def add_entry(
        self,
        project_id: str,
        category: SmartTypeCategory,
        value: str,
        is_new: bool = False,
    ) -> SmartTypeEntry | None:
        """Reinforce ``value`` or remember it for the first time."""
        ...


class SmartTypeIndex:
    """In-memory SmartType index keyed by project id."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        """Initialize an empty index.

        Args:
            clock: Source of ``last_used`` timestamps
        """
        self._projects: dict[str, SmartTypeData] = {}
        self._clock = clock

    def data(self, project_id: str) -> SmartTypeData:
        """Entries of a project, seeded with default transitions and times."""
        if project_id not in self._projects:
            self._projects[project_id] = SmartTypeData()
        return self._projects[project_id]

    def get_suggestions(
        self,
        project_id: str,
        category: SmartTypeCategory,
        query_prefix: str,
        limit: int = 10,
    ) -> list[str]:
        """Return ranked suggestions for a partially typed value.

        Matching is a case-insensitive prefix match. Results are ordered by
        frequency, then alphabetically; times of day keep their conventional
        order (DAY before DAWN). An empty query returns the most frequently
        used values.

        Args:
            project_id: Project whose entries are searched
            category: Suggestion category
            query_prefix: Text typed so far
            limit: Maximum number of suggestions

        Returns:
            Suggested values, best first
        """
        entries = self.data(project_id).entries(category)
        query = query_prefix.strip().upper()

        if not query:
            ranked = sorted(entries, key=lambda e: -e.frequency)
            return [entry.value for entry in ranked[:limit]]

        matches = [entry for entry in entries if entry.value.startswith(query)]
        if category is SmartTypeCategory.TIME_OF_DAY:
            matches.sort(key=_time_of_day_key)
        else:
            matches.sort(key=lambda e: (-e.frequency, e.value))
        return [entry.value for entry in matches[:limit]]

    def add_entry(
        self,
        project_id: str,
        category: SmartTypeCategory,
        value: str,
        is_new: bool = False,
    ) -> SmartTypeEntry | None:
        """Reinforce an existing value or add a new one.

        Args:
            project_id: Project to update
            category: Suggestion category
            value: Value to remember (stored uppercase)
            is_new: True when the user adds the value explicitly; such entries
                survive ``clear_learned`` and garbage collection

        Returns:
            The updated or created entry, or None for blank values
        """
        cleaned = value.strip().upper()
        if not cleaned:
            return None

        data = self.data(project_id)
        entry, created = self._upsert(data, category, cleaned, user_defined=is_new)
        if not created:
            return entry

        logger.debug(
            "Added SmartType entry",
            project_id=project_id,
            category=category.value,
            value=cleaned,
        )
        return entry

    def remove_entry(self, project_id: str, entry_id: str) -> bool:
        """Delete an entry from whichever category holds it."""
        data = self.data(project_id)
        for category in SmartTypeCategory:
            entries = data.entries(category)
            kept = [entry for entry in entries if entry.id != entry_id]
            if len(kept) != len(entries):
                data.set_entries(category, kept)
                return True
        return False

    def update_entry(self, project_id: str, entry_id: str, value: str) -> bool:
        """Rename an entry; returns False when the id is unknown."""
        for entry in self.data(project_id).all_entries():
            if entry.id == entry_id:
                entry.value = value.strip().upper()
                return True
        return False

    def learn_from_document(
        self, project_id: str, elements: Iterable[ScriptElement]
    ) -> None:
        """Rebuild frequencies from a whole document.

        Frequencies are reset and recounted so reloading the same script never
        double counts. Learned entries that no longer occur are dropped;
        user-defined entries and the built-in defaults are kept.

        Args:
            project_id: Project to update
            elements: Script elements to learn from
        """
        data = self.data(project_id)
        for entry in data.all_entries():
            entry.frequency = 0

        for element in elements:
            for category, value in _learnable_values(element):
                cleaned = value.strip().upper()
                if cleaned:
                    self._upsert(data, category, cleaned)

        removed = 0
        for category in SmartTypeCategory:
            entries = data.entries(category)
            kept = [e for e in entries if e.frequency > 0 or _is_protected(e)]
            removed += len(entries) - len(kept)
            data.set_entries(category, kept)

        logger.info(
            "Learned SmartType entries from document",
            project_id=project_id,
            characters=len(data.characters),
            locations=len(data.locations),
            removed=removed,
        )

    def clear_learned(self, project_id: str) -> None:
        """Drop learned entries, keeping user-defined ones and the defaults."""
        data = self.data(project_id)
        for category in SmartTypeCategory:
            data.set_entries(
                category, [e for e in data.entries(category) if _is_protected(e)]
            )

    def export_json(self, project_id: str) -> str:
        """Serialize a project's entries to JSON."""
        return self.data(project_id).model_dump_json(by_alias=True, indent=2)

    def import_json(self, project_id: str, payload: str) -> None:
        """Replace a project's entries with previously exported JSON.

        Raises:
            SuggestionIndexError: If the payload is not valid SmartType data
        """
        try:
            data = SmartTypeData.model_validate(json.loads(payload))
        except (json.JSONDecodeError, ValidationError, TypeError) as e:
            raise SuggestionIndexError(
                message="Invalid SmartType data format",
                hint="Import a file created by the SmartType export",
                details={"project_id": project_id, "error": str(e)},
            ) from e
        self._projects[project_id] = data

    def _upsert(
        self,
        data: SmartTypeData,
        category: SmartTypeCategory,
        value: str,
        user_defined: bool = False,
    ) -> tuple[SmartTypeEntry, bool]:
        """Bump the frequency of ``value`` or append it; returns (entry, created)."""
        entries = data.entries(category)
        for entry in entries:
            if entry.value == value:
                entry.frequency += 1
                entry.last_used = self._clock()
                return entry, False
        entry = SmartTypeEntry(
            category=category,
            value=value,
            frequency=1,
            last_used=self._clock(),
            user_defined=user_defined,
        )
        entries.append(entry)
        return entry, True


def _is_protected(entry: SmartTypeEntry) -> bool:
    if entry.user_defined:
        return True
    if entry.category is SmartTypeCategory.TRANSITION:
        return entry.value in DEFAULT_TRANSITIONS
    if entry.category is SmartTypeCategory.TIME_OF_DAY:
        return entry.value in DEFAULT_TIMES
    return False


def _time_of_day_key(entry: SmartTypeEntry) -> tuple[int, int, str]:
    if entry.value in DEFAULT_TIMES:
        return (DEFAULT_TIMES.index(entry.value), 0, entry.value)
    return (len(DEFAULT_TIMES), -entry.frequency, entry.value)


def _learnable_values(
    element: ScriptElement,
) -> list[tuple[SmartTypeCategory, str]]:
    """Values a single element contributes to the index."""
    if element.type is ElementType.CHARACTER:
        return [(SmartTypeCategory.CHARACTER, character_name(element.content))]
    if element.type is ElementType.TRANSITION:
        return [(SmartTypeCategory.TRANSITION, element.content)]
    if element.type is ElementType.SCENE_HEADING:
        parts = parse_scene_heading(element.content.upper())
        if parts.stage == 1:
            return []
        values = [(SmartTypeCategory.LOCATION, parts.location)]
        if parts.time:
            values.append((SmartTypeCategory.TIME_OF_DAY, parts.time))
        return values
    return []
