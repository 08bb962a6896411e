"""Data models for the SmartType suggestion index."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from scriptdesk.models import new_element_id


class SmartTypeCategory(str, Enum):
    """Suggestion categories kept per project."""

    CHARACTER = "character"
    LOCATION = "location"
    TRANSITION = "transition"
    TIME_OF_DAY = "time_of_day"


DEFAULT_TRANSITIONS: tuple[str, ...] = (
    "CUT TO:",
    "FADE TO:",
    "DISSOLVE TO:",
    "FADE OUT.",
    "FADE IN:",
    "SMASH CUT TO:",
    "MATCH CUT TO:",
    "JUMP CUT TO:",
    "CROSSFADE TO:",
)

# Order matters: time-of-day suggestions keep this order (DAY before DAWN)
DEFAULT_TIMES: tuple[str, ...] = (
    "DAY",
    "NIGHT",
    "DAWN",
    "DUSK",
    "MORNING",
    "AFTERNOON",
    "EVENING",
    "CONTINUOUS",
    "LATER",
    "MOMENTS LATER",
    "SAME TIME",
)


class SmartTypeEntry(BaseModel):
    """A single remembered value."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(default_factory=new_element_id)
    category: SmartTypeCategory = Field(alias="type")
    value: str
    frequency: int = Field(default=0, ge=0)
    last_used: float = Field(default=0.0, alias="lastUsed")
    user_defined: bool = Field(default=False, alias="userDefined")

    @field_validator("value")
    @classmethod
    def normalize_value(cls, v: str) -> str:
        """Screenplay values are stored trimmed and uppercase."""
        return v.strip().upper()


def _defaults(
    category: SmartTypeCategory, values: tuple[str, ...]
) -> list[SmartTypeEntry]:
    if category is SmartTypeCategory.TIME_OF_DAY:
        prefix = "default_time"
    else:
        prefix = "default_trans"
    return [
        SmartTypeEntry(id=f"{prefix}_{i}", category=category, value=value)
        for i, value in enumerate(values)
    ]


_CATEGORY_FIELDS: dict[SmartTypeCategory, str] = {
    SmartTypeCategory.CHARACTER: "characters",
    SmartTypeCategory.LOCATION: "locations",
    SmartTypeCategory.TRANSITION: "transitions",
    SmartTypeCategory.TIME_OF_DAY: "times_of_day",
}


class SmartTypeData(BaseModel):
    """All SmartType entries of one project."""

    model_config = ConfigDict(populate_by_name=True)

    characters: list[SmartTypeEntry] = Field(default_factory=list)
    locations: list[SmartTypeEntry] = Field(default_factory=list)
    transitions: list[SmartTypeEntry] = Field(
        default_factory=lambda: _defaults(
            SmartTypeCategory.TRANSITION, DEFAULT_TRANSITIONS
        )
    )
    times_of_day: list[SmartTypeEntry] = Field(
        default_factory=lambda: _defaults(SmartTypeCategory.TIME_OF_DAY, DEFAULT_TIMES),
        alias="timesOfDay",
    )

    def entries(self, category: SmartTypeCategory) -> list[SmartTypeEntry]:
        """Entry list backing a category."""
        entries: list[SmartTypeEntry] = getattr(self, _CATEGORY_FIELDS[category])
        return entries

    def set_entries(
        self, category: SmartTypeCategory, entries: list[SmartTypeEntry]
    ) -> None:
        """Replace the entry list backing a category."""
        setattr(self, _CATEGORY_FIELDS[category], entries)

    def all_entries(self) -> list[SmartTypeEntry]:
        return [
            *self.characters,
            *self.locations,
            *self.transitions,
            *self.times_of_day,
        ]
