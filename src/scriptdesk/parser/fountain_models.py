"""Data models for Fountain screenplay parsing."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from scriptdesk.models import Document

AUTHOR_KEYS = ("author", "authors", "writer", "writers", "written by")

# Title page keys emitted first, in this order
TITLE_PAGE_ORDER = ("title", "credit", "author", "source", "draft date", "contact")


@dataclass
class TitlePage:
    """Title page key/value pairs of a Fountain script."""

    values: dict[str, str] = field(default_factory=dict)

    @property
    def title(self) -> str | None:
        return self.values.get("title")

    @property
    def author(self) -> str | None:
        for key in AUTHOR_KEYS:
            if key in self.values:
                return self.values[key]
        return None

    def is_empty(self) -> bool:
        return not any(value.strip() for value in self.values.values())


@dataclass
class ParsedScript:
    """Represents a parsed screenplay with its title page."""

    elements: Document
    title: str | None = None
    author: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def title_page(self) -> TitlePage:
        values = {key: str(value) for key, value in self.metadata.items()}
        if self.title is not None:
            values["title"] = self.title
        if self.author is not None and TitlePage(values).author is None:
            values["author"] = self.author
        return TitlePage(values)
