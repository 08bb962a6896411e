"""Fountain-style canonical text parser and serializer for ScriptDesk."""

from __future__ import annotations

from .fountain_models import ParsedScript, TitlePage
from .fountain_parser import FountainParser, parse, parse_script
from .fountain_serializer import (
    FountainSerializer,
    auto_format,
    serialize,
    serialize_script,
)

__all__ = [
    "FountainParser",
    "FountainSerializer",
    "ParsedScript",
    "TitlePage",
    "auto_format",
    "parse",
    "parse_script",
    "serialize",
    "serialize_script",
]
