"""Headless editor: events, pure reducer, state and controller."""

from __future__ import annotations

from .controller import EditorController
from .events import (
    AcceptSuggestion,
    AutoFormat,
    Blur,
    ClearSceneNumber,
    ContentChanged,
    EditorEvent,
    Focus,
    GenerateFromScenes,
    KeyDown,
    Load,
    Redo,
    SetType,
    SuggestionsReady,
    Undo,
)
from .reducer import apply
from .scheduling import AsyncioScheduler, Scheduler, TaskHandle
from .state import EditorState

__all__ = [
    "AcceptSuggestion",
    "AsyncioScheduler",
    "AutoFormat",
    "Blur",
    "ClearSceneNumber",
    "ContentChanged",
    "EditorController",
    "EditorEvent",
    "EditorState",
    "Focus",
    "GenerateFromScenes",
    "KeyDown",
    "Load",
    "Redo",
    "Scheduler",
    "SetType",
    "SuggestionsReady",
    "TaskHandle",
    "Undo",
    "apply",
]
