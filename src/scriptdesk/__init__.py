"""ScriptDesk: a screenplay document engine.

ScriptDesk edits screenplays as an ordered list of typed blocks, converts
them to and from Fountain-style plain text and offers SmartType
autocompletion for scene headings, characters and transitions.
"""

from .config import ScriptDeskSettings, get_logger, get_settings
from .document.history import History
from .models import Document, ElementType, SceneOutline, ScriptElement
from .parser import FountainParser, auto_format, serialize

__version__ = "0.1.0"

__all__ = [
    "Document",
    "ElementType",
    "FountainParser",
    "History",
    "SceneOutline",
    "ScriptDeskSettings",
    "ScriptElement",
    "__version__",
    "auto_format",
    "get_logger",
    "get_settings",
    "serialize",
]
