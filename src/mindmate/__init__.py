"""AI-assisted journaling.

Entries are analyzed by a remote model (mood, summary, tip, reflection
prompt, cognitive distortions) and kept in a newest-first collection that
is snapshotted to a key-value store after every change.
"""

from mindmate.client import AnalysisClient
from mindmate.errors import (
    AnalysisError,
    EmptyEntryError,
    MalformedResponseError,
    MindMateError,
    TransportError,
    ValidationError,
)
from mindmate.models import Analysis, CognitiveDistortion, JournalEntry, View, new_entry
from mindmate.store import EntryStore, FileKeyValueStore, MemoryKeyValueStore

__version__ = "0.3.0"

__all__ = [
    "Analysis",
    "AnalysisClient",
    "AnalysisError",
    "CognitiveDistortion",
    "EmptyEntryError",
    "EntryStore",
    "FileKeyValueStore",
    "JournalEntry",
    "MalformedResponseError",
    "MemoryKeyValueStore",
    "MindMateError",
    "TransportError",
    "ValidationError",
    "View",
    "new_entry",
]
