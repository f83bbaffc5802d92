from .models import PROGRESS_SCALE, VocabularyEntry, progress_ratio
from .store import (
    InMemoryWordStore,
    JsonlWordStore,
    WordNotFoundError,
    WordStore,
    WordStoreError,
    commit_progress,
)

__all__ = [
    "PROGRESS_SCALE",
    "VocabularyEntry",
    "progress_ratio",
    "InMemoryWordStore",
    "JsonlWordStore",
    "WordNotFoundError",
    "WordStore",
    "WordStoreError",
    "commit_progress",
]
