"""Vocabulary entry value types."""

from __future__ import annotations

from dataclasses import asdict, dataclass

PROGRESS_SCALE = 5


@dataclass(frozen=True)
class VocabularyEntry:
    """One original/translated pair owned by a user."""

    owner: str
    original: str
    translated: str
    progress: int = 0
    id: str | None = None

    def __post_init__(self) -> None:
        if not str(self.original or "").strip():
            raise ValueError("original must not be empty")
        if not str(self.translated or "").strip():
            raise ValueError("translated must not be empty")
        if self.progress < 0:
            raise ValueError("progress must be >= 0")

    def to_record(self) -> dict[str, object]:
        return asdict(self)

    @classmethod
    def from_record(cls, data: dict[str, object]) -> "VocabularyEntry":
        raw_id = data.get("id")
        return cls(
            owner=str(data.get("owner", "")),
            original=str(data.get("original", "")),
            translated=str(data.get("translated", "")),
            progress=int(data.get("progress", 0) or 0),  # type: ignore[arg-type]
            id=str(raw_id) if raw_id is not None else None,
        )


def progress_ratio(entry: VocabularyEntry) -> float:
    """Return how close ``entry`` is to learned, clamped to ``[0, 1]``."""

    return min(entry.progress, PROGRESS_SCALE) / PROGRESS_SCALE
