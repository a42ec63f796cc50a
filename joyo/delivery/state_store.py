"""
Key-value blob stores and progress persistence.

Provides:
- BlobStore protocol (get/set of a string blob by key)
- JsonFileBlobStore: one file per key under ~/.joyo/
- MemoryBlobStore: process-local store, used by tests and replays
- ProgressRepository: ProgressRecord <-> persisted JSON blob

Persisted blob shape:
    {"masteredIds": [...], "mistakeIds": [...], "lastReviewDate": "2025-01-02T03:04:05.000Z" | null}
"""

from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from joyo.core.errors import CorruptPersistedState
from joyo.study.progress import ProgressRecord

# =============================================================================
# Blob Stores
# =============================================================================


class BlobStore(Protocol):
    """Minimal key-value blob store."""

    def get(self, key: str) -> str | None:
        """Return the stored blob, or None if the key was never set."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a blob, replacing any previous value."""
        ...


class MemoryBlobStore:
    """In-memory blob store."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileBlobStore:
    """
    File-backed blob store.

    Each key is stored as {key}.json in the store directory. Writes go to a
    temporary file first and are moved into place so a crash never leaves a
    truncated blob behind.
    """

    DEFAULT_DIR = Path.home() / ".joyo"

    def __init__(self, directory: Path | None = None):
        self.directory = directory or self.DEFAULT_DIR
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> str | None:
        filepath = self._path(key)
        if not filepath.exists():
            return None
        with open(filepath, "r", encoding="utf-8") as f:
            return f.read()

    def set(self, key: str, value: str) -> None:
        filepath = self._path(key)
        tmp = filepath.with_suffix(".json.tmp")
        with open(tmp, "w", encoding="utf-8") as f:
            f.write(value)
        os.replace(tmp, filepath)


def _format_timestamp(value: datetime) -> str:
    """UTC with millisecond precision, e.g. 2025-01-02T03:04:05.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    value = value.astimezone(UTC)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


# =============================================================================
# Progress Repository
# =============================================================================


class PersistedProgress(BaseModel):
    """Wire shape of the progress blob."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    mastered_ids: list[str] = Field(default_factory=list, alias="masteredIds")
    mistake_ids: list[str] = Field(default_factory=list, alias="mistakeIds")
    last_review_date: datetime | None = Field(default=None, alias="lastReviewDate")


class ProgressRepository:
    """
    Loads and saves the ProgressRecord through a BlobStore.

    Malformed or missing data falls back to the empty record; the session
    logic never sees a persistence error on load.
    """

    def __init__(self, store: BlobStore, key: str = "kanji_mastery_progress"):
        self.store = store
        self.key = key

    def load(self) -> ProgressRecord:
        """Load the record, substituting the empty default on any problem."""
        try:
            raw = self.store.get(self.key)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Cannot read progress blob '{self.key}': {e}")
            return ProgressRecord.empty()

        if raw is None:
            return ProgressRecord.empty()

        try:
            return self.decode(raw)
        except CorruptPersistedState as e:
            logger.warning(f"Discarding corrupt progress blob: {e}")
            return ProgressRecord.empty()

    def save(self, record: ProgressRecord) -> None:
        self.store.set(self.key, self.encode(record))

    @staticmethod
    def encode(record: ProgressRecord) -> str:
        payload = {
            "masteredIds": sorted(record.mastered_ids),
            "mistakeIds": sorted(record.mistake_ids),
            "lastReviewDate": _format_timestamp(record.last_review) if record.last_review else None,
        }
        return json.dumps(payload, ensure_ascii=False)

    @staticmethod
    def decode(raw: str) -> ProgressRecord:
        """
        Parse a stored blob.

        Raises:
            CorruptPersistedState: On bad JSON, wrong shape, or overlapping ids
        """
        try:
            data = PersistedProgress.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptPersistedState(str(e)) from e

        record = ProgressRecord(
            mastered_ids=set(data.mastered_ids),
            mistake_ids=set(data.mistake_ids),
            last_review=data.last_review_date,
        )
        if not record.is_consistent():
            overlap = sorted(record.mastered_ids & record.mistake_ids)
            raise CorruptPersistedState(f"ids both mastered and mistaken: {overlap}")
        return record
