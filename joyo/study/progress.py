"""
Progress Tracker: mastery and mistake record.

The record is the only persistently shared mutable state. It has exactly one
mutator, ProgressTracker.record_answer(), and is flushed to the repository
after every mutation.

Scoring rule:
- Correct   -> id joins masteredIds, leaves mistakeIds
- Incorrect -> id leaves masteredIds, joins mistakeIds
- Always    -> lastReviewTimestamp = now
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from joyo.delivery.state_store import ProgressRepository


class CardStatus(str, Enum):
    """Per-card learning status shown on the stats screen."""

    NEW = "new"
    MASTERED = "mastered"
    REVIEW = "review"

    @property
    def display_name(self) -> str:
        return {
            CardStatus.NEW: "New",
            CardStatus.MASTERED: "Mastered",
            CardStatus.REVIEW: "Needs Review",
        }[self]

    @property
    def color(self) -> str:
        """Rich color for CLI display."""
        return {
            CardStatus.NEW: "dim",
            CardStatus.MASTERED: "green",
            CardStatus.REVIEW: "yellow",
        }[self]


@dataclass
class ProgressRecord:
    """
    Mastery/mistake record.

    Invariant: mastered_ids and mistake_ids never share an id.
    """

    mastered_ids: set[str] = field(default_factory=set)
    mistake_ids: set[str] = field(default_factory=set)
    last_review: datetime | None = None

    @classmethod
    def empty(cls) -> ProgressRecord:
        return cls()

    def status_of(self, card_id: str) -> CardStatus:
        if card_id in self.mastered_ids:
            return CardStatus.MASTERED
        if card_id in self.mistake_ids:
            return CardStatus.REVIEW
        return CardStatus.NEW

    def is_consistent(self) -> bool:
        return not (self.mastered_ids & self.mistake_ids)


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ProgressTracker:
    """
    Owns the in-memory ProgressRecord and keeps the external blob in sync.
    """

    def __init__(
        self,
        repository: ProgressRepository,
        record: ProgressRecord | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ):
        """
        Initialize the tracker.

        Args:
            repository: Persistence target flushed after every mutation
            record: Starting record (loaded from the repository if None)
            clock: Source of review timestamps
        """
        self.repository = repository
        self.record = record if record is not None else repository.load()
        self._clock = clock

    def record_answer(self, card_id: str, correct: bool) -> ProgressRecord:
        """
        Apply one scoring update and persist it.

        The new sets are built first and swapped in together so the record
        is never observed half-updated.
        """
        mastered = set(self.record.mastered_ids)
        mistakes = set(self.record.mistake_ids)

        if correct:
            mastered.add(card_id)
            mistakes.discard(card_id)
        else:
            mastered.discard(card_id)
            mistakes.add(card_id)

        self.record = ProgressRecord(
            mastered_ids=mastered,
            mistake_ids=mistakes,
            last_review=self._clock(),
        )
        logger.debug(f"Scored {card_id}: {'correct' if correct else 'wrong'}")
        self._flush()
        return self.record

    def reset(self) -> ProgressRecord:
        """Forget all progress and persist the empty record."""
        self.record = ProgressRecord.empty()
        logger.info("Progress reset")
        self._flush()
        return self.record

    def _flush(self) -> None:
        # Persistence is fire-and-forget relative to session state
        try:
            self.repository.save(self.record)
        except OSError as e:
            logger.warning(f"Failed to persist progress: {e}")
