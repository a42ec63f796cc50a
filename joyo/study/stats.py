"""
Progress statistics for the home and stats screens.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from joyo.core.cards import Card

from .progress import CardStatus, ProgressRecord


@dataclass(frozen=True)
class CardRow:
    card: Card
    status: CardStatus


@dataclass(frozen=True)
class ProgressSummary:
    total: int
    mastered: int
    needs_review: int

    @property
    def new(self) -> int:
        return self.total - self.mastered - self.needs_review

    @property
    def mastered_percent(self) -> float:
        return 100.0 * self.mastered / self.total if self.total else 0.0

    @property
    def review_percent(self) -> float:
        return 100.0 * self.needs_review / self.total if self.total else 0.0


def summarize(progress: ProgressRecord, catalog: Sequence[Card]) -> ProgressSummary:
    """Count catalog cards per status. Ids not in the catalog are ignored."""
    ids = {c.id for c in catalog}
    return ProgressSummary(
        total=len(catalog),
        mastered=len(progress.mastered_ids & ids),
        needs_review=len(progress.mistake_ids & ids),
    )


def card_rows(progress: ProgressRecord, catalog: Sequence[Card], query: str = "") -> list[CardRow]:
    """Catalog rows matching query (char, readings or examples), in catalog order."""
    query = query.strip()
    return [
        CardRow(card=c, status=progress.status_of(c.id))
        for c in catalog
        if c.matches(query)
    ]
