"""
Session Queue Builder.

Turns the progress record and a session mode into the ordered card list for
one session:

- REVIEW: every card in the mistake list, shuffled.
- NEW:    up to BATCH_SIZE unseen cards, topped up with mistakes when fewer
          than BATCH_SIZE unseen remain, shuffled together.

An empty result raises instead of returning an empty queue.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from loguru import logger

from joyo.core.cards import Card
from joyo.core.errors import CatalogMastered, NoReviewItems
from joyo.core.modes import SessionMode

from .progress import ProgressRecord

BATCH_SIZE = 10


def build_queue(
    mode: SessionMode,
    progress: ProgressRecord,
    catalog: Sequence[Card],
    batch_size: int = BATCH_SIZE,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Build the study queue for a session.

    Args:
        mode: NEW or REVIEW
        progress: Current mastery/mistake record
        catalog: Full card catalog in catalog order
        batch_size: Cap for NEW sessions
        rng: Shuffle source (seed it for reproducible queues)

    Returns:
        Non-empty list of cards in session order

    Raises:
        NoReviewItems: REVIEW requested with no mistakes in the catalog
        CatalogMastered: NEW requested with nothing unseen and no mistakes
    """
    rng = rng or random.Random()
    mistakes = [c for c in catalog if c.id in progress.mistake_ids]

    if mode is SessionMode.REVIEW:
        if not mistakes:
            raise NoReviewItems()
        queue = list(mistakes)
    else:
        unseen = [
            c for c in catalog
            if c.id not in progress.mastered_ids and c.id not in progress.mistake_ids
        ]
        queue = unseen[:batch_size]
        if len(queue) < batch_size:
            queue.extend(mistakes[: batch_size - len(queue)])
        if not queue:
            raise CatalogMastered()

    rng.shuffle(queue)
    logger.debug(f"Built {mode.value} queue of {len(queue)} cards")
    return queue
