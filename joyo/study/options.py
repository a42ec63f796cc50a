"""
Multiple-choice option generation.
"""

from __future__ import annotations

import random
from collections.abc import Sequence

from joyo.core.cards import Card
from joyo.core.errors import CatalogTooSmall

OPTION_COUNT = 4


def generate_options(
    card: Card,
    catalog: Sequence[Card],
    count: int = OPTION_COUNT,
    rng: random.Random | None = None,
) -> list[Card]:
    """
    Pick count-1 distinct distractors and shuffle them with the target card.

    The target card appears exactly once in the result.

    Raises:
        CatalogTooSmall: Catalog cannot supply enough distinct distractors
    """
    rng = rng or random.Random()
    others = [c for c in catalog if c.id != card.id]
    if len(others) < count - 1:
        raise CatalogTooSmall(
            f"Need {count} cards for options, catalog has {len(others) + 1}"
        )

    options = [card, *rng.sample(others, count - 1)]
    rng.shuffle(options)
    return options
