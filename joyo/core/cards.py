"""
Card catalog: immutable kanji reference data.

The catalog is a fixed, ordered list of cards loaded once at startup from a
JSON file (the bundled Joyo list by default).
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import CatalogLoadError

BUNDLED_CATALOG = Path(__file__).parent.parent / "data" / "joyo_kanji.json"


class Card(BaseModel):
    """
    A single kanji card.

    Attributes:
        id: Unique across the catalog
        char: The kanji itself
        old_char: Pre-reform form, if any (JSON key "oldChar")
        on: Katakana (on'yomi) readings
        kun: Hiragana (kun'yomi) readings
        examples: Example words
        note: Free-form remark
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(min_length=1)
    char: str = Field(min_length=1)
    old_char: str | None = Field(default=None, alias="oldChar")
    on: tuple[str, ...] = ()
    kun: tuple[str, ...] = ()
    examples: tuple[str, ...] = ()
    note: str | None = None

    @property
    def on_text(self) -> str:
        return "・".join(self.on) if self.on else "-"

    @property
    def kun_text(self) -> str:
        return "・".join(self.kun) if self.kun else "-"

    @property
    def display_char(self) -> str:
        """Character with the old form in parentheses, e.g. 亜 (亞)."""
        if self.old_char:
            return f"{self.char} ({self.old_char})"
        return self.char

    def matches(self, query: str) -> bool:
        """Substring match against char, readings and examples."""
        if not query:
            return True
        return (
            query in self.char
            or any(query in r for r in self.on)
            or any(query in r for r in self.kun)
            or any(query in e for e in self.examples)
        )


def build_catalog(records: Iterable[dict]) -> tuple[Card, ...]:
    """
    Validate raw records into an immutable catalog.

    Raises:
        CatalogLoadError: On invalid records or duplicate ids
    """
    try:
        cards = tuple(Card.model_validate(r) for r in records)
    except ValidationError as e:
        raise CatalogLoadError(f"Invalid card record: {e}") from e

    seen: set[str] = set()
    for card in cards:
        if card.id in seen:
            raise CatalogLoadError(f"Duplicate card id: {card.id}")
        seen.add(card.id)
    return cards


def load_catalog(path: Path | None = None) -> tuple[Card, ...]:
    """
    Load the card catalog from a JSON file.

    Args:
        path: JSON file holding a list of card records (defaults to bundled data)

    Returns:
        Cards in file order
    """
    path = path or BUNDLED_CATALOG
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise CatalogLoadError(f"Cannot read catalog {path}: {e}") from e

    if not isinstance(data, list):
        raise CatalogLoadError(f"Catalog {path} must be a JSON list")

    cards = build_catalog(data)
    logger.info(f"Loaded {len(cards)} cards from {path}")
    return cards
