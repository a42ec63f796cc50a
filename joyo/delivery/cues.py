"""
Audio and speech cue triggers.

The engine only emits cues; playing sounds or speaking text belongs to the
host. Emission is fire-and-forget: a sink failure is logged and swallowed so
it can never disturb session state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from loguru import logger

from joyo.core.cards import Card


class CueKind(str, Enum):
    CORRECT = "correct"
    WRONG = "wrong"
    COMPLETE = "complete"
    SPEAK = "speak"


@dataclass(frozen=True)
class Cue:
    kind: CueKind
    card: Card | None = None

    @property
    def speech_text(self) -> str | None:
        """Text a speech engine should read for SPEAK cues."""
        if self.kind is not CueKind.SPEAK or self.card is None:
            return None
        readings = [*self.card.kun, *self.card.on]
        return "、".join([self.card.char, *readings])


class CueSink(Protocol):
    def emit(self, cue: Cue) -> None: ...


class LoggingCueSink:
    """Default sink: writes cues to the debug log."""

    def emit(self, cue: Cue) -> None:
        card = f" {cue.card.char}" if cue.card else ""
        logger.debug(f"Cue: {cue.kind.value}{card}")


class CueEmitter:
    """Wraps a sink so failures stay local."""

    def __init__(self, sink: CueSink | None = None):
        self.sink = sink or LoggingCueSink()

    def emit(self, kind: CueKind, card: Card | None = None) -> None:
        try:
            self.sink.emit(Cue(kind=kind, card=card))
        except Exception as e:
            logger.warning(f"Cue sink failed on {kind.value}: {e}")
