"""
Quiz Session: per-card answer/flip/advance state machine.

States:
    Presenting(unanswered) --select_option--> Presenting(answered)
    Presenting(answered)   --advance-------> Presenting(unanswered) of next card
    Presenting(answered)   --advance (last)-> Complete

Complete is terminal; the only way out is discarding the session.

Answering schedules an automatic flip so the correctness feedback can show
before the card details. The flip is idempotent and the pending event is
cancelled when the session advances or closes.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field

from loguru import logger

from joyo.core.cards import Card
from joyo.delivery.cues import CueEmitter, CueKind
from joyo.delivery.scheduler import EventScheduler, ScheduledEvent

from .options import OPTION_COUNT, generate_options
from .progress import ProgressTracker

AUTO_FLIP_DELAY_MS = 600


@dataclass
class QuizCardState:
    """
    State of the card currently on screen.

    Invariant: answered implies selected_option_id is set.
    """

    index: int
    options: list[Card]
    flipped: bool = False
    answered: bool = False
    selected_option_id: str | None = None


@dataclass
class SessionSummary:
    total: int
    correct: int
    incorrect: int

    @property
    def accuracy(self) -> float:
        answered = self.correct + self.incorrect
        return self.correct / answered if answered else 0.0


@dataclass
class AnswerOutcome:
    card: Card
    selected_id: str
    correct: bool


class QuizSession:
    """
    Drives one study session over a fixed queue.
    """

    def __init__(
        self,
        queue: Sequence[Card],
        catalog: Sequence[Card],
        tracker: ProgressTracker,
        scheduler: EventScheduler,
        cues: CueEmitter | None = None,
        option_count: int = OPTION_COUNT,
        auto_flip_delay_ms: float = AUTO_FLIP_DELAY_MS,
        rng: random.Random | None = None,
    ):
        if not queue:
            raise ValueError("QuizSession requires a non-empty queue")

        self.queue: tuple[Card, ...] = tuple(queue)
        self.catalog = catalog
        self.tracker = tracker
        self.scheduler = scheduler
        self.cues = cues or CueEmitter()
        self.option_count = option_count
        self.auto_flip_delay_ms = auto_flip_delay_ms
        self.rng = rng or random.Random()

        self.complete = False
        self.outcomes: list[AnswerOutcome] = []
        self._pending_flip: ScheduledEvent | None = None
        self.state = self._present(0)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def current_card(self) -> Card:
        return self.queue[self.state.index]

    @property
    def options(self) -> list[Card]:
        return self.state.options

    @property
    def answered(self) -> bool:
        return self.state.answered

    @property
    def last_answer_correct(self) -> bool | None:
        if not self.state.answered:
            return None
        return self.state.selected_option_id == self.current_card.id

    @property
    def flip_pending(self) -> bool:
        return self._pending_flip is not None and self._pending_flip.pending

    def summary(self) -> SessionSummary:
        correct = sum(1 for o in self.outcomes if o.correct)
        return SessionSummary(
            total=len(self.queue),
            correct=correct,
            incorrect=len(self.outcomes) - correct,
        )

    # =========================================================================
    # Transitions
    # =========================================================================

    def select_option(self, option_id: str) -> AnswerOutcome | None:
        """
        Answer the current card.

        Returns:
            The outcome, or None when the card was already answered
        """
        if self.complete or self.state.answered:
            return None
        if option_id not in {o.id for o in self.state.options}:
            raise ValueError(f"{option_id!r} is not an option for this card")

        card = self.current_card
        is_correct = option_id == card.id
        self.tracker.record_answer(card.id, is_correct)

        self.state.answered = True
        self.state.selected_option_id = option_id
        outcome = AnswerOutcome(card=card, selected_id=option_id, correct=is_correct)
        self.outcomes.append(outcome)

        self.cues.emit(CueKind.CORRECT if is_correct else CueKind.WRONG, card)
        self._pending_flip = self.scheduler.schedule(
            self.auto_flip_delay_ms, self._auto_flip, name=f"flip:{card.id}"
        )
        logger.debug(f"Card {self.state.index + 1}/{len(self.queue)} answered, correct={is_correct}")
        return outcome

    def select_option_at(self, position: int) -> AnswerOutcome | None:
        """Answer with the option at a fixed on-screen position, if it exists."""
        if not 0 <= position < len(self.state.options):
            return None
        return self.select_option(self.state.options[position].id)

    def advance(self) -> bool:
        """
        Move to the next card, or complete the session after the last one.

        Returns:
            False when the current card has not been answered yet
        """
        if self.complete or not self.state.answered:
            return False

        self._cancel_flip()
        next_index = self.state.index + 1
        if next_index < len(self.queue):
            self.state = self._present(next_index)
        else:
            self.complete = True
            self.cues.emit(CueKind.COMPLETE)
            logger.info(f"Session complete: {self.summary()}")
        return True

    def toggle_flip(self) -> bool:
        """Flip the card by hand. Does not touch the answered flag."""
        if self.complete:
            return False
        self.state.flipped = not self.state.flipped
        return True

    def close(self) -> None:
        """Discard the session, cancelling any pending flip."""
        self._cancel_flip()

    # =========================================================================
    # Internals
    # =========================================================================

    def _present(self, index: int) -> QuizCardState:
        card = self.queue[index]
        options = generate_options(card, self.catalog, count=self.option_count, rng=self.rng)
        self.cues.emit(CueKind.SPEAK, card)
        return QuizCardState(index=index, options=options)

    def _auto_flip(self) -> None:
        self.state.flipped = True

    def _cancel_flip(self) -> None:
        if self._pending_flip is not None:
            self._pending_flip.cancel()
            self._pending_flip = None
