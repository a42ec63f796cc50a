"""
Session context: the single owned object holding all UI/session state.

Transition functions take the context, apply one state change and return it.
Empty-queue and catalog problems become a user-visible notice and leave the
screen and any running session untouched.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from loguru import logger

from joyo.core.cards import Card
from joyo.core.errors import CatalogTooSmall, EmptyQueueError
from joyo.core.modes import Screen, SessionMode
from joyo.delivery.cues import CueEmitter
from joyo.delivery.scheduler import EventScheduler
from joyo.delivery.state_store import BlobStore, ProgressRepository
from joyo.study.options import OPTION_COUNT
from joyo.study.progress import ProgressTracker
from joyo.study.queue_builder import BATCH_SIZE, build_queue
from joyo.study.quiz_session import AUTO_FLIP_DELAY_MS, QuizSession


@dataclass
class SessionContext:
    """
    Everything the dispatcher acts on.

    Attributes:
        catalog: Immutable card catalog
        tracker: Progress record owner (single writer)
        scheduler: Delayed events (auto-flip)
        screen: Screen currently shown
        session: Running quiz, only while screen is QUIZ
        notice: Last user-visible notice, cleared by the next transition
    """

    catalog: Sequence[Card]
    tracker: ProgressTracker
    scheduler: EventScheduler = field(default_factory=EventScheduler)
    cues: CueEmitter = field(default_factory=CueEmitter)
    rng: random.Random = field(default_factory=random.Random)
    batch_size: int = BATCH_SIZE
    option_count: int = OPTION_COUNT
    auto_flip_delay_ms: float = AUTO_FLIP_DELAY_MS

    screen: Screen = Screen.HOME
    session: QuizSession | None = None
    session_mode: SessionMode | None = None
    notice: str | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Any,
        store: BlobStore,
        catalog: Sequence[Card],
        **kwargs: Any,
    ) -> SessionContext:
        """Wire a context from a Settings object and a blob store."""
        repository = ProgressRepository(store, key=settings.progress_key)
        return cls(
            catalog=catalog,
            tracker=ProgressTracker(repository),
            batch_size=settings.batch_size,
            option_count=settings.option_count,
            auto_flip_delay_ms=settings.auto_flip_delay_ms,
            **kwargs,
        )

    @property
    def answered(self) -> bool:
        return self.session is not None and self.session.answered


def start_session(ctx: SessionContext, mode: SessionMode) -> SessionContext:
    """Build a queue and enter the quiz, or post a notice if nothing is eligible."""
    ctx.notice = None
    try:
        queue = build_queue(
            mode, ctx.tracker.record, ctx.catalog, batch_size=ctx.batch_size, rng=ctx.rng
        )
        session = QuizSession(
            queue,
            ctx.catalog,
            ctx.tracker,
            ctx.scheduler,
            cues=ctx.cues,
            option_count=ctx.option_count,
            auto_flip_delay_ms=ctx.auto_flip_delay_ms,
            rng=ctx.rng,
        )
    except (EmptyQueueError, CatalogTooSmall) as e:
        ctx.notice = e.notice
        logger.info(f"Session not started: {e.notice}")
        return ctx

    if ctx.session is not None:
        ctx.session.close()
    ctx.session = session
    ctx.session_mode = mode
    ctx.screen = Screen.QUIZ
    logger.info(f"Started {mode.value} session with {len(queue)} cards")
    return ctx


def return_home(ctx: SessionContext) -> SessionContext:
    """Go home, discarding any session and its pending events."""
    ctx.notice = None
    if ctx.session is not None:
        ctx.session.close()
    ctx.session = None
    ctx.session_mode = None
    ctx.screen = Screen.HOME
    return ctx


def open_stats(ctx: SessionContext) -> SessionContext:
    return_home(ctx)
    ctx.screen = Screen.STATS
    return ctx


def select_option_at(ctx: SessionContext, position: int) -> SessionContext:
    if ctx.screen is Screen.QUIZ and ctx.session is not None:
        ctx.notice = None
        ctx.session.select_option_at(position)
    return ctx


def advance(ctx: SessionContext) -> SessionContext:
    if ctx.screen is Screen.QUIZ and ctx.session is not None:
        ctx.session.advance()
    return ctx


def toggle_flip(ctx: SessionContext) -> SessionContext:
    if ctx.screen is Screen.QUIZ and ctx.session is not None:
        ctx.session.toggle_flip()
    return ctx


def reset_progress(ctx: SessionContext) -> SessionContext:
    ctx.tracker.reset()
    ctx.notice = "Progress has been reset."
    return ctx
