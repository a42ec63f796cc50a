"""
Study engine: queue building, scoring, and the per-card quiz state machine.
"""

from .options import OPTION_COUNT, generate_options
from .progress import CardStatus, ProgressRecord, ProgressTracker
from .queue_builder import BATCH_SIZE, build_queue
from .quiz_session import AUTO_FLIP_DELAY_MS, QuizCardState, QuizSession, SessionSummary
from .stats import ProgressSummary, card_rows, summarize

__all__ = [
    "AUTO_FLIP_DELAY_MS",
    "BATCH_SIZE",
    "OPTION_COUNT",
    "CardStatus",
    "ProgressRecord",
    "ProgressSummary",
    "ProgressTracker",
    "QuizCardState",
    "QuizSession",
    "SessionSummary",
    "build_queue",
    "card_rows",
    "generate_options",
    "summarize",
]
