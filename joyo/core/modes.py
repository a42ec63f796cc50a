"""
Screens and session modes of the drill application.
"""

from __future__ import annotations

from enum import Enum


class Screen(str, Enum):
    """Top-level screen the user is looking at."""

    HOME = "home"
    QUIZ = "quiz"
    STATS = "stats"

    @property
    def display_name(self) -> str:
        """Human-readable name."""
        return self.value.title()


class SessionMode(str, Enum):
    """How the study queue is assembled."""

    NEW = "new"  # Unseen cards first, topped up with mistakes
    REVIEW = "review"  # Mistakes only
