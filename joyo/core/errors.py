"""
Error kinds raised by the drill engine.

All of them are recoverable and local except CatalogLoadError, which can only
happen at startup before any session exists.
"""


class JoyoError(Exception):
    """Base class for drill engine errors."""

    notice: str = "Something went wrong."


class EmptyQueueError(JoyoError):
    """A session was requested but no card is eligible for it."""


class NoReviewItems(EmptyQueueError):
    """Review mode was requested with an empty mistake list."""

    notice = "No mistakes to review! Great job."


class CatalogMastered(EmptyQueueError):
    """Every card in the catalog is mastered and nothing needs review."""

    notice = "You have mastered all Kanji in the database!"


class CatalogTooSmall(JoyoError):
    """Not enough cards to draw distinct distractors from."""

    notice = "The card catalog is too small for multiple choice."


class CatalogLoadError(JoyoError):
    """Raised when the card catalog file cannot be read or validated."""


class GestureModeError(JoyoError):
    """Gesture mode could not be enabled; manual input keeps working."""


class CameraUnavailable(GestureModeError):
    """Camera permission denied or acquisition failed."""

    notice = "Camera unavailable. Gesture control has been turned off."


class ModelLoadFailure(GestureModeError):
    """The pose landmark model could not be loaded or failed mid-stream."""

    notice = "Pose model failed to load. Use manual controls."


class CorruptPersistedState(JoyoError):
    """Stored progress blob could not be parsed. Never leaves the repository."""
