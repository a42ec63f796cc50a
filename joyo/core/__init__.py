"""
Core vocabulary shared by the study engine and the gesture pipeline.
"""

from .cards import Card, load_catalog
from .errors import (
    CameraUnavailable,
    CatalogLoadError,
    CatalogMastered,
    CatalogTooSmall,
    CorruptPersistedState,
    EmptyQueueError,
    GestureModeError,
    JoyoError,
    ModelLoadFailure,
    NoReviewItems,
)
from .modes import Screen, SessionMode

__all__ = [
    "Card",
    "load_catalog",
    "Screen",
    "SessionMode",
    "JoyoError",
    "EmptyQueueError",
    "NoReviewItems",
    "CatalogMastered",
    "CatalogTooSmall",
    "CatalogLoadError",
    "GestureModeError",
    "CameraUnavailable",
    "ModelLoadFailure",
    "CorruptPersistedState",
]
