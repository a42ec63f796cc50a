"""
Delivery infrastructure: persistence, delayed events, and cue output.
"""

from .cues import Cue, CueEmitter, CueKind, CueSink, LoggingCueSink
from .scheduler import EventScheduler, ScheduledEvent, monotonic_ms
from .state_store import BlobStore, JsonFileBlobStore, MemoryBlobStore, ProgressRepository

__all__ = [
    "BlobStore",
    "Cue",
    "CueEmitter",
    "CueKind",
    "CueSink",
    "EventScheduler",
    "JsonFileBlobStore",
    "LoggingCueSink",
    "MemoryBlobStore",
    "ProgressRepository",
    "ScheduledEvent",
    "monotonic_ms",
]
