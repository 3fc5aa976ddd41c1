"""
Session module.

Dataset-slice sessions and ordered playback scheduling.
"""

from .session import PitchRange, PlayResult, SonificationSession
from .scheduler import PlaybackTask, PlaybackScheduler

__all__ = [
    "PitchRange",
    "PlayResult",
    "SonificationSession",
    "PlaybackTask",
    "PlaybackScheduler"
]
