"""
Sound-emission collaborators.

A session hands every resolved note to an emitter; what "emitting" means
(recording, rendering to a buffer, playing on a device) is up to the
emitter.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class NoteEvent:
    """One note to be sounded ``delay`` seconds after playback starts."""
    note: str
    frequency: float
    delay: float = 0.0
    duration: float = 0.25
    waveform: Optional[str] = None


class SoundEmitter(ABC):
    """Base class for sound-emission collaborators."""
    
    @abstractmethod
    def emit(self, event: NoteEvent) -> None:
        """Sound or collect one note event."""
    
    def stop(self) -> None:
        """Silence anything still sounding. Default: nothing to silence."""


class RecordingEmitter(SoundEmitter):
    """Keeps emitted events in order; used for previews and tests."""
    
    def __init__(self):
        self.events: List[NoteEvent] = []
        self.stop_count = 0
    
    def emit(self, event: NoteEvent) -> None:
        self.events.append(event)
    
    def stop(self) -> None:
        self.stop_count += 1
    
    @property
    def notes(self) -> List[str]:
        return [event.note for event in self.events]
    
    def clear(self) -> None:
        self.events.clear()
