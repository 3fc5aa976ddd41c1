"""
Narration voice selection and speech.

Platforms announce their speech voices asynchronously. The registry keeps
the selected voice as explicit state with a ``ready()`` query and
``when_ready()`` callbacks instead of relying on announcement timing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional

from rich.console import Console

from ..config import get_config
from ..exceptions import NarrationError
from ..logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Voice:
    name: str
    lang: str


class VoiceRegistry:
    """
    Picks the narration voice once the platform's voices are known.
    
    Selection order: the voice whose name equals ``preferred_name``, else
    the first voice whose language tag starts with ``fallback_language``,
    else no voice (the backend's default is used).
    """
    
    def __init__(self, preferred_name: Optional[str] = None,
                 fallback_language: Optional[str] = None):
        self.preferred_name = preferred_name or get_config('narration', 'preferred_voice')
        self.fallback_language = fallback_language or get_config('narration', 'fallback_language')
        self._voices: List[Voice] = []
        self._voice: Optional[Voice] = None
        self._ready = False
        self._callbacks: List[Callable[[Optional[Voice]], None]] = []
    
    def announce(self, voices: Iterable[Voice]) -> Optional[Voice]:
        """Register the available voices and select one. May be called again."""
        self._voices = list(voices)
        self._voice = self._select()
        self._ready = True
        
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback(self._voice)
        return self._voice
    
    def _select(self) -> Optional[Voice]:
        for voice in self._voices:
            if voice.name == self.preferred_name:
                return voice
        
        logger.info(f"Preferred voice not available: {self.preferred_name}")
        if self.fallback_language:
            for voice in self._voices:
                if voice.lang.startswith(self.fallback_language):
                    logger.debug(f"Falling back to voice {voice.name} ({voice.lang})")
                    return voice
        return None
    
    def ready(self) -> bool:
        return self._ready
    
    def when_ready(self, callback: Callable[[Optional[Voice]], None]) -> None:
        """Run callback with the selected voice now, or on the next announce."""
        if self._ready:
            callback(self._voice)
        else:
            self._callbacks.append(callback)
    
    @property
    def voice(self) -> Optional[Voice]:
        return self._voice
    
    @property
    def voices(self) -> List[Voice]:
        return list(self._voices)


class SpeechBackend(ABC):
    """Base class for speech synthesis collaborators."""
    
    @abstractmethod
    def speak(self, text: str, voice: Optional[Voice] = None) -> None:
        """Start speaking text with voice, or the platform default when None."""
    
    @abstractmethod
    def cancel(self) -> None:
        """Stop any speech in progress."""


class CaptionBackend(SpeechBackend):
    """Shows narration as console captions."""
    
    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
    
    def speak(self, text: str, voice: Optional[Voice] = None) -> None:
        speaker = voice.name if voice is not None else "narrator"
        self.console.print(f"[dim]{speaker}:[/dim] {text}")
    
    def cancel(self) -> None:
        pass


class Narrator:
    """
    Speaks short descriptions of data points, one utterance at a time.
    
    Each new utterance cancels whatever is still being spoken.
    """
    
    def __init__(self, backend: SpeechBackend, registry: Optional[VoiceRegistry] = None):
        self.backend = backend
        self.registry = registry or VoiceRegistry()
    
    def speak(self, text: str) -> None:
        """
        Raises:
            NarrationError: If text is blank
        """
        if not text or not text.strip():
            raise NarrationError("Nothing to say: narration text is empty")
        
        self.backend.cancel()
        self.backend.speak(text, voice=self.registry.voice)
    
    def announce(self, label: str, value: float, unit: str = "") -> str:
        """Speak a "label: value unit" description and return the text."""
        text = f"{label}: {value:g}"
        if unit:
            text = f"{text} {unit}"
        self.speak(text)
        return text
    
    def stop(self) -> None:
        self.backend.cancel()
