"""
Narration module.

Voice selection and spoken descriptions of data points.
"""

from .voice import Voice, VoiceRegistry, SpeechBackend, CaptionBackend, Narrator

__all__ = [
    "Voice",
    "VoiceRegistry",
    "SpeechBackend",
    "CaptionBackend",
    "Narrator"
]
