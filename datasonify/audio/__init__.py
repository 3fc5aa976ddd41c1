"""
Audio module.

Sound-emission collaborators: recording, offline synthesis and live output.
"""

from .emitter import NoteEvent, SoundEmitter, RecordingEmitter
from .synth import WAVEFORMS, ToneSynthesizer, SynthEmitter, write_wav
from .output import (
    AudioOutput, SoundDeviceBackend, LiveEmitter,
    get_audio_output, set_audio_output
)

__all__ = [
    "NoteEvent",
    "SoundEmitter",
    "RecordingEmitter",
    "WAVEFORMS",
    "ToneSynthesizer",
    "SynthEmitter",
    "write_wav",
    "AudioOutput",
    "SoundDeviceBackend",
    "LiveEmitter",
    "get_audio_output",
    "set_audio_output"
]
