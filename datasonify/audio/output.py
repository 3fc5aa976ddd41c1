"""
Process-wide audio output handle.

The output device is acquired lazily, on the first tone actually played,
and shared by every playback call afterwards. At most one tone sounds at a
time: starting a new tone silences the previous one.
"""

import numpy as np
from typing import Callable, Optional

from .emitter import NoteEvent, SoundEmitter
from .synth import ToneSynthesizer
from ..exceptions import SynthesisError
from ..logger import get_logger

logger = get_logger(__name__)


class SoundDeviceBackend:
    """Plays buffers on the default output device through sounddevice."""
    
    def __init__(self):
        try:
            import sounddevice
        except (ImportError, OSError) as e:
            raise SynthesisError(
                f"Live playback needs the 'sounddevice' package and PortAudio: {e}"
            )
        self._sd = sounddevice
    
    def play(self, samples: np.ndarray, sample_rate: int) -> None:
        self._sd.play(np.ascontiguousarray(samples, dtype=np.float32), sample_rate)
    
    def stop(self) -> None:
        self._sd.stop()
    
    def close(self) -> None:
        self._sd.stop()


class AudioOutput:
    """
    Lazily-acquired, shared audio output with a single active tone.
    
    Args:
        backend_factory: Zero-argument callable creating the device backend
            on first use (default: :class:`SoundDeviceBackend`)
    """
    
    def __init__(self, backend_factory: Optional[Callable[[], object]] = None):
        self._backend_factory = backend_factory or SoundDeviceBackend
        self._backend = None
        self._active = False
    
    def ready(self) -> bool:
        """Whether the device has been acquired."""
        return self._backend is not None
    
    @property
    def active(self) -> bool:
        return self._active
    
    def acquire(self) -> None:
        if self._backend is None:
            self._backend = self._backend_factory()
            logger.info("Audio output acquired")
    
    def play(self, samples: np.ndarray, sample_rate: int) -> None:
        self.acquire()
        self.stop()
        self._backend.play(samples, sample_rate)
        self._active = True
    
    def stop(self) -> None:
        """Silence the active tone, if any. Never acquires the device."""
        if self._backend is not None and self._active:
            self._backend.stop()
        self._active = False
    
    def release(self) -> None:
        """Stop playback and drop the device; the next play re-acquires it."""
        if self._backend is None:
            return
        self.stop()
        self._backend.close()
        self._backend = None
        logger.info("Audio output released")


_audio_output: Optional[AudioOutput] = None


def get_audio_output() -> AudioOutput:
    """Shared AudioOutput instance; created, not acquired, on first call."""
    global _audio_output
    if _audio_output is None:
        _audio_output = AudioOutput()
    return _audio_output


def set_audio_output(output: Optional[AudioOutput]) -> None:
    """Replace the shared output, releasing the previous one."""
    global _audio_output
    if _audio_output is not None and _audio_output is not output:
        _audio_output.release()
    _audio_output = output


class LiveEmitter(SoundEmitter):
    """
    Emitter that plays each note immediately on the shared output.
    
    Timing is left to the caller (see ``PlaybackScheduler.run(realtime=True)``),
    so the event delay is ignored here.
    """
    
    def __init__(self, synthesizer: Optional[ToneSynthesizer] = None,
                 output: Optional[AudioOutput] = None):
        self.synthesizer = synthesizer or ToneSynthesizer()
        self.output = output or get_audio_output()
    
    def emit(self, event: NoteEvent) -> None:
        samples = self.synthesizer.tone(event.frequency, event.duration, event.waveform)
        self.output.play(samples, self.synthesizer.sample_rate)
    
    def stop(self) -> None:
        self.output.stop()
