"""
Tone synthesis with numpy.

Renders note events, fixed-frequency tones and exponential frequency
sweeps into mono float buffers, and writes them to WAV with soundfile.
"""

import numpy as np
import soundfile as sf
from pathlib import Path
from typing import Iterable, List, Optional

from .emitter import NoteEvent, SoundEmitter
from ..config import get_config
from ..exceptions import SynthesisError
from ..logger import get_logger

logger = get_logger(__name__)

WAVEFORMS = ('sine', 'square', 'sawtooth', 'triangle')


def _check_waveform(waveform: str) -> None:
    if waveform not in WAVEFORMS:
        raise SynthesisError(
            f"Unknown waveform '{waveform}', expected one of {', '.join(WAVEFORMS)}"
        )


def _oscillate(phase: np.ndarray, waveform: str) -> np.ndarray:
    """Evaluate a waveform at phase measured in cycles."""
    if waveform == 'sine':
        return np.sin(2 * np.pi * phase)
    if waveform == 'square':
        return np.where(np.sin(2 * np.pi * phase) >= 0, 1.0, -1.0)
    saw = 2.0 * (phase - np.floor(phase + 0.5))
    if waveform == 'sawtooth':
        return saw
    return 2.0 * np.abs(saw) - 1.0  # triangle


class ToneSynthesizer:
    """
    Single-oscillator tone synthesizer.
    
    Every tone gets a short linear attack and release so notes start and
    stop without clicks. Unset parameters come from the ``synth`` config
    section.
    """
    
    def __init__(self, sample_rate: Optional[int] = None,
                 waveform: Optional[str] = None,
                 amplitude: Optional[float] = None,
                 attack: Optional[float] = None,
                 release: Optional[float] = None):
        self.sample_rate = sample_rate or get_config('synth', 'sample_rate')
        self.waveform = waveform or get_config('synth', 'waveform')
        self.amplitude = amplitude if amplitude is not None else get_config('synth', 'amplitude')
        self.attack = attack if attack is not None else get_config('synth', 'attack')
        self.release = release if release is not None else get_config('synth', 'release')
        
        _check_waveform(self.waveform)
        if self.sample_rate <= 0:
            raise SynthesisError("Sample rate must be positive")
        if not 0.0 <= self.amplitude <= 1.0:
            raise SynthesisError("Amplitude must be within [0, 1]")
        
        logger.debug(f"ToneSynthesizer initialized: sr={self.sample_rate}, waveform={self.waveform}")
    
    def _n_samples(self, duration: float) -> int:
        if duration < 0:
            raise SynthesisError(f"Duration must be non-negative, got {duration}")
        return int(round(duration * self.sample_rate))
    
    def envelope(self, n_samples: int) -> np.ndarray:
        """Attack/sustain/release gain curve for a tone of n_samples."""
        env = np.ones(n_samples)
        attack_n = min(int(self.attack * self.sample_rate), n_samples // 2)
        release_n = min(int(self.release * self.sample_rate), n_samples - attack_n)
        if attack_n > 0:
            env[:attack_n] = np.linspace(0.0, 1.0, attack_n, endpoint=False)
        if release_n > 0:
            env[n_samples - release_n:] = np.linspace(1.0, 0.0, release_n)
        return env
    
    def tone(self, frequency: float, duration: float,
             waveform: Optional[str] = None) -> np.ndarray:
        """
        Render a fixed-frequency tone.
        
        Args:
            frequency: Tone frequency in Hz
            duration: Length in seconds
            waveform: Overrides the synthesizer's waveform for this tone
        
        Raises:
            SynthesisError: If frequency is non-positive, duration negative
                or the waveform unknown
        """
        if frequency <= 0:
            raise SynthesisError(f"Frequency must be positive, got {frequency}")
        waveform = waveform or self.waveform
        _check_waveform(waveform)
        
        n = self._n_samples(duration)
        phase = frequency * np.arange(n) / self.sample_rate
        return self.amplitude * _oscillate(phase, waveform) * self.envelope(n)
    
    def sweep(self, start_hz: float, end_hz: float, ramp_duration: float,
              hold: float = 0.0) -> np.ndarray:
        """
        Render a tone held at ``start_hz`` for ``hold`` seconds, then
        ramped exponentially to ``end_hz`` over ``ramp_duration`` seconds.
        """
        if start_hz <= 0 or end_hz <= 0:
            raise SynthesisError("Sweep frequencies must be positive")
        
        hold_n = self._n_samples(hold)
        ramp_n = self._n_samples(ramp_duration)
        
        ramp = start_hz * (end_hz / start_hz) ** (np.arange(ramp_n) / max(ramp_n, 1))
        frequencies = np.concatenate([np.full(hold_n, float(start_hz)), ramp])
        
        # Integrate instantaneous frequency so the ramp stays phase-continuous
        phase = np.cumsum(frequencies) / self.sample_rate
        n = len(frequencies)
        return self.amplitude * _oscillate(phase, self.waveform) * self.envelope(n)
    
    def render(self, events: Iterable[NoteEvent]) -> np.ndarray:
        """
        Mix note events into one buffer, each placed at its delay and
        rendered with its own waveform when it names one.
        
        The mix is rescaled only if overlapping notes would clip.
        """
        events = list(events)
        if not events:
            return np.zeros(0)
        
        total = max(self._n_samples(e.delay) + self._n_samples(e.duration) for e in events)
        buffer = np.zeros(total)
        
        for event in events:
            start = self._n_samples(event.delay)
            tone = self.tone(event.frequency, event.duration, event.waveform)
            buffer[start:start + len(tone)] += tone
        
        peak = np.max(np.abs(buffer)) if total else 0.0
        if peak > 1.0:
            logger.debug(f"Rescaling mix with peak {peak:.2f}")
            buffer /= peak
        
        return buffer


def write_wav(path: str, audio: np.ndarray, sample_rate: int) -> Path:
    """
    Write a mono buffer to a WAV file, creating parent directories.
    
    Raises:
        SynthesisError: If the file cannot be written
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        sf.write(str(path), audio, sample_rate)
    except Exception as e:
        raise SynthesisError(f"Failed to write audio file {path}: {str(e)}")
    
    logger.info(f"Wrote {len(audio) / sample_rate:.2f}s of audio to {path}")
    return path


class SynthEmitter(SoundEmitter):
    """
    Emitter that collects events and renders them offline.
    
    ``stop()`` discards anything collected so far, mirroring the
    at-most-one-active-melody rule of live playback.
    """
    
    def __init__(self, synthesizer: Optional[ToneSynthesizer] = None):
        self.synthesizer = synthesizer or ToneSynthesizer()
        self.events: List[NoteEvent] = []
    
    def emit(self, event: NoteEvent) -> None:
        self.events.append(event)
    
    def stop(self) -> None:
        self.events.clear()
    
    def render(self) -> np.ndarray:
        return self.synthesizer.render(self.events)
    
    def write(self, path: str) -> Path:
        return write_wav(path, self.render(), self.synthesizer.sample_rate)
