"""
Sonification session.

Holds the active slice of a dataset and turns individual observations into
named notes handed to a sound-emission collaborator.
"""

import numpy as np
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Sequence, Tuple

from ..audio.emitter import NoteEvent, SoundEmitter
from ..audio.synth import WAVEFORMS
from ..config import get_config
from ..exceptions import EmptyDatasetError, IndexOutOfBoundsError, PlaybackError, SynthesisError
from ..logger import get_logger
from ..mapping import RangeMapper
from ..quantize import PitchQuantizer

logger = get_logger(__name__)


class PitchRange(NamedTuple):
    """Target MIDI pitch interval, low <= high."""
    low: float
    high: float


@dataclass(frozen=True)
class PlayResult:
    """Outcome of playing one index; ``error`` is set when ``ok`` is False."""
    index: int
    ok: bool
    value: Optional[float] = None
    pitch: Optional[float] = None
    note: Optional[str] = None
    frequency: Optional[float] = None
    delay: float = 0.0
    error: Optional[PlaybackError] = None


class SonificationSession:
    """
    Maps the values of one dataset slice onto notes and emits them.
    
    ``configure`` may be called again whenever the slice changes (a new
    filter or date range); each call replaces the previous values and
    source range entirely. Playback failures are reported in the returned
    :class:`PlayResult` and logged, never raised, so one bad index cannot
    abort a melody.
    
    Args:
        emitter: Sound-emission collaborator receiving :class:`NoteEvent` objects
        natural_only: Restrict notes to C D E F G A B (default from config)
        note_duration: Seconds per emitted note (default from config)
        waveform: Timbre requested for every emitted note; None leaves it
            to the emitter. Two sessions with different waveforms stay
            distinguishable when played together.
    """
    
    def __init__(self, emitter: SoundEmitter,
                 natural_only: Optional[bool] = None,
                 note_duration: Optional[float] = None,
                 waveform: Optional[str] = None):
        if natural_only is None:
            natural_only = get_config('mapping', 'natural_only')
        if note_duration is None:
            note_duration = get_config('playback', 'note_duration')
        
        self.emitter = emitter
        self.quantizer = PitchQuantizer(natural_only=bool(natural_only))
        self.note_duration = note_duration
        if waveform is not None and waveform not in WAVEFORMS:
            raise SynthesisError(
                f"Unknown waveform '{waveform}', expected one of {', '.join(WAVEFORMS)}"
            )
        self.waveform = waveform
        self._values: Tuple[float, ...] = ()
        self._mapper: Optional[RangeMapper] = None
    
    def configure(self, values: Sequence[float],
                  target_pitch_range: Optional[Tuple[float, float]] = None,
                  source_range: Optional[Tuple[float, float]] = None) -> bool:
        """
        Load a new slice of values and fit the source range to it.
        
        Args:
            values: Observations of the active slice
            target_pitch_range: (low, high) MIDI pitch bounds
                (default: ``mapping.target_min``/``target_max`` from config)
            source_range: Data range to map from instead of the min/max of
                values, so several series can share one scale
            
        Returns:
            True if the session is ready to play, False for an empty slice
            
        Raises:
            MappingError: If a range is inverted or values are not finite
        """
        if target_pitch_range is None:
            target_pitch_range = (get_config('mapping', 'target_min'),
                                  get_config('mapping', 'target_max'))
        target = PitchRange(*target_pitch_range)
        mapper = RangeMapper(target.low, target.high)
        
        data = tuple(float(v) for v in values)
        if not data:
            self._values = ()
            self._mapper = None
            logger.warning("Session configured with an empty dataset; playback disabled")
            return False
        
        mapper.fit(data)
        if source_range is not None:
            mapper = RangeMapper(target.low, target.high, *source_range)
        
        self._mapper = mapper
        self._values = data
        logger.debug(f"Session configured: {len(data)} values, source range {self._mapper.source_range}, "
                     f"target range ({target.low}, {target.high})")
        return True
    
    def ready(self) -> bool:
        return self._mapper is not None
    
    @property
    def values(self) -> Tuple[float, ...]:
        return self._values
    
    @property
    def source_range(self) -> Optional[Tuple[float, float]]:
        return self._mapper.source_range if self._mapper is not None else None
    
    def __len__(self) -> int:
        return len(self._values)
    
    def resolve(self, index: int, delay_offset: float = 0.0) -> PlayResult:
        """Work out what ``play`` would emit for index, without emitting it."""
        if not self.ready():
            return PlayResult(index=index, ok=False, delay=delay_offset,
                              error=EmptyDatasetError("Session has no values to play"))
        if not 0 <= index < len(self._values):
            return PlayResult(index=index, ok=False, delay=delay_offset,
                              error=IndexOutOfBoundsError(index, len(self._values)))
        
        value = self._values[index]
        pitch = self._mapper.map(value)
        return PlayResult(
            index=index,
            ok=True,
            value=value,
            pitch=pitch,
            note=self.quantizer.quantize(pitch),
            frequency=self.quantizer.frequency(pitch),
            delay=delay_offset
        )
    
    def play(self, index: int, delay_offset: float = 0.0) -> PlayResult:
        """
        Emit the note for ``values[index]`` scheduled ``delay_offset`` seconds out.
        
        Out-of-bounds indices and unconfigured or empty sessions emit
        nothing and return a failed result.
        """
        result = self.resolve(index, delay_offset)
        if not result.ok:
            logger.warning(f"Skipping note at index {index}: {result.error}")
            return result
        
        self.emitter.emit(NoteEvent(
            note=result.note,
            frequency=result.frequency,
            delay=delay_offset,
            duration=self.note_duration,
            waveform=self.waveform
        ))
        return result
    
    def notes(self) -> List[str]:
        """Note names for every value, in order."""
        return [self.resolve(i).note for i in range(len(self._values))]
    
    def pitches(self) -> np.ndarray:
        """Mapped (unquantized) pitches for every value."""
        if not self.ready():
            return np.array([])
        return np.asarray(self._mapper.map(np.asarray(self._values)), dtype=float)
    
    def play_all(self, interval: Optional[float] = None,
                 realtime: bool = False) -> List[PlayResult]:
        """
        Play every value in order, ``interval`` seconds apart.
        
        Anything still sounding from a previous playback is stopped first.
        """
        from .scheduler import PlaybackScheduler
        
        if interval is None:
            interval = get_config('playback', 'interval')
        
        self.emitter.stop()
        scheduler = PlaybackScheduler.for_indices(self, range(len(self._values)), interval)
        return scheduler.run(realtime=realtime)
