"""
Pitch quantization and note naming.

This module discretizes continuous MIDI pitch values onto the chromatic
scale (or its seven natural pitch classes) and names the resulting notes,
plus the MIDI <-> frequency conversions synthesizers need.
"""

import math
import re
import numpy as np
from typing import Union

from ..exceptions import QuantizationError

CHROMATIC_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")
NATURAL_NAMES = ("C", "D", "E", "F", "G", "A", "B")
NATURAL_OFFSETS = (0, 2, 4, 5, 7, 9, 11)

_FLAT_ALIASES = {"Db": "C#", "Eb": "D#", "Gb": "F#", "Ab": "G#", "Bb": "A#"}
_NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)(-?\d+)$")


def _semitone(raw_pitch_index: float) -> int:
    """Round to the nearest semitone, halves up."""
    if isinstance(raw_pitch_index, (int, np.integer)):
        return int(raw_pitch_index)
    if not math.isfinite(raw_pitch_index):
        raise QuantizationError(f"Cannot quantize non-finite pitch {raw_pitch_index}")
    return math.floor(raw_pitch_index + 0.5)


def _circular_distance(a: int, b: int) -> int:
    diff = abs(a - b) % 12
    return min(diff, 12 - diff)


def nearest_natural(pitch_class: int) -> int:
    """
    Index into NATURAL_NAMES of the natural closest to a pitch class.
    
    Distance is measured on the 12-tone circle. Sharps sit exactly between
    two naturals; ties go to the earlier table entry, so every sharp snaps
    down (C# -> C, F# -> F, A# -> A).
    """
    best = 0
    best_distance = _circular_distance(pitch_class, NATURAL_OFFSETS[0])
    for i, offset in enumerate(NATURAL_OFFSETS[1:], start=1):
        distance = _circular_distance(pitch_class, offset)
        if distance < best_distance:
            best, best_distance = i, distance
    return best


def quantize_pitch(raw_pitch_index: Union[int, float], natural_only: bool = False) -> str:
    """
    Name the note nearest to a MIDI pitch index.
    
    Fractional indices round to the nearest semitone first (halves up).
    The octave is ``floor(index / 12) - 1`` so that 60 is C4; floor division
    keeps negative indices consistent (-1 is B-2).
    
    Args:
        raw_pitch_index: MIDI pitch index (int or float)
        natural_only: Snap to the seven natural pitch classes only
        
    Returns:
        Note name such as "C4" or "F#5"
        
    Raises:
        QuantizationError: If the index is NaN or infinite
        
    Examples:
        >>> quantize_pitch(60)
        'C4'
        >>> quantize_pitch(61)
        'C#4'
        >>> quantize_pitch(61, natural_only=True)
        'C4'
    """
    index = _semitone(raw_pitch_index)
    octave = index // 12 - 1
    pitch_class = index % 12
    
    if natural_only:
        name = NATURAL_NAMES[nearest_natural(pitch_class)]
    else:
        name = CHROMATIC_NAMES[pitch_class]
    
    return f"{name}{octave}"


def midi_to_hz(midi: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Convert MIDI note number(s) to frequency in Hz (A4 = MIDI 69 = 440 Hz).
    
    Examples:
        >>> midi_to_hz(69)
        440.0
    """
    midi = np.asarray(midi, dtype=float)
    f_hz = 440.0 * (2.0 ** ((midi - 69.0) / 12.0))
    if f_hz.ndim == 0:
        return float(f_hz)
    return f_hz


def hz_to_midi(f_hz: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Convert frequency in Hz to (fractional) MIDI note number(s).
    
    Raises:
        QuantizationError: If frequency is non-positive
    """
    f_hz = np.asarray(f_hz, dtype=float)
    if np.any(f_hz <= 0):
        raise QuantizationError("Frequency must be positive")
    
    midi = 12.0 * np.log2(f_hz / 440.0) + 69.0
    if midi.ndim == 0:
        return float(midi)
    return midi


def note_to_midi(note_name: str) -> int:
    """
    Parse a note name ("C4", "F#5", "Bb3") back to its MIDI index.
    
    Raises:
        QuantizationError: If the name is not a valid note
    """
    match = _NOTE_PATTERN.match(note_name.strip())
    if match is None:
        raise QuantizationError(f"Invalid note name: {note_name!r}")
    
    letter, accidental, octave = match.groups()
    pitch_name = letter.upper() + accidental
    pitch_name = _FLAT_ALIASES.get(pitch_name, pitch_name)
    
    if pitch_name not in CHROMATIC_NAMES:
        # Cb, Fb and E#/B# style spellings
        base = CHROMATIC_NAMES.index(letter.upper())
        shift = 1 if accidental == "#" else -1
        return (int(octave) + 1) * 12 + base + shift
    
    return (int(octave) + 1) * 12 + CHROMATIC_NAMES.index(pitch_name)


class PitchQuantizer:
    """
    Note-naming quantizer with a fixed scale restriction.
    
    Wraps :func:`quantize_pitch` so the chromatic/natural choice is made
    once, typically from configuration.
    """
    
    def __init__(self, natural_only: bool = False):
        self.natural_only = natural_only
    
    def quantize(self, raw_pitch_index: Union[int, float]) -> str:
        """Name the note nearest to a MIDI pitch index."""
        return quantize_pitch(raw_pitch_index, natural_only=self.natural_only)
    
    def frequency(self, raw_pitch_index: Union[int, float]) -> float:
        """Frequency in Hz of the quantized note, not of the raw pitch."""
        return midi_to_hz(note_to_midi(self.quantize(raw_pitch_index)))
