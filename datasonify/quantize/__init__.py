"""
Quantization module.

Snap continuous pitch values to named chromatic or natural notes.
"""

from .pitch import (
    CHROMATIC_NAMES, NATURAL_NAMES, NATURAL_OFFSETS,
    quantize_pitch, nearest_natural, midi_to_hz, hz_to_midi, note_to_midi,
    PitchQuantizer
)

__all__ = [
    "CHROMATIC_NAMES",
    "NATURAL_NAMES",
    "NATURAL_OFFSETS",
    "quantize_pitch",
    "nearest_natural",
    "midi_to_hz",
    "hz_to_midi",
    "note_to_midi",
    "PitchQuantizer"
]
