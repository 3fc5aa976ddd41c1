"""
Unit tests for pitch quantization and note naming.
"""

import pytest
import numpy as np

from datasonify.quantize import (
    quantize_pitch, nearest_natural, midi_to_hz, hz_to_midi, note_to_midi,
    PitchQuantizer, NATURAL_NAMES
)
from datasonify.exceptions import QuantizationError


class TestQuantizePitch:
    """Test chromatic note naming."""
    
    def test_reference_notes(self):
        assert quantize_pitch(60) == "C4"
        assert quantize_pitch(61) == "C#4"
        assert quantize_pitch(72) == "C5"
        assert quantize_pitch(69) == "A4"
        assert quantize_pitch(48) == "C3"
        assert quantize_pitch(78) == "F#5"
    
    def test_octave_boundaries(self):
        assert quantize_pitch(59) == "B3"
        assert quantize_pitch(71) == "B4"
        assert quantize_pitch(0) == "C-1"
        assert quantize_pitch(127) == "G9"
    
    def test_negative_indices_use_floor_division(self):
        assert quantize_pitch(-1) == "B-2"
        assert quantize_pitch(-12) == "C-2"
        assert quantize_pitch(-13) == "B-3"
    
    def test_fractional_rounds_to_nearest_semitone(self):
        assert quantize_pitch(60.4) == "C4"
        assert quantize_pitch(60.6) == "C#4"
        assert quantize_pitch(71.7) == "C5"
    
    def test_halves_round_up(self):
        assert quantize_pitch(60.5) == "C#4"
        assert quantize_pitch(-0.5) == "C-1"
    
    def test_numpy_scalars(self):
        assert quantize_pitch(np.int64(60)) == "C4"
        assert quantize_pitch(np.float64(72.0)) == "C5"
    
    def test_non_finite_rejected(self):
        with pytest.raises(QuantizationError):
            quantize_pitch(float('nan'))
        with pytest.raises(QuantizationError):
            quantize_pitch(float('inf'))


class TestNaturalOnly:
    """Test snapping to the seven natural notes."""
    
    def test_naturals_unchanged(self):
        for midi, name in zip([60, 62, 64, 65, 67, 69, 71], NATURAL_NAMES):
            assert quantize_pitch(midi, natural_only=True) == f"{name}4"
    
    def test_sharps_tie_break_to_lower_natural(self):
        """Sharps are equidistant from two naturals; the lower table entry wins."""
        assert quantize_pitch(61, natural_only=True) == "C4"
        assert quantize_pitch(63, natural_only=True) == "D4"
        assert quantize_pitch(66, natural_only=True) == "F4"
        assert quantize_pitch(68, natural_only=True) == "G4"
        assert quantize_pitch(70, natural_only=True) == "A4"
    
    def test_octave_never_changes(self):
        assert quantize_pitch(71, natural_only=True) == "B4"
        assert quantize_pitch(49, natural_only=True) == "C3"
    
    def test_nearest_natural_indices(self):
        assert [nearest_natural(pc) for pc in range(12)] == [0, 0, 1, 1, 2, 3, 3, 4, 4, 5, 5, 6]


class TestFrequencyConversion:
    """Test MIDI/frequency conversion."""
    
    def test_midi_to_hz(self):
        assert midi_to_hz(69) == 440.0
        assert abs(midi_to_hz(60) - 261.6256) < 1e-3
        assert abs(midi_to_hz(81) - 880.0) < 1e-9
    
    def test_midi_to_hz_array(self):
        freqs = midi_to_hz(np.array([57, 69]))
        assert isinstance(freqs, np.ndarray)
        np.testing.assert_allclose(freqs, [220.0, 440.0])
    
    def test_hz_to_midi(self):
        assert hz_to_midi(440.0) == 69.0
        assert abs(hz_to_midi(200.0) - 55.35) < 0.01
    
    def test_hz_to_midi_rejects_non_positive(self):
        with pytest.raises(QuantizationError, match="Frequency must be positive"):
            hz_to_midi(0.0)
        with pytest.raises(QuantizationError):
            hz_to_midi(np.array([440.0, -1.0]))


class TestNoteToMidi:
    
    def test_sharps_and_flats(self):
        assert note_to_midi("C4") == 60
        assert note_to_midi("C#4") == 61
        assert note_to_midi("Db4") == 61
        assert note_to_midi("Bb3") == 58
        assert note_to_midi("c5") == 72
    
    def test_enharmonic_edge_spellings(self):
        assert note_to_midi("B#3") == 60
        assert note_to_midi("Cb4") == 59
        assert note_to_midi("E#4") == 65
    
    def test_negative_octave(self):
        assert note_to_midi("B-2") == -1
    
    def test_names_round_trip_through_quantizer(self):
        for midi in (-13, 0, 47, 60, 61, 99):
            assert note_to_midi(quantize_pitch(midi)) == midi
    
    def test_invalid_names(self):
        for bad in ("H4", "C", "C##4", ""):
            with pytest.raises(QuantizationError):
                note_to_midi(bad)


class TestPitchQuantizer:
    
    def test_chromatic(self):
        quantizer = PitchQuantizer()
        assert quantizer.quantize(61) == "C#4"
        assert abs(quantizer.frequency(61.2) - midi_to_hz(61)) < 1e-9
    
    def test_natural_frequency_is_of_snapped_note(self):
        quantizer = PitchQuantizer(natural_only=True)
        assert quantizer.quantize(61) == "C4"
        assert abs(quantizer.frequency(61) - midi_to_hz(60)) < 1e-9
