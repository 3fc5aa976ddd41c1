"""
DataSonify: data sonification toolkit

Maps numeric observations onto musical notes, tones and sweeps, with
ordered playback, WAV rendering and narration helpers.
"""

__version__ = "0.1.0"
__author__ = "DataSonify Development Team"

from .config import get_config, set_config
from .logger import get_logger
from .mapping import map_range, RangeMapper
from .quantize import quantize_pitch, PitchQuantizer
from .session import SonificationSession, PlaybackScheduler

__all__ = [
    "get_config",
    "set_config",
    "get_logger",
    "map_range",
    "RangeMapper",
    "quantize_pitch",
    "PitchQuantizer",
    "SonificationSession",
    "PlaybackScheduler",
    "__version__"
]
