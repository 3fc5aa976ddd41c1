"""
Exception hierarchy for DataSonify.
"""


class SonificationError(Exception):
    """Base exception for DataSonify."""
    pass


class MappingError(SonificationError):
    """Malformed source or target ranges."""
    pass


class QuantizationError(SonificationError):
    """Pitch values that cannot be named or converted."""
    pass


class PlaybackError(SonificationError):
    """Session and scheduling failures."""
    pass


class IndexOutOfBoundsError(PlaybackError):
    """Requested index has no corresponding value."""
    
    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(f"Index {index} out of range for {size} values")


class EmptyDatasetError(PlaybackError):
    """Session configured with zero values, or never configured."""
    pass


class SynthesisError(SonificationError):
    """Tone rendering or audio output failures."""
    pass


class DatasetError(SonificationError):
    """CSV loading and column parsing errors."""
    pass


class NarrationError(SonificationError):
    """Speech voice selection or backend failures."""
    pass
