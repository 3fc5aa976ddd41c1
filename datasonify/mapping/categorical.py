"""
Threshold bands mapping values to a fixed set of outputs.

Used where a continuous mapping is too subtle to hear, e.g. three elevation
classes of volcanoes each getting a clearly distinct tone.
"""

from typing import Any, Iterable, List, Tuple

from ..exceptions import MappingError


class CategoricalMapper:
    """
    Map a value to the output of the first band whose threshold it exceeds.
    
    Bands are checked from the highest threshold down; a value must be
    strictly greater than a threshold to fall into its band. Values that
    exceed no threshold get ``default``.
    
    Examples:
        >>> volcano = CategoricalMapper([(3000, 200.0), (1000, 400.0)], default=800.0)
        >>> volcano.map(3776)
        200.0
        >>> volcano.map(1000)
        800.0
    """
    
    def __init__(self, bands: Iterable[Tuple[float, Any]], default: Any):
        self.bands: List[Tuple[float, Any]] = sorted(
            bands, key=lambda band: band[0], reverse=True
        )
        thresholds = [threshold for threshold, _ in self.bands]
        if len(set(thresholds)) != len(thresholds):
            raise MappingError(f"Duplicate band thresholds: {thresholds}")
        self.default = default
    
    def map(self, value: float) -> Any:
        for threshold, output in self.bands:
            if value > threshold:
                return output
        return self.default
    
    def __len__(self) -> int:
        return len(self.bands) + 1


def parse_bands(texts: Iterable[str]) -> List[Tuple[float, float]]:
    """
    Parse ``"threshold=output"`` strings into numeric bands.
    
    Raises:
        MappingError: If a band is not of the form ``<number>=<number>``
    """
    bands = []
    for text in texts:
        threshold, sep, output = text.partition('=')
        if not sep:
            raise MappingError(f"Band '{text}' must look like THRESHOLD=OUTPUT")
        try:
            bands.append((float(threshold), float(output)))
        except ValueError:
            raise MappingError(f"Band '{text}' must contain two numbers")
    return bands
