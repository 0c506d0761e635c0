"""
Data types shared by the pickup detector and its sample source.
"""

import math
from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple

@dataclass(frozen=True)
class Sample:
    """One tri-axial accelerometer reading, in m/s^2."""
    x: float
    y: float
    z: float

    @classmethod
    def from_tuple(cls, values: Sequence[float]) -> "Sample":
        x, y, z = values
        return cls(float(x), float(y), float(z))

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

@dataclass(frozen=True)
class PickupEvent:
    """A detected flat-to-upright transition."""
    previous: Sample
    current: Sample

@dataclass
class DetectorState:
    """Rolling state of the detector: the last sample seen, if any."""
    previous: Optional[Sample] = None

class Thresholds(NamedTuple):
    """Pickup thresholds, in m/s^2. All comparisons are strict."""
    motion_delta: float = 1.5
    flat: float = 8.0
    upright: float = 5.0

DEFAULT_THRESHOLDS = Thresholds()

class TransitionCheck(NamedTuple):
    """The three conditions evaluated for one sample-to-sample transition."""
    significant_motion: bool
    was_flat: bool
    is_upright: bool

    @property
    def fired(self) -> bool:
        return self.significant_motion and self.was_flat and self.is_upright
