"""
Pickup detection.

The detector turns a stream of accelerometer samples into pickup events; the
sample source and monitoring session feed it from the accelerometer.
"""

from .models import Sample, PickupEvent, DetectorState, Thresholds, TransitionCheck
from .detector import PickupDetector, check_transition

__all__ = [
    'Sample',
    'PickupEvent',
    'DetectorState',
    'Thresholds',
    'TransitionCheck',
    'PickupDetector',
    'check_transition',
]
