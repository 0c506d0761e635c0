"""
Pickup Detector

Classifies accelerometer transitions as pickup / not-pickup.

A phone resting flat on a table reads close to gravity (~9.8 m/s^2) on its z
axis. Lifting it rotates that axis away from gravity and produces a jerk. The
detector therefore fires when, between two consecutive samples:

- the previous sample was flat:     |prev.z| > flat (8.0)
- the current sample is upright:    |z| < upright (5.0)
- at least one axis jumped:         |prev.a - a| > motion_delta (1.5) for a in x, y, z

Only the previous sample is kept, so the decision for sample n depends on
samples n-1 and n alone. Samples with non-finite components never fire but
still replace the previous sample.

State machine:
- Uninitialized (no previous sample) -> Tracking(sample) on the first ingest.
- Tracking(s) -> Tracking(s') on every ingest, optionally emitting a PickupEvent.
- start()/stop() -> Uninitialized from any state.
"""

from typing import Optional
from .models import (
    DEFAULT_THRESHOLDS,
    DetectorState,
    PickupEvent,
    Sample,
    Thresholds,
    TransitionCheck,
)

def check_transition(previous: Sample, current: Sample,
                     thresholds: Thresholds = DEFAULT_THRESHOLDS) -> TransitionCheck:
    """
    Evaluate the pickup conditions for one transition.

    Args:
        previous: The sample before the transition
        current: The sample after the transition
        thresholds: Thresholds to compare against

    Returns:
        TransitionCheck with each condition; all False if either sample is not finite
    """
    if not (previous.is_finite and current.is_finite):
        return TransitionCheck(False, False, False)

    significant_motion = (
        abs(previous.x - current.x) > thresholds.motion_delta
        or abs(previous.y - current.y) > thresholds.motion_delta
        or abs(previous.z - current.z) > thresholds.motion_delta
    )
    was_flat = abs(previous.z) > thresholds.flat
    is_upright = abs(current.z) < thresholds.upright

    return TransitionCheck(significant_motion, was_flat, is_upright)

class PickupDetector:
    """
    First-order pickup detector over a stream of accelerometer samples.

    Not thread-safe: samples must be ingested serially by a single consumer.
    """

    def __init__(self, thresholds: Thresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds
        self.state = DetectorState()

    @property
    def previous(self) -> Optional[Sample]:
        return self.state.previous

    @property
    def is_tracking(self) -> bool:
        return self.state.previous is not None

    def start(self) -> None:
        """Begin a new monitoring session with no previous sample."""
        self.state.previous = None

    def stop(self) -> None:
        """Discard state. Safe to call when not started."""
        self.state.previous = None

    def reset(self, previous: Optional[Sample] = None) -> None:
        """
        Replace the rolling state.

        Args:
            previous: Sample to treat as the last one seen, or None to start cold
        """
        self.state.previous = previous

    def ingest(self, sample: Sample) -> Optional[PickupEvent]:
        """
        Feed one sample to the detector.

        Args:
            sample: The newest accelerometer reading

        Returns:
            PickupEvent if this sample completes a pickup transition, otherwise None
        """
        previous = self.state.previous
        self.state.previous = sample

        if previous is None:
            return None

        if check_transition(previous, sample, self.thresholds).fired:
            return PickupEvent(previous=previous, current=sample)
        return None
