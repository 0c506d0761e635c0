"""
Sensor events for the Phone Pickup Counter.

This module defines events related to accelerometer monitoring and the
pickups detected from it.
"""

from typing import Literal, Tuple
from pickup.core.events import BaseEvent, EventType

Vector = Tuple[float, float, float]

class PermissionStatusEvent(BaseEvent):
    """
    Event published once the notification permission has been checked.

    Monitoring only starts when the permission was granted.
    """
    type: Literal[EventType.PERMISSION_STATUS] = EventType.PERMISSION_STATUS
    granted: bool

class MonitoringStateEvent(BaseEvent):
    """
    Event published when accelerometer monitoring starts or stops.
    """
    type: Literal[EventType.MONITORING_STATE] = EventType.MONITORING_STATE
    active: bool
    interval: float  # Sampling interval in seconds

class PickupDetectedEvent(BaseEvent):
    """
    Event published when the phone has been picked up.

    The samples are the transition that fired, kept for diagnostics.
    """
    type: Literal[EventType.PICKUP_DETECTED] = EventType.PICKUP_DETECTED
    previous: Vector  # (x, y, z) before the pickup, m/s^2
    current: Vector   # (x, y, z) after the pickup, m/s^2
