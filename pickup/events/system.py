"""
System events for the Phone Pickup Counter.

This module defines events related to application lifecycle, service state,
and system-level operations.
"""

from typing import Dict, Any, Optional, Literal
from pickup.core.events import BaseEvent, EventType

class ApplicationStartupCompletedEvent(BaseEvent):
    """
    Event published when application startup has completed.

    This event signals that all services have been started and monitoring
    has been requested.
    """
    type: Literal[EventType.APPLICATION_STARTUP_COMPLETED] = EventType.APPLICATION_STARTUP_COMPLETED

class ServiceStateChangedEvent(BaseEvent):
    """
    Event published when a service changes state.
    """
    type: Literal[EventType.SERVICE_STATE_CHANGED] = EventType.SERVICE_STATE_CHANGED
    service_name: str
    state: str  # 'started', 'stopping', 'stopped'
    error: Optional[str] = None

class ServiceErrorEvent(BaseEvent):
    """
    Event published when a service fails to perform one of its duties.

    Counter storage and notification failures are reported this way so they
    never interrupt pickup detection.
    """
    type: Literal[EventType.SERVICE_ERROR] = EventType.SERVICE_ERROR
    service_name: str
    error_type: str
    error_message: str
    details: Optional[Dict[str, Any]] = None

class HardwareErrorEvent(BaseEvent):
    """
    Event published when a hardware component (accelerometer, notifier) fails.
    """
    type: Literal[EventType.HARDWARE_ERROR] = EventType.HARDWARE_ERROR
    component: str  # 'accelerometer', 'notifier', ...
    error_type: str
    error_message: str
    details: Optional[Dict[str, Any]] = None
