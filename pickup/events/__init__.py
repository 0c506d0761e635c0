"""
Event definitions for the Phone Pickup Counter.

This package contains all event types used in the system, organized by functional area.
Each module defines events related to a specific subsystem.
"""

# Re-export core types
from pickup.core.events import EventType, BaseEvent
