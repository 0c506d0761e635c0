"""
Counter and notification events for the Phone Pickup Counter.
"""

from typing import Literal
from pickup.core.events import BaseEvent, EventType

class PickupCountedEvent(BaseEvent):
    """
    Event published after the persisted pickup counter has been incremented.
    """
    type: Literal[EventType.PICKUP_COUNTED] = EventType.PICKUP_COUNTED
    count: int  # Counter value after the increment

class NotificationSentEvent(BaseEvent):
    """
    Event published after a pickup notification has been delivered.
    """
    type: Literal[EventType.NOTIFICATION_SENT] = EventType.NOTIFICATION_SENT
    title: str
    body: str
    count: int
