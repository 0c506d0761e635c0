"""
Service implementations for the Phone Pickup Counter.

Services are the core components of the application, each responsible for a
specific piece of functionality. They communicate through events on the bus.
"""

from .pickup_service import PickupService
from .counter_service import CounterService
from .notification_service import NotificationService
