"""
Event bus for the Phone Pickup Counter.

This module provides the event bus that delivers events between services.
It handles event validation, tracing, and delivery to subscribers.
"""

import asyncio
import logging
from typing import Dict, List, Optional, Callable, Awaitable
from .events import EventType, BaseEvent
from .registry import EventRegistry
from .tracing import EventTracer

# Type aliases
EventHandler = Callable[[BaseEvent], Awaitable[None]]

class EventBus:
    """
    Central event bus for delivering typed events between services.

    The event bus is responsible for:
    - Validating events against their registered schemas
    - Tracking event producers and consumers
    - Routing events to subscribers
    - Handling errors during event delivery
    - Providing observability through tracing
    """

    def __init__(self, registry: EventRegistry, tracer: Optional[EventTracer] = None):
        """
        Initialize the event bus.

        Args:
            registry: The event registry for validation and tracking
            tracer: Optional event tracer for observability
        """
        self.registry = registry
        self.tracer = tracer
        self.subscribers: Dict[EventType, List[EventHandler]] = {}
        self.logger = logging.getLogger(__name__)

    async def publish(self, event: BaseEvent, sender: str) -> None:
        """
        Publish an event to all subscribers.

        Args:
            event: The event to publish
            sender: Name of the service publishing the event
        """
        if not event.producer_name:
            event.producer_name = sender

        try:
            self.registry.validate_schema(event)
        except (ValueError, TypeError) as e:
            self.logger.error(f"Event validation failed: {e}")
            return

        if self.tracer:
            self.tracer.record_event(event)

        event_type = event.type
        subscribers = list(self.subscribers.get(event_type, []))

        if not subscribers:
            self.logger.debug(f"No subscribers for event type: {event_type}")
            return

        tasks = [
            asyncio.create_task(self._deliver_event(subscriber, event))
            for subscriber in subscribers
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        for result in results:
            if isinstance(result, Exception):
                self.logger.error(f"Error in event handler: {result}", exc_info=result)

    async def _deliver_event(self, handler: EventHandler, event: BaseEvent) -> None:
        """
        Deliver an event to a single handler with error handling.

        Args:
            handler: The event handler function
            event: The event to deliver
        """
        try:
            await handler(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Handler failures stay with the handler; other subscribers still get the event
            self.logger.error(
                f"Error delivering event {event.type} to {handler.__qualname__}: {e}",
                exc_info=True
            )

    def subscribe(self, event_type: EventType, handler: EventHandler, service_name: str) -> None:
        """
        Subscribe a handler to events of a specific type.

        Args:
            event_type: The event type to subscribe to
            handler: The handler function to call when events arrive
            service_name: Name of the service subscribing
        """
        self.subscribers.setdefault(event_type, []).append(handler)
        self.registry.register_consumer(service_name, event_type)
        self.logger.debug(f"Service {service_name} subscribed to {event_type}")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Unsubscribe a handler from events of a specific type.

        Args:
            event_type: The event type to unsubscribe from
            handler: The handler function to unsubscribe
        """
        if handler in self.subscribers.get(event_type, []):
            self.subscribers[event_type].remove(handler)
            if not self.subscribers[event_type]:
                del self.subscribers[event_type]
            self.logger.debug(f"Handler {handler.__qualname__} unsubscribed from {event_type}")
