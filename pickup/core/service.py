"""
Base service implementation for the Phone Pickup Counter.

This module provides the BaseService class that all services should inherit from,
defining the core service lifecycle and event handling interfaces.
"""

import asyncio
import structlog
from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, ClassVar
from .events import EventType, BaseEvent
from .registry import ServiceRegistry
from .bus import EventBus

class BaseService(ABC):
    """
    Base class for all services.

    This class provides:
    - Service lifecycle management (start/stop)
    - Typed event publishing and handling
    - Service registration and state tracking
    - Structured logging with context

    All services should inherit from this class and define their produced and consumed events.
    """

    # Map of EventType to event class and description
    PRODUCES_EVENTS: ClassVar[Dict[EventType, Dict[str, Any]]] = {}

    # Map of EventType to handler method name
    CONSUMES_EVENTS: ClassVar[Dict[EventType, str]] = {}

    def __init__(self,
                 event_bus: EventBus,
                 service_registry: ServiceRegistry,
                 name: Optional[str] = None,
                 config: Optional[Any] = None):
        """
        Initialize the service.

        Args:
            event_bus: The event bus for publishing and subscribing to events
            service_registry: The service registry for service lifecycle management
            name: Optional service name (defaults to class name)
            config: Optional service configuration
        """
        from pickup.events.system import ServiceStateChangedEvent, ServiceErrorEvent

        self.event_bus = event_bus
        self.service_registry = service_registry
        self.name = name or self.__class__.__name__
        self.config = config

        self.logger = structlog.get_logger(service=self.name)

        self._running = False
        self._lock = asyncio.Lock()

        # Every service reports its lifecycle and its errors
        produces = {
            EventType.SERVICE_STATE_CHANGED: {
                'schema': ServiceStateChangedEvent,
                'description': "A service changed lifecycle state"
            },
            EventType.SERVICE_ERROR: {
                'schema': ServiceErrorEvent,
                'description': "A service failed to perform a duty"
            },
        }
        produces.update(self.PRODUCES_EVENTS)
        for event_type, event_info in produces.items():
            event_bus.registry.register_producer(self.name, event_type)
            if 'schema' in event_info and 'description' in event_info:
                event_bus.registry.register_event(
                    event_type,
                    event_info['schema'],
                    event_info['description']
                )

        self.service_registry.register_service(self.name, self)

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """
        Start the service.

        This method:
        1. Subscribes to events
        2. Marks the service as running

        Implementations should call super().start() first.
        """
        async with self._lock:
            if self._running:
                self.logger.warning("Service already running")
                return

            for event_type, handler_name in self.CONSUMES_EVENTS.items():
                handler = getattr(self, handler_name)
                self.event_bus.subscribe(event_type, handler, self.name)

            self._running = True
            self.service_registry.set_service_state(self.name, 'running')
            self.logger.info("Service started")

            await self.publish_service_state('started')

    async def stop(self) -> None:
        """
        Stop the service.

        This method:
        1. Unsubscribes from events
        2. Marks the service as stopped

        Implementations should perform their own cleanup and call super().stop() at the end.
        """
        async with self._lock:
            if not self._running:
                self.logger.warning("Service already stopped")
                return

            await self.publish_service_state('stopping')

            for event_type, handler_name in self.CONSUMES_EVENTS.items():
                self.event_bus.unsubscribe(event_type, getattr(self, handler_name))

            self._running = False
            self.service_registry.set_service_state(self.name, 'stopped')
            self.logger.info("Service stopped")

            await self.publish_service_state('stopped')

    async def publish(self, event: BaseEvent) -> None:
        """
        Publish an event through the bus.

        Args:
            event: The event to publish
        """
        if not self._running:
            self.logger.warning("Attempted publish while stopped",
                                event_type=event.type)
            return

        if not event.producer_name:
            event.producer_name = self.name

        await self.event_bus.publish(event, self.name)

    async def publish_service_state(self, state: str) -> None:
        """
        Publish a service state change event.

        Args:
            state: New state of the service
        """
        from pickup.events.system import ServiceStateChangedEvent

        event = ServiceStateChangedEvent(
            producer_name=self.name,
            service_name=self.name,
            state=state
        )
        await self.event_bus.publish(event, self.name)

    async def report_error(self, error: Exception, **details: Any) -> None:
        """
        Log a failure and publish it as a service error event.

        Args:
            error: The exception that was raised
            **details: Extra context to attach to the event
        """
        from pickup.events.system import ServiceErrorEvent

        self.logger.error("Service error", error=str(error), error_type=type(error).__name__, **details)
        await self.publish(ServiceErrorEvent(
            producer_name=self.name,
            service_name=self.name,
            error_type=type(error).__name__,
            error_message=str(error),
            details=details or None
        ))

    @abstractmethod
    async def handle_event(self, event: BaseEvent) -> None:
        """
        Handle an event from the event bus.

        When a service registers a handler in CONSUMES_EVENTS, the handler should
        call this method to standardize event handling.

        Args:
            event: The event to handle
        """
        pass
