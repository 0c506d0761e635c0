"""
This service watches the accelerometer and publishes an event every time the
phone is picked up.

Monitoring is gated on the notification permission: it is checked once when
the service starts, and if it is denied the accelerometer is never sampled.
"""

from typing import Optional
from pickup.core.events import BaseEvent, EventType
from pickup.core.service import BaseService
from pickup.detection.models import PickupEvent
from pickup.detection.session import MonitoringSession
from pickup.events.sensors import (
    MonitoringStateEvent,
    PermissionStatusEvent,
    PickupDetectedEvent,
)
from pickup.events.system import HardwareErrorEvent
from pickup.hardware.notifier import PermissionGate

class PickupService(BaseService):
    """Service running the pickup monitoring session"""

    PRODUCES_EVENTS = {
        EventType.PERMISSION_STATUS: {
            'schema': PermissionStatusEvent,
            'description': "Notification permission was checked"
        },
        EventType.MONITORING_STATE: {
            'schema': MonitoringStateEvent,
            'description': "Accelerometer monitoring started or stopped"
        },
        EventType.PICKUP_DETECTED: {
            'schema': PickupDetectedEvent,
            'description': "The phone was picked up"
        },
        EventType.HARDWARE_ERROR: {
            'schema': HardwareErrorEvent,
            'description': "The accelerometer could not be read"
        },
    }

    def __init__(self, event_bus, service_registry, session: MonitoringSession,
                 permission_gate: PermissionGate, name: Optional[str] = None, config=None):
        super().__init__(event_bus, service_registry, name=name, config=config)
        self.session = session
        self.permission_gate = permission_gate
        self.permission_granted: Optional[bool] = None
        self.session.on_pickup = self._on_pickup
        self.session.source.on_error = self._on_hardware_error

    async def start(self) -> None:
        """Check permission, then start monitoring if it was granted"""
        if self.is_running:
            self.logger.warning("Service already running")
            return

        await super().start()

        self.permission_granted = await self.permission_gate.ensure_granted()
        await self.publish(PermissionStatusEvent(
            producer_name=self.name,
            granted=self.permission_granted
        ))
        if not self.permission_granted:
            self.logger.warning("Notification permission denied, pickup monitoring not started")
            return

        await self.session.start()
        await self._publish_monitoring_state(True)

    async def stop(self) -> None:
        """Stop monitoring and the service"""
        if self.session.is_running:
            await self.session.stop()
            await self._publish_monitoring_state(False)
        await super().stop()

    async def _publish_monitoring_state(self, active: bool) -> None:
        await self.publish(MonitoringStateEvent(
            producer_name=self.name,
            active=active,
            interval=self.session.source.interval
        ))

    async def _on_pickup(self, event: PickupEvent) -> None:
        await self.publish(PickupDetectedEvent(
            producer_name=self.name,
            previous=event.previous.as_tuple(),
            current=event.current.as_tuple()
        ))

    async def _on_hardware_error(self, error: Exception) -> None:
        await self.publish(HardwareErrorEvent(
            producer_name=self.name,
            component="accelerometer",
            error_type=type(error).__name__,
            error_message=str(error)
        ))

    async def handle_event(self, event: BaseEvent) -> None:
        """Consumes no events; pickups arrive from the monitoring session."""
