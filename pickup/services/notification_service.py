"""
This service sends a notification with the updated count after every counted
pickup.
"""

from typing import Optional
from pickup.core.config import NotificationConfig
from pickup.core.events import BaseEvent, EventType
from pickup.core.service import BaseService
from pickup.events.notifications import NotificationSentEvent
from pickup.hardware.notifier import NotificationBackend

class NotificationService(BaseService):
    """Service delivering pickup notifications"""

    PRODUCES_EVENTS = {
        EventType.NOTIFICATION_SENT: {
            'schema': NotificationSentEvent,
            'description': "A pickup notification was delivered"
        },
    }

    CONSUMES_EVENTS = {
        EventType.PICKUP_COUNTED: 'handle_event',
    }

    def __init__(self, event_bus, service_registry, backend: NotificationBackend,
                 config: Optional[NotificationConfig] = None, name: Optional[str] = None):
        config = config or NotificationConfig()
        super().__init__(event_bus, service_registry, name=name, config=config)
        self.backend = backend

    def render(self, count: int):
        """
        Build the notification text for a count.

        Args:
            count: Pickup count to report

        Returns:
            (title, body) tuple
        """
        return self.config.title, self.config.body_template.format(count=count)

    async def handle_event(self, event: BaseEvent) -> None:
        if event.type != EventType.PICKUP_COUNTED:
            return

        title, body = self.render(event.count)
        self.logger.debug("Sending notification", count=event.count)
        try:
            await self.backend.deliver(title, body)
        except Exception as e:
            await self.report_error(e, count=event.count)
            return

        await self.publish(NotificationSentEvent(
            producer_name=self.name,
            title=title,
            body=body,
            count=event.count
        ))
