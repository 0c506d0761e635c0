"""
This service keeps the persisted pickup count, incrementing it once for every
detected pickup.
"""

from typing import Optional
from pickup.core.config import StorageConfig
from pickup.core.events import BaseEvent, EventType
from pickup.core.service import BaseService
from pickup.events.notifications import PickupCountedEvent
from pickup.storage.counter import CounterStore

class CounterService(BaseService):
    """Service counting pickups in a CounterStore"""

    PRODUCES_EVENTS = {
        EventType.PICKUP_COUNTED: {
            'schema': PickupCountedEvent,
            'description': "The pickup counter was incremented"
        },
    }

    CONSUMES_EVENTS = {
        EventType.PICKUP_DETECTED: 'handle_event',
    }

    def __init__(self, event_bus, service_registry, store: CounterStore,
                 config: Optional[StorageConfig] = None, name: Optional[str] = None):
        config = config or StorageConfig()
        super().__init__(event_bus, service_registry, name=name, config=config)
        self.store = store
        self.key = config.key

    async def get_count(self) -> int:
        """Current persisted count"""
        return await self.store.get_count(self.key)

    async def handle_event(self, event: BaseEvent) -> None:
        if event.type != EventType.PICKUP_DETECTED:
            return

        try:
            count = await self.store.increment(self.key)
        except Exception as e:
            await self.report_error(e, key=self.key)
            return

        self.logger.info("Pickup counted", count=count)
        await self.publish(PickupCountedEvent(producer_name=self.name, count=count))
