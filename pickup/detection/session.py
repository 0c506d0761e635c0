"""
Monitoring session: owns the sample subscription and the detector state for
one start/stop cycle of pickup monitoring.
"""

import asyncio
from typing import Awaitable, Callable, Optional
import structlog
from .detector import PickupDetector
from .models import PickupEvent
from .source import SampleSource, SampleSubscription

PickupCallback = Callable[[PickupEvent], Awaitable[None]]

class MonitoringSession:
    """
    Feeds samples from a SampleSource through a PickupDetector.

    A single consumer task drains the subscription channel, so samples are
    ingested strictly in arrival order. Pickups are handed to the callback; a
    failing callback is logged and never stops the session or touches the
    detector state.
    """

    def __init__(self, source: SampleSource, detector: PickupDetector,
                 on_pickup: Optional[PickupCallback]):
        """
        Initialize the monitoring session.

        Args:
            source: Where samples come from
            detector: Detector whose state this session owns
            on_pickup: Awaited once per detected pickup
        """
        self.source = source
        self.detector = detector
        self.on_pickup = on_pickup
        self.logger = structlog.get_logger(component="MonitoringSession")
        self.samples_seen = 0
        self.pickups_detected = 0
        self._subscription: Optional[SampleSubscription] = None
        self._consumer_task: Optional[asyncio.Task] = None
        self._pickup_task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._subscription is not None

    async def start(self) -> None:
        """Reset the detector and start consuming samples."""
        if self.is_running:
            self.logger.warning("Monitoring already running")
            return

        self.detector.start()
        self.samples_seen = 0
        self.pickups_detected = 0
        self._subscription = self.source.subscribe()
        self._consumer_task = asyncio.create_task(self._consume(self._subscription))
        self.logger.info("Monitoring started", interval=self.source.interval)

    async def stop(self) -> None:
        """Unsubscribe and discard detector state. Safe to call when not running."""
        if not self.is_running:
            self.detector.stop()
            return

        self._subscription.remove()
        self._subscription = None

        task = self._consumer_task
        self._consumer_task = None
        if task:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        # A pickup already handed to the callback is seen through to the end
        pending = self._pickup_task
        self._pickup_task = None
        if pending and not pending.cancelled():
            await self._await_pickup(pending)

        self.detector.stop()
        self.logger.info("Monitoring stopped",
                         samples=self.samples_seen,
                         pickups=self.pickups_detected)

    async def _consume(self, subscription: SampleSubscription) -> None:
        """Consumer loop: one ingest per sample, in arrival order"""
        while True:
            sample = await subscription.get()
            self.samples_seen += 1

            event = self.detector.ingest(sample)
            if event is None:
                continue

            self.pickups_detected += 1
            self.logger.info("Phone picked up",
                             previous=event.previous.as_tuple(),
                             current=event.current.as_tuple())
            if self.on_pickup is None:
                continue
            self._pickup_task = asyncio.ensure_future(self.on_pickup(event))
            await self._await_pickup(asyncio.shield(self._pickup_task))
            self._pickup_task = None

    async def _await_pickup(self, pickup: Awaitable[None]) -> None:
        try:
            await pickup
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error("Error in pickup callback", error=str(e), exc_info=True)
