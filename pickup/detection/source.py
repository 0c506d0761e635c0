"""
Sample source: polls the accelerometer at a fixed interval and pushes each
sample into the channel of every subscriber.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional
import structlog
from pickup.hardware.accelerometer import AccelerometerHardware
from .models import Sample

ErrorCallback = Callable[[Exception], Awaitable[None]]

class SampleSubscription:
    """
    A subscriber's channel of samples, delivered in arrival order.

    The channel is bounded; when the consumer falls behind, the oldest
    buffered sample is dropped to make room for the newest.
    """

    def __init__(self, source: "SampleSource", maxsize: int):
        self.queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.dropped = 0
        self._source = source
        self._active = True

    def push(self, sample: Sample) -> None:
        if self.queue.full():
            self.queue.get_nowait()
            self.dropped += 1
            self._source.logger.warning("Sample channel full, dropped oldest sample",
                                        dropped=self.dropped)
        self.queue.put_nowait(sample)

    async def get(self) -> Sample:
        """Wait for the next sample."""
        return await self.queue.get()

    def remove(self) -> None:
        """Stop receiving samples. Safe to call more than once."""
        if self._active:
            self._active = False
            self._source._unsubscribe(self)

class SampleSource:
    """
    Produces accelerometer samples at a fixed interval.

    Polling starts with the first subscription and stops when the last
    subscription is removed.
    """

    def __init__(self, accelerometer: AccelerometerHardware,
                 interval: float = 0.1,
                 queue_size: int = 100,
                 on_error: Optional[ErrorCallback] = None):
        """
        Initialize the sample source.

        Args:
            accelerometer: Device to read samples from
            interval: Seconds between samples
            queue_size: Samples buffered per subscriber
            on_error: Called with the exception when a read fails
        """
        if interval <= 0:
            raise ValueError("Sampling interval must be greater than 0")
        self.accelerometer = accelerometer
        self.interval = interval
        self.queue_size = queue_size
        self.on_error = on_error
        self.logger = structlog.get_logger(component="SampleSource")
        self._subscriptions: List[SampleSubscription] = []
        self._poll_task: Optional[asyncio.Task] = None
        self._stopping_tasks: List[asyncio.Task] = []

    @property
    def is_polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def subscribe(self) -> SampleSubscription:
        """
        Subscribe to samples. Must be called from within the running event loop.

        Returns:
            A subscription whose channel receives every subsequent sample
        """
        subscription = SampleSubscription(self, self.queue_size)
        self._subscriptions.append(subscription)
        if not self.is_polling:
            self._poll_task = asyncio.create_task(self._poll_loop())
            self.logger.info("Sampling started", interval=self.interval)
        return subscription

    def _unsubscribe(self, subscription: SampleSubscription) -> None:
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
        if not self._subscriptions and self._poll_task:
            self._poll_task.cancel()
            self._stopping_tasks = [t for t in self._stopping_tasks if not t.done()]
            self._stopping_tasks.append(self._poll_task)
            self._poll_task = None
            self.logger.info("Sampling stopped")

    async def close(self) -> None:
        """Remove every subscription and wait for polling to finish."""
        for subscription in list(self._subscriptions):
            subscription.remove()
        tasks, self._stopping_tasks = self._stopping_tasks, []
        for task in tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def _poll_loop(self) -> None:
        """Continuous loop reading the accelerometer"""
        while True:
            try:
                sample = await self.accelerometer.read_sample()
            except EOFError:
                self.logger.info("Accelerometer has no more samples")
                return
            except Exception as e:
                self.logger.error("Error reading accelerometer", error=str(e))
                if self.on_error:
                    await self.on_error(e)
            else:
                for subscription in list(self._subscriptions):
                    subscription.push(sample)

            await asyncio.sleep(self.interval)
