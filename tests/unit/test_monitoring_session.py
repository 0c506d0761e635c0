"""
Unit tests for the SampleSource and MonitoringSession.

A simulated accelerometer replays a short, fixed trace at a fast interval so the
sessions run through real asyncio tasks and queues.
"""

import asyncio
import unittest
from unittest.mock import AsyncMock, MagicMock

from pickup.detection import PickupDetector, Sample
from pickup.detection.session import MonitoringSession
from pickup.detection.source import SampleSource
from pickup.hardware.accelerometer import SimulatedAccelerometer

INTERVAL = 0.001
FLAT = (0.0, 0.0, 9.8)
UPRIGHT = (0.0, 0.0, 2.0)
TWO_PICKUPS = [FLAT, UPRIGHT, FLAT, FLAT, UPRIGHT, UPRIGHT]

async def wait_until(predicate, timeout=2.0):
    """Poll until predicate() is true or fail after timeout seconds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not reached in time")
        await asyncio.sleep(INTERVAL)

class TestMonitoringSession(unittest.IsolatedAsyncioTestCase):
    """Test cases for the MonitoringSession class."""

    async def asyncSetUp(self):
        self.accelerometer = SimulatedAccelerometer(trace=TWO_PICKUPS, loop=False)
        self.source = SampleSource(self.accelerometer, interval=INTERVAL)
        self.detector = PickupDetector()
        self.on_pickup = AsyncMock()
        self.session = MonitoringSession(self.source, self.detector, self.on_pickup)

    async def asyncTearDown(self):
        await self.session.stop()
        await self.source.close()

    async def test_detects_each_pickup_once(self):
        await self.session.start()
        await wait_until(lambda: self.session.samples_seen == len(TWO_PICKUPS))

        self.assertEqual(self.session.pickups_detected, 2)
        self.assertEqual(self.on_pickup.await_count, 2)
        event = self.on_pickup.await_args_list[0].args[0]
        self.assertEqual(event.previous, Sample(*FLAT))
        self.assertEqual(event.current, Sample(*UPRIGHT))

    async def test_samples_ingested_in_arrival_order(self):
        self.detector.ingest = MagicMock(wraps=self.detector.ingest)

        await self.session.start()
        await wait_until(lambda: self.session.samples_seen == len(TWO_PICKUPS))

        ingested = [c.args[0].as_tuple() for c in self.detector.ingest.call_args_list]
        self.assertEqual(ingested, TWO_PICKUPS)

    async def test_failing_callback_does_not_stop_session(self):
        self.on_pickup.side_effect = [RuntimeError("storage unavailable"), None]

        await self.session.start()
        await wait_until(lambda: self.session.samples_seen == len(TWO_PICKUPS))

        self.assertEqual(self.on_pickup.await_count, 2)
        self.assertTrue(self.session.is_running)

    async def test_stop_discards_state_and_is_idempotent(self):
        await self.session.start()
        await wait_until(lambda: self.session.samples_seen >= 1)

        await self.session.stop()
        await self.session.stop()

        self.assertFalse(self.session.is_running)
        self.assertFalse(self.source.is_polling)
        self.assertIsNone(self.detector.previous)

    async def test_stop_lets_pickup_in_progress_finish(self):
        started = asyncio.Event()
        finished = []

        async def slow_pickup(event):
            started.set()
            await asyncio.sleep(0.2)
            finished.append(event)

        self.session.on_pickup = slow_pickup
        await self.session.start()
        await asyncio.wait_for(started.wait(), timeout=2.0)
        await self.session.stop()

        self.assertEqual(len(finished), 1)
        self.assertFalse(self.session.is_running)

    async def test_stop_before_start_is_noop(self):
        await self.session.stop()
        self.assertFalse(self.session.is_running)
        self.assertIsNone(self.detector.previous)

    async def test_restart_begins_cold(self):
        await self.session.start()
        await wait_until(lambda: self.session.samples_seen >= 1)
        await self.session.stop()

        # A restarted session must not pair the new first sample with an old one
        self.accelerometer.trace = self.accelerometer.trace[1:2]
        self.accelerometer._position = 0
        await self.session.start()
        await wait_until(lambda: self.session.samples_seen == 1)
        self.assertEqual(self.session.pickups_detected, 0)

class TestSampleSource(unittest.IsolatedAsyncioTestCase):
    """Test cases for the SampleSource class."""

    async def test_read_errors_are_reported_and_skipped(self):
        accelerometer = MagicMock()
        accelerometer.read_sample = AsyncMock(side_effect=[
            RuntimeError("i2c timeout"), Sample(*FLAT), EOFError()
        ])
        on_error = AsyncMock()
        source = SampleSource(accelerometer, interval=INTERVAL, on_error=on_error)

        subscription = source.subscribe()
        sample = await asyncio.wait_for(subscription.get(), timeout=2.0)

        self.assertEqual(sample, Sample(*FLAT))
        on_error.assert_awaited_once()
        self.assertIsInstance(on_error.await_args.args[0], RuntimeError)
        await source.close()

    async def test_full_channel_drops_oldest(self):
        source = SampleSource(MagicMock(), interval=INTERVAL, queue_size=2)
        subscription = source.subscribe()
        source._poll_task.cancel()

        for z in (1.0, 2.0, 3.0):
            subscription.push(Sample(0, 0, z))

        self.assertEqual(subscription.dropped, 1)
        self.assertEqual((await subscription.get()).z, 2.0)
        self.assertEqual((await subscription.get()).z, 3.0)
        subscription.remove()
        subscription.remove()

    async def test_polling_stops_with_last_subscriber(self):
        accelerometer = SimulatedAccelerometer(trace=[FLAT])
        source = SampleSource(accelerometer, interval=INTERVAL)

        first = source.subscribe()
        second = source.subscribe()
        first.remove()
        self.assertTrue(source.is_polling)
        second.remove()
        self.assertFalse(source.is_polling)

    async def test_close_waits_for_polling_already_cancelled(self):
        source = SampleSource(SimulatedAccelerometer(trace=[FLAT]), interval=INTERVAL)
        subscription = source.subscribe()
        poll_task = source._poll_task

        subscription.remove()
        self.assertFalse(poll_task.done())

        await source.close()
        self.assertTrue(poll_task.done())

    def test_interval_must_be_positive(self):
        with self.assertRaises(ValueError):
            SampleSource(MagicMock(), interval=0)

if __name__ == "__main__":
    unittest.main()
