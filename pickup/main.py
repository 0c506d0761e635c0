"""
Main entry point for the Phone Pickup Counter.

This module wires the event system, the hardware abstractions and the services
together and runs them until interrupted. It handles signal management, logging
setup, and system lifecycle.
"""

import argparse
import asyncio
import logging
import signal
import sys
from typing import List, Optional
import structlog
from dotenv import load_dotenv

from pickup.core import (
    EventRegistry, ServiceRegistry, EventBus, EventTracer, get_config, ApplicationConfig
)
from pickup.core.events import EventType
from pickup.detection import PickupDetector, Thresholds
from pickup.detection.session import MonitoringSession
from pickup.detection.source import SampleSource
from pickup.events.system import ApplicationStartupCompletedEvent
from pickup.hardware.accelerometer import AccelerometerHardware, SimulatedAccelerometer
from pickup.hardware.notifier import (
    NotificationBackend, PermissionGate, StaticPermissionGate, create_notification_backend
)
from pickup.services import PickupService, CounterService, NotificationService
from pickup.storage.counter import CounterStore, create_counter_store

def setup_logging(level: str = "INFO"):
    """Configure structured logging for the application."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level),
        stream=sys.stdout,
    )

class PickupApplication:
    """
    Main application class for the Phone Pickup Counter.

    Services are started consumers first so that no event published by the
    pickup service is missed, and stopped in reverse order.
    """

    def __init__(self,
                 config: Optional[ApplicationConfig] = None,
                 accelerometer: Optional[AccelerometerHardware] = None,
                 store: Optional[CounterStore] = None,
                 notifier: Optional[NotificationBackend] = None,
                 permission_gate: Optional[PermissionGate] = None):
        """
        Initialize the application.

        Collaborators left as None are built from configuration.
        """
        self.logger = structlog.get_logger(app="pickup")
        self.config = config or get_config()

        self.event_registry = EventRegistry()
        self.service_registry = ServiceRegistry()

        if self.config.event.tracing_enabled:
            self.event_tracer = EventTracer(max_events=self.config.event.max_trace_events)
        else:
            self.event_tracer = None

        self.event_bus = EventBus(self.event_registry, self.event_tracer)
        self.event_registry.register_event(
            EventType.APPLICATION_STARTUP_COMPLETED,
            ApplicationStartupCompletedEvent,
            "All services have been started"
        )

        sampling = self.config.sampling
        self.accelerometer = accelerometer or SimulatedAccelerometer(
            config=self.config.simulator, interval=sampling.interval
        )
        self.store = store or create_counter_store(self.config.storage)
        self.notifier = notifier or create_notification_backend(self.config.notification)
        self.permission_gate = permission_gate or StaticPermissionGate(
            self.config.notification.permission_granted
        )

        detector_config = self.config.detector
        self.detector = PickupDetector(Thresholds(
            motion_delta=detector_config.motion_delta,
            flat=detector_config.flat,
            upright=detector_config.upright,
        ))
        self.source = SampleSource(self.accelerometer, sampling.interval, sampling.queue_size)
        # The pickup service installs its own callback
        self.session = MonitoringSession(self.source, self.detector, on_pickup=None)

        self.services = {
            "notification": NotificationService(
                self.event_bus, self.service_registry, self.notifier,
                config=self.config.notification
            ),
            "counter": CounterService(
                self.event_bus, self.service_registry, self.store,
                config=self.config.storage
            ),
            "pickup": PickupService(
                self.event_bus, self.service_registry, self.session, self.permission_gate
            ),
        }
        self._running = False
        self._stop_event = asyncio.Event()

    async def initialize(self):
        """Initialize hardware, start all services and begin monitoring."""
        self.logger.info("Initializing Phone Pickup Counter")

        try:
            await self.accelerometer.initialize()
            await self.notifier.initialize()

            for name, service in self.services.items():
                self.logger.info(f"Starting service: {name}")
                await service.start()

            self._running = True
            await self.event_bus.publish(
                ApplicationStartupCompletedEvent(producer_name="pickup"),
                "pickup"
            )
            self.logger.info("Phone Pickup Counter initialization complete",
                             count=await self.services["counter"].get_count(),
                             services={
                                 service.name: self.service_registry.get_service_state(service.name)
                                 for service in self.services.values()
                             })

        except Exception as e:
            self.logger.error("Failed to initialize application", error=str(e), exc_info=True)
            raise

    async def run(self, duration: Optional[float] = None):
        """
        Run until stopped, or for a fixed number of seconds.

        Args:
            duration: Seconds to run for, or None to run until a signal arrives
        """
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=duration)
        except asyncio.TimeoutError:
            self.logger.info("Run duration elapsed", duration=duration)
        except asyncio.CancelledError:
            self.logger.info("Application task cancelled")
        finally:
            await self.shutdown()

    async def shutdown(self):
        """Shut down all services and clean up resources."""
        if not self._running:
            return

        self._running = False
        self.logger.info("Shutting down Phone Pickup Counter")

        for name, service in reversed(list(self.services.items())):
            try:
                self.logger.info(f"Stopping service: {name}")
                await service.stop()
            except Exception as e:
                self.logger.error(f"Error stopping service {name}: {e}")

        await self.source.close()
        for hardware in (self.notifier, self.accelerometer):
            try:
                await hardware.shutdown()
            except Exception as e:
                self.logger.error(f"Error shutting down {hardware.name}: {e}")

        if self.event_tracer:
            self.logger.info("Event statistics", **self.event_tracer.get_event_stats())
        self.logger.info("Phone Pickup Counter shutdown complete")

    def handle_signal(self, sig):
        """
        Handle termination signals.

        Args:
            sig: The signal received
        """
        self.logger.info(f"Received signal {sig.name}, shutting down")
        self._stop_event.set()

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Count phone pickups from accelerometer samples")
    parser.add_argument("--duration", type=float, default=None,
                        help="Stop after this many seconds (default: run until interrupted)")
    parser.add_argument("--log-level", default=None,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                        help="Override the configured log level")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for the simulated accelerometer noise")
    return parser.parse_args(argv)

async def main(argv: Optional[List[str]] = None):
    """Application entry point."""
    args = parse_args(argv)
    config = get_config()
    if args.seed is not None:
        config.simulator.seed = args.seed

    setup_logging(args.log_level or config.log_level.value)

    app = PickupApplication(config)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: app.handle_signal(s))

    await app.initialize()
    await app.run(args.duration)

def cli():
    load_dotenv()
    try:
        asyncio.run(main())
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    cli()
