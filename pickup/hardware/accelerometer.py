"""
Accelerometer hardware abstraction for the Phone Pickup Counter.

The application only needs one operation from the device: read the current
(x, y, z) acceleration in m/s^2. SimulatedAccelerometer replays a generated
trace so the counter runs on machines without a motion sensor.
"""

from abc import abstractmethod
from typing import Optional
import numpy as np
from .base import BaseHardware
from pickup.core.config import SimulatorConfig
from pickup.detection.models import Sample

GRAVITY = 9.81  # m/s^2

class AccelerometerHardware(BaseHardware):
    """
    Base class for accelerometer implementations.
    """

    @abstractmethod
    async def read_sample(self) -> Sample:
        """
        Read the current acceleration.

        Returns:
            Sample with x, y, z in m/s^2
        """
        pass

def generate_pickup_trace(interval: float,
                          rest_seconds: float = 3.0,
                          held_seconds: float = 2.0,
                          noise_std: float = 0.05,
                          rng: Optional[np.random.Generator] = None) -> np.ndarray:
    """
    Generate one pickup cycle as an (n, 3) array of accelerometer samples.

    The cycle is: lying flat face up, a quick lift to roughly upright, being held
    with a slight tremor, then put back down flat.

    Args:
        interval: Seconds between samples
        rest_seconds: Time lying flat before the pickup
        held_seconds: Time held upright after the pickup
        noise_std: Standard deviation of the Gaussian sensor noise
        rng: Random generator for the noise

    Returns:
        Array of shape (n, 3) with x, y, z columns
    """
    rng = rng or np.random.default_rng()
    rest_count = max(1, int(round(rest_seconds / interval)))
    held_count = max(1, int(round(held_seconds / interval)))

    flat = np.tile([0.0, 0.0, GRAVITY], (rest_count, 1))

    # Tilted about the x axis so gravity moves from z to y
    tilt = np.radians(75.0)
    upright_vector = [0.0, GRAVITY * np.sin(tilt), GRAVITY * np.cos(tilt)]
    held = np.tile(upright_vector, (held_count, 1))
    held += rng.normal(0.0, 0.3, size=held.shape)

    # A short settle back down to flat
    settle_angles = np.linspace(tilt, 0.0, 4)
    settle = np.column_stack([
        np.zeros_like(settle_angles),
        GRAVITY * np.sin(settle_angles),
        GRAVITY * np.cos(settle_angles),
    ])

    trace = np.vstack([flat, held, settle])
    trace += rng.normal(0.0, noise_std, size=trace.shape)
    return trace

class SimulatedAccelerometer(AccelerometerHardware):
    """
    Accelerometer that replays a trace of samples in a loop.
    """

    def __init__(self, trace: Optional[np.ndarray] = None,
                 config: Optional[SimulatorConfig] = None,
                 interval: float = 0.1,
                 loop: bool = True,
                 name: Optional[str] = None):
        """
        Initialize the simulated accelerometer.

        Args:
            trace: Explicit (n, 3) array to replay; generated from config when omitted
            config: Simulator configuration used to generate the trace
            interval: Sampling interval the generated trace is built for
            loop: Restart from the beginning once the trace is exhausted
            name: Optional name for this hardware instance
        """
        config = config or SimulatorConfig()
        super().__init__(config, name or "SimulatedAccelerometer")
        if trace is None:
            trace = generate_pickup_trace(
                interval,
                rest_seconds=config.rest_seconds,
                held_seconds=config.held_seconds,
                noise_std=config.noise_std,
                rng=np.random.default_rng(config.seed),
            )
        trace = np.asarray(trace, dtype=float)
        if trace.ndim != 2 or trace.shape[1] != 3 or len(trace) == 0:
            raise ValueError(f"Trace must be a non-empty (n, 3) array, got shape {trace.shape}")
        self.trace = trace
        self.loop = loop
        self.samples_read = 0
        self._position = 0

    async def _initialize_impl(self) -> None:
        # Replay always starts from the top of the trace
        self._position = 0
        self.samples_read = 0
        self.logger.debug("Trace loaded", samples=len(self.trace), loop=self.loop)

    async def _shutdown_impl(self) -> None:
        self.logger.debug("Trace replay ended", samples_read=self.samples_read)

    @property
    def exhausted(self) -> bool:
        return not self.loop and self._position >= len(self.trace)

    async def read_sample(self) -> Sample:
        if self.exhausted:
            raise EOFError("Simulated accelerometer trace exhausted")
        row = self.trace[self._position % len(self.trace)]
        self._position += 1
        self.samples_read += 1
        if self.loop:
            self._position %= len(self.trace)
        return Sample.from_tuple(row)
