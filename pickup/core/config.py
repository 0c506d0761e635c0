"""
Configuration management for the Phone Pickup Counter.

This module provides Pydantic settings models for type-safe configuration with
validation and environment variable integration. Every setting can be overridden
with a PICKUP_-prefixed environment variable or a .env file.
"""

from typing import Literal, Optional
from enum import Enum
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

class LogLevel(str, Enum):
    """Log levels for the application."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class BaseConfig(BaseSettings):
    """
    Base configuration class with common settings for all components.

    All other configuration classes should inherit from this class.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PICKUP_", extra="ignore")

    debug: bool = False
    log_level: LogLevel = LogLevel.INFO

class EventConfig(BaseConfig):
    """Configuration for the event system."""
    model_config = SettingsConfigDict(env_prefix="PICKUP_EVENT_")

    max_trace_events: int = 1000
    tracing_enabled: bool = True

class SamplingConfig(BaseConfig):
    """Configuration for accelerometer sampling."""
    model_config = SettingsConfigDict(env_prefix="PICKUP_SAMPLING_")

    interval: float = 0.1  # seconds between samples
    queue_size: int = 100  # samples buffered per subscriber before dropping the oldest

    @field_validator("interval")
    @classmethod
    def validate_interval(cls, v):
        """Validate the sampling interval is positive."""
        if v <= 0:
            raise ValueError("Sampling interval must be greater than 0")
        return v

    @field_validator("queue_size")
    @classmethod
    def validate_queue_size(cls, v):
        if v < 1:
            raise ValueError("Queue size must be at least 1")
        return v

class DetectorConfig(BaseConfig):
    """Thresholds for pickup detection, in m/s^2."""
    model_config = SettingsConfigDict(env_prefix="PICKUP_DETECTOR_")

    motion_delta: float = 1.5  # per-axis sample-to-sample change counted as a jerk
    flat: float = 8.0          # |z| above this means the phone was lying flat
    upright: float = 5.0       # |z| below this means the phone has been tilted up

    @model_validator(mode="after")
    def validate_thresholds(self):
        """Validate the upright band sits below the flat band."""
        if self.upright >= self.flat:
            raise ValueError("Upright threshold must be lower than the flat threshold")
        if self.motion_delta <= 0:
            raise ValueError("Motion delta threshold must be greater than 0")
        return self

class SimulatorConfig(BaseConfig):
    """Configuration for the simulated accelerometer."""
    model_config = SettingsConfigDict(env_prefix="PICKUP_SIMULATOR_")

    seed: Optional[int] = None
    noise_std: float = 0.05     # m/s^2
    rest_seconds: float = 3.0   # time spent lying flat between pickups
    held_seconds: float = 2.0   # time spent in the hand after a pickup

class StorageConfig(BaseConfig):
    """Configuration for the persisted pickup counter."""
    model_config = SettingsConfigDict(env_prefix="PICKUP_STORAGE_")

    backend: Literal["file", "memory"] = "file"
    path: str = "pickup_count.json"
    key: str = "pickupCount"

class NotificationConfig(BaseConfig):
    """Configuration for pickup notifications."""
    model_config = SettingsConfigDict(env_prefix="PICKUP_NOTIFICATION_")

    backend: Literal["log", "command"] = "log"
    command: str = "notify-send"
    title: str = "Phone Pickup Detected!"
    body_template: str = "You have picked up your phone {count} times today."
    permission_granted: bool = True

    @field_validator("body_template")
    @classmethod
    def validate_body_template(cls, v):
        """Validate the body template carries the count placeholder."""
        if "{count}" not in v:
            raise ValueError("Notification body template must contain '{count}'")
        return v

class ApplicationConfig(BaseConfig):
    """
    Main application configuration that combines all component configurations.

    This is the top-level configuration class that should be used by the application.
    """
    model_config = SettingsConfigDict(env_file=".env", env_prefix="PICKUP_", env_nested_delimiter="__")

    event: EventConfig = Field(default_factory=EventConfig)
    sampling: SamplingConfig = Field(default_factory=SamplingConfig)
    detector: DetectorConfig = Field(default_factory=DetectorConfig)
    simulator: SimulatorConfig = Field(default_factory=SimulatorConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)

def get_config() -> ApplicationConfig:
    """
    Get the application configuration.

    Returns:
        The validated ApplicationConfig instance
    """
    return ApplicationConfig()
