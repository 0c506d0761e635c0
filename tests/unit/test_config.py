"""
Unit tests for configuration loading and validation.
"""

import os
import unittest
from unittest.mock import patch

from pydantic import ValidationError

from pickup.core.config import (
    ApplicationConfig,
    DetectorConfig,
    NotificationConfig,
    SamplingConfig,
    get_config,
)

class TestConfig(unittest.TestCase):
    """Test cases for the settings models."""

    def test_defaults(self):
        with patch.dict(os.environ, {}, clear=True):
            config = get_config()

        self.assertIsInstance(config, ApplicationConfig)
        self.assertEqual(config.sampling.interval, 0.1)
        self.assertEqual(config.storage.key, "pickupCount")
        self.assertEqual(config.notification.title, "Phone Pickup Detected!")
        self.assertEqual(
            (config.detector.motion_delta, config.detector.flat, config.detector.upright),
            (1.5, 8.0, 5.0)
        )

    def test_environment_override(self):
        env = {
            "PICKUP_SAMPLING_INTERVAL": "0.25",
            "PICKUP_STORAGE_BACKEND": "memory",
            "PICKUP_NOTIFICATION_PERMISSION_GRANTED": "false",
        }
        with patch.dict(os.environ, env, clear=True):
            config = get_config()

        self.assertEqual(config.sampling.interval, 0.25)
        self.assertEqual(config.storage.backend, "memory")
        self.assertFalse(config.notification.permission_granted)

    def test_interval_must_be_positive(self):
        with self.assertRaises(ValidationError):
            SamplingConfig(interval=0)

    def test_upright_must_be_below_flat(self):
        with self.assertRaises(ValidationError):
            DetectorConfig(flat=5.0, upright=6.0)

    def test_body_template_needs_count(self):
        with self.assertRaises(ValidationError):
            NotificationConfig(body_template="You picked up your phone.")

if __name__ == "__main__":
    unittest.main()
