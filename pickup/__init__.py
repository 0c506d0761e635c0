"""
Phone Pickup Counter - counts how often a phone is picked up.

This package watches a stream of accelerometer samples, detects the moment a
phone is lifted from a flat resting position, keeps a running count of pickups
and sends a notification for each one.

Features:
- Flat-to-upright pickup detection on raw accelerometer samples
- Channel-based sampling with start/stop monitoring sessions
- Persisted pickup counter
- Pluggable notification delivery and permission gating
"""

__version__ = "1.0.0"
