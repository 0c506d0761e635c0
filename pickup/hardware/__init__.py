"""
Hardware abstractions for the Phone Pickup Counter.

This package provides the interfaces to the host device: the accelerometer
that produces samples and the notification facilities used for each pickup.
"""
