"""
Storage for the Phone Pickup Counter.
"""

from .counter import CounterStore, MemoryCounterStore, JsonFileCounterStore, create_counter_store
