"""
Persisted pickup counter.

Counters live in a small key-value store holding string values, read,
incremented and written back once per pickup. A missing key reads as 0.
"""

import asyncio
import json
import logging
import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from pickup.core.config import StorageConfig

logger = logging.getLogger(__name__)

# Stored values may be written as "41" or "41.0"; the leading integer is the count
_LEADING_INT = re.compile(r"\s*[-+]?\d+")

class CounterStore(ABC):
    """
    Key-value store for counters.

    Increments are not atomic across processes; a single writer is assumed.
    """

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """Return the stored value for key, or None if absent."""
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store value under key."""
        pass

    async def get_count(self, key: str) -> int:
        """
        Read a counter.

        Args:
            key: Counter key

        Returns:
            The leading integer of the stored value, or 0 if absent or unreadable
        """
        raw = await self.get_item(key)
        if raw is None:
            return 0
        match = _LEADING_INT.match(raw)
        if match is None:
            logger.warning(f"Stored value for {key!r} is not an integer ({raw!r}), treating as 0")
            return 0
        return int(match.group(0))

    async def increment(self, key: str) -> int:
        """
        Increment a counter by one and persist it.

        Args:
            key: Counter key

        Returns:
            The new count
        """
        current = await self.get_count(key)
        new_count = current + 1
        logger.debug(f"Counter {key}: {current} -> {new_count}")
        await self.set_item(key, str(new_count))
        return new_count

class MemoryCounterStore(CounterStore):
    """Counter store kept in memory; lost on exit."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    async def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

class JsonFileCounterStore(CounterStore):
    """
    Counter store backed by a JSON object on disk.

    Writes go to a temporary file in the same directory which then replaces
    the existing file, so a crash never leaves a half-written file behind.
    """

    def __init__(self, path):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Counter file {self.path} is corrupt ({e}), starting empty")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Counter file {self.path} does not hold an object, starting empty")
            return {}
        return data

    def _write(self, data: Dict[str, str]) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise

    async def get_item(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read)
        value = data.get(key)
        return None if value is None else str(value)

    async def set_item(self, key: str, value: str) -> None:
        def update():
            data = self._read()
            data[key] = value
            self._write(data)
        await asyncio.to_thread(update)

def create_counter_store(config: StorageConfig) -> CounterStore:
    """
    Build the counter store selected by configuration.

    Args:
        config: Storage configuration

    Returns:
        The configured CounterStore
    """
    if config.backend == "memory":
        return MemoryCounterStore()
    return JsonFileCounterStore(config.path)
