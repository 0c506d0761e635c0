"""
Unit tests for the counter stores.
"""

import json
import tempfile
import unittest
from pathlib import Path

from pickup.core.config import StorageConfig
from pickup.storage.counter import (
    JsonFileCounterStore,
    MemoryCounterStore,
    create_counter_store,
)

KEY = "pickupCount"

class TestMemoryCounterStore(unittest.IsolatedAsyncioTestCase):
    """Test cases for the MemoryCounterStore class."""

    async def test_missing_key_reads_zero(self):
        store = MemoryCounterStore()
        self.assertIsNone(await store.get_item(KEY))
        self.assertEqual(await store.get_count(KEY), 0)

    async def test_increment_returns_new_value(self):
        store = MemoryCounterStore({KEY: "7"})
        results = [await store.increment(KEY) for _ in range(3)]
        self.assertEqual(results, [8, 9, 10])
        self.assertEqual(await store.get_item(KEY), "10")

    async def test_non_integer_value_treated_as_zero(self):
        store = MemoryCounterStore({KEY: "lots"})
        self.assertEqual(await store.increment(KEY), 1)

    async def test_leading_integer_is_kept(self):
        store = MemoryCounterStore({KEY: "41.0", "padded": " 7 ", "suffixed": "12abc"})
        self.assertEqual(await store.get_count(KEY), 41)
        self.assertEqual(await store.get_count("padded"), 7)
        self.assertEqual(await store.get_count("suffixed"), 12)

class TestJsonFileCounterStore(unittest.IsolatedAsyncioTestCase):
    """Test cases for the JsonFileCounterStore class."""

    async def asyncSetUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = Path(self.tmpdir.name) / "state" / "counts.json"

    async def asyncTearDown(self):
        self.tmpdir.cleanup()

    async def test_count_survives_new_store_instance(self):
        store = JsonFileCounterStore(self.path)
        for _ in range(5):
            await store.increment(KEY)

        reopened = JsonFileCounterStore(self.path)
        self.assertEqual(await reopened.get_count(KEY), 5)
        with open(self.path) as f:
            self.assertEqual(json.load(f), {KEY: "5"})

    async def test_other_keys_preserved(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({"other": "x"}))

        await JsonFileCounterStore(self.path).increment(KEY)

        self.assertEqual(json.loads(self.path.read_text()), {"other": "x", KEY: "1"})

    async def test_corrupt_file_starts_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json")

        store = JsonFileCounterStore(self.path)
        self.assertEqual(await store.get_count(KEY), 0)
        self.assertEqual(await store.increment(KEY), 1)

    async def test_non_utf8_file_starts_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_bytes(b"\xff\xfe\x00garbage")

        store = JsonFileCounterStore(self.path)
        self.assertEqual(await store.get_count(KEY), 0)
        self.assertEqual(await store.increment(KEY), 1)
        self.assertEqual(json.loads(self.path.read_text()), {KEY: "1"})

    async def test_float_count_continues_from_stored_value(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text(json.dumps({KEY: 41.0}))

        self.assertEqual(await JsonFileCounterStore(self.path).increment(KEY), 42)
        self.assertEqual(json.loads(self.path.read_text()), {KEY: "42"})

    async def test_no_temp_files_left_behind(self):
        await JsonFileCounterStore(self.path).increment(KEY)
        self.assertEqual([p.name for p in self.path.parent.iterdir()], ["counts.json"])

class TestCreateCounterStore(unittest.TestCase):

    def test_backend_selection(self):
        self.assertIsInstance(create_counter_store(StorageConfig(backend="memory")), MemoryCounterStore)
        store = create_counter_store(StorageConfig(backend="file", path="/tmp/x.json"))
        self.assertIsInstance(store, JsonFileCounterStore)
        self.assertEqual(store.path, Path("/tmp/x.json"))

if __name__ == "__main__":
    unittest.main()
