"""
Futelt Backend — Message Store Tests
======================================

What:  The MessageStore contract, checked against both backends, plus the
       durability and failure behavior specific to the SQL store.
"""

import asyncio
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List

import pytest
from pydantic import ValidationError as PydanticValidationError

from futelt.config import Settings
from futelt.database import build_engine
from futelt.exceptions import PersistenceError, ValidationError
from futelt.schemas.message import MessageItem
from futelt.store import InMemoryMessageStore, MessageStore, SqlMessageStore, create_store


class TestStoreContract:
    """Behavior every MessageStore implementation must share."""

    @pytest.mark.asyncio
    async def test_satisfies_protocol(self, store):
        assert isinstance(store, MessageStore)

    @pytest.mark.asyncio
    async def test_empty_store_lists_nothing(self, store):
        assert await store.list_all() == []

    @pytest.mark.asyncio
    async def test_append_then_list_contains_message(self, store):
        message_id = await store.append("hello")

        items = await store.list_all()

        assert [item for item in items if item.text == "hello"] == [
            MessageItem(id=message_id, text="hello")
        ]

    @pytest.mark.asyncio
    async def test_sequential_ids_start_at_one(self, store):
        ids = [await store.append(f"note {i}") for i in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    @pytest.mark.asyncio
    async def test_list_is_newest_first(self, store):
        for text in ("first", "second", "third"):
            await store.append(text)

        items = await store.list_all()

        assert [item.id for item in items] == [3, 2, 1]
        assert [item.text for item in items] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_consecutive_reads_are_identical(self, store):
        await store.append("a")
        await store.append("b")

        assert await store.list_all() == await store.list_all()

    @pytest.mark.asyncio
    async def test_concurrent_appends_get_distinct_gapless_ids(self, store):
        count = 25
        ids = await asyncio.gather(*(store.append(f"msg {i}") for i in range(count)))

        assert sorted(ids) == list(range(1, count + 1))
        items = await store.list_all()
        assert len(items) == count
        assert {item.id for item in items} == set(ids)

    @pytest.mark.asyncio
    async def test_text_stored_verbatim(self, store):
        text = "  未来の自分へ 🌸\nline two  "
        message_id = await store.append(text)

        items = await store.list_all()

        assert items[0] == MessageItem(id=message_id, text=text)

    @pytest.mark.asyncio
    async def test_empty_text_rejected_without_consuming_id(self, store):
        with pytest.raises(ValidationError):
            await store.append("")

        assert await store.list_all() == []
        assert await store.append("after") == 1

    @pytest.mark.asyncio
    async def test_returned_items_are_immutable(self, store):
        await store.append("fixed")
        items = await store.list_all()

        with pytest.raises(PydanticValidationError):
            items[0].text = "changed"

        assert (await store.list_all())[0].text == "fixed"


class TestSqlMessageStore:
    """Durability and failure handling of the database-backed store."""

    @pytest.mark.asyncio
    async def test_messages_survive_reopen(self, database_settings):
        first = SqlMessageStore(build_engine(database_settings))
        await first.open()
        await first.append("before restart")
        await first.close()

        second = SqlMessageStore(build_engine(database_settings))
        await second.open()
        try:
            assert await second.list_all() == [MessageItem(id=1, text="before restart")]
            assert await second.append("after restart") == 2
        finally:
            await second.close()

    @pytest.mark.asyncio
    async def test_open_is_idempotent(self, sql_store):
        await sql_store.append("kept")
        await sql_store.open()

        assert [item.text for item in await sql_store.list_all()] == ["kept"]

    @pytest.mark.asyncio
    async def test_failed_append_leaves_no_gap(self, sql_store, monkeypatch):
        assert await sql_store.append("one") == 1

        # Let NULL reach the database, where it violates NOT NULL on messages.text
        monkeypatch.setattr("futelt.store.sql.check_text", lambda text: None)
        with pytest.raises(PersistenceError):
            await sql_store.append(None)
        monkeypatch.undo()

        assert await sql_store.append("two") == 2
        assert [item.id for item in await sql_store.list_all()] == [2, 1]

    @pytest.mark.asyncio
    async def test_failure_context_hides_driver_details(self, sql_store, monkeypatch):
        monkeypatch.setattr("futelt.store.sql.check_text", lambda text: None)
        with pytest.raises(PersistenceError) as exc_info:
            await sql_store.append(None)

        assert exc_info.value.message == "Could not save the message. Please try again."
        assert exc_info.value.context == {"error_type": "IntegrityError"}

    @pytest.mark.asyncio
    async def test_open_unusable_location_raises(self, tmp_path):
        settings = Settings(
            store_backend="database",
            database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'dir' / 'futelt.db'}",
        )
        store = SqlMessageStore(build_engine(settings))

        with pytest.raises(PersistenceError):
            await store.open()
        await store.close()

    @pytest.mark.asyncio
    async def test_list_without_table_raises(self, database_settings):
        store = SqlMessageStore(build_engine(database_settings))
        try:
            with pytest.raises(PersistenceError):
                await store.list_all()
        finally:
            await store.close()


class TestCreateStore:
    """Backend selection from configuration."""

    def test_memory_backend(self, memory_settings):
        assert isinstance(create_store(memory_settings), InMemoryMessageStore)

    @pytest.mark.asyncio
    async def test_database_backend(self, database_settings):
        store = create_store(database_settings)
        try:
            assert isinstance(store, SqlMessageStore)
        finally:
            await store.close()


class TestInMemoryThreadSafety:
    """Appends from worker threads, each driving the coroutine on its own loop."""

    def setup_method(self):
        self.store = InMemoryMessageStore()
        # Frequent thread switches make unsynchronized id assignment collide
        self._switch_interval = sys.getswitchinterval()
        sys.setswitchinterval(1e-6)

    def teardown_method(self):
        sys.setswitchinterval(self._switch_interval)

    def _append_many(self, worker: int, count: int) -> List[int]:
        return [asyncio.run(self.store.append(f"w{worker}-{i}")) for i in range(count)]

    def test_threaded_appends_get_distinct_gapless_ids(self):
        workers, per_worker = 8, 200
        total = workers * per_worker
        barrier = threading.Barrier(workers)

        def run(worker: int) -> List[int]:
            barrier.wait()
            return self._append_many(worker, per_worker)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            results = list(pool.map(run, range(workers)))

        ids = [message_id for batch in results for message_id in batch]
        assert len(ids) == total
        assert set(ids) == set(range(1, total + 1))

        items = asyncio.run(self.store.list_all())
        assert len(items) == total
        assert [item.id for item in items] == list(range(total, 0, -1))

    def test_threaded_reads_see_complete_snapshots(self):
        for i in range(50):
            asyncio.run(self.store.append(f"seed {i}"))

        def read(_: int) -> List[int]:
            return [item.id for item in asyncio.run(self.store.list_all())]

        with ThreadPoolExecutor(max_workers=4) as pool:
            writer = pool.submit(self._append_many, 99, 200)
            snapshots = list(pool.map(read, range(20)))
            writer.result()

        for snapshot in snapshots:
            # Every snapshot is a strictly descending, gapless prefix of the ids
            assert snapshot == list(range(len(snapshot), 0, -1))
