"""Unit tests for the MongoDB document store."""

from collections import defaultdict
from types import SimpleNamespace
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import OperationFailure, ServerSelectionTimeoutError, WriteError

from src.commons.infrastructure.documentdb.base import (
    DeleteSummary,
    InsertManySummary,
    UpdateSummary,
)
from src.commons.infrastructure.documentdb.connection import (
    ConnectionConfig,
    ConnectionHandle,
    MongoConnectionFactory,
)
from src.commons.infrastructure.documentdb.exceptions import (
    DocumentDBConnectionError,
    DocumentDBOperationError,
)
from src.commons.infrastructure.documentdb.mongodb_provider import MongoDocumentStore

CONFIG = ConnectionConfig(url="mongodb://localhost:27017", database_name="test_db")


def _matches(document: dict[str, Any], filters: dict[str, Any]) -> bool:
    return all(document.get(key) == value for key, value in filters.items())


class InMemoryCursor:
    """Async iterable over a snapshot of documents."""

    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    async def _iterate(self):
        for doc in self._documents:
            yield doc

    def __aiter__(self):
        return self._iterate()


class InMemoryCollection:
    """Equality-filter stand-in for a Motor collection."""

    def __init__(self) -> None:
        self.documents: list[dict[str, Any]] = []

    def find(self, filters: dict[str, Any]) -> InMemoryCursor:
        return InMemoryCursor(
            [dict(doc) for doc in self.documents if _matches(doc, filters)]
        )

    async def insert_many(self, documents: list[dict[str, Any]]) -> SimpleNamespace:
        inserted_ids = []
        for doc in documents:
            doc.setdefault("_id", ObjectId())
            self.documents.append(dict(doc))
            inserted_ids.append(doc["_id"])
        return SimpleNamespace(inserted_ids=inserted_ids)

    async def delete_one(self, filters: dict[str, Any]) -> SimpleNamespace:
        for index, doc in enumerate(self.documents):
            if _matches(doc, filters):
                del self.documents[index]
                return SimpleNamespace(deleted_count=1)
        return SimpleNamespace(deleted_count=0)

    async def update_many(
        self, filters: dict[str, Any], update: dict[str, Any]
    ) -> SimpleNamespace:
        matched = modified = 0
        for doc in self.documents:
            if not _matches(doc, filters):
                continue
            matched += 1
            patch = update["$set"]
            if any(doc.get(key) != value for key, value in patch.items()):
                doc.update(patch)
                modified += 1
        return SimpleNamespace(matched_count=matched, modified_count=modified)


class CountingConnectionFactory(MongoConnectionFactory):
    """Connection factory double that counts connects and releases."""

    def __init__(self, database: Any, connect_error: Exception | None = None) -> None:
        super().__init__(CONFIG)
        self.database = database
        self.connect_error = connect_error
        self.connect_count = 0
        self.release_count = 0
        self.clients: list[MagicMock] = []

    async def connect(self) -> ConnectionHandle:
        self.connect_count += 1
        if self.connect_error is not None:
            raise DocumentDBConnectionError(self.connect_error) from self.connect_error
        client = MagicMock()
        self.clients.append(client)
        return ConnectionHandle(database=self.database, client=client)

    def release(self, handle: ConnectionHandle | None) -> None:
        self.release_count += 1
        super().release(handle)


@pytest.fixture
def database():
    """In-memory database creating collections on first access."""
    return defaultdict(InMemoryCollection)


@pytest.fixture
def connections(database):
    return CountingConnectionFactory(database)


@pytest.fixture
def store(connections):
    return MongoDocumentStore(CONFIG, connections=connections)


class TestReadAll:
    """Tests for read_all."""

    async def test_returns_every_document(self, store, database):
        fixtures = [{"_id": 1, "name": "vue"}, {"_id": 2, "name": "react"}]
        database["project"].documents.extend(fixtures)

        result = await store.read_all("project")

        assert len(result) == 2
        assert sorted(result, key=lambda d: d["_id"]) == fixtures

    async def test_does_not_leak_other_collections(self, store, database):
        database["project"].documents.append({"_id": 1, "name": "vue"})
        database["component"].documents.append({"_id": 2, "name": "button"})

        result = await store.read_all("project")

        assert result == [{"_id": 1, "name": "vue"}]

    async def test_empty_collection(self, store):
        assert await store.read_all("empty") == []

    async def test_uses_empty_filter(self, connections):
        collection = MagicMock()
        collection.find = MagicMock(return_value=InMemoryCursor([]))
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)

        await store.read_all("project")

        collection.find.assert_called_once_with({})


class TestInsertMany:
    """Tests for insert_many."""

    async def test_inserted_documents_are_readable(self, store):
        d1 = {"name": "vue-template", "version": "1.0.0"}
        d2 = {"name": "react-template", "version": "2.0.0"}

        await store.insert_many("project", [d1, d2])
        result = await store.read_all("project")

        names = {doc["name"] for doc in result}
        assert {"vue-template", "react-template"} <= names

    async def test_returns_count_and_ids(self, store):
        summary = await store.insert_many("project", [{"a": 1}, {"a": 2}])

        assert isinstance(summary, InsertManySummary)
        assert summary.inserted_count == 2
        assert len(summary.inserted_ids) == 2
        assert all(isinstance(i, ObjectId) for i in summary.inserted_ids)

    async def test_single_driver_call(self, connections):
        collection = MagicMock()
        collection.insert_many = AsyncMock(
            return_value=MagicMock(inserted_ids=["id-1", "id-2"])
        )
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)
        documents = [{"a": 1}, {"a": 2}]

        await store.insert_many("project", documents)

        collection.insert_many.assert_awaited_once_with(documents)

    async def test_empty_list_rejected_without_connecting(self, store, connections):
        with pytest.raises(ValueError):
            await store.insert_many("project", [])

        assert connections.connect_count == 0

    async def test_insert_then_read_scenario(self, store):
        await store.insert_many("items", [{"name": "a"}])

        result = await store.read_all("items")

        assert len(result) == 1
        assert result[0]["name"] == "a"


class TestRemoveOne:
    """Tests for remove_one."""

    async def test_deletes_single_match(self, store, database):
        database["project"].documents.extend(
            [{"_id": 1, "tag": "x"}, {"_id": 2, "tag": "x"}]
        )

        summary = await store.remove_one("project", {"tag": "x"})

        assert summary == DeleteSummary(deleted_count=1)
        assert len(database["project"].documents) == 1

    async def test_missing_document_is_zero_count_success(self, store):
        summary = await store.remove_one("project", {"_id": ObjectId()})

        assert summary.deleted_count == 0

    async def test_uses_delete_one(self, connections):
        collection = MagicMock()
        collection.delete_one = AsyncMock(return_value=MagicMock(deleted_count=1))
        collection.delete_many = AsyncMock()
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)

        await store.remove_one("project", {"name": "vue"})

        collection.delete_one.assert_awaited_once_with({"name": "vue"})
        collection.delete_many.assert_not_called()


class TestUpdateMany:
    """Tests for update_many."""

    async def test_no_filter_updates_every_document(self, store, database):
        # Omitting the filter matches the whole collection
        database["project"].documents.extend(
            [{"_id": 1, "v": 1}, {"_id": 2, "v": 2}, {"_id": 3, "v": 3}]
        )

        summary = await store.update_many("project", {"v": 0})

        assert summary == UpdateSummary(matched_count=3, modified_count=3)
        assert all(doc["v"] == 0 for doc in database["project"].documents)

    async def test_filter_limits_update(self, store, database):
        database["project"].documents.extend(
            [{"_id": 1, "type": "a"}, {"_id": 2, "type": "b"}]
        )

        summary = await store.update_many(
            "project", {"done": True}, filters={"type": "a"}
        )

        assert summary.matched_count == 1
        assert summary.modified_count == 1
        assert "done" not in database["project"].documents[1]

    async def test_wraps_update_in_set(self, connections):
        collection = MagicMock()
        collection.update_many = AsyncMock(
            return_value=MagicMock(matched_count=2, modified_count=1)
        )
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)

        summary = await store.update_many("project", {"status": "ready"})

        collection.update_many.assert_awaited_once_with(
            {}, {"$set": {"status": "ready"}}
        )
        assert summary.matched_count == 2
        assert summary.modified_count == 1


class TestConnectionLifecycle:
    """Every operation opens and closes exactly one connection."""

    async def test_each_operation_releases_once(self, store, connections):
        await store.read_all("project")
        await store.insert_many("project", [{"a": 1}])
        await store.remove_one("project", {"a": 1})
        await store.update_many("project", {"b": 2})

        assert connections.connect_count == 4
        assert connections.release_count == 4
        for client in connections.clients:
            client.close.assert_called_once()

    async def test_no_connection_is_reused(self, store, connections):
        await store.read_all("project")
        await store.read_all("project")

        assert len(connections.clients) == 2
        assert connections.clients[0] is not connections.clients[1]

    @pytest.mark.parametrize(
        ("method", "attr", "args"),
        [
            ("read_all", "find", ("project",)),
            ("insert_many", "insert_many", ("project", [{"a": 1}])),
            ("remove_one", "delete_one", ("project", {"a": 1})),
            ("update_many", "update_many", ("project", {"a": 2})),
        ],
    )
    async def test_failed_operation_releases_once(
        self, connections, method, attr, args
    ):
        failure = OperationFailure("boom")
        collection = MagicMock()
        setattr(collection, attr, MagicMock(side_effect=failure))
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)

        with pytest.raises(DocumentDBOperationError):
            await getattr(store, method)(*args)

        assert connections.connect_count == 1
        assert connections.release_count == 1
        connections.clients[0].close.assert_called_once()


class TestErrors:
    """Tests for failure propagation."""

    async def test_operation_error_carries_driver_error(self, connections):
        failure = WriteError("duplicate key", code=11000)
        collection = MagicMock()
        collection.insert_many = AsyncMock(side_effect=failure)
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)

        with pytest.raises(DocumentDBOperationError) as exc_info:
            await store.insert_many("project", [{"_id": 1}])

        assert exc_info.value.cause is failure
        assert exc_info.value.__cause__ is failure
        assert exc_info.value.collection == "project"
        assert exc_info.value.operation == "insert_many"

    async def test_malformed_filter_is_operation_error(self, connections):
        collection = MagicMock()
        collection.delete_one = AsyncMock(
            side_effect=TypeError("filter must be an instance of dict")
        )
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)

        with pytest.raises(DocumentDBOperationError):
            await store.remove_one("project", "not-a-filter")  # type: ignore[arg-type]

    async def test_connection_error_never_reaches_operation(self, database):
        connections = CountingConnectionFactory(
            database, connect_error=ServerSelectionTimeoutError("down")
        )
        collection = MagicMock()
        connections.database = {"project": collection}
        store = MongoDocumentStore(CONFIG, connections=connections)

        with pytest.raises(DocumentDBConnectionError) as exc_info:
            await store.read_all("project")

        assert not isinstance(exc_info.value, DocumentDBOperationError)
        collection.find.assert_not_called()
        assert connections.release_count == 0


class TestHealthCheck:
    """Tests for health_check."""

    async def test_healthy(self, store, connections):
        health = await store.health_check()

        assert health.healthy is True
        assert health.details == {"database": "test_db"}
        assert connections.release_count == 1

    async def test_unhealthy_does_not_raise(self, database):
        connections = CountingConnectionFactory(
            database, connect_error=ServerSelectionTimeoutError("down")
        )
        store = MongoDocumentStore(CONFIG, connections=connections)

        health = await store.health_check()

        assert health.healthy is False
        assert "down" in (health.message or "")
