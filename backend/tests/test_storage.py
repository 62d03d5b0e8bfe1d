import pytest
from sqlmodel import SQLModel

from app.client.storage import (
    MemoryStorage,
    SQLStorage,
    StorageError,
    StorageQuotaExceeded,
    entry_size,
)


def test_entry_size_counts_utf8_bytes():
    assert entry_size("k", "abc") == 4
    assert entry_size("k", "豆包") == 7


class TestMemoryStorage:
    def test_set_get_remove(self):
        storage = MemoryStorage()
        storage.set_item("a", "1")
        assert storage.get_item("a") == "1"
        assert storage.keys() == ["a"]
        storage.remove_item("a")
        storage.remove_item("a")
        assert storage.get_item("a") is None

    def test_quota_exceeded(self):
        storage = MemoryStorage(quota_bytes=10)
        storage.set_item("a", "12345")
        with pytest.raises(StorageQuotaExceeded):
            storage.set_item("b", "123456")
        assert storage.get_item("b") is None

    def test_overwrite_does_not_count_old_value(self):
        storage = MemoryStorage(quota_bytes=10)
        storage.set_item("a", "123456789")
        storage.set_item("a", "987654321")
        assert storage.get_item("a") == "987654321"


class TestSQLStorage:
    def test_set_get_remove(self, sql_storage: SQLStorage):
        sql_storage.set_item("a", "1")
        sql_storage.set_item("a", "2")
        sql_storage.set_item("b", "3")
        assert sql_storage.get_item("a") == "2"
        assert sorted(sql_storage.keys()) == ["a", "b"]
        sql_storage.remove_item("a")
        sql_storage.remove_item("a")
        assert sql_storage.get_item("a") is None
        assert sql_storage.keys() == ["b"]

    def test_quota_exceeded(self, sql_storage: SQLStorage):
        sql_storage.quota_bytes = 10
        sql_storage.set_item("a", "12345")
        with pytest.raises(StorageQuotaExceeded):
            sql_storage.set_item("b", "123456")
        assert sql_storage.get_item("b") is None

    def test_database_errors_become_storage_errors(self, sql_storage: SQLStorage):
        sql_storage.set_item("a", "1")
        SQLModel.metadata.drop_all(sql_storage.engine)

        with pytest.raises(StorageError, match="Failed to read a"):
            sql_storage.get_item("a")
        with pytest.raises(StorageError, match="Failed to write a"):
            sql_storage.set_item("a", "2")
        with pytest.raises(StorageError, match="Failed to remove a"):
            sql_storage.remove_item("a")
        with pytest.raises(StorageError, match="Failed to list keys"):
            sql_storage.keys()
