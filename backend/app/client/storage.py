"""Key/value storage backends for the client's local persistence."""

from typing import Protocol

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.models.storage import StorageItem


class StorageError(RuntimeError):
    """A local storage operation failed."""


class StorageQuotaExceeded(StorageError):
    """The write would exceed the storage quota."""


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...

    def keys(self) -> list[str]: ...


def entry_size(key: str, value: str) -> int:
    """Bytes a key/value pair occupies, as counted against quotas."""
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))


def _check_quota(quota: int | None, used_elsewhere: int, key: str, value: str) -> None:
    if quota is None:
        return
    needed = used_elsewhere + entry_size(key, value)
    if needed > quota:
        raise StorageQuotaExceeded(
            f"Storing {key} needs {needed} bytes, quota is {quota}"
        )


class MemoryStorage:
    """Dict-backed storage with an optional byte quota."""

    def __init__(self, quota_bytes: int | None = None):
        self.quota_bytes = quota_bytes
        self._items: dict[str, str] = {}

    def get_item(self, key: str) -> str | None:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        used = sum(entry_size(k, v) for k, v in self._items.items() if k != key)
        _check_quota(self.quota_bytes, used, key, value)
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items)


class SQLStorage:
    """Durable storage in a single SQL table, one row per key.

    Every database failure surfaces as ``StorageError``.
    """

    def __init__(self, engine: Engine, quota_bytes: int | None = None):
        self.engine = engine
        self.quota_bytes = quota_bytes

    def get_item(self, key: str) -> str | None:
        try:
            with Session(self.engine) as session:
                item = session.get(StorageItem, key)
                return item.value if item else None
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            with Session(self.engine) as session:
                if self.quota_bytes is not None:
                    others = session.exec(
                        select(StorageItem).where(StorageItem.key != key)
                    ).all()
                    used = sum(entry_size(i.key, i.value) for i in others)
                    _check_quota(self.quota_bytes, used, key, value)
                item = session.get(StorageItem, key)
                if item:
                    item.value = value
                else:
                    item = StorageItem(key=key, value=value)
                session.add(item)
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to write {key}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with Session(self.engine) as session:
                item = session.get(StorageItem, key)
                if item:
                    session.delete(item)
                    session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to remove {key}: {e}") from e

    def keys(self) -> list[str]:
        try:
            with Session(self.engine) as session:
                return list(session.exec(select(StorageItem.key)).all())
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to list keys: {e}") from e
