"""
Key-Value Backends
==================

Durable string key-value areas used by the template store.
"""

from typing import Any, Dict, Optional
from abc import ABC, abstractmethod
import redis.asyncio as redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

from email_builder.config.logging import get_logger

logger = get_logger(__name__)


class StorageError(Exception):
    """Exception raised when the storage medium is unavailable."""

    pass


class KeyValueBackend(ABC):
    """Abstract base class for string key-value storage."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store a value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove a key; absent keys are ignored."""
        pass


class MemoryKeyValueBackend(KeyValueBackend):
    """Process-local backend, used in development and tests."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class RedisKeyValueBackend(KeyValueBackend):
    """Redis-backed storage; connection failures surface as StorageError."""

    def __init__(self, client: "redis.Redis[Any]") -> None:
        self.client = client
        self.logger: Any = logger.bind(backend="redis")  # structlog.BoundLoggerBase

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await self.client.get(key)
        except RedisError as e:
            self.logger.error("Redis read failed", key=key, error=str(e))
            raise StorageError(f"Failed to read {key}: {e}") from e
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    async def set(self, key: str, value: str) -> None:
        try:
            await self.client.set(key, value)
        except RedisError as e:
            self.logger.error("Redis write failed", key=key, error=str(e))
            raise StorageError(f"Failed to write {key}: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except RedisError as e:
            self.logger.error("Redis delete failed", key=key, error=str(e))
            raise StorageError(f"Failed to delete {key}: {e}") from e
