"""
Database Configuration
=====================

Redis connection management for the template store.
Provides a shared connection pool and async Redis clients.
"""

from typing import Optional, Dict
import redis.asyncio as redis  # type: ignore[import-untyped]
from redis.asyncio import ConnectionPool  # type: ignore[import-untyped]

from .settings import get_settings
from .logging import get_logger

logger = get_logger(__name__)


class DatabaseManager:
    """Connection manager for the Redis template store backend."""

    def __init__(self) -> None:
        self.settings = get_settings()
        self._redis_pool: Optional[ConnectionPool] = None  # type: ignore[type-arg]

    @property
    def initialized(self) -> bool:
        return self._redis_pool is not None

    async def initialize(self) -> None:
        """Initialize the Redis connection pool."""
        if self.initialized:
            return
        try:
            self._redis_pool = ConnectionPool.from_url(  # type: ignore[attr-defined]
                self.settings.redis_url,
                max_connections=self.settings.redis_max_connections,
                retry_on_timeout=True,
                decode_responses=True,
            )

            # Test connection
            async with redis.Redis(connection_pool=self._redis_pool) as client:  # type: ignore[attr-defined]
                await client.ping()  # type: ignore[attr-defined]

            logger.info("Redis connection established", url=self.settings.redis_url)
        except Exception as e:
            self._redis_pool = None
            logger.error("Failed to connect to Redis", error=str(e))
            raise

    async def close(self) -> None:
        """Close the Redis connection pool."""
        if self._redis_pool:  # type: ignore[misc]
            await self._redis_pool.disconnect()  # type: ignore[attr-defined]
            self._redis_pool = None
            logger.info("Redis connection closed")

    def get_redis_client(self) -> redis.Redis:  # type: ignore[type-arg]
        """Get Redis client instance."""
        if not self._redis_pool:  # type: ignore[misc]
            raise RuntimeError("Redis not initialized")
        return redis.Redis(connection_pool=self._redis_pool)  # type: ignore[attr-defined]


# Global database manager instance
db_manager = DatabaseManager()


def get_redis_client() -> redis.Redis:  # type: ignore[type-arg]
    """
    Get Redis client instance.

    Returns:
        Redis client bound to the shared connection pool
    """
    return db_manager.get_redis_client()  # type: ignore[misc]


async def initialize_databases() -> None:
    """Initialize all database connections."""
    await db_manager.initialize()


async def close_databases() -> None:
    """Close all database connections."""
    await db_manager.close()


async def check_redis_health() -> bool:
    """Check Redis connection health."""
    try:
        client = get_redis_client()
        await client.ping()
        return True
    except Exception as e:
        logger.error("Redis health check failed", error=str(e))
        return False


async def check_database_health() -> Dict[str, bool]:
    """Check database connections health."""
    if get_settings().storage_backend != "redis":
        return {"redis": True}
    return {"redis": await check_redis_health()}
