"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. It is created from `Settings` once per
process, connected in the app lifespan and closed on shutdown (see
`api/main.py`), then handed to the repositories that need it.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Errors:
- constraint violations (unique, foreign key) propagate as asyncpg errors so
  repositories can turn them into domain errors;
- everything else the store throws (unreachable host, timeouts, closed pool,
  server errors) becomes `InternalError`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import asyncpg

from .config import Settings
from .errors import InternalError

logger = logging.getLogger(__name__)

_STORE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


class Database:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 30.0,
        connect_timeout: float = 10.0,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._connect_timeout = connect_timeout
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url(),
            min_size=settings.DB_POOL_MIN_SIZE,
            max_size=settings.DB_POOL_MAX_SIZE,
            command_timeout=settings.DB_COMMAND_TIMEOUT_S,
            connect_timeout=settings.DB_CONNECT_TIMEOUT_S,
        )

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        self._pool = await asyncpg.create_pool(
            dsn=self._dsn,
            min_size=self._min_size,
            max_size=self._max_size,
            command_timeout=self._command_timeout,
            timeout=self._connect_timeout,
        )
        logger.info("db_pool_ready min_size=%s max_size=%s", self._min_size, self._max_size)

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Acquire a pooled connection, giving up after the connect timeout
        instead of waiting on an exhausted pool.
        """
        try:
            async with self.pool().acquire(timeout=self._connect_timeout) as conn:
                yield conn
        except asyncpg.IntegrityConstraintViolationError:
            raise
        except _STORE_ERRORS as exc:
            raise InternalError("Database operation failed.") from exc

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        async with self.connection() as conn:
            row = await conn.fetchrow(sql, *args)
        return dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        async with self.connection() as conn:
            rows = await conn.fetch(sql, *args)
        return [dict(r) for r in rows]
