"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. The app factory builds one instance,
connects it on startup and closes it on shutdown (see `api/main.py`).
Route handlers get it through the `get_database` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Driver failures (server errors, lost connections, pool exhaustion, timeouts)
are raised as `StorageError` so callers never see asyncpg exceptions.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from .errors import StorageError
from .settings import Settings

logger = logging.getLogger(__name__)

DRIVER_ERRORS = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
    asyncio.TimeoutError,
)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def rows_affected(status: str) -> int:
    """
    Parse the row count out of a command status tag such as "INSERT 0 3".
    """
    parts = (status or "").split()
    if not parts or not parts[-1].isdigit():
        return 0
    return int(parts[-1])


class Database:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 30.0,
        acquire_timeout: float = 10.0,
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._acquire_timeout = acquire_timeout
        self._pool: asyncpg.Pool | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "Database":
        return cls(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout_s,
            acquire_timeout=settings.db_acquire_timeout_s,
        )

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        if not self._dsn:
            raise RuntimeError("DATABASE_URL is not set.")
        self._pool = await asyncpg.create_pool(
            dsn=_sanitize_database_url(self._dsn),
            min_size=min(self._min_size, self._max_size),
            max_size=self._max_size,
            command_timeout=self._command_timeout,
        )
        logger.info("db_pool_ready min_size=%s max_size=%s", self._min_size, self._max_size)

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None

    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Check out one pooled connection, waiting at most `acquire_timeout`.
        """
        try:
            async with self.pool().acquire(timeout=self._acquire_timeout) as conn:
                yield conn
        except DRIVER_ERRORS as exc:
            logger.error("db_error type=%s", type(exc).__name__, exc_info=exc)
            raise StorageError() from exc

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[asyncpg.Connection]:
        """
        Check out a connection and run the block inside one transaction.

        Any exception raised in the block rolls the transaction back.
        """
        async with self.connection() as conn:
            async with conn.transaction():
                yield conn

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        async with self.connection() as conn:
            row = await conn.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        async with self.connection() as conn:
            rows = await conn.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL) and return its status tag.
        """
        async with self.connection() as conn:
            return await conn.execute(sql, *args)


def get_database(request: Request) -> Database:
    return request.app.state.database
