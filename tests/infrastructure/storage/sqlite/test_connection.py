"""Unit tests for SQLite connection pool."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from orderdesk.infrastructure.storage.sqlite import connection as conn_module
from orderdesk.infrastructure.storage.sqlite.connection import (
    ConnectionPool,
    close_pool,
    get_connection,
    get_pool,
    get_transaction,
)


class TestConnectionPoolInit:
    """Tests for ConnectionPool initialization."""

    def test_init_defaults(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path)
        assert pool.db_path == temp_db_path
        assert pool.pool_size == 5
        assert pool.busy_timeout == 30000
        assert pool._initialized is False
        assert len(pool._connections) == 0


class TestConnectionPoolInitialize:
    """Tests for ConnectionPool.initialize()."""

    @pytest.mark.asyncio
    async def test_initialize_creates_directory(self, tmp_path: Path):
        """Initialize creates database directory if not exists."""
        db_path = tmp_path / "subdir" / "nested" / "test.db"
        pool = ConnectionPool(db_path, pool_size=1)

        await pool.initialize()
        assert db_path.parent.exists()
        await pool.close()

    @pytest.mark.asyncio
    async def test_initialize_idempotent(self, temp_db_path: Path):
        """Multiple initialize calls are safe."""
        pool = ConnectionPool(temp_db_path, pool_size=2)

        await pool.initialize()
        await pool.initialize()

        assert len(pool._connections) == 2
        assert pool._pool.qsize() == 2
        await pool.close()


class TestConnectionPragmas:
    @pytest.mark.asyncio
    async def test_open_configures_connection(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, busy_timeout=1234)
        conn = await pool._open()
        try:
            cursor = await conn.execute("PRAGMA journal_mode")
            assert (await cursor.fetchone())[0].lower() == "wal"

            cursor = await conn.execute("PRAGMA foreign_keys")
            assert (await cursor.fetchone())[0] == 1

            cursor = await conn.execute("PRAGMA busy_timeout")
            assert (await cursor.fetchone())[0] == 1234

            assert conn.row_factory == aiosqlite.Row
        finally:
            await conn.close()


class TestConnectionPoolAcquire:
    """Tests for ConnectionPool.acquire()."""

    @pytest.mark.asyncio
    async def test_acquire_auto_initializes(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)

        async with pool.acquire() as conn:
            assert pool._initialized is True
            assert isinstance(conn, aiosqlite.Connection)
            assert pool._pool.qsize() == 0

        assert pool._pool.qsize() == 1
        await pool.close()

    @pytest.mark.asyncio
    async def test_acquire_returns_on_exception(self, temp_db_path: Path):
        """Connection is returned even if exception occurs."""
        pool = ConnectionPool(temp_db_path, pool_size=1)
        await pool.initialize()

        with pytest.raises(ValueError):
            async with pool.acquire() as _conn:
                raise ValueError("Test error")

        assert pool._pool.qsize() == 1
        await pool.close()


class TestConnectionPoolTransaction:
    """Tests for ConnectionPool.transaction()."""

    @pytest.mark.asyncio
    async def test_transaction_commits(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")
            await conn.execute("INSERT INTO t VALUES (1)")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 1
        await pool.close()

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=1)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        with pytest.raises(RuntimeError):
            async with pool.transaction(immediate=True) as conn:
                await conn.execute("INSERT INTO t VALUES (1)")
                raise RuntimeError("abort")

        async with pool.acquire() as conn:
            cursor = await conn.execute("SELECT COUNT(*) FROM t")
            assert (await cursor.fetchone())[0] == 0
        await pool.close()

    @pytest.mark.asyncio
    async def test_immediate_transaction_holds_write_lock(self, temp_db_path: Path):
        pool = ConnectionPool(temp_db_path, pool_size=2, busy_timeout=0)
        async with pool.transaction() as conn:
            await conn.execute("CREATE TABLE t (v INTEGER)")

        async with pool.transaction(immediate=True) as writer:
            await writer.execute("INSERT INTO t VALUES (1)")
            async with pool.acquire() as other:
                with pytest.raises(aiosqlite.OperationalError):
                    await other.execute("BEGIN IMMEDIATE")
        await pool.close()


class TestGlobalPool:
    """Tests for the module-level pool helpers."""

    @pytest.mark.asyncio
    async def test_get_pool_uses_settings(self, mock_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            try:
                pool = await get_pool()
                assert pool.db_path == mock_settings.storage.db_path
                assert pool.pool_size == 2
                assert await get_pool() is pool
            finally:
                await close_pool()

        assert conn_module._pool is None

    @pytest.mark.asyncio
    async def test_get_connection_and_transaction(self, mock_settings):
        conn_module._pool = None
        with patch.object(conn_module, "get_settings", return_value=mock_settings):
            try:
                async with get_transaction() as conn:
                    await conn.execute("CREATE TABLE t (v TEXT)")
                    await conn.execute("INSERT INTO t VALUES ('x')")
                async with get_connection() as conn:
                    cursor = await conn.execute("SELECT v FROM t")
                    row = await cursor.fetchone()
                    assert row["v"] == "x"
            finally:
                await close_pool()
