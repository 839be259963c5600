"""
SQLite 어댑터 테스트

SQLiteAdapter 및 관련 함수 테스트.
"""

import asyncio
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import (
    LockTimeoutError,
    SQLiteAdapter,
    create_connection,
)


class TestCreateConnection:
    """create_connection 테스트"""

    @pytest.mark.asyncio
    async def test_create_connection(self, tmp_path: Path) -> None:
        """연결 생성 (파일 DB는 WAL)"""
        conn = await create_connection(tmp_path / "test.db")

        cursor = await conn.execute("PRAGMA journal_mode")
        row = await cursor.fetchone()
        assert row[0].upper() == "WAL"

        await conn.close()

    @pytest.mark.asyncio
    async def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """부모 디렉토리 생성"""
        db_path = tmp_path / "subdir" / "test.db"

        conn = await create_connection(db_path)

        assert db_path.parent.exists()
        await conn.close()

    @pytest.mark.asyncio
    async def test_memory_foreign_keys(self) -> None:
        """인메모리 DB도 외래 키 활성화"""
        conn = await create_connection(":memory:")

        cursor = await conn.execute("PRAGMA foreign_keys")
        row = await cursor.fetchone()
        assert row[0] == 1

        await conn.close()


class TestSQLiteAdapter:
    """SQLiteAdapter 테스트"""

    @pytest_asyncio.fixture
    async def adapter(self) -> SQLiteAdapter:
        """어댑터 픽스처"""
        adapter = SQLiteAdapter(":memory:", lock_timeout=0.2)
        await adapter.connect()
        yield adapter
        await adapter.close()

    @pytest.mark.asyncio
    async def test_connect_and_close(self, tmp_path: Path) -> None:
        """연결 및 종료"""
        adapter = SQLiteAdapter(tmp_path / "test.db")

        assert adapter.is_connected is False

        await adapter.connect()
        assert adapter.is_connected is True

        await adapter.close()
        assert adapter.is_connected is False

    @pytest.mark.asyncio
    async def test_not_connected(self) -> None:
        """연결 전 실행 시 RuntimeError"""
        adapter = SQLiteAdapter(":memory:")

        with pytest.raises(RuntimeError):
            await adapter.execute("SELECT 1")

    @pytest.mark.asyncio
    async def test_fetchall(self, adapter: SQLiteAdapter) -> None:
        """전체 조회"""
        await adapter.execute("CREATE TABLE items (value TEXT)")
        await adapter.execute("INSERT INTO items (value) VALUES ('C'), ('A'), ('B')")
        await adapter.commit()

        rows = await adapter.fetchall("SELECT value FROM items ORDER BY value")

        assert [r[0] for r in rows] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_transaction_commit(self, adapter: SQLiteAdapter) -> None:
        """트랜잭션 커밋"""
        await adapter.execute("CREATE TABLE tx_test (id INTEGER)")
        await adapter.commit()

        async with adapter.transaction() as conn:
            assert adapter.in_transaction is True
            await conn.execute("INSERT INTO tx_test (id) VALUES (1)")
            await conn.execute("INSERT INTO tx_test (id) VALUES (2)")

        assert adapter.in_transaction is False
        rows = await adapter.fetchall("SELECT id FROM tx_test")
        assert len(rows) == 2

    @pytest.mark.asyncio
    async def test_transaction_rollback(self, adapter: SQLiteAdapter) -> None:
        """예외 시 롤백 후 예외 전파"""
        await adapter.execute("CREATE TABLE tx_test2 (id INTEGER)")
        await adapter.commit()

        with pytest.raises(ValueError, match="의도적 에러"):
            async with adapter.transaction() as conn:
                await conn.execute("INSERT INTO tx_test2 (id) VALUES (1)")
                raise ValueError("의도적 에러")

        rows = await adapter.fetchall("SELECT id FROM tx_test2")
        assert len(rows) == 0
        assert adapter.in_transaction is False

    @pytest.mark.asyncio
    async def test_lock_timeout(self, adapter: SQLiteAdapter) -> None:
        """락 보유 중 다른 트랜잭션은 lock_timeout 후 실패"""
        async with adapter.transaction():
            with pytest.raises(LockTimeoutError):
                async with adapter.transaction():
                    pass

    @pytest.mark.asyncio
    async def test_reading_waits_for_transaction(self, adapter: SQLiteAdapter) -> None:
        """읽기는 진행 중인 트랜잭션이 끝난 뒤 커밋된 상태를 본다"""
        await adapter.execute("CREATE TABLE counter (value INTEGER)")
        await adapter.execute("INSERT INTO counter (value) VALUES (0)")
        await adapter.commit()

        started = asyncio.Event()

        async def writer() -> None:
            async with adapter.transaction() as conn:
                await conn.execute("UPDATE counter SET value = 1")
                started.set()
                await asyncio.sleep(0.05)
                await conn.execute("UPDATE counter SET value = 2")

        async def reader() -> int:
            await started.wait()
            async with adapter.reading():
                row = await adapter.fetchone("SELECT value FROM counter")
            return row[0]

        _, seen = await asyncio.gather(writer(), reader())

        assert seen == 2

    @pytest.mark.asyncio
    async def test_table_exists(self, adapter: SQLiteAdapter) -> None:
        """테이블 존재 확인"""
        assert await adapter.table_exists("nonexistent") is False

        await adapter.execute("CREATE TABLE existing (id INTEGER)")
        await adapter.commit()

        assert await adapter.table_exists("existing") is True

    @pytest.mark.asyncio
    async def test_context_manager(self, tmp_path: Path) -> None:
        """컨텍스트 매니저"""
        async with SQLiteAdapter(tmp_path / "ctx_test.db") as adapter:
            assert adapter.is_connected is True
            await adapter.execute("CREATE TABLE ctx (id INTEGER)")

        assert adapter.is_connected is False
