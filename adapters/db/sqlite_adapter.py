"""
SQLite 어댑터

aiosqlite 연결 관리.
하나의 연결을 공유하므로 쓰기 트랜잭션과 일관된 읽기는 모두
어댑터 락 안에서 수행한다. 락 밖에서 실행된 쿼리는 다른 작업의
커밋 전 상태를 볼 수 있다.

주의: SQLite alias로 time, count 사용 금지 (예약어)
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

import aiosqlite

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


class LockTimeoutError(Exception):
    """어댑터 락 획득 시간 초과"""

    pass


async def create_connection(
    db_path: Path | str,
    readonly: bool = False,
) -> aiosqlite.Connection:
    """SQLite 연결 생성

    파일 DB는 WAL 모드, 인메모리 DB는 기본 저널 모드 사용.

    Args:
        db_path: DB 파일 경로 또는 ":memory:"
        readonly: 읽기 전용 여부

    Returns:
        aiosqlite 연결 객체
    """
    db_path_str = str(db_path)
    is_memory = db_path_str == MEMORY_DB

    if not is_memory:
        # 디렉토리가 없으면 생성
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    if readonly and not is_memory:
        conn = await aiosqlite.connect(f"file:{db_path_str}?mode=ro", uri=True)
    else:
        conn = await aiosqlite.connect(db_path_str)

    if not is_memory:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA busy_timeout=30000")  # 30초 대기

    # 외래 키 제약 활성화
    await conn.execute("PRAGMA foreign_keys=ON")

    logger.info(
        "SQLite 연결 생성",
        extra={"db_path": db_path_str, "readonly": readonly},
    )

    return conn


class SQLiteAdapter:
    """SQLite 어댑터

    트랜잭션 컨텍스트 매니저와 읽기 스냅샷 컨텍스트 매니저 제공.
    두 컨텍스트 모두 같은 asyncio 락을 잡으므로 하나의 쓰기 작업은
    다른 작업과 섞이지 않고, 읽기는 작업 전 또는 작업 후 상태만 본다.

    Args:
        db_path: DB 파일 경로 또는 ":memory:"
        readonly: 읽기 전용 여부
        lock_timeout: 락 대기 한도 (초, None이면 무제한)

    사용 예시:
    ```python
    adapter = SQLiteAdapter(":memory:")
    await adapter.connect()

    async with adapter.transaction() as conn:
        await conn.execute("INSERT INTO ...")

    async with adapter.reading():
        rows = await adapter.fetchall("SELECT ...")

    await adapter.close()
    ```
    """

    def __init__(
        self,
        db_path: Path | str,
        readonly: bool = False,
        lock_timeout: float | None = None,
    ):
        self.db_path = db_path if str(db_path) == MEMORY_DB else Path(db_path)
        self.readonly = readonly
        self.lock_timeout = lock_timeout
        self._conn: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    @property
    def is_connected(self) -> bool:
        """연결 상태 확인"""
        return self._conn is not None

    @property
    def in_transaction(self) -> bool:
        """락 보유 여부 (트랜잭션 또는 읽기 스냅샷 진행 중)"""
        return self._lock.locked()

    async def connect(self) -> None:
        """연결 생성"""
        if self._conn is not None:
            return

        self._conn = await create_connection(self.db_path, self.readonly)

    async def close(self) -> None:
        """연결 종료"""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("SQLite 연결 종료")

    async def execute(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> aiosqlite.Cursor:
        """SQL 실행"""
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        if parameters:
            return await self._conn.execute(sql, parameters)
        return await self._conn.execute(sql)

    async def fetchone(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> tuple[Any, ...] | None:
        """단일 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchone()

    async def fetchall(
        self,
        sql: str,
        parameters: tuple[Any, ...] | None = None,
    ) -> list[tuple[Any, ...]]:
        """전체 행 조회"""
        cursor = await self.execute(sql, parameters)
        return await cursor.fetchall()

    async def commit(self) -> None:
        """커밋"""
        if self._conn is not None:
            await self._conn.commit()

    async def rollback(self) -> None:
        """롤백"""
        if self._conn is not None:
            await self._conn.rollback()

    async def _acquire(self) -> None:
        """락 획득 (lock_timeout 초과 시 LockTimeoutError)"""
        if self.lock_timeout is None:
            await self._lock.acquire()
            return

        try:
            await asyncio.wait_for(self._lock.acquire(), timeout=self.lock_timeout)
        except asyncio.TimeoutError as e:
            raise LockTimeoutError(
                f"DB 락 대기 시간 초과 ({self.lock_timeout}s)"
            ) from e

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """트랜잭션 컨텍스트 매니저

        락을 잡은 채로 실행하며 성공 시 자동 커밋, 예외 시 자동 롤백.
        중첩 호출 불가 (락은 재진입 불가).

        사용 예시:
        ```python
        async with adapter.transaction() as conn:
            await conn.execute("INSERT INTO ...")
            # 성공 시 자동 커밋
        ```
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        await self._acquire()
        try:
            try:
                yield self._conn
                await self._conn.commit()
            except BaseException:
                await self._conn.rollback()
                raise
        finally:
            self._lock.release()

    @asynccontextmanager
    async def reading(self) -> AsyncIterator[aiosqlite.Connection]:
        """읽기 스냅샷 컨텍스트 매니저

        진행 중인 쓰기 트랜잭션이 끝날 때까지 기다린 뒤 락을 잡고 읽는다.
        """
        if self._conn is None:
            raise RuntimeError("Not connected to database")

        await self._acquire()
        try:
            yield self._conn
        finally:
            self._lock.release()

    async def table_exists(self, table_name: str) -> bool:
        """테이블 존재 여부 확인"""
        result = await self.fetchone(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?",
            (table_name,),
        )
        return result is not None

    # -------------------------------------------------------------------------
    # 컨텍스트 매니저
    # -------------------------------------------------------------------------

    async def __aenter__(self) -> "SQLiteAdapter":
        await self.connect()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()
