"""
데이터베이스 어댑터

aiosqlite 연결 및 트랜잭션 관리.
"""

from adapters.db.sqlite_adapter import (
    LockTimeoutError,
    SQLiteAdapter,
    create_connection,
)

__all__ = [
    "LockTimeoutError",
    "SQLiteAdapter",
    "create_connection",
]
