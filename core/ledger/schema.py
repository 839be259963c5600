"""
원장 스키마 초기화

Web/스크립트 시작 시 원장 테이블 생성.
CREATE IF NOT EXISTS 패턴으로 안전하게 동작.
"""

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from adapters.db.sqlite_adapter import SQLiteAdapter

logger = logging.getLogger(__name__)

# ledger_counter의 거래 번호 카운터 이름
TRANSACTION_NUMBER_COUNTER = "transaction_number"


async def init_schema(db: "SQLiteAdapter") -> None:
    """원장 스키마 초기화

    이미 존재하는 경우 안전하게 건너뜀 (IF NOT EXISTS).

    Args:
        db: 연결된 SQLiteAdapter
    """
    async with db.transaction():
        await _create_tables(db)
        await _create_indexes(db)
        await db.execute(
            "INSERT OR IGNORE INTO ledger_counter (name, value) VALUES (?, 0)",
            (TRANSACTION_NUMBER_COUNTER,),
        )

    logger.info("원장 스키마 초기화 완료")


async def _create_tables(db: "SQLiteAdapter") -> None:
    """원장 테이블 생성"""

    # account: 잔액은 TEXT (Decimal 문자열)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS account (
            account_id       TEXT PRIMARY KEY,
            name             TEXT NOT NULL,
            account_type     TEXT NOT NULL
                CHECK (account_type IN ('drawer', 'cash_in_hand', 'business', 'other')),
            balance          TEXT NOT NULL DEFAULT '0',
            created_at       TEXT NOT NULL,
            updated_at       TEXT NOT NULL
        )
    """)

    # cash_transaction: 수정/삭제되는 현재 거래 목록
    await db.execute("""
        CREATE TABLE IF NOT EXISTS cash_transaction (
            seq                     INTEGER PRIMARY KEY AUTOINCREMENT,
            transaction_id          TEXT NOT NULL UNIQUE,
            transaction_number      TEXT NOT NULL UNIQUE,
            name                    TEXT NOT NULL,
            description             TEXT,
            category                TEXT,
            transaction_type        TEXT NOT NULL
                CHECK (transaction_type IN ('income', 'expense', 'transfer')),
            amount                  TEXT NOT NULL,
            account_id              TEXT NOT NULL REFERENCES account(account_id),
            transfer_to_account_id  TEXT REFERENCES account(account_id),
            transaction_date        TEXT NOT NULL,
            created_at              TEXT NOT NULL,
            updated_at              TEXT,
            CHECK ((transaction_type = 'transfer') = (transfer_to_account_id IS NOT NULL)),
            CHECK (transfer_to_account_id IS NULL OR transfer_to_account_id != account_id)
        )
    """)

    # ledger_entry: 추가 전용 분개 (잔액 = 계정별 delta 합계)
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_entry (
            seq                 INTEGER PRIMARY KEY AUTOINCREMENT,
            entry_id            TEXT NOT NULL UNIQUE,
            transaction_id      TEXT,
            transaction_number  TEXT,
            operation           TEXT NOT NULL,
            kind                TEXT NOT NULL,
            account_id          TEXT NOT NULL REFERENCES account(account_id),
            delta               TEXT NOT NULL,
            ts                  TEXT NOT NULL
        )
    """)

    # ledger_counter: 재사용되지 않는 번호 발번
    await db.execute("""
        CREATE TABLE IF NOT EXISTS ledger_counter (
            name   TEXT PRIMARY KEY,
            value  INTEGER NOT NULL
        )
    """)


async def _create_indexes(db: "SQLiteAdapter") -> None:
    """인덱스 생성"""
    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_ledger_entry_transaction
        ON ledger_entry(transaction_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_ledger_entry_account
        ON ledger_entry(account_id)
    """)

    await db.execute("""
        CREATE INDEX IF NOT EXISTS ix_cash_transaction_date
        ON cash_transaction(transaction_date)
    """)
