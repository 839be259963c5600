#!/usr/bin/env python3
"""원장 잔액 검증 스크립트

분개(ledger_entry)를 계정별로 다시 합산해 저장된 잔액과 비교한다.
불일치가 있으면 종료 코드 1.

실행:
    python scripts/verify_ledger.py
    python scripts/verify_ledger.py --db data/cash_ledger.db
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import get_settings, resolve_db_path
from core.ledger.account_store import AccountStore
from core.logging import setup_logging

logger = logging.getLogger("scripts.verify_ledger")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="현금 원장 잔액 검증")
    parser.add_argument(
        "--db",
        default=None,
        help="DB 파일 경로 (기본: settings.yaml의 ledger.db_path)",
    )
    return parser.parse_args()


async def main() -> int:
    args = parse_args()
    db_path = resolve_db_path(args.db) if args.db else get_settings().db_path

    if not Path(db_path).exists():
        logger.error(f"DB 파일 없음: {db_path}")
        return 2

    async with SQLiteAdapter(db_path, readonly=True) as db:
        if not await db.table_exists("ledger_entry"):
            logger.error(f"원장 스키마 없음: {db_path}")
            return 2

        store = AccountStore(db)
        accounts = await store.list_accounts()
        drifts = await store.find_drift()

    print("=" * 60)
    print(f"DB Path: {db_path}")
    print("=" * 60)
    for account in accounts:
        print(f"  {account.account_id:16} | {account.name:20} | {account.balance:>15}")

    if not drifts:
        print("\n잔액 일치: 모든 계정의 잔액이 분개 합계와 같습니다.")
        return 0

    print(f"\n잔액 불일치 {len(drifts)}건:")
    for d in drifts:
        print(f"  {d.account_id:16} | stored={d.stored} expected={d.expected} diff={d.difference}")
    return 1


if __name__ == "__main__":
    setup_logging("scripts")
    sys.exit(asyncio.run(main()))
