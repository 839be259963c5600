"""
계정 서비스

계정 잔액 조회 및 잔액 검증
"""

from decimal import Decimal
from typing import Any

from core.ledger.service import LedgerService
from core.utils.timezone import format_iso


class AccountService:
    """계정 서비스

    AccountStore 조회 결과를 API 응답 dict로 변환.
    """

    def __init__(self, ledger: LedgerService):
        self.ledger = ledger
        self.accounts = ledger.accounts

    async def list_accounts(self) -> dict[str, Any]:
        """계정 목록 + 전체 잔액

        Returns:
            accounts, total_balance 포함 응답
        """
        snapshot = await self.ledger.snapshot()
        total = sum((a.balance for a in snapshot.accounts), Decimal("0"))

        return {
            "accounts": [a.to_dict() for a in snapshot.accounts],
            "total_balance": str(total),
        }

    async def get_account(self, account_id: str) -> dict[str, Any]:
        """계정 조회

        Raises:
            AccountNotFoundError: 계정 없음
        """
        account = await self.accounts.get_account(account_id)
        return account.to_dict()

    async def reconcile(self) -> dict[str, Any]:
        """저장된 잔액과 분개 합계 비교

        Returns:
            consistent, drifts, checked_at 포함 응답
        """
        drifts = await self.ledger.verify()

        return {
            "consistent": not drifts,
            "drifts": [
                {
                    "account_id": d.account_id,
                    "stored": str(d.stored),
                    "expected": str(d.expected),
                    "difference": str(d.difference),
                }
                for d in drifts
            ],
            "checked_at": format_iso(self.ledger.clock()),
        }
