"""
거래 서비스

거래 생성/수정/삭제 및 목록 조회
"""

from datetime import date
from typing import Any

from core.ledger.query import QueryView, TransactionFilter
from core.ledger.service import LedgerService
from core.types import SortOrder, TransactionType
from web.models.requests import TransactionRequest


class TransactionService:
    """거래 서비스

    LedgerService(쓰기)와 QueryView(목록/통계)를 묶어 API 응답 dict로 변환.
    """

    def __init__(self, ledger: LedgerService, query_view: QueryView):
        self.ledger = ledger
        self.query_view = query_view

    async def create(self, request: TransactionRequest) -> dict[str, Any]:
        """거래 생성"""
        transaction = await self.ledger.create(request.to_input(self.ledger.tz))
        return transaction.to_dict()

    async def edit(self, transaction_id: str, request: TransactionRequest) -> dict[str, Any]:
        """거래 전체 교체"""
        transaction = await self.ledger.edit(
            transaction_id,
            request.to_input(self.ledger.tz),
        )
        return transaction.to_dict()

    async def delete(self, transaction_id: str) -> dict[str, Any]:
        """거래 삭제 (삭제된 거래 반환)"""
        transaction = await self.ledger.delete(transaction_id)
        return transaction.to_dict()

    async def get(self, transaction_id: str) -> dict[str, Any]:
        """거래 조회"""
        transaction = await self.ledger.get(transaction_id)
        return transaction.to_dict()

    async def history(self, transaction_id: str) -> dict[str, Any]:
        """거래 분개 이력"""
        entries = await self.ledger.history(transaction_id)
        return {
            "transaction_id": transaction_id,
            "entries": [e.to_dict() for e in entries],
        }

    async def list_transactions(
        self,
        *,
        search: str | None = None,
        account_id: str | None = None,
        include_transfers_in: bool = False,
        transaction_type: TransactionType | None = None,
        category: str | None = None,
        start: date | None = None,
        end: date | None = None,
        order: SortOrder = SortOrder.DESC,
        page: int = 1,
        page_size: int = 10,
    ) -> dict[str, Any]:
        """거래 목록 조회

        필터 → 거래일 정렬 → 페이지. 요약 통계 포함.

        Returns:
            transactions, pagination, summary 포함 응답
        """
        criteria = TransactionFilter(
            search=search or None,
            account_id=account_id or None,
            transaction_type=transaction_type,
            category=category or None,
            start_date=start,
            end_date=end,
            include_transfers_in=include_transfers_in,
        )

        snapshot = await self.ledger.snapshot()
        result = self.query_view.query(
            snapshot,
            criteria,
            order=order,
            page=page,
            page_size=page_size,
        )
        result_page = result.page

        return {
            "transactions": [tx.to_dict() for tx in result_page.items],
            "pagination": {
                "page": result_page.page,
                "page_size": result_page.page_size,
                "total_count": result_page.total_count,
                "total_pages": result_page.total_pages,
                "has_next": result_page.has_next,
                "has_previous": result_page.has_previous,
                "page_numbers": result.page_numbers,
            },
            "summary": result.summary.to_dict(),
        }
