"""
거래 조회 뷰

스냅샷에 대한 순수 파생 계산: 필터 → 정렬 → 페이지 + 요약 통계.
캐시 없이 호출마다 다시 계산한다.
"""

import math
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Generic, TypeVar

from core.ledger.models import Account, CashTransaction, LedgerSnapshot
from core.types import SortOrder, TransactionType
from core.utils.timezone import LOCAL_TZ, end_of_day, now_utc, start_of_day, to_local

T = TypeVar("T")

# page_numbers()의 생략 표시
ELLIPSIS = "..."


@dataclass(frozen=True)
class TransactionFilter:
    """거래 필터 (모든 조건의 AND)

    None 또는 빈 문자열 조건은 무시한다.
    """

    search: str | None = None
    account_id: str | None = None
    transaction_type: TransactionType | None = None
    category: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    include_transfers_in: bool = False  # account_id가 이체 도착 계정인 거래 포함

    @property
    def is_active(self) -> bool:
        return any(
            (
                self.search,
                self.account_id,
                self.transaction_type,
                self.category,
                self.start_date,
                self.end_date,
            )
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """페이지 결과"""

    items: list[T]
    page: int
    page_size: int
    total_count: int
    total_pages: int

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous(self) -> bool:
        return self.page > 1


@dataclass(frozen=True)
class LedgerSummary:
    """요약 통계

    요약 카드 통계는 필터와 무관하게 전체 거래 기준.
    filtered_count만 필터 적용 결과 건수.
    """

    total_balance: Decimal
    today_income: Decimal
    today_expense: Decimal
    total_transactions: int = 0
    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    income_count: int = 0
    expense_count: int = 0
    transfer_count: int = 0
    category_counts: dict[str, int] = field(default_factory=dict)
    filtered_count: int = 0
    has_active_filters: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_balance": str(self.total_balance),
            "today_income": str(self.today_income),
            "today_expense": str(self.today_expense),
            "total_transactions": self.total_transactions,
            "total_income": str(self.total_income),
            "total_expense": str(self.total_expense),
            "income_count": self.income_count,
            "expense_count": self.expense_count,
            "transfer_count": self.transfer_count,
            "category_counts": dict(self.category_counts),
            "filtered_count": self.filtered_count,
            "has_active_filters": self.has_active_filters,
        }


@dataclass(frozen=True)
class QueryResult:
    """query() 결과"""

    page: Page[CashTransaction]
    summary: LedgerSummary
    page_numbers: list[int | str]


def page_numbers(current: int, total: int) -> list[int | str]:
    """페이지 버튼 목록

    5페이지 이하면 전체, 그 외에는 처음/끝과 현재 주변만 표시.

    Example:
        >>> page_numbers(1, 10)
        [1, 2, 3, 4, '...', 10]
        >>> page_numbers(5, 10)
        [1, '...', 4, 5, 6, '...', 10]
        >>> page_numbers(9, 10)
        [1, '...', 7, 8, 9, 10]
    """
    if total <= 0:
        return []
    if total <= 5:
        return list(range(1, total + 1))

    if current <= 3:
        return [1, 2, 3, 4, ELLIPSIS, total]
    if current >= total - 2:
        return [1, ELLIPSIS, *range(total - 3, total + 1)]
    return [1, ELLIPSIS, current - 1, current, current + 1, ELLIPSIS, total]


def paginate(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """1부터 시작하는 페이지 분할

    범위를 넘는 페이지는 빈 목록.

    Raises:
        ValueError: page < 1 또는 page_size < 1
    """
    if page < 1:
        raise ValueError(f"page must be >= 1: {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1: {page_size}")

    total_count = len(items)
    start = (page - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        page=page,
        page_size=page_size,
        total_count=total_count,
        total_pages=math.ceil(total_count / page_size),
    )


class QueryView:
    """거래 조회 뷰

    Args:
        tz: 날짜 경계 계산용 로컬 타임존
        clock: 현재 시각 함수 ("오늘" 판정용)
    """

    def __init__(
        self,
        tz: timezone = LOCAL_TZ,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.tz = tz
        self.clock = clock

    def today(self) -> date:
        """clock 기준 로컬 날짜"""
        return to_local(self.clock(), self.tz).date()

    def filter(
        self,
        transactions: Iterable[CashTransaction],
        criteria: TransactionFilter,
    ) -> list[CashTransaction]:
        """조건에 맞는 거래 (입력 순서 유지)"""
        return [tx for tx in transactions if self._matches(tx, criteria)]

    def sort(
        self,
        transactions: Iterable[CashTransaction],
        order: SortOrder = SortOrder.DESC,
    ) -> list[CashTransaction]:
        """거래일 정렬 (안정 정렬: 같은 날짜는 입력 순서 유지)"""
        by_insertion = sorted(transactions, key=lambda tx: tx.seq)
        return sorted(
            by_insertion,
            key=lambda tx: tx.transaction_date,
            reverse=SortOrder(order) == SortOrder.DESC,
        )

    def summarize(
        self,
        accounts: Iterable[Account],
        transactions: Iterable[CashTransaction],
        filtered: Sequence[CashTransaction] | None = None,
        criteria: TransactionFilter | None = None,
    ) -> LedgerSummary:
        """요약 통계

        Args:
            accounts: 전체 계정
            transactions: 전체 거래 (요약 카드 통계 기준)
            filtered: 필터 결과 (건수만 사용, None이면 transactions)
            criteria: 적용된 필터
        """
        transactions = list(transactions)
        if filtered is None:
            filtered = transactions

        today = self.today()
        day_start = start_of_day(today, self.tz)
        day_end = end_of_day(today, self.tz)

        today_income = Decimal("0")
        today_expense = Decimal("0")
        for tx in transactions:
            if not day_start <= tx.transaction_date <= day_end:
                continue
            if tx.transaction_type == TransactionType.INCOME:
                today_income += tx.amount
            elif tx.transaction_type == TransactionType.EXPENSE:
                today_expense += tx.amount

        types = Counter(tx.transaction_type for tx in transactions)
        categories = Counter(tx.category for tx in transactions if tx.category)

        return LedgerSummary(
            total_balance=sum((a.balance for a in accounts), Decimal("0")),
            today_income=today_income,
            today_expense=today_expense,
            total_transactions=len(transactions),
            total_income=sum(
                (tx.amount for tx in transactions if tx.transaction_type == TransactionType.INCOME),
                Decimal("0"),
            ),
            total_expense=sum(
                (tx.amount for tx in transactions if tx.transaction_type == TransactionType.EXPENSE),
                Decimal("0"),
            ),
            income_count=types[TransactionType.INCOME],
            expense_count=types[TransactionType.EXPENSE],
            transfer_count=types[TransactionType.TRANSFER],
            category_counts=dict(categories),
            filtered_count=len(filtered),
            has_active_filters=bool(criteria and criteria.is_active),
        )

    def query(
        self,
        snapshot: LedgerSnapshot,
        criteria: TransactionFilter | None = None,
        *,
        order: SortOrder = SortOrder.DESC,
        page: int = 1,
        page_size: int = 10,
    ) -> QueryResult:
        """필터 → 정렬 → 페이지 + 요약"""
        criteria = criteria or TransactionFilter()
        filtered = self.filter(snapshot.transactions, criteria)
        ordered = self.sort(filtered, order)
        result_page = paginate(ordered, page, page_size)

        return QueryResult(
            page=result_page,
            summary=self.summarize(
                snapshot.accounts,
                snapshot.transactions,
                filtered,
                criteria,
            ),
            page_numbers=page_numbers(result_page.page, result_page.total_pages),
        )

    def _matches(self, tx: CashTransaction, criteria: TransactionFilter) -> bool:
        if criteria.search:
            needle = criteria.search.lower()
            haystack = (tx.name, tx.description, tx.transaction_number, tx.category)
            if not any(needle in text.lower() for text in haystack if text):
                return False

        if criteria.account_id:
            matched = tx.account_id == criteria.account_id
            if not matched and criteria.include_transfers_in:
                matched = tx.transfer_to_account_id == criteria.account_id
            if not matched:
                return False

        if criteria.transaction_type and tx.transaction_type != criteria.transaction_type:
            return False

        if criteria.category and tx.category != criteria.category:
            return False

        if criteria.start_date and tx.transaction_date < start_of_day(criteria.start_date, self.tz):
            return False

        if criteria.end_date and tx.transaction_date > end_of_day(criteria.end_date, self.tz):
            return False

        return True
