"""
응답 스키마 (Pydantic)

Web API 응답 데이터 직렬화.
금액은 Decimal 손실 방지를 위해 문자열로 전달한다.
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """헬스 체크 응답"""

    status: str = Field(default="ok", description="서비스 상태")
    version: str = Field(..., description="API 버전")
    database: str = Field(..., description="DB 연결 상태 (connected/disconnected)")
    timestamp: str = Field(..., description="응답 시간 (UTC, ISO-8601)")


class ErrorDetail(BaseModel):
    """오류 응답의 detail"""

    error: str = Field(..., description="오류 코드")
    message: str = Field(..., description="오류 메시지")


class AccountResponse(BaseModel):
    """계정 응답"""

    account_id: str = Field(..., description="계정 ID")
    name: str = Field(..., description="계정명")
    account_type: str = Field(..., description="계정 유형 (drawer/cash_in_hand/business/other)")
    balance: str = Field(..., description="잔액")
    updated_at: str | None = Field(default=None, description="마지막 변경 시간")


class AccountListResponse(BaseModel):
    """계정 목록 응답"""

    accounts: list[AccountResponse] = Field(default_factory=list, description="계정 목록")
    total_balance: str = Field(..., description="전체 잔액 합계")


class TransactionResponse(BaseModel):
    """거래 응답"""

    id: str = Field(..., description="거래 ID")
    transaction_number: str = Field(..., description="거래 번호 (TXN-000001)")
    name: str = Field(..., description="거래명")
    description: str | None = Field(default=None, description="설명")
    category: str | None = Field(default=None, description="카테고리")
    type: str = Field(..., description="거래 유형 (income/expense/transfer)")
    amount: str = Field(..., description="금액")
    account_id: str = Field(..., description="출발 계정 ID")
    transfer_to_account_id: str | None = Field(default=None, description="도착 계정 ID (이체만)")
    transaction_date: str = Field(..., description="거래일")
    created_at: str = Field(..., description="생성 시간")
    updated_at: str | None = Field(default=None, description="수정 시간")


class PaginationResponse(BaseModel):
    """페이지 정보"""

    page: int = Field(..., description="현재 페이지 (1부터)")
    page_size: int = Field(..., description="페이지 크기")
    total_count: int = Field(..., description="필터 결과 전체 개수")
    total_pages: int = Field(..., description="전체 페이지 수")
    has_next: bool = Field(..., description="다음 페이지 존재 여부")
    has_previous: bool = Field(..., description="이전 페이지 존재 여부")
    page_numbers: list[int | str] = Field(default_factory=list, description="페이지 버튼 목록")


class SummaryResponse(BaseModel):
    """요약 통계"""

    total_balance: str = Field(..., description="전체 잔액 합계")
    today_income: str = Field(..., description="오늘 수입 합계")
    today_expense: str = Field(..., description="오늘 지출 합계")
    total_transactions: int = Field(..., description="전체 거래 수")
    total_income: str = Field(..., description="전체 수입 합계")
    total_expense: str = Field(..., description="전체 지출 합계")
    income_count: int = Field(..., description="수입 건수")
    expense_count: int = Field(..., description="지출 건수")
    transfer_count: int = Field(..., description="이체 건수")
    category_counts: dict[str, int] = Field(default_factory=dict, description="카테고리별 건수")
    filtered_count: int = Field(..., description="필터 결과 거래 수")
    has_active_filters: bool = Field(..., description="필터 적용 여부")


class TransactionListResponse(BaseModel):
    """거래 목록 응답"""

    transactions: list[TransactionResponse] = Field(default_factory=list, description="거래 목록")
    pagination: PaginationResponse
    summary: SummaryResponse


class LedgerEntryResponse(BaseModel):
    """분개 응답"""

    seq: int = Field(..., description="기록 순번")
    entry_id: str = Field(..., description="분개 ID")
    transaction_id: str | None = Field(default=None, description="거래 ID")
    transaction_number: str | None = Field(default=None, description="거래 번호")
    operation: str = Field(..., description="작업 (OPENING/CREATE/EDIT/DELETE)")
    kind: str = Field(..., description="종류 (OPENING/APPLY/REVERSE)")
    account_id: str = Field(..., description="계정 ID")
    delta: str = Field(..., description="잔액 변화")
    ts: str = Field(..., description="기록 시간")


class TransactionHistoryResponse(BaseModel):
    """거래 분개 이력 응답"""

    transaction_id: str = Field(..., description="거래 ID")
    entries: list[LedgerEntryResponse] = Field(default_factory=list, description="분개 목록")


class DriftResponse(BaseModel):
    """잔액 불일치 항목"""

    account_id: str = Field(..., description="계정 ID")
    stored: str = Field(..., description="저장된 잔액")
    expected: str = Field(..., description="분개 합계")
    difference: str = Field(..., description="차이 (stored - expected)")


class ReconcileResponse(BaseModel):
    """잔액 검증 응답"""

    consistent: bool = Field(..., description="불일치 없음 여부")
    drifts: list[DriftResponse] = Field(default_factory=list, description="불일치 목록")
    checked_at: str = Field(..., description="검증 시간")


class CategoryListResponse(BaseModel):
    """카테고리 목록 응답"""

    categories: list[str] = Field(default_factory=list, description="설정된 카테고리")
