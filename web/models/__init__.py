"""
Web 모델 패키지

Pydantic 스키마 정의
"""

from web.models.requests import (
    ExpenseRequest,
    IncomeRequest,
    TransactionRequest,
    TransferRequest,
)
from web.models.responses import (
    AccountListResponse,
    AccountResponse,
    CategoryListResponse,
    DriftResponse,
    ErrorDetail,
    HealthResponse,
    LedgerEntryResponse,
    PaginationResponse,
    ReconcileResponse,
    SummaryResponse,
    TransactionHistoryResponse,
    TransactionListResponse,
    TransactionResponse,
)

__all__ = [
    # Requests
    "IncomeRequest",
    "ExpenseRequest",
    "TransferRequest",
    "TransactionRequest",
    # Responses
    "AccountResponse",
    "AccountListResponse",
    "CategoryListResponse",
    "DriftResponse",
    "ErrorDetail",
    "HealthResponse",
    "LedgerEntryResponse",
    "PaginationResponse",
    "ReconcileResponse",
    "SummaryResponse",
    "TransactionHistoryResponse",
    "TransactionListResponse",
    "TransactionResponse",
]
