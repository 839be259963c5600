"""
거래 API 라우트

POST   /api/transactions               거래 생성
GET    /api/transactions               목록 (필터/정렬/페이지 + 요약)
GET    /api/transactions/{id}          거래 조회
GET    /api/transactions/{id}/history  분개 이력
PUT    /api/transactions/{id}          전체 교체
DELETE /api/transactions/{id}          삭제
"""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query

from core.config.loader import LedgerSettings
from core.ledger.errors import ValidationError
from core.types import SortOrder, TransactionType
from web.dependencies import get_app_settings, get_transaction_service
from web.models.requests import TransactionRequest
from web.models.responses import (
    ErrorDetail,
    TransactionHistoryResponse,
    TransactionListResponse,
    TransactionResponse,
)
from web.services.transaction_service import TransactionService

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionResponse, status_code=201)
async def create_transaction(
    payload: TransactionRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    """거래 생성

    검증 실패 422, 락 대기 초과 503.
    """
    return await service.create(payload)


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    search: str | None = Query(default=None, description="이름/설명/번호/카테고리 검색"),
    account: str | None = Query(default=None, description="출발 계정 ID"),
    include_transfers_in: bool = Query(default=False, description="이체 도착 계정도 포함"),
    transaction_type: TransactionType | None = Query(default=None, alias="type"),
    category: str | None = Query(default=None),
    start: date | None = Query(default=None, description="시작일 (포함, 로컬)"),
    end: date | None = Query(default=None, description="종료일 (포함, 로컬)"),
    sort: SortOrder = Query(default=SortOrder.DESC, description="거래일 정렬"),
    page: int = Query(default=1, ge=1),
    page_size: int | None = Query(default=None, ge=1),
    settings: LedgerSettings = Depends(get_app_settings),
    service: TransactionService = Depends(get_transaction_service),
):
    """거래 목록 조회"""
    if page_size is None:
        page_size = settings.default_page_size
    if page_size > settings.max_page_size:
        raise HTTPException(
            status_code=422,
            detail=ErrorDetail(
                error=ValidationError.code,
                message=f"page_size must be <= {settings.max_page_size}",
            ).model_dump(),
        )

    if start and end and start > end:
        raise HTTPException(
            status_code=422,
            detail=ErrorDetail(
                error=ValidationError.code,
                message="start must not be after end",
            ).model_dump(),
        )

    return await service.list_transactions(
        search=search,
        account_id=account,
        include_transfers_in=include_transfers_in,
        transaction_type=transaction_type,
        category=category,
        start=start,
        end=end,
        order=sort,
        page=page,
        page_size=page_size,
    )


@router.get("/{transaction_id}", response_model=TransactionResponse)
async def get_transaction(
    transaction_id: str,
    service: TransactionService = Depends(get_transaction_service),
):
    """거래 조회 (없으면 404)"""
    return await service.get(transaction_id)


@router.get("/{transaction_id}/history", response_model=TransactionHistoryResponse)
async def get_transaction_history(
    transaction_id: str,
    service: TransactionService = Depends(get_transaction_service),
):
    """거래 분개 이력 (삭제된 거래 포함)"""
    return await service.history(transaction_id)


@router.put("/{transaction_id}", response_model=TransactionResponse)
async def edit_transaction(
    transaction_id: str,
    payload: TransactionRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    """거래 전체 교체

    id, 거래 번호, 생성 시간은 유지된다.
    """
    return await service.edit(transaction_id, payload)


@router.delete("/{transaction_id}", response_model=TransactionResponse)
async def delete_transaction(
    transaction_id: str,
    service: TransactionService = Depends(get_transaction_service),
):
    """거래 삭제 (삭제된 거래 반환)"""
    return await service.delete(transaction_id)
