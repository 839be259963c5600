"""
계정 API 라우트

계정 잔액 조회 및 잔액 검증
"""

from fastapi import APIRouter, Depends

from web.dependencies import get_account_service
from web.models.responses import AccountListResponse, AccountResponse, ReconcileResponse
from web.services.account_service import AccountService

router = APIRouter(prefix="/api/accounts", tags=["Accounts"])


@router.get("", response_model=AccountListResponse)
async def list_accounts(
    service: AccountService = Depends(get_account_service),
):
    """계정 목록 + 전체 잔액"""
    return await service.list_accounts()


@router.get("/reconcile", response_model=ReconcileResponse)
async def reconcile_accounts(
    service: AccountService = Depends(get_account_service),
):
    """저장된 잔액과 분개 합계 비교

    불일치가 있어도 200. consistent=false로 표시한다.
    """
    return await service.reconcile()


@router.get("/{account_id}", response_model=AccountResponse)
async def get_account(
    account_id: str,
    service: AccountService = Depends(get_account_service),
):
    """계정 조회 (없으면 404)"""
    return await service.get_account(account_id)
