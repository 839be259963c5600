"""
의존성 주입

FastAPI의 Depends를 사용한 의존성 관리.
원장 객체는 lifespan에서 한 번 생성되어 app.state에 보관된다.
"""

from fastapi import Depends, Request

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import LedgerSettings
from core.ledger.query import QueryView
from core.ledger.service import LedgerService
from web.services.account_service import AccountService
from web.services.transaction_service import TransactionService


def get_app_settings(request: Request) -> LedgerSettings:
    """애플리케이션 설정 반환"""
    return request.app.state.settings


def get_db(request: Request) -> SQLiteAdapter:
    """공유 DB 어댑터 반환"""
    return request.app.state.db


def get_ledger(request: Request) -> LedgerService:
    """원장 서비스 반환"""
    return request.app.state.ledger


def get_query_view(request: Request) -> QueryView:
    """조회 뷰 반환"""
    return request.app.state.query_view


def get_account_service(
    ledger: LedgerService = Depends(get_ledger),
) -> AccountService:
    return AccountService(ledger)


def get_transaction_service(
    ledger: LedgerService = Depends(get_ledger),
    query_view: QueryView = Depends(get_query_view),
) -> TransactionService:
    return TransactionService(ledger, query_view)
