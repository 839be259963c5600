"""
FastAPI 애플리케이션

라우터 등록, 원장 객체 생성, 오류 → HTTP 매핑.

실행:
    python -m web
    uvicorn web.app:create_app --factory
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import LedgerSettings, get_settings, resolve_db_path
from core.constants import APP_NAME, APP_VERSION
from core.ledger.account_store import AccountStore
from core.ledger.errors import (
    AccountNotFoundError,
    LedgerBusyError,
    LedgerError,
    TransactionNotFoundError,
    ValidationError,
)
from core.ledger.query import QueryView
from core.ledger.schema import init_schema
from core.ledger.service import LedgerService
from core.logging import setup_logging
from core.utils.timezone import now_utc
from web.routes import accounts, categories, health, transactions

logger = logging.getLogger(__name__)

# 오류 → HTTP 상태 코드
ERROR_STATUS: dict[type[LedgerError], int] = {
    ValidationError: 422,
    TransactionNotFoundError: 404,
    AccountNotFoundError: 404,
    LedgerBusyError: 503,
}


def _status_for(exc: LedgerError) -> int:
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    """LedgerError → {"detail": {"error", "message"}}"""
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} 실패: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"detail": {"error": exc.code, "message": str(exc)}},
    )


async def request_validation_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """요청 스키마 검증 실패 → 422 (원장 검증 오류와 같은 형식)"""
    errors = jsonable_encoder(exc.errors())
    message = "; ".join(
        f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg', '')}" for e in errors
    )
    return JSONResponse(
        status_code=422,
        content={
            "detail": {
                "error": ValidationError.code,
                "message": message or "Invalid request",
                "errors": errors,
            }
        },
    )


def create_app(
    ledger_settings: LedgerSettings | None = None,
    *,
    clock: Callable[[], datetime] | None = None,
    configure_logging: bool = True,
) -> FastAPI:
    """FastAPI 앱 생성

    Args:
        ledger_settings: 원장 설정 (None이면 settings.yaml)
        clock: 현재 시각 함수 (테스트 주입용, None이면 now_utc)
        configure_logging: 콘솔 + 파일 로깅 설정 여부

    Returns:
        FastAPI 앱
    """
    if configure_logging:
        setup_logging("web")

    settings = ledger_settings or get_settings().ledger
    now = clock or now_utc

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """앱 생명주기 관리

        시작: DB 연결 → 스키마 초기화 → 초기 계정 생성
        종료: DB 연결 종료
        """
        db = SQLiteAdapter(
            resolve_db_path(settings.db_path),
            lock_timeout=settings.lock_timeout_sec,
        )
        await db.connect()

        try:
            await init_schema(db)
            account_store = AccountStore(db)
            await account_store.ensure_accounts(settings.accounts)

            app.state.settings = settings
            app.state.db = db
            app.state.ledger = LedgerService(
                db,
                account_store,
                minor_unit=settings.minor_unit,
                clock=now,
                tz=settings.local_tz,
            )
            app.state.query_view = QueryView(tz=settings.local_tz, clock=now)

            logger.info(
                f"Web: 원장 준비 완료 (db={settings.db_path}, "
                f"accounts={len(settings.accounts)}, utc_offset={settings.utc_offset_minutes}m)"
            )
            yield
        finally:
            await db.close()
            logger.info("Web: DB 연결 종료 완료")

    app = FastAPI(
        title=APP_NAME,
        description="현금 계정 잔액 / 거래 원장 API",
        version=APP_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS 설정 (개발용)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # =========================================================================
    # API 라우터 등록
    # =========================================================================

    app.include_router(health.router)
    app.include_router(accounts.router)
    app.include_router(transactions.router)
    app.include_router(categories.router)

    return app
