"""
헬스 체크 엔드포인트

GET /health - 서버 상태 확인
"""

from fastapi import APIRouter, Depends

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.constants import APP_VERSION
from core.utils.timezone import format_iso, now_utc
from web.dependencies import get_db
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(db: SQLiteAdapter = Depends(get_db)) -> HealthResponse:
    """서버 상태 확인

    Returns:
        HealthResponse: status, version, database, timestamp 정보
    """
    return HealthResponse(
        status="ok",
        version=APP_VERSION,
        database="connected" if db.is_connected else "disconnected",
        timestamp=format_iso(now_utc()),
    )
