"""
카테고리 API 라우트
"""

from fastapi import APIRouter, Depends

from core.config.loader import LedgerSettings
from web.dependencies import get_app_settings
from web.models.responses import CategoryListResponse

router = APIRouter(prefix="/api", tags=["Categories"])


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(
    settings: LedgerSettings = Depends(get_app_settings),
):
    """설정된 카테고리 목록"""
    return {"categories": list(settings.categories)}
