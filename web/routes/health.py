"""
헬스 체크

GET /health - 서버 및 Ledger DB 상태
"""

from fastapi import APIRouter, Depends

from core.config.loader import Settings
from web.dependencies import get_app_settings
from web.models.responses import HealthResponse

router = APIRouter(tags=["health"])

API_VERSION = "1.0.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)) -> HealthResponse:
    """DB 파일이 없으면 degraded (재무제표 조회는 503)"""
    db_path = settings.db_path
    exists = db_path.exists()
    return HealthResponse(
        status="ok" if exists else "degraded",
        version=API_VERSION,
        database=str(db_path),
        database_exists=exists,
    )
