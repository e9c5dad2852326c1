from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.api.dependencies import get_db, require_admin
from src.api.schemas.schemas import GlobalStatsResponse
from src.application.dashboard_service import DashboardService

router = APIRouter(tags=["stats"])


@router.get(
    "/stats",
    response_model=GlobalStatsResponse,
    dependencies=[Depends(require_admin)],
)
def global_stats(db: Session = Depends(get_db)):
    return GlobalStatsResponse(**DashboardService(db).global_stats())
