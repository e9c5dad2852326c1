from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_db, require_admin
from src.api.schemas.schemas import (
    ExhibitorCreate,
    ExhibitorDetailResponse,
    ExhibitorExportRow,
    ExhibitorListResponse,
    ExhibitorMutationResponse,
    ExhibitorResponse,
    ExhibitorStatsResponse,
    ExhibitorStatusUpdate,
    MessageResponse,
    ProfileUpdate,
    UserResponse,
)
from src.application.exhibitor_service import ExhibitorService

router = APIRouter(
    prefix="/exhibitors",
    tags=["exhibitors"],
    dependencies=[Depends(require_admin)],
)


def _with_profile(model, user, extra: dict):
    profile = UserResponse.model_validate(user).model_dump()
    return model(**profile, **extra)


@router.get("", response_model=ExhibitorListResponse)
def list_exhibitors(
    industry: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    sort: str | None = None,
    db: Session = Depends(get_db),
):
    rows = ExhibitorService(db).list_exhibitors(industry=industry, status=status_filter, sort=sort)
    return ExhibitorListResponse(
        exhibitors=[_with_profile(ExhibitorResponse, user, stats) for user, stats in rows]
    )


@router.get("/stats", response_model=ExhibitorStatsResponse)
def exhibitor_stats(db: Session = Depends(get_db)):
    return ExhibitorStatsResponse(**ExhibitorService(db).stats())


@router.get("/export", response_model=list[ExhibitorExportRow])
def export_exhibitors(db: Session = Depends(get_db)):
    return [
        _with_profile(ExhibitorExportRow, user, stats)
        for user, stats in ExhibitorService(db).export()
    ]


@router.get("/{exhibitor_id}", response_model=ExhibitorDetailResponse)
def get_exhibitor(exhibitor_id: str, db: Session = Depends(get_db)):
    user, detail = ExhibitorService(db).get_detail(exhibitor_id)
    return _with_profile(ExhibitorDetailResponse, user, detail)


@router.post(
    "",
    response_model=ExhibitorMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_exhibitor(request: ExhibitorCreate, db: Session = Depends(get_db)):
    user = ExhibitorService(db).create_exhibitor(request)
    return ExhibitorMutationResponse(
        message="Exhibitor created successfully",
        exhibitor=UserResponse.model_validate(user),
    )


@router.put("/{exhibitor_id}", response_model=ExhibitorMutationResponse)
def update_exhibitor(
    exhibitor_id: str,
    request: ProfileUpdate,
    db: Session = Depends(get_db),
):
    user = ExhibitorService(db).update_exhibitor(exhibitor_id, request)
    return ExhibitorMutationResponse(
        message="Exhibitor updated successfully",
        exhibitor=UserResponse.model_validate(user),
    )


@router.patch("/{exhibitor_id}/status", response_model=ExhibitorMutationResponse)
def update_exhibitor_status(
    exhibitor_id: str,
    request: ExhibitorStatusUpdate,
    db: Session = Depends(get_db),
):
    user = ExhibitorService(db).set_status(exhibitor_id, request.status)
    return ExhibitorMutationResponse(
        message="Exhibitor status updated successfully",
        exhibitor=UserResponse.model_validate(user),
    )


@router.delete("/{exhibitor_id}", response_model=MessageResponse)
def delete_exhibitor(exhibitor_id: str, db: Session = Depends(get_db)):
    ExhibitorService(db).delete_exhibitor(exhibitor_id)
    return MessageResponse(message="Exhibitor deleted successfully")
