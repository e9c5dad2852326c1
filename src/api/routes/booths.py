from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_db, require_admin
from src.api.schemas.schemas import (
    BoothCreate,
    BoothListResponse,
    BoothMutationResponse,
    BoothResponse,
    BoothStatsResponse,
    BoothUpdate,
    MessageResponse,
)
from src.api.templating import templates
from src.application import floor_plan
from src.application.booth_service import BoothService
from src.infrastructure.db.models import User

router = APIRouter(prefix="/booths", tags=["booths"])


def render_floor_plan(request: Request, positions: list[tuple]):
    return templates.TemplateResponse(
        request,
        "floor_plan.svg",
        {
            "positions": positions,
            "width": floor_plan.CANVAS_WIDTH,
            "height": floor_plan.CANVAS_HEIGHT,
            "booth_width": floor_plan.BOOTH_WIDTH,
            "booth_height": floor_plan.BOOTH_HEIGHT,
        },
        media_type="image/svg+xml",
    )


@router.get("", response_model=BoothListResponse)
def list_booths(
    status_filter: str | None = Query(default=None, alias="status"),
    event_id: str | None = None,
    event: str | None = None,
    location: str | None = None,
    size: str | None = None,
    max_price: str | None = None,
    db: Session = Depends(get_db),
):
    booths = BoothService(db).list_booths(
        status=status_filter,
        event_id=event_id,
        event=event,
        location=location,
        size=size,
        max_price=max_price,
    )
    return BoothListResponse(booths=[BoothResponse.from_booth(b) for b in booths])


@router.get("/stats", response_model=BoothStatsResponse)
def booth_stats(db: Session = Depends(get_db)):
    return BoothStatsResponse(**BoothService(db).stats())


@router.get("/floor-plan.svg")
def booth_floor_plan(
    request: Request,
    event_id: str | None = None,
    event: str | None = None,
    location: str | None = None,
    db: Session = Depends(get_db),
):
    positions = BoothService(db).floor_plan(
        event_id=event_id,
        event=event,
        location=location,
    )
    return render_floor_plan(request, positions)


@router.get("/{booth_id}", response_model=BoothResponse)
def get_booth(booth_id: str, db: Session = Depends(get_db)):
    return BoothResponse.from_booth(BoothService(db).get_booth(booth_id))


@router.post(
    "",
    response_model=BoothMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_booth(
    request: BoothCreate,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    booth = BoothService(db).create_booth(request)
    return BoothMutationResponse(
        message="Booth created successfully",
        booth=BoothResponse.from_booth(booth),
    )


@router.put("/{booth_id}", response_model=BoothMutationResponse)
def update_booth(
    booth_id: str,
    request: BoothUpdate,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    booth = BoothService(db).update_booth(booth_id, request)
    return BoothMutationResponse(
        message="Booth updated successfully",
        booth=BoothResponse.from_booth(booth),
    )


@router.delete("/{booth_id}", response_model=MessageResponse)
def delete_booth(
    booth_id: str,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    BoothService(db).delete_booth(booth_id)
    return MessageResponse(message="Booth deleted successfully")
