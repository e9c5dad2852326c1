from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.dependencies import get_db, require_admin
from src.api.schemas.schemas import (
    EventListResponse,
    EventMutationResponse,
    EventPayload,
    EventResponse,
    MessageResponse,
)
from src.application.event_service import EventService
from src.infrastructure.db.models import User

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventListResponse)
def list_events(
    q: str | None = None,
    status_filter: str | None = Query(default=None, alias="status"),
    date_from: str | None = Query(default=None, alias="from"),
    date_to: str | None = Query(default=None, alias="to"),
    sort: str | None = None,
    db: Session = Depends(get_db),
):
    events = EventService(db).list_events(
        q=q,
        status=status_filter,
        date_from=date_from,
        date_to=date_to,
        sort=sort,
    )
    return EventListResponse(events=[EventResponse.model_validate(e) for e in events])


@router.get("/{event_id}", response_model=EventResponse)
def get_event(event_id: str, db: Session = Depends(get_db)):
    return EventResponse.model_validate(EventService(db).get_event(event_id))


@router.post(
    "",
    response_model=EventMutationResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_event(
    request: EventPayload,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    event = EventService(db).create_event(request)
    return EventMutationResponse(
        message="Event created successfully",
        event=EventResponse.model_validate(event),
    )


@router.put("/{event_id}", response_model=EventMutationResponse)
def update_event(
    event_id: str,
    request: EventPayload,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    event = EventService(db).update_event(event_id, request)
    return EventMutationResponse(
        message="Event updated successfully",
        event=EventResponse.model_validate(event),
    )


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: str,
    _: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    EventService(db).delete_event(event_id)
    return MessageResponse(message="Event deleted successfully")
