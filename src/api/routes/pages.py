from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from src.api.dependencies import get_db
from src.api.templating import templates
from src.application.event_service import EventService
from src.domain.enums import BoothStatus
from src.infrastructure.repositories.booth_repository import BoothRepository

router = APIRouter(tags=["pages"])


def _availability(booths) -> dict:
    return {
        "total": len(booths),
        "available": sum(1 for b in booths if b.status == BoothStatus.AVAILABLE),
        "booked": sum(1 for b in booths if b.status == BoothStatus.BOOKED),
    }


@router.get("/", response_class=HTMLResponse)
def landing_page(request: Request, db: Session = Depends(get_db)):
    booth_repository = BoothRepository(db)
    event_cards = []
    for event in EventService(db).list_events():
        booths = booth_repository.list_booths(event_id=event.id)
        event_cards.append({"event": event, "booths": _availability(booths)})

    return templates.TemplateResponse(
        request,
        "index.html",
        {"events": event_cards},
    )


@router.get("/events/{event_id}/page", response_class=HTMLResponse)
def event_detail_page(
    event_id: str,
    request: Request,
    db: Session = Depends(get_db),
):
    event = EventService(db).get_event(event_id)
    booths = BoothRepository(db).list_booths(event_id=event.id)
    return templates.TemplateResponse(
        request,
        "event_detail.html",
        {
            "event": event,
            "booths": booths,
            "availability": _availability(booths),
        },
    )
