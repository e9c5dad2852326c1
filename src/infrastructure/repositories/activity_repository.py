# src/infrastructure/repositories/activity_repository.py

import json

from sqlalchemy.orm import Session
from sqlalchemy import select

from src.infrastructure.db.models import ActivityEvent


class ActivityRepository:
    """Append-only activity log read by the admin dashboard."""

    def __init__(self, db: Session):
        self.db = db

    def add_event(
        self,
        aggregate_type: str,
        aggregate_id: str,
        event_type: str,
        title: str,
        description: str,
        payload: dict,
        dedupe_key: str,
    ) -> None:
        existing = self.db.execute(
            select(ActivityEvent).where(ActivityEvent.dedupe_key == dedupe_key)
        ).scalar_one_or_none()
        if existing:
            return

        self.db.add(
            ActivityEvent(
                aggregate_type=aggregate_type,
                aggregate_id=aggregate_id,
                event_type=event_type,
                title=title,
                description=description,
                payload=json.dumps(payload, sort_keys=True, default=str),
                dedupe_key=dedupe_key,
            )
        )

    def list_recent(self, limit: int) -> list[ActivityEvent]:
        stmt = (
            select(ActivityEvent)
            .order_by(ActivityEvent.created_at.desc())
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())
