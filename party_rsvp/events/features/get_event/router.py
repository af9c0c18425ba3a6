from fastapi import APIRouter, Depends, HTTPException

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dependencies import get_event_read_model
from party_rsvp.events.repository.read_models import EventReadModel
from party_rsvp.events.schemas import EventEnvelope, EventResponse
from party_rsvp.events.urls import EVENT_URL

router = APIRouter()


@router.get(EVENT_URL, response_model=EventEnvelope)
async def get_event(
    slug: str,
    admin: AdminContext = Depends(require_admin),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> EventEnvelope:
    """One event by slug or id, display overrides applied."""
    event = await read_model.get_event(slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    ensure_event_access(admin, event.slug)

    return EventEnvelope(event=EventResponse.from_dto(event))
