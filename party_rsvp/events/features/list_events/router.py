from fastapi import APIRouter, Depends, Query

from party_rsvp.admin.auth import require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dependencies import get_event_read_model
from party_rsvp.events.repository.read_models import EventReadModel
from party_rsvp.events.schemas import EventResponse
from party_rsvp.events.urls import EVENTS_URL
from party_rsvp.rsvps.schemas import CamelModel

router = APIRouter()


class ListEventsResponse(CamelModel):
    success: bool = True
    count: int
    events: list[EventResponse]


@router.get(EVENTS_URL, response_model=ListEventsResponse)
async def list_events(
    active: bool = Query(default=False),
    admin: AdminContext = Depends(require_admin),
    read_model: EventReadModel = Depends(get_event_read_model),
) -> ListEventsResponse:
    """Events the organizer can see, newest first. `?active=true` hides deactivated ones."""
    events = await read_model.list_events(active_only=active)
    events = [event for event in events if admin.can_access(event.slug)]
    return ListEventsResponse(count=len(events), events=[EventResponse.from_dto(event) for event in events])
