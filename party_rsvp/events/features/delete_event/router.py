from fastapi import APIRouter, Depends, HTTPException, Query

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dependencies import get_event_read_model, get_event_write_model
from party_rsvp.events.dtos import EventNotFoundError
from party_rsvp.events.repository.read_models import EventReadModel
from party_rsvp.events.repository.write_models import EventWriteModel
from party_rsvp.events.urls import EVENT_URL
from party_rsvp.rsvps.schemas import CamelModel

router = APIRouter()


class DeleteEventResponse(CamelModel):
    success: bool = True
    message: str


@router.delete(EVENT_URL, response_model=DeleteEventResponse)
async def delete_event(
    slug: str,
    hard: bool = Query(default=False),
    admin: AdminContext = Depends(require_admin),
    read_model: EventReadModel = Depends(get_event_read_model),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> DeleteEventResponse:
    """Deactivate an event so it stops taking RSVPs. `?hard=true` removes it for good."""
    event = await read_model.get_event(slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    ensure_event_access(admin, event.slug)

    try:
        if hard:
            await write_model.delete_event(event.slug)
        else:
            await write_model.deactivate_event(event.slug)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    return DeleteEventResponse(message="Event deleted" if hard else "Event deactivated")
