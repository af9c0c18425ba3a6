from fastapi import APIRouter, Depends, HTTPException
from pydantic import AwareDatetime

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dependencies import get_event_read_model, get_event_write_model
from party_rsvp.events.dtos import EventNotFoundError, EventUpdateDTO
from party_rsvp.events.repository.read_models import EventReadModel
from party_rsvp.events.repository.write_models import EventWriteModel
from party_rsvp.events.schemas import EventEnvelope, EventResponse, ThemeSchema
from party_rsvp.events.urls import EVENT_URL
from party_rsvp.rsvps.schemas import CamelModel

router = APIRouter()


class UpdateEventRequest(CamelModel):
    title: str | None = None
    subtitle: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    details: str | None = None
    background_image_url: str | None = None
    theme: ThemeSchema | None = None
    host_name: str | None = None
    host_email: str | None = None
    is_active: bool | None = None
    email_confirmation_enabled: bool | None = None
    reminder_enabled: bool | None = None
    reminder_scheduled_at: AwareDatetime | None = None


@router.put(EVENT_URL, response_model=EventEnvelope)
async def update_event(
    slug: str,
    request: UpdateEventRequest,
    admin: AdminContext = Depends(require_admin),
    read_model: EventReadModel = Depends(get_event_read_model),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventEnvelope:
    """
    Change only the fields that are sent.

    A new `reminderScheduledAt` re-arms the reminder even if it already went out.
    Display overrides saved through the event settings still win over these fields.
    """
    event = await read_model.get_event(slug)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    ensure_event_access(admin, event.slug)

    changes = EventUpdateDTO(
        title=request.title,
        subtitle=request.subtitle,
        date=request.date,
        time=request.time,
        location=request.location,
        details=request.details,
        background_image_url=request.background_image_url,
        theme=request.theme.to_dto() if request.theme is not None else None,
        host_name=request.host_name,
        host_email=request.host_email,
        is_active=request.is_active,
        email_confirmation_enabled=request.email_confirmation_enabled,
        reminder_enabled=request.reminder_enabled,
        reminder_scheduled_at=request.reminder_scheduled_at,
    )
    if not changes.as_values():
        raise HTTPException(status_code=400, detail="No changes given")
    if changes.title is not None and not changes.title.strip():
        raise HTTPException(status_code=400, detail="The title cannot be blank")

    try:
        await write_model.update_event(event.slug, changes)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    updated = await read_model.get_event(event.slug)
    return EventEnvelope(message="Event updated", event=EventResponse.from_dto(updated))
