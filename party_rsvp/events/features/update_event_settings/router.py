from fastapi import APIRouter, Depends, HTTPException

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dependencies import get_event_write_model
from party_rsvp.events.dtos import EventNotFoundError, EventOverridesDTO
from party_rsvp.events.repository.write_models import EventWriteModel
from party_rsvp.events.schemas import EventEnvelope, EventResponse
from party_rsvp.events.urls import ADMIN_EVENT_SETTINGS_URL
from party_rsvp.rsvps.schemas import CamelModel

router = APIRouter()


class UpdateEventSettingsRequest(CamelModel):
    event_id: str
    title: str | None = None
    subtitle: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    details: str | None = None
    background_image_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None


@router.post(ADMIN_EVENT_SETTINGS_URL, response_model=EventEnvelope)
async def update_event_settings(
    request: UpdateEventSettingsRequest,
    admin: AdminContext = Depends(require_admin),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventEnvelope:
    """
    Replace the display overrides of an event.

    Fields left out are no longer overridden, so the event's own value shows again.
    """
    ensure_event_access(admin, request.event_id)
    overrides = EventOverridesDTO(
        title=request.title,
        subtitle=request.subtitle,
        date=request.date,
        time=request.time,
        location=request.location,
        details=request.details,
        background_image_url=request.background_image_url,
        primary_color=request.primary_color,
        secondary_color=request.secondary_color,
        accent_color=request.accent_color,
    )

    try:
        event = await write_model.save_event_settings(request.event_id, overrides)
    except EventNotFoundError:
        raise HTTPException(status_code=404, detail="Event not found")

    return EventEnvelope(message="Event settings updated", event=EventResponse.from_dto(event))
