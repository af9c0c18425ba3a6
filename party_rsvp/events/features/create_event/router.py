from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import AwareDatetime, Field

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dependencies import get_event_write_model
from party_rsvp.events.dtos import EventAlreadyExistsError, EventCreateDTO, InvalidEventError
from party_rsvp.events.repository.write_models import EventWriteModel
from party_rsvp.events.schemas import EventEnvelope, EventResponse, ThemeSchema
from party_rsvp.events.urls import EVENTS_URL
from party_rsvp.rsvps.schemas import CamelModel

router = APIRouter()


class CreateEventRequest(CamelModel):
    slug: str
    title: str
    subtitle: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    details: str = ""
    background_image_url: str = "/background.png"
    theme: ThemeSchema = Field(default_factory=ThemeSchema)
    host_name: str = ""
    host_email: str = ""
    is_active: bool = True
    email_confirmation_enabled: bool = True
    reminder_scheduled_at: AwareDatetime | None = None


@router.post(EVENTS_URL, response_model=EventEnvelope, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: CreateEventRequest,
    admin: AdminContext = Depends(require_admin),
    write_model: EventWriteModel = Depends(get_event_write_model),
) -> EventEnvelope:
    """Create an event. Setting `reminderScheduledAt` enables the reminder email."""
    ensure_event_access(admin, request.slug)

    try:
        event = await write_model.create_event(
            EventCreateDTO(
                slug=request.slug,
                title=request.title,
                subtitle=request.subtitle,
                date=request.date,
                time=request.time,
                location=request.location,
                details=request.details,
                background_image_url=request.background_image_url,
                theme=request.theme.to_dto(),
                host_name=request.host_name,
                host_email=request.host_email,
                is_active=request.is_active,
                email_confirmation_enabled=request.email_confirmation_enabled,
                reminder_scheduled_at=request.reminder_scheduled_at,
            )
        )
    except InvalidEventError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except EventAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))

    return EventEnvelope(message="Event created", event=EventResponse.from_dto(event))
