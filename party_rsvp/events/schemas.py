"""Event bodies on the wire. Keys are camelCase, like the RSVP endpoints."""

from datetime import datetime
from uuid import UUID

from party_rsvp.events.dtos import DEFAULT_THEME, EventDTO, ThemeDTO
from party_rsvp.rsvps.schemas import CamelModel


class ThemeSchema(CamelModel):
    primary_color: str = DEFAULT_THEME["primary_color"]
    secondary_color: str = DEFAULT_THEME["secondary_color"]
    accent_color: str = DEFAULT_THEME["accent_color"]
    background_color: str = DEFAULT_THEME["background_color"]
    text_color: str = DEFAULT_THEME["text_color"]

    def to_dto(self) -> ThemeDTO:
        return ThemeDTO(**self.model_dump())


class EventResponse(CamelModel):
    id: UUID
    slug: str
    title: str
    subtitle: str
    date: str
    time: str
    location: str
    details: str
    background_image_url: str
    theme: ThemeSchema
    host_name: str
    host_email: str
    is_active: bool
    email_confirmation_enabled: bool
    reminder_enabled: bool
    reminder_scheduled_at: datetime | None = None
    reminder_sent_at: datetime | None = None

    @classmethod
    def from_dto(cls, event: EventDTO) -> "EventResponse":
        return cls(
            id=event.id,
            slug=event.slug,
            title=event.title,
            subtitle=event.subtitle,
            date=event.date,
            time=event.time,
            location=event.location,
            details=event.details,
            background_image_url=event.background_image_url,
            theme=ThemeSchema(**event.theme.to_json()),
            host_name=event.host_name,
            host_email=event.host_email,
            is_active=event.is_active,
            email_confirmation_enabled=event.email_confirmation_enabled,
            reminder_enabled=event.reminder_enabled,
            reminder_scheduled_at=event.reminder_scheduled_at,
            reminder_sent_at=event.reminder_sent_at,
        )


class EventEnvelope(CamelModel):
    success: bool = True
    message: str | None = None
    event: EventResponse
