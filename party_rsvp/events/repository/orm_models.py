from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from party_rsvp.config.table_names import TableNames
from party_rsvp.events.dtos import DEFAULT_THEME, EventDTO, EventOverridesDTO, ThemeDTO
from party_rsvp.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    subtitle: Mapped[str] = mapped_column(Text, default="", nullable=True)
    # Free text as typed by the organizer, e.g. "Sábado 15 de Marzo"
    date: Mapped[str] = mapped_column(Text, default="", nullable=True)
    time: Mapped[str] = mapped_column(Text, default="", nullable=True)
    location: Mapped[str] = mapped_column(Text, default="", nullable=True)
    details: Mapped[str] = mapped_column(Text, default="", nullable=True)
    background_image_url: Mapped[str] = mapped_column(Text, default="/background.png", nullable=True)
    theme: Mapped[dict] = mapped_column(
        sa.JSON().with_variant(JSONB(), "postgresql"),
        default=lambda: dict(DEFAULT_THEME),
        nullable=True,
    )

    # Contact info
    host_name: Mapped[str] = mapped_column(Text, default="", nullable=True)
    host_email: Mapped[str] = mapped_column(Text, default="", nullable=True)

    # Can guests still RSVP?
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # Email configuration
    email_confirmation_enabled: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    reminder_enabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    reminder_scheduled_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    reminder_sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    def to_dto(self) -> EventDTO:
        return EventDTO(
            id=self.uuid,
            slug=self.slug,
            title=self.title,
            subtitle=self.subtitle or "",
            date=self.date or "",
            time=self.time or "",
            location=self.location or "",
            details=self.details or "",
            background_image_url=self.background_image_url or "/background.png",
            theme=ThemeDTO.from_json(self.theme),
            host_name=self.host_name or "",
            host_email=self.host_email or "",
            is_active=bool(self.is_active),
            email_confirmation_enabled=bool(self.email_confirmation_enabled),
            reminder_enabled=bool(self.reminder_enabled),
            reminder_scheduled_at=self.reminder_scheduled_at,
            reminder_sent_at=self.reminder_sent_at,
        )

    def __repr__(self) -> str:
        return f"<Event {self.slug}>"


class EventSettings(Base, TimeStamp):
    __tablename__ = TableNames.EVENT_SETTINGS.value

    # Event slug the overrides apply to
    event_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    title: Mapped[str | None] = mapped_column(Text, nullable=True)
    subtitle: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[str | None] = mapped_column(Text, nullable=True)
    time: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    details: Mapped[str | None] = mapped_column(Text, nullable=True)
    background_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    primary_color: Mapped[str | None] = mapped_column(String(10), nullable=True)
    secondary_color: Mapped[str | None] = mapped_column(String(10), nullable=True)
    accent_color: Mapped[str | None] = mapped_column(String(10), nullable=True)

    def to_overrides(self) -> EventOverridesDTO:
        return EventOverridesDTO(
            title=self.title or None,
            subtitle=self.subtitle,
            date=self.date or None,
            time=self.time or None,
            location=self.location or None,
            details=self.details,
            background_image_url=self.background_image_url or None,
            primary_color=self.primary_color or None,
            secondary_color=self.secondary_color or None,
            accent_color=self.accent_color or None,
        )

    def __repr__(self) -> str:
        return f"<EventSettings for {self.event_id}>"
