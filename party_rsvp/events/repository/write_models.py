import logging
from abc import ABC, abstractmethod
from datetime import datetime
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from party_rsvp.config.database import async_session_manager
from party_rsvp.events.dtos import (
    EventAlreadyExistsError,
    EventCreateDTO,
    EventDTO,
    EventNotFoundError,
    EventOverridesDTO,
    EventUpdateDTO,
    merge_event_overrides,
    validate_new_event,
)
from party_rsvp.events.repository.orm_models import Event, EventSettings
from party_rsvp.events.repository.read_models import find_event

logger = logging.getLogger(__name__)


class EventWriteModel(ABC):
    @abstractmethod
    async def create_event(self, event_data: EventCreateDTO) -> EventDTO:
        raise NotImplementedError

    @abstractmethod
    async def update_event(self, slug_or_id: str, changes: EventUpdateDTO) -> EventDTO:
        """A new reminder schedule re-arms the reminder."""
        raise NotImplementedError

    @abstractmethod
    async def deactivate_event(self, slug_or_id: str) -> EventDTO:
        raise NotImplementedError

    @abstractmethod
    async def delete_event(self, slug_or_id: str) -> None:
        """Remove the event and its overrides. RSVPs are kept."""
        raise NotImplementedError

    @abstractmethod
    async def save_event_settings(self, slug_or_id: str, overrides: EventOverridesDTO) -> EventDTO:
        """Replace the event's display overrides and return the merged event."""
        raise NotImplementedError

    @abstractmethod
    async def mark_reminder_sent(self, event_id: UUID, sent_at: datetime) -> EventDTO:
        raise NotImplementedError


class SqlEventWriteModel(EventWriteModel):
    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def create_event(self, event_data: EventCreateDTO) -> EventDTO:
        validate_new_event(event_data.slug, event_data.title)

        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(Event).where(Event.slug == event_data.slug))
            if result.scalar_one_or_none() is not None:
                raise EventAlreadyExistsError(event_data.slug)

            event = Event(
                slug=event_data.slug,
                title=event_data.title.strip(),
                subtitle=event_data.subtitle,
                date=event_data.date,
                time=event_data.time,
                location=event_data.location,
                details=event_data.details,
                background_image_url=event_data.background_image_url,
                theme=event_data.theme.to_json(),
                host_name=event_data.host_name,
                host_email=event_data.host_email,
                is_active=event_data.is_active,
                email_confirmation_enabled=event_data.email_confirmation_enabled,
                reminder_enabled=event_data.reminder_scheduled_at is not None,
                reminder_scheduled_at=event_data.reminder_scheduled_at,
            )
            session.add(event)
            await session.flush()

            logger.info(f"Created event {event.slug} ({event.uuid})")
            return event.to_dto()

    async def update_event(self, slug_or_id: str, changes: EventUpdateDTO) -> EventDTO:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get(session, slug_or_id)

            values = changes.as_values()
            if "theme" in values:
                values["theme"] = values["theme"].to_json()
            if "reminder_scheduled_at" in values:
                values.setdefault("reminder_enabled", True)
                event.reminder_sent_at = None

            for key, value in values.items():
                setattr(event, key, value)
            await session.flush()

            logger.info(f"Updated event {event.slug}: {sorted(values)}")
            return event.to_dto()

    async def deactivate_event(self, slug_or_id: str) -> EventDTO:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get(session, slug_or_id)
            event.is_active = False
            await session.flush()

            logger.info(f"Deactivated event {event.slug}")
            return event.to_dto()

    async def delete_event(self, slug_or_id: str) -> None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get(session, slug_or_id)
            slug = event.slug

            await session.execute(delete(EventSettings).where(EventSettings.event_id == slug))
            await session.delete(event)
            await session.flush()

            logger.warning(f"Deleted event {slug}; its RSVPs are kept")

    async def save_event_settings(self, slug_or_id: str, overrides: EventOverridesDTO) -> EventDTO:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get(session, slug_or_id)

            result = await session.execute(
                select(EventSettings).where(EventSettings.event_id == event.slug)
            )
            row = result.scalar_one_or_none()
            if row is None:
                row = EventSettings(event_id=event.slug)
                session.add(row)

            row.title = overrides.title
            row.subtitle = overrides.subtitle
            row.date = overrides.date
            row.time = overrides.time
            row.location = overrides.location
            row.details = overrides.details
            row.background_image_url = overrides.background_image_url
            row.primary_color = overrides.primary_color
            row.secondary_color = overrides.secondary_color
            row.accent_color = overrides.accent_color
            await session.flush()

            logger.info(f"Saved display settings for event {event.slug}")
            return merge_event_overrides(event.to_dto(), row.to_overrides())

    async def mark_reminder_sent(self, event_id: UUID, sent_at: datetime) -> EventDTO:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await session.get(Event, event_id)
            if event is None:
                raise EventNotFoundError(str(event_id))

            event.reminder_sent_at = sent_at
            await session.flush()
            return event.to_dto()

    async def _get(self, session, slug_or_id: str) -> Event:
        event = await find_event(session, slug_or_id)
        if event is None:
            raise EventNotFoundError(slug_or_id)
        return event
