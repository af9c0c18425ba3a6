import abc
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from party_rsvp.config.database import async_session_manager
from party_rsvp.events.dtos import EventDTO, merge_event_overrides
from party_rsvp.events.repository.orm_models import Event, EventSettings


async def find_event(session: AsyncSession, slug_or_id: str) -> Event | None:
    """Slug first, then id. Links have used both."""
    result = await session.execute(select(Event).where(Event.slug == slug_or_id))
    event = result.scalar_one_or_none()
    if event is not None:
        return event
    try:
        event_id = UUID(slug_or_id)
    except ValueError:
        return None
    return await session.get(Event, event_id)


class EventReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_event(self, slug_or_id: str) -> EventDTO | None:
        """Look an event up by slug, then by id, with its display overrides applied."""
        raise NotImplementedError

    @abc.abstractmethod
    async def list_events(self, active_only: bool = False) -> list[EventDTO]:
        """Newest first."""
        raise NotImplementedError

    @abc.abstractmethod
    async def get_events_with_pending_reminders(self, now: datetime) -> list[EventDTO]:
        raise NotImplementedError


class SqlEventReadModel(EventReadModel):
    """SQL implementation of event read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_event(self, slug_or_id: str) -> EventDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await find_event(session, slug_or_id)
            if event is None:
                return None

            result = await session.execute(
                select(EventSettings).where(EventSettings.event_id == event.slug)
            )
            overrides = result.scalar_one_or_none()

            dto = event.to_dto()
            if overrides is None:
                return dto
            return merge_event_overrides(dto, overrides.to_overrides())

    async def list_events(self, active_only: bool = False) -> list[EventDTO]:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            query = select(Event).order_by(Event.created_at.desc())
            if active_only:
                query = query.where(Event.is_active.is_(True))
            events = (await session.execute(query)).scalars().all()

            result = await session.execute(select(EventSettings))
            overrides = {row.event_id: row.to_overrides() for row in result.scalars().all()}

            return [
                merge_event_overrides(event.to_dto(), overrides[event.slug])
                if event.slug in overrides
                else event.to_dto()
                for event in events
            ]

    async def get_events_with_pending_reminders(self, now: datetime) -> list[EventDTO]:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(
                select(Event).where(
                    Event.reminder_enabled.is_(True),
                    Event.reminder_sent_at.is_(None),
                    Event.reminder_scheduled_at.is_not(None),
                    Event.reminder_scheduled_at <= now,
                )
            )
            return [event.to_dto() for event in result.scalars().all()]
