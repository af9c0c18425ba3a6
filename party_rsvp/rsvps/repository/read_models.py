import abc
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from party_rsvp.config.database import async_session_manager
from party_rsvp.rsvps.dtos import RSVPDTO, RSVPStatsDTO, RSVPStatus
from party_rsvp.rsvps.repository.orm_models import RSVP


def stats_for(rsvps: list[RSVPDTO]) -> RSVPStatsDTO:
    confirmed = sum(1 for rsvp in rsvps if rsvp.status == RSVPStatus.CONFIRMED)
    cancelled = sum(1 for rsvp in rsvps if rsvp.status == RSVPStatus.CANCELLED)
    return RSVPStatsDTO(total=len(rsvps), confirmed=confirmed, cancelled=cancelled)


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_by_id(self, rsvp_id: UUID) -> RSVPDTO | None:
        raise NotImplementedError

    @abc.abstractmethod
    async def get_by_event(self, event_id: str) -> list[RSVPDTO]:
        """All RSVPs of an event, newest first."""
        raise NotImplementedError

    async def compute_stats(self, event_id: str) -> RSVPStatsDTO:
        return stats_for(await self.get_by_event(event_id))


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_by_id(self, rsvp_id: UUID) -> RSVPDTO | None:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = await session.get(RSVP, rsvp_id)
            return rsvp.to_dto() if rsvp else None

    async def get_by_event(self, event_id: str) -> list[RSVPDTO]:
        async with async_session_manager(session_overwrite=self.session_overwrite) as session:
            result = await session.execute(select(RSVP).where(RSVP.event_id == event_id))
            rsvps = [rsvp.to_dto() for rsvp in result.scalars().all()]

        # Sorted here so the query needs no (event_id, created_at) index
        return sorted(rsvps, key=lambda rsvp: rsvp.created_at, reverse=True)
