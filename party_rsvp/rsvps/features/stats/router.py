from fastapi import APIRouter, Depends, Query

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.config.settings import settings
from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel, StatsResponse
from party_rsvp.rsvps.urls import STATS_URL

router = APIRouter()


class EventStatsResponse(CamelModel):
    success: bool = True
    event_id: str
    stats: StatsResponse


@router.get(STATS_URL, response_model=EventStatsResponse)
async def get_stats(
    event_id: str | None = Query(default=None, alias="eventId"),
    admin: AdminContext = Depends(require_admin),
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> EventStatsResponse:
    event_id = event_id or settings.default_event_slug
    ensure_event_access(admin, event_id)

    stats = await lifecycle.get_stats(admin, event_id)
    return EventStatsResponse(event_id=event_id, stats=StatsResponse.from_dto(stats))
