from fastapi import APIRouter, Depends, Query

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.config.settings import settings
from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel, RSVPResponse
from party_rsvp.rsvps.urls import RSVP_URL

router = APIRouter()


class ListRSVPsResponse(CamelModel):
    success: bool = True
    count: int
    rsvps: list[RSVPResponse]


@router.get(RSVP_URL, response_model=ListRSVPsResponse)
async def list_rsvps(
    event_id: str | None = Query(default=None, alias="eventId"),
    admin: AdminContext = Depends(require_admin),
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> ListRSVPsResponse:
    """All RSVPs of an event, newest first."""
    event_id = event_id or settings.default_event_slug
    ensure_event_access(admin, event_id)

    rsvps = await lifecycle.list_rsvps(admin, event_id)
    return ListRSVPsResponse(count=len(rsvps), rsvps=[RSVPResponse.from_dto(rsvp) for rsvp in rsvps])
