from fastapi import APIRouter, Depends, HTTPException, Query

from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.dtos import InvalidTokenError, RSVPNotFoundError
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import GuestRSVPEnvelope, GuestRSVPResponse
from party_rsvp.rsvps.urls import GET_RSVP_URL

router = APIRouter()


@router.get(GET_RSVP_URL, response_model=GuestRSVPEnvelope, response_model_exclude_none=True)
async def get_rsvp(
    rsvp_id: str | None = Query(default=None, alias="rsvpId"),
    token: str | None = Query(default=None),
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> GuestRSVPEnvelope:
    """Load the guest's own RSVP for the cancel/edit page."""
    if not rsvp_id or not token:
        raise HTTPException(status_code=400, detail="rsvpId and token are required")

    try:
        rsvp = await lifecycle.get_for_guest(rsvp_id, token)
    except RSVPNotFoundError:
        raise HTTPException(status_code=404, detail="RSVP not found")
    except InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid token")

    return GuestRSVPEnvelope(rsvp=GuestRSVPResponse.from_dto(rsvp))
