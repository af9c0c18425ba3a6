from fastapi import APIRouter, Depends, HTTPException

from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.dtos import InvalidTokenError, RSVPNotFoundError
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel, GuestRSVPEnvelope, GuestRSVPResponse
from party_rsvp.rsvps.urls import CANCEL_RSVP_URL

router = APIRouter()


class CancelRSVPRequest(CamelModel):
    rsvp_id: str | None = None
    token: str | None = None


@router.post(CANCEL_RSVP_URL, response_model=GuestRSVPEnvelope)
async def cancel_rsvp(
    request: CancelRSVPRequest,
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> GuestRSVPEnvelope:
    if not request.rsvp_id or not request.token:
        raise HTTPException(status_code=400, detail="rsvpId and token are required")

    try:
        rsvp = await lifecycle.cancel_for_guest(request.rsvp_id, request.token)
    except RSVPNotFoundError:
        raise HTTPException(status_code=404, detail="RSVP not found")
    except InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid or expired token")

    return GuestRSVPEnvelope(
        message="Your RSVP has been cancelled",
        rsvp=GuestRSVPResponse.from_dto(rsvp),
    )
