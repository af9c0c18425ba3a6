from fastapi import APIRouter, Depends, HTTPException

from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.dtos import (
    DuplicateGuestError,
    InvalidRSVPError,
    InvalidTokenError,
    RSVPNotFoundError,
)
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel, GuestRSVPResponse
from party_rsvp.rsvps.urls import UPDATE_RSVP_URL

router = APIRouter()


class UpdateRSVPRequest(CamelModel):
    rsvp_id: str | None = None
    token: str | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    plus_one: bool = False
    reconfirm: bool = False


class UpdatedRSVPResponse(GuestRSVPResponse):
    # Only set when the email changed; the old link stops working
    cancel_token: str | None = None


class UpdateRSVPResponse(CamelModel):
    success: bool = True
    message: str
    rsvp: UpdatedRSVPResponse


@router.post(UPDATE_RSVP_URL, response_model=UpdateRSVPResponse)
async def update_rsvp(
    request: UpdateRSVPRequest,
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> UpdateRSVPResponse:
    """Edit contact details and, with `reconfirm`, undo a cancellation."""
    if not request.rsvp_id or not request.token:
        raise HTTPException(status_code=400, detail="rsvpId and token are required")

    try:
        previous = await lifecycle.get_for_guest(request.rsvp_id, request.token)
        rsvp = await lifecycle.update_for_guest(
            rsvp_id=previous.id,
            token=request.token,
            name=request.name,
            email=request.email,
            phone=request.phone,
            plus_one=request.plus_one,
            reconfirm=request.reconfirm,
        )
    except RSVPNotFoundError:
        raise HTTPException(status_code=404, detail="RSVP not found")
    except InvalidTokenError:
        raise HTTPException(status_code=403, detail="Invalid token")
    except InvalidRSVPError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except DuplicateGuestError:
        raise HTTPException(status_code=409, detail="That email already has an RSVP for this event")

    message = "Your attendance is confirmed again" if request.reconfirm else "Your RSVP has been updated"
    return UpdateRSVPResponse(
        message=message,
        rsvp=UpdatedRSVPResponse(
            **GuestRSVPResponse.from_dto(rsvp).model_dump(),
            cancel_token=rsvp.cancel_token if rsvp.email != previous.email else None,
        ),
    )
