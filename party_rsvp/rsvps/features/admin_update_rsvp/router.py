from fastapi import APIRouter, Depends, HTTPException
from pydantic import EmailStr

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.dtos import (
    DuplicateGuestError,
    InvalidRSVPError,
    RSVPNotFoundError,
    RSVPStatus,
    RSVPUpdateDTO,
)
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel, RSVPResponse
from party_rsvp.rsvps.urls import ADMIN_UPDATE_RSVP_URL

router = APIRouter()


class RSVPUpdates(CamelModel):
    name: str | None = None
    email: EmailStr | None = None
    phone: str | None = None
    plus_one: bool | None = None
    status: RSVPStatus | None = None


class AdminUpdateRSVPRequest(CamelModel):
    rsvp_id: str
    updates: RSVPUpdates


class AdminUpdateRSVPResponse(CamelModel):
    success: bool = True
    message: str
    rsvp: RSVPResponse


@router.post(ADMIN_UPDATE_RSVP_URL, response_model=AdminUpdateRSVPResponse)
async def admin_update_rsvp(
    request: AdminUpdateRSVPRequest,
    admin: AdminContext = Depends(require_admin),
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> AdminUpdateRSVPResponse:
    """Edit any field of an RSVP, including its status. No email is sent."""
    changes = RSVPUpdateDTO(
        name=request.updates.name,
        email=request.updates.email,
        phone=request.updates.phone,
        plus_one=request.updates.plus_one,
        status=request.updates.status,
    )

    try:
        rsvp = await lifecycle.get_rsvp(admin, request.rsvp_id)
        ensure_event_access(admin, rsvp.event_id)
        updated = await lifecycle.admin_update(admin, rsvp.id, changes)
    except RSVPNotFoundError:
        raise HTTPException(status_code=404, detail="RSVP not found")
    except InvalidRSVPError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except DuplicateGuestError:
        raise HTTPException(status_code=409, detail="That email already has an RSVP for this event")

    return AdminUpdateRSVPResponse(message="RSVP updated", rsvp=RSVPResponse.from_dto(updated))
