from fastapi import APIRouter, Depends, HTTPException, status

from party_rsvp.events.dtos import EventNotFoundError
from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.dtos import DuplicateGuestError, InvalidRSVPError, NotificationStatus
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel, RSVPResponse
from party_rsvp.rsvps.urls import RSVP_URL

router = APIRouter()


class CreateRSVPRequest(CamelModel):
    # Presence is checked by the lifecycle so blanks get the same message as missing fields
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    plus_one: bool = False
    event_slug: str | None = None


class NotificationResponse(CamelModel):
    status: NotificationStatus
    error: str | None = None


class CreatedRSVPResponse(RSVPResponse):
    cancel_token: str | None = None


class CreateRSVPResponse(CamelModel):
    success: bool = True
    message: str
    rsvp: CreatedRSVPResponse
    notification: NotificationResponse


@router.post(RSVP_URL, response_model=CreateRSVPResponse, status_code=status.HTTP_201_CREATED)
async def create_rsvp(
    request: CreateRSVPRequest,
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> CreateRSVPResponse:
    """
    Confirm attendance to an event.

    The confirmation email is best effort: when it fails the RSVP still exists
    and `notification.status` says so.
    """
    try:
        created = await lifecycle.submit_rsvp(
            name=request.name,
            email=request.email,
            phone=request.phone,
            plus_one=request.plus_one,
            event_slug=request.event_slug,
        )
    except InvalidRSVPError as e:
        raise HTTPException(status_code=400, detail=e.reason)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except DuplicateGuestError:
        raise HTTPException(status_code=409, detail="You have already confirmed your attendance")

    rsvp = created.rsvp
    return CreateRSVPResponse(
        message="RSVP confirmed!",
        rsvp=CreatedRSVPResponse(
            **RSVPResponse.from_dto(rsvp).model_dump(),
            cancel_token=rsvp.cancel_token,
        ),
        notification=NotificationResponse(
            status=created.notification_status,
            error=created.notification_error,
        ),
    )
