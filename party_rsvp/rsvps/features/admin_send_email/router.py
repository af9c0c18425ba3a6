from fastapi import APIRouter, Depends, HTTPException

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dtos import EventNotFoundError
from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.dtos import (
    EmailDispatchError,
    EmailVariant,
    EventInPastError,
    RSVPNotFoundError,
)
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel
from party_rsvp.rsvps.urls import ADMIN_SEND_EMAIL_URL

router = APIRouter()


class SendEmailRequest(CamelModel):
    rsvp_id: str | None = None


class SendEmailResponse(CamelModel):
    success: bool = True
    message: str
    email_id: str | None = None
    variant: EmailVariant


@router.post(ADMIN_SEND_EMAIL_URL, response_model=SendEmailResponse)
async def send_email(
    request: SendEmailRequest,
    admin: AdminContext = Depends(require_admin),
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> SendEmailResponse:
    """
    Send the email that fits the guest's state: a confirmation if they never got
    one, a reminder if they did, a re-invitation if they cancelled.
    """
    if not request.rsvp_id:
        raise HTTPException(status_code=400, detail="rsvpId is required")

    try:
        rsvp = await lifecycle.get_rsvp(admin, request.rsvp_id)
        ensure_event_access(admin, rsvp.event_id)
        sent = await lifecycle.admin_send_email(admin, rsvp.id)
    except (RSVPNotFoundError, EventNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EventInPastError:
        raise HTTPException(status_code=400, detail="The event already took place, no emails are sent")
    except EmailDispatchError as e:
        raise HTTPException(status_code=502, detail=f"Error sending email: {e.reason}")

    return SendEmailResponse(
        message="Email sent",
        email_id=sent.email_id,
        variant=sent.variant,
    )
