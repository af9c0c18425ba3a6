from fastapi import APIRouter, Depends, HTTPException

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.events.dtos import EventNotFoundError
from party_rsvp.rsvps.dependencies import get_rsvp_lifecycle
from party_rsvp.rsvps.dtos import EventInPastError
from party_rsvp.rsvps.lifecycle import RSVPLifecycleService
from party_rsvp.rsvps.schemas import CamelModel
from party_rsvp.rsvps.urls import ADMIN_SEND_BULK_EMAIL_URL

router = APIRouter()


class SendBulkEmailRequest(CamelModel):
    event_id: str | None = None
    rsvp_ids: list[str] = []


class SendBulkEmailResponse(CamelModel):
    success: bool = True
    message: str
    sent: int
    failed: int
    errors: list[str]


@router.post(ADMIN_SEND_BULK_EMAIL_URL, response_model=SendBulkEmailResponse)
async def send_bulk_email(
    request: SendBulkEmailRequest,
    admin: AdminContext = Depends(require_admin),
    lifecycle: RSVPLifecycleService = Depends(get_rsvp_lifecycle),
) -> SendBulkEmailResponse:
    """
    Send emails one after the other. A failed send does not stop the batch;
    the response counts successes and failures.
    """
    if not request.event_id:
        raise HTTPException(status_code=400, detail="eventId is required")
    if not request.rsvp_ids:
        raise HTTPException(status_code=400, detail="No RSVPs selected")
    ensure_event_access(admin, request.event_id)

    try:
        result = await lifecycle.admin_send_bulk(admin, request.event_id, request.rsvp_ids)
    except EventNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EventInPastError:
        raise HTTPException(status_code=400, detail="The event already took place, no emails are sent")

    return SendBulkEmailResponse(
        success=result.failed == 0,
        message=f"{result.sent} email(s) sent, {result.failed} failed",
        sent=result.sent,
        failed=result.failed,
        errors=result.errors,
    )
