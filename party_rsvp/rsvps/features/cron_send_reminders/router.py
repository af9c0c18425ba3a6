from fastapi import APIRouter, Depends

from party_rsvp.admin.auth import require_cron_secret
from party_rsvp.rsvps.dependencies import get_reminder_service
from party_rsvp.rsvps.reminders import ReminderService
from party_rsvp.rsvps.schemas import CamelModel
from party_rsvp.rsvps.urls import CRON_SEND_REMINDERS_URL

router = APIRouter()


class ReminderRunResponse(CamelModel):
    event_id: str
    title: str
    sent: int
    failed: int
    skipped: bool
    errors: list[str]


class ReminderSummary(CamelModel):
    events: int
    sent: int
    failed: int


class SendRemindersResponse(CamelModel):
    success: bool = True
    message: str
    summary: ReminderSummary
    results: list[ReminderRunResponse]


# Schedulers differ in the method they call with
@router.api_route(
    CRON_SEND_REMINDERS_URL,
    methods=["GET", "POST"],
    response_model=SendRemindersResponse,
    dependencies=[Depends(require_cron_secret)],
)
async def send_reminders(
    reminder_service: ReminderService = Depends(get_reminder_service),
) -> SendRemindersResponse:
    runs = await reminder_service.send_scheduled_reminders()

    summary = ReminderSummary(
        events=len(runs),
        sent=sum(run.sent for run in runs),
        failed=sum(run.failed for run in runs),
    )
    message = "No reminders due" if not runs else f"Reminders processed for {summary.events} event(s)"
    return SendRemindersResponse(
        message=message,
        summary=summary,
        results=[
            ReminderRunResponse(
                event_id=run.event_id,
                title=run.title,
                sent=run.sent,
                failed=run.failed,
                skipped=run.skipped,
                errors=run.errors,
            )
            for run in runs
        ],
    )
