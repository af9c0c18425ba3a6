import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

from party_rsvp.config.settings import settings
from party_rsvp.events.event_dates import is_event_in_past
from party_rsvp.events.repository.read_models import EventReadModel
from party_rsvp.events.repository.write_models import EventWriteModel
from party_rsvp.rsvps.dtos import EmailVariant, ReminderRunDTO, RSVPStatus
from party_rsvp.rsvps.lifecycle import utcnow
from party_rsvp.rsvps.notifications import NotificationDispatcher
from party_rsvp.rsvps.repository.read_models import RSVPReadModel
from party_rsvp.rsvps.repository.write_models import RSVPWriteModel

logger = logging.getLogger(__name__)


class ReminderService:
    """Sends the scheduled reminder of every event whose time has come, once."""

    def __init__(
        self,
        event_read_model: EventReadModel,
        event_write_model: EventWriteModel,
        rsvp_read_model: RSVPReadModel,
        rsvp_write_model: RSVPWriteModel,
        dispatcher: NotificationDispatcher,
        bulk_send_delay: float = settings.bulk_send_delay_seconds,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.event_read_model = event_read_model
        self.event_write_model = event_write_model
        self.rsvp_read_model = rsvp_read_model
        self.rsvp_write_model = rsvp_write_model
        self.dispatcher = dispatcher
        self.bulk_send_delay = bulk_send_delay
        self.sleep = sleep

    async def send_scheduled_reminders(self, now: datetime | None = None) -> list[ReminderRunDTO]:
        now = now or utcnow()
        events = await self.event_read_model.get_events_with_pending_reminders(now)
        logger.info(f"{len(events)} event(s) with pending reminders")

        runs = []
        for event in events:
            run = ReminderRunDTO(event_id=event.slug, title=event.title)

            if is_event_in_past(event.date, event.time, now=now):
                logger.info(f"Not sending reminders for {event.slug}: event already took place")
                run.skipped = True
            else:
                rsvps = await self.rsvp_read_model.get_by_event(event.slug)
                confirmed = [rsvp for rsvp in rsvps if rsvp.status == RSVPStatus.CONFIRMED]
                for index, rsvp in enumerate(confirmed):
                    if index:
                        await self.sleep(self.bulk_send_delay)
                    result = await self.dispatcher.send(rsvp, event, EmailVariant.REMINDER)
                    if result.ok:
                        await self.rsvp_write_model.record_email_sent(rsvp.id, EmailVariant.REMINDER)
                        run.sent += 1
                    else:
                        logger.error(f"Reminder to {rsvp.email} for {event.slug} failed: {result.reason}")
                        run.failed += 1
                        run.errors.append(f"{rsvp.email}: {result.reason}")

            # Marked even with nobody to remind so the job does not pick it up again
            await self.event_write_model.mark_reminder_sent(event.id, now)
            logger.info(f"Reminders for {event.slug}: {run.sent} sent, {run.failed} failed")
            runs.append(run)

        return runs
