"""RSVP lifecycle: the guest and organizer operations on an RSVP.

An RSVP is either ``confirmed`` or ``cancelled``. Guests move between the two
with their emailed token; organizers do it directly. Emails are a side effect
of creation and of explicit admin sends, and are recorded only after the
transport accepted them.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable, Iterable
from datetime import UTC, datetime
from uuid import UUID

from party_rsvp.admin.dtos import AdminContext
from party_rsvp.config.settings import settings
from party_rsvp.events.dtos import EventDTO, EventNotFoundError
from party_rsvp.events.event_dates import is_event_in_past
from party_rsvp.events.repository.read_models import EventReadModel
from party_rsvp.rsvps.dtos import (
    BulkSendResultDTO,
    DispatchResultDTO,
    EmailDispatchError,
    EmailSentDTO,
    EmailVariant,
    EventInPastError,
    InvalidRSVPError,
    InvalidTokenError,
    NotificationStatus,
    RSVPCreateDTO,
    RSVPCreatedDTO,
    RSVPDTO,
    RSVPNotFoundError,
    RSVPStatsDTO,
    RSVPStatus,
    RSVPUpdateDTO,
)
from party_rsvp.rsvps.notifications import NotificationDispatcher
from party_rsvp.rsvps.repository.read_models import RSVPReadModel
from party_rsvp.rsvps.repository.write_models import RSVPWriteModel
from party_rsvp.rsvps.tokens import CancelTokenService

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CONFIRMATION_UNAVAILABLE = "Confirmation email could not be sent"


def utcnow() -> datetime:
    return datetime.now(UTC)


def infer_variant(rsvp: RSVPDTO) -> EmailVariant:
    if rsvp.is_cancelled:
        return EmailVariant.RE_INVITATION
    if rsvp.email_sent is None and not rsvp.email_history:
        return EmailVariant.CONFIRMATION
    return EmailVariant.REMINDER


def parse_rsvp_id(rsvp_id: UUID | str) -> UUID:
    """Ids come from links and query strings; anything malformed cannot exist."""
    if isinstance(rsvp_id, UUID):
        return rsvp_id
    try:
        return UUID(str(rsvp_id))
    except ValueError:
        raise RSVPNotFoundError(rsvp_id) from None


def normalize_email(email: str) -> str:
    return email.strip().lower()


def validate_guest_fields(name: str | None, email: str | None, phone: str | None) -> tuple[str, str, str]:
    """Strip and check the contact fields every guest must give.

    Raises:
        InvalidRSVPError: a field is missing or blank, or the email is malformed
    """
    name = (name or "").strip()
    email = normalize_email(email or "")
    phone = (phone or "").strip()
    if not name or not email or not phone:
        raise InvalidRSVPError("Name, email and phone are required")
    if not EMAIL_PATTERN.match(email):
        raise InvalidRSVPError("Invalid email address")
    return name, email, phone


class RSVPLifecycleService:
    def __init__(
        self,
        read_model: RSVPReadModel,
        write_model: RSVPWriteModel,
        dispatcher: NotificationDispatcher,
        token_service: CancelTokenService,
        event_read_model: EventReadModel,
        clock: Callable[[], datetime] = utcnow,
        bulk_send_delay: float = settings.bulk_send_delay_seconds,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.read_model = read_model
        self.write_model = write_model
        self.dispatcher = dispatcher
        self.token_service = token_service
        self.event_read_model = event_read_model
        self.clock = clock
        self.bulk_send_delay = bulk_send_delay
        self.sleep = sleep

    # Guest operations

    async def submit_rsvp(
        self,
        name: str,
        email: str,
        phone: str,
        plus_one: bool = False,
        event_slug: str | None = None,
    ) -> RSVPCreatedDTO:
        """Create a confirmed RSVP and send the confirmation email, best effort.

        Raises:
            InvalidRSVPError: bad guest input or the event is not accepting RSVPs
            EventNotFoundError: unknown event
            DuplicateGuestError: the email already has an RSVP for the event
        """
        name, email, phone = validate_guest_fields(name, email, phone)
        event = await self._get_event(event_slug or settings.default_event_slug)
        if not event.is_active:
            raise InvalidRSVPError("This event is no longer accepting RSVPs")

        rsvp = await self.write_model.create(
            RSVPCreateDTO(event_id=event.slug, name=name, email=email, phone=phone, plus_one=plus_one)
        )

        if not event.email_confirmation_enabled:
            return RSVPCreatedDTO(rsvp=rsvp, notification_status=NotificationStatus.SKIPPED)
        if self._is_past(event):
            logger.info(f"Skipping confirmation for RSVP {rsvp.id}: event {event.slug} already took place")
            return RSVPCreatedDTO(rsvp=rsvp, notification_status=NotificationStatus.SKIPPED)

        try:
            result = await self.dispatcher.send(rsvp, event, EmailVariant.CONFIRMATION)
        except Exception as e:
            logger.exception(f"Unexpected error sending confirmation for RSVP {rsvp.id}: {e!r}")
            result = DispatchResultDTO(
                ok=False, variant=EmailVariant.CONFIRMATION, reason=CONFIRMATION_UNAVAILABLE
            )
        if not result.ok:
            # The guest is registered either way
            logger.warning(f"RSVP {rsvp.id} created but confirmation email failed: {result.reason}")
            return RSVPCreatedDTO(
                rsvp=rsvp,
                notification_status=NotificationStatus.FAILED,
                notification_error=result.reason,
            )

        rsvp = await self.write_model.record_email_sent(rsvp.id, EmailVariant.CONFIRMATION)
        return RSVPCreatedDTO(rsvp=rsvp, notification_status=NotificationStatus.SENT)

    async def get_for_guest(self, rsvp_id: UUID | str, token: str) -> RSVPDTO:
        return await self._get_verified(rsvp_id, token)

    async def cancel_for_guest(self, rsvp_id: UUID | str, token: str) -> RSVPDTO:
        rsvp = await self._get_verified(rsvp_id, token)
        updated = await self.write_model.update(rsvp.id, RSVPUpdateDTO(status=RSVPStatus.CANCELLED))
        logger.info(f"RSVP {rsvp.id} cancelled by guest")
        return updated

    async def update_for_guest(
        self,
        rsvp_id: UUID | str,
        token: str,
        name: str,
        email: str,
        phone: str,
        plus_one: bool = False,
        reconfirm: bool = False,
    ) -> RSVPDTO:
        """Edit contact details; with ``reconfirm`` a cancelled RSVP becomes confirmed again.

        A changed email invalidates the old link; the returned DTO carries the new token.
        """
        rsvp = await self._get_verified(rsvp_id, token)
        name, email, phone = validate_guest_fields(name, email, phone)

        changes = RSVPUpdateDTO(
            name=name,
            email=email,
            phone=phone,
            plus_one=plus_one,
            status=RSVPStatus.CONFIRMED if reconfirm else None,
        )
        updated = await self.write_model.update(rsvp.id, changes)
        if reconfirm and rsvp.is_cancelled:
            logger.info(f"RSVP {rsvp.id} reconfirmed by guest")
        return updated

    # Admin operations. Callers pass a context that is already authorized.

    async def list_rsvps(self, admin: AdminContext, event_id: str) -> list[RSVPDTO]:
        return await self.read_model.get_by_event(event_id)

    async def get_stats(self, admin: AdminContext, event_id: str) -> RSVPStatsDTO:
        return await self.read_model.compute_stats(event_id)

    async def get_rsvp(self, admin: AdminContext, rsvp_id: UUID | str) -> RSVPDTO:
        rsvp = await self.read_model.get_by_id(parse_rsvp_id(rsvp_id))
        if rsvp is None:
            raise RSVPNotFoundError(rsvp_id)
        return rsvp

    async def admin_update(self, admin: AdminContext, rsvp_id: UUID | str, changes: RSVPUpdateDTO) -> RSVPDTO:
        """Raises InvalidRSVPError when there is nothing to change."""
        if changes.is_empty():
            raise InvalidRSVPError("No changes given")
        if changes.email is not None:
            changes = RSVPUpdateDTO(
                name=changes.name,
                email=normalize_email(changes.email),
                phone=changes.phone,
                plus_one=changes.plus_one,
                status=changes.status,
            )
        updated = await self.write_model.update(parse_rsvp_id(rsvp_id), changes)
        logger.info(f"RSVP {updated.id} updated by {admin.username}")
        return updated

    async def admin_send_email(self, admin: AdminContext, rsvp_id: UUID | str) -> EmailSentDTO:
        """Send the email that fits the RSVP's state.

        Raises:
            RSVPNotFoundError: no such RSVP
            EventNotFoundError: the RSVP points to an unknown event
            EventInPastError: the event already took place
            EmailDispatchError: the transport failed
        """
        rsvp = await self.get_rsvp(admin, rsvp_id)
        event = await self._get_event(rsvp.event_id)
        return await self._send_to(rsvp, event)

    async def admin_send_bulk(
        self,
        admin: AdminContext,
        event_id: str,
        rsvp_ids: Iterable[UUID | str],
    ) -> BulkSendResultDTO:
        """Send one by one; a failure is counted and the batch carries on."""
        event = await self._get_event(event_id)
        if self._is_past(event):
            raise EventInPastError(event.slug)

        result = BulkSendResultDTO()
        for index, rsvp_id in enumerate(rsvp_ids):
            if index:
                await self.sleep(self.bulk_send_delay)
            try:
                rsvp = await self.get_rsvp(admin, rsvp_id)
                if rsvp.event_id != event.slug:
                    raise RSVPNotFoundError(rsvp_id)
                await self._send_to(rsvp, event)
            except (RSVPNotFoundError, EmailDispatchError) as e:
                logger.warning(f"Bulk send to RSVP {rsvp_id} failed: {e}")
                result.failed += 1
                result.errors.append(f"{rsvp_id}: {e}")
            else:
                result.sent += 1

        logger.info(f"Bulk send for {event.slug} by {admin.username}: {result.sent} sent, {result.failed} failed")
        return result

    async def _send_to(self, rsvp: RSVPDTO, event: EventDTO) -> EmailSentDTO:
        if self._is_past(event):
            raise EventInPastError(event.slug)

        variant = infer_variant(rsvp)
        result = await self.dispatcher.send(rsvp, event, variant)
        if not result.ok:
            raise EmailDispatchError(result.reason or "Email could not be sent")

        rsvp = await self.write_model.record_email_sent(rsvp.id, variant)
        return EmailSentDTO(rsvp=rsvp, variant=variant, email_id=result.email_id)

    async def _get_verified(self, rsvp_id: UUID | str, token: str) -> RSVPDTO:
        rsvp = await self.read_model.get_by_id(parse_rsvp_id(rsvp_id))
        if rsvp is None:
            raise RSVPNotFoundError(rsvp_id)
        if not self.token_service.verify(token, rsvp.id, rsvp.email):
            raise InvalidTokenError(rsvp.id)
        return rsvp

    async def _get_event(self, slug_or_id: str) -> EventDTO:
        event = await self.event_read_model.get_event(slug_or_id)
        if event is None:
            raise EventNotFoundError(slug_or_id)
        return event

    def _is_past(self, event: EventDTO) -> bool:
        return is_event_in_past(event.date, event.time, now=self.clock())
