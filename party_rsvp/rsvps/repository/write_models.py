"""RSVP write model - persists guest records and returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from party_rsvp.config.database import async_session_manager
from party_rsvp.rsvps.dtos import (
    DuplicateGuestError,
    EmailHistoryEntryDTO,
    EmailVariant,
    RSVPCreateDTO,
    RSVPDTO,
    RSVPNotFoundError,
    RSVPStatus,
    RSVPUpdateDTO,
)
from party_rsvp.rsvps.repository.orm_models import RSVP
from party_rsvp.rsvps.tokens import CancelTokenService

logger = logging.getLogger(__name__)


class RSVPWriteModel(ABC):
    @abstractmethod
    async def create(self, rsvp_data: RSVPCreateDTO) -> RSVPDTO:
        """Create a confirmed RSVP.

        Raises:
            DuplicateGuestError: the email already has an RSVP for this event
        """
        raise NotImplementedError

    @abstractmethod
    async def update(self, rsvp_id: UUID, changes: RSVPUpdateDTO) -> RSVPDTO:
        """Apply a partial update. No field validation happens here.

        Raises:
            RSVPNotFoundError: no RSVP with this id
            DuplicateGuestError: the new email is already registered for the event
        """
        raise NotImplementedError

    @abstractmethod
    async def record_email_sent(self, rsvp_id: UUID, variant: EmailVariant) -> RSVPDTO:
        """Append one entry to the email history. Call only after a successful send.

        Raises:
            RSVPNotFoundError: no RSVP with this id
        """
        raise NotImplementedError


class SqlRSVPWriteModel(RSVPWriteModel):
    """SQL implementation of RSVP write operations."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        token_service: CancelTokenService,
        session_overwrite: AsyncSession | None = None,
    ) -> None:
        self.token_service = token_service
        self.session_overwrite = session_overwrite

    async def create(self, rsvp_data: RSVPCreateDTO) -> RSVPDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            # 1. Check for an existing RSVP with this email for the event
            existing = await self._get_by_email(session, rsvp_data.event_id, rsvp_data.email)
            if existing is not None:
                raise DuplicateGuestError(rsvp_data.email, rsvp_data.event_id)

            # 2. Insert the confirmed record
            rsvp = RSVP(
                event_id=rsvp_data.event_id,
                name=rsvp_data.name,
                email=rsvp_data.email,
                phone=rsvp_data.phone,
                plus_one=rsvp_data.plus_one,
                status=RSVPStatus.CONFIRMED,
                email_history=[],
            )
            session.add(rsvp)
            await self._flush(session, rsvp_data.email, rsvp_data.event_id)

            # 3. Mint the cancel token from the real id
            rsvp.cancel_token = self.token_service.mint(rsvp.uuid, rsvp.email)
            await session.flush()

            logger.info(f"Created RSVP {rsvp.uuid} for event {rsvp.event_id}")
            return rsvp.to_dto()

    async def update(self, rsvp_id: UUID, changes: RSVPUpdateDTO) -> RSVPDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = await session.get(RSVP, rsvp_id)
            if rsvp is None:
                raise RSVPNotFoundError(rsvp_id)

            values = changes.as_values()
            new_email = values.get("email")
            if new_email is not None and new_email != rsvp.email:
                existing = await self._get_by_email(session, rsvp.event_id, new_email)
                if existing is not None:
                    raise DuplicateGuestError(new_email, rsvp.event_id)

            for key, value in values.items():
                setattr(rsvp, key, value)
            # The stored copy follows the email the token is derived from
            rsvp.cancel_token = self.token_service.mint(rsvp.uuid, rsvp.email)

            await self._flush(session, rsvp.email, rsvp.event_id)
            return rsvp.to_dto()

    async def record_email_sent(self, rsvp_id: UUID, variant: EmailVariant) -> RSVPDTO:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            rsvp = await session.get(RSVP, rsvp_id)
            if rsvp is None:
                raise RSVPNotFoundError(rsvp_id)

            sent_at = datetime.now(UTC)
            entry = EmailHistoryEntryDTO(sent_at=sent_at, type=variant)
            # Reassign so the JSON column is flagged as modified
            rsvp.email_history = [*(rsvp.email_history or []), entry.to_json()]
            rsvp.email_sent = sent_at
            await session.flush()
            return rsvp.to_dto()

    async def _get_by_email(self, session, event_id: str, email: str) -> RSVP | None:
        result = await session.execute(
            select(RSVP).where(RSVP.event_id == event_id, RSVP.email == email).limit(1)
        )
        return result.scalar_one_or_none()

    async def _flush(self, session, email: str, event_id: str) -> None:
        # Two concurrent submissions can both pass the existence check; the
        # unique constraint turns the loser into a duplicate.
        try:
            await session.flush()
        except IntegrityError as e:
            raise DuplicateGuestError(email, event_id) from e
