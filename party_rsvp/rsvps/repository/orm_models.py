from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import Boolean, DateTime, Enum, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from party_rsvp.config.table_names import TableNames
from party_rsvp.models.base import Base, TimeStamp
from party_rsvp.rsvps.dtos import (
    EmailHistoryEntryDTO,
    RSVPDTO,
    RSVPStatus,
)


class RSVP(Base, TimeStamp):
    __tablename__ = TableNames.RSVPS.value
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_rsvps_event_id_email"),)

    # Event slug; not a foreign key so renamed events can be re-pointed in bulk
    event_id: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Guest info
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    plus_one: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    status: Mapped[RSVPStatus] = mapped_column(
        Enum(RSVPStatus, name="rsvp_status_enum", values_callable=lambda x: [e.value for e in x]),
        default=RSVPStatus.CONFIRMED,
        nullable=False,
    )

    # Email tracking
    email_sent: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    email_history: Mapped[list[dict]] = mapped_column(
        sa.JSON().with_variant(JSONB(), "postgresql"), nullable=False, default=list
    )

    # Denormalized copy; tokens are always re-derived when verified
    cancel_token: Mapped[str | None] = mapped_column(String(64), nullable=True)

    def to_dto(self) -> RSVPDTO:
        return RSVPDTO(
            id=self.uuid,
            event_id=self.event_id,
            name=self.name,
            email=self.email,
            phone=self.phone,
            plus_one=bool(self.plus_one),
            status=RSVPStatus(self.status),
            created_at=self.created_at,
            cancel_token=self.cancel_token,
            email_sent=self.email_sent,
            email_history=tuple(
                EmailHistoryEntryDTO.from_json(entry) for entry in (self.email_history or [])
            ),
        )

    def __repr__(self) -> str:
        return f"<RSVP {self.email} for {self.event_id} - {self.status}>"
