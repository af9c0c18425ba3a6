"""Response bodies shared by the RSVP endpoints. Keys are camelCase on the wire."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from party_rsvp.rsvps.dtos import EmailVariant, RSVPDTO, RSVPStatsDTO, RSVPStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EmailHistoryEntry(CamelModel):
    sent_at: datetime
    type: EmailVariant


class RSVPResponse(CamelModel):
    """Full record, as organizers see it."""

    id: UUID
    event_id: str
    name: str
    email: str
    phone: str
    plus_one: bool
    status: RSVPStatus
    created_at: datetime
    email_sent: datetime | None = None
    email_history: list[EmailHistoryEntry] = []

    @classmethod
    def from_dto(cls, rsvp: RSVPDTO) -> "RSVPResponse":
        return cls(
            id=rsvp.id,
            event_id=rsvp.event_id,
            name=rsvp.name,
            email=rsvp.email,
            phone=rsvp.phone,
            plus_one=rsvp.plus_one,
            status=rsvp.status,
            created_at=rsvp.created_at,
            email_sent=rsvp.email_sent,
            email_history=[
                EmailHistoryEntry(sent_at=entry.sent_at, type=entry.type) for entry in rsvp.email_history
            ],
        )


class GuestRSVPResponse(CamelModel):
    """What the token holder gets to see of their own RSVP."""

    id: UUID
    event_id: str
    name: str
    email: str
    phone: str
    plus_one: bool
    status: RSVPStatus

    @classmethod
    def from_dto(cls, rsvp: RSVPDTO) -> "GuestRSVPResponse":
        return cls(
            id=rsvp.id,
            event_id=rsvp.event_id,
            name=rsvp.name,
            email=rsvp.email,
            phone=rsvp.phone,
            plus_one=rsvp.plus_one,
            status=rsvp.status,
        )


class GuestRSVPEnvelope(CamelModel):
    success: bool = True
    message: str | None = None
    rsvp: GuestRSVPResponse


class StatsResponse(CamelModel):
    total: int
    confirmed: int
    cancelled: int

    @classmethod
    def from_dto(cls, stats: RSVPStatsDTO) -> "StatsResponse":
        return cls(total=stats.total, confirmed=stats.confirmed, cancelled=stats.cancelled)
