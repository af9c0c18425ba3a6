from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from uuid import UUID


class InvalidRSVPError(Exception):
    """Raised when guest input is missing or malformed, or the event is closed."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class DuplicateGuestError(Exception):
    """Raised when an email already has an RSVP for the event."""

    def __init__(self, email: str, event_id: str) -> None:
        self.email = email
        self.event_id = event_id
        super().__init__(f"Email '{email}' already has an RSVP for event '{event_id}'")


class RSVPNotFoundError(Exception):
    def __init__(self, rsvp_id: UUID | str) -> None:
        self.rsvp_id = rsvp_id
        super().__init__(f"RSVP '{rsvp_id}' not found")


class InvalidTokenError(Exception):
    """Raised when a cancel/edit token does not match the RSVP on record."""

    def __init__(self, rsvp_id: UUID | str) -> None:
        self.rsvp_id = rsvp_id
        super().__init__(f"Invalid token for RSVP '{rsvp_id}'")


class EventInPastError(Exception):
    """Raised when an email is requested for an event that already happened."""

    def __init__(self, event_id: str) -> None:
        self.event_id = event_id
        super().__init__(f"Event '{event_id}' already took place")


class EmailDispatchError(Exception):
    """Raised when an explicitly requested email could not be sent."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class RSVPStatus(str, Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class EmailVariant(str, Enum):
    CONFIRMATION = "confirmation"
    REMINDER = "reminder"
    RE_INVITATION = "re-invitation"


class Language(str, Enum):
    EN = "en"
    ES = "es"


class NotificationStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class EmailHistoryEntryDTO:
    sent_at: datetime
    type: EmailVariant

    def to_json(self) -> dict:
        return {"sent_at": self.sent_at.isoformat(), "type": self.type.value}

    @classmethod
    def from_json(cls, data: dict) -> "EmailHistoryEntryDTO":
        return cls(
            sent_at=datetime.fromisoformat(data["sent_at"]),
            type=EmailVariant(data["type"]),
        )


@dataclass(frozen=True)
class RSVPDTO:
    """A guest's attendance record for one event."""

    id: UUID
    event_id: str
    name: str
    email: str
    phone: str
    plus_one: bool
    status: RSVPStatus
    created_at: datetime
    cancel_token: str | None = None
    email_sent: datetime | None = None
    email_history: tuple[EmailHistoryEntryDTO, ...] = ()

    @property
    def is_cancelled(self) -> bool:
        return self.status == RSVPStatus.CANCELLED


@dataclass(frozen=True)
class RSVPCreateDTO:
    event_id: str
    name: str
    email: str
    phone: str
    plus_one: bool = False


@dataclass(frozen=True)
class RSVPUpdateDTO:
    """Partial update; fields left as None are not touched."""

    name: str | None = None
    email: str | None = None
    phone: str | None = None
    plus_one: bool | None = None
    status: RSVPStatus | None = None

    def as_values(self) -> dict:
        values = {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "plus_one": self.plus_one,
            "status": self.status,
        }
        return {key: value for key, value in values.items() if value is not None}

    def is_empty(self) -> bool:
        return not self.as_values()


@dataclass(frozen=True)
class RSVPStatsDTO:
    total: int
    confirmed: int
    cancelled: int


@dataclass(frozen=True)
class DispatchResultDTO:
    """Outcome of a single email send."""

    ok: bool
    variant: EmailVariant
    email_id: str | None = None
    reason: str | None = None


@dataclass(frozen=True)
class RSVPCreatedDTO:
    rsvp: RSVPDTO
    notification_status: NotificationStatus
    notification_error: str | None = None


@dataclass(frozen=True)
class EmailSentDTO:
    rsvp: RSVPDTO
    variant: EmailVariant
    email_id: str | None = None


@dataclass
class BulkSendResultDTO:
    sent: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)


@dataclass
class ReminderRunDTO:
    """What one scheduled reminder run did for one event."""

    event_id: str
    title: str
    sent: int = 0
    failed: int = 0
    skipped: bool = False
    errors: list[str] = field(default_factory=list)
