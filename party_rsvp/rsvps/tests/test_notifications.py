from datetime import UTC, datetime
from uuid import UUID

import pytest

from party_rsvp.rsvps.dtos import RSVPDTO, EmailVariant, Language, RSVPStatus
from party_rsvp.rsvps.notifications import NotificationDispatcher, build_cancel_url
from party_rsvp.rsvps.tests.inmemory_models import (
    APP_URL,
    TEST_SECRET,
    InMemoryEmailService,
    make_event,
)
from party_rsvp.rsvps.tokens import CancelTokenService

RSVP = RSVPDTO(
    id=UUID("0b6f9e38-5a0c-4f7e-9d55-3f1c2a4b6d8e"),
    event_id="rooftop-party",
    name="Ana <script>",
    email="ana@example.com",
    phone="5512345678",
    plus_one=True,
    status=RSVPStatus.CONFIRMED,
    created_at=datetime(2025, 2, 1, tzinfo=UTC),
)


def make_dispatcher(email_service, language=Language.ES) -> NotificationDispatcher:
    return NotificationDispatcher(
        email_service=email_service,
        token_service=CancelTokenService(secret=TEST_SECRET),
        app_url=APP_URL,
        language=language,
    )


def test_build_cancel_url():
    url = build_cancel_url("https://party.example.com/", RSVP.id, "abc123")

    assert url == f"https://party.example.com/cancel?rsvpId={RSVP.id}&token=abc123"


async def test_send_calls_transport_once_with_rendered_email():
    email_service = InMemoryEmailService()
    token = CancelTokenService(secret=TEST_SECRET).mint(RSVP.id, RSVP.email)

    result = await make_dispatcher(email_service).send(RSVP, make_event(), EmailVariant.CONFIRMATION)

    assert result.ok
    assert result.email_id == "email-1"
    [email] = email_service.sent
    assert email["rsvp_id"] == RSVP.id
    assert email["subject"] == "Confirmación - Rooftop Party"
    assert f"rsvpId={RSVP.id}&token={token}" in email["text_body"]
    assert "+1 Confirmado" in email["html_body"]
    assert "Terraza Roma Norte" in email["html_body"]
    # Guest input is escaped in the HTML part
    assert "Ana &lt;script&gt;" in email["html_body"]
    assert "<script>" not in email["html_body"]


@pytest.mark.parametrize(
    "variant, subject",
    [
        (EmailVariant.CONFIRMATION, "Confirmation - Rooftop Party"),
        (EmailVariant.REMINDER, "Reminder - Rooftop Party"),
        (EmailVariant.RE_INVITATION, "We miss you - Rooftop Party"),
    ],
)
async def test_send_uses_variant_copy(variant, subject):
    email_service = InMemoryEmailService()

    await make_dispatcher(email_service, Language.EN).send(RSVP, make_event(), variant)

    assert email_service.sent[0]["subject"] == subject
    assert email_service.sent[0]["email_type"] == variant.value


async def test_send_reports_transport_failure_without_raising():
    email_service = InMemoryEmailService(failing={"ana@example.com"})

    result = await make_dispatcher(email_service).send(RSVP, make_event(), EmailVariant.REMINDER)

    assert not result.ok
    assert result.variant == EmailVariant.REMINDER
    assert result.reason == "Resend rejected the message (HTTP 422)"
