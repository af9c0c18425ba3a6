from dataclasses import replace
from datetime import UTC, datetime
from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest
from sqlalchemy.exc import OperationalError

from party_rsvp.events.dtos import EventNotFoundError
from party_rsvp.rsvps.dtos import (
    DuplicateGuestError,
    EmailDispatchError,
    EmailHistoryEntryDTO,
    EmailVariant,
    EventInPastError,
    InvalidRSVPError,
    InvalidTokenError,
    NotificationStatus,
    RSVPDTO,
    RSVPNotFoundError,
    RSVPStatus,
    RSVPUpdateDTO,
)
from party_rsvp.rsvps.lifecycle import infer_variant
from party_rsvp.rsvps.tests.inmemory_models import (
    ADMIN,
    APP_URL,
    InMemoryEmailService,
    LifecycleHarness,
    make_event,
)


async def submit(harness: LifecycleHarness, **kwargs):
    values = {"name": "Ana López", "email": "ana@example.com", "phone": "5512345678"}
    values.update(kwargs)
    return await harness.lifecycle.submit_rsvp(**values)


# Creation


async def test_submit_creates_confirmed_rsvp_with_verifiable_token():
    harness = LifecycleHarness(events=[make_event(email_confirmation_enabled=False)])

    created = await submit(harness)

    rsvp = created.rsvp
    assert rsvp.status == RSVPStatus.CONFIRMED
    assert rsvp.event_id == "rooftop-party"
    assert rsvp.email_history == ()
    assert rsvp.email_sent is None
    assert harness.token_service.verify(rsvp.cancel_token, rsvp.id, rsvp.email)
    assert created.notification_status == NotificationStatus.SKIPPED
    assert harness.email_service.sent == []


async def test_submit_sends_and_records_confirmation():
    harness = LifecycleHarness()

    created = await submit(harness)

    assert created.notification_status == NotificationStatus.SENT
    assert [entry.type for entry in created.rsvp.email_history] == [EmailVariant.CONFIRMATION]
    assert created.rsvp.email_sent == created.rsvp.email_history[-1].sent_at

    [email] = harness.email_service.sent
    assert email["to_address"] == "ana@example.com"
    assert email["email_type"] == "confirmation"
    assert email["subject"] == "Confirmación - Rooftop Party"


async def test_confirmation_link_carries_id_and_token():
    harness = LifecycleHarness()

    created = await submit(harness)

    [email] = harness.email_service.sent
    link = next(word for word in email["text_body"].split() if word.startswith(APP_URL))
    query = parse_qs(urlparse(link).query)
    assert urlparse(link).path == "/cancel"
    assert query["rsvpId"] == [str(created.rsvp.id)]
    assert harness.token_service.verify(query["token"][0], created.rsvp.id, "ana@example.com")


async def test_submit_normalizes_email_and_strips_fields():
    harness = LifecycleHarness()

    created = await submit(harness, name="  Ana  ", email="  Ana@Example.COM ", phone=" 55 ")

    assert created.rsvp.name == "Ana"
    assert created.rsvp.email == "ana@example.com"
    assert created.rsvp.phone == "55"


@pytest.mark.parametrize(
    "field, value",
    [("name", ""), ("name", "   "), ("email", None), ("phone", "")],
)
async def test_submit_requires_name_email_and_phone(field, value):
    harness = LifecycleHarness()

    with pytest.raises(InvalidRSVPError):
        await submit(harness, **{field: value})

    assert harness.memory == {}


@pytest.mark.parametrize("email", ["ana", "ana@example", "ana @example.com", "@example.com"])
async def test_submit_rejects_malformed_email(email):
    harness = LifecycleHarness()

    with pytest.raises(InvalidRSVPError, match="Invalid email"):
        await submit(harness, email=email)


async def test_submit_to_unknown_event():
    harness = LifecycleHarness()

    with pytest.raises(EventNotFoundError):
        await submit(harness, event_slug="no-such-party")


async def test_submit_to_inactive_event_is_rejected():
    harness = LifecycleHarness(events=[make_event(is_active=False)])

    with pytest.raises(InvalidRSVPError):
        await submit(harness)

    assert harness.memory == {}
    assert harness.email_service.sent == []


async def test_duplicate_submit_fails_and_keeps_original():
    harness = LifecycleHarness()
    original = (await submit(harness)).rsvp

    with pytest.raises(DuplicateGuestError):
        await submit(harness, name="Someone Else", email="ANA@example.com", phone="000")

    assert list(harness.memory.values()) == [original]
    assert len(harness.email_service.sent) == 1


async def test_email_failure_does_not_fail_creation():
    harness = LifecycleHarness(failing_emails={"ana@example.com"})

    created = await submit(harness)

    assert created.notification_status == NotificationStatus.FAILED
    assert "422" in created.notification_error
    assert harness.memory[created.rsvp.id].email_history == ()


class BrokenEmailLogService(InMemoryEmailService):
    async def send_email(self, **kwargs):
        raise OperationalError("INSERT INTO email_logs", {}, Exception("database is locked"))


async def test_unexpected_send_error_does_not_fail_creation():
    harness = LifecycleHarness()
    harness.dispatcher.email_service = BrokenEmailLogService()

    created = await submit(harness)

    assert created.notification_status == NotificationStatus.FAILED
    assert created.notification_error == "Confirmation email could not be sent"
    assert list(harness.memory) == [created.rsvp.id]
    assert harness.memory[created.rsvp.id].email_history == ()


async def test_no_confirmation_for_past_event():
    harness = LifecycleHarness(events=[make_event(date="2024-12-31", time="22:00")])

    created = await submit(harness)

    assert created.notification_status == NotificationStatus.SKIPPED
    assert harness.email_service.sent == []


async def test_unparseable_event_date_does_not_block_confirmation():
    harness = LifecycleHarness(events=[make_event(date="Próximamente", time="")])

    created = await submit(harness)

    assert created.notification_status == NotificationStatus.SENT


# Guest self-service


async def test_cancel_with_valid_token():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    cancelled = await harness.lifecycle.cancel_for_guest(str(rsvp.id), rsvp.cancel_token)

    assert cancelled.status == RSVPStatus.CANCELLED
    assert len(harness.email_service.sent) == 1


async def test_cancel_with_bad_token_is_forbidden_not_missing():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    with pytest.raises(InvalidTokenError):
        await harness.lifecycle.cancel_for_guest(rsvp.id, "0" * 32)

    assert harness.memory[rsvp.id].status == RSVPStatus.CONFIRMED


@pytest.mark.parametrize("rsvp_id", [uuid4(), "not-a-uuid"])
async def test_cancel_unknown_rsvp(rsvp_id):
    harness = LifecycleHarness()

    with pytest.raises(RSVPNotFoundError):
        await harness.lifecycle.cancel_for_guest(rsvp_id, "0" * 32)


async def test_cancel_then_reconfirm_keeps_contact_details():
    harness = LifecycleHarness()
    rsvp = (await submit(harness, plus_one=True)).rsvp

    await harness.lifecycle.cancel_for_guest(rsvp.id, rsvp.cancel_token)
    reconfirmed = await harness.lifecycle.update_for_guest(
        rsvp.id,
        rsvp.cancel_token,
        name=rsvp.name,
        email=rsvp.email,
        phone=rsvp.phone,
        plus_one=rsvp.plus_one,
        reconfirm=True,
    )

    assert reconfirmed.status == RSVPStatus.CONFIRMED
    assert (reconfirmed.name, reconfirmed.email, reconfirmed.phone, reconfirmed.plus_one) == (
        rsvp.name,
        rsvp.email,
        rsvp.phone,
        rsvp.plus_one,
    )
    # Status changes never send email
    assert len(harness.email_service.sent) == 1


async def test_update_without_reconfirm_keeps_status():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp
    await harness.lifecycle.cancel_for_guest(rsvp.id, rsvp.cancel_token)

    updated = await harness.lifecycle.update_for_guest(
        rsvp.id, rsvp.cancel_token, name="Ana María", email=rsvp.email, phone=rsvp.phone
    )

    assert updated.status == RSVPStatus.CANCELLED
    assert updated.name == "Ana María"


async def test_email_change_issues_new_token_and_retires_old_one():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    updated = await harness.lifecycle.update_for_guest(
        rsvp.id, rsvp.cancel_token, name=rsvp.name, email="Ana.New@Example.com", phone=rsvp.phone
    )

    assert updated.email == "ana.new@example.com"
    assert updated.cancel_token != rsvp.cancel_token
    assert await harness.lifecycle.get_for_guest(rsvp.id, updated.cancel_token)
    with pytest.raises(InvalidTokenError):
        await harness.lifecycle.get_for_guest(rsvp.id, rsvp.cancel_token)


async def test_update_to_an_email_already_registered():
    harness = LifecycleHarness()
    ana = (await submit(harness)).rsvp
    await submit(harness, name="Beto", email="beto@example.com")

    with pytest.raises(DuplicateGuestError):
        await harness.lifecycle.update_for_guest(
            ana.id, ana.cancel_token, name=ana.name, email="beto@example.com", phone=ana.phone
        )


async def test_update_validates_fields():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    with pytest.raises(InvalidRSVPError):
        await harness.lifecycle.update_for_guest(
            rsvp.id, rsvp.cancel_token, name="", email=rsvp.email, phone=rsvp.phone
        )


# Admin


def test_infer_variant():
    sent_at = datetime.now(UTC)
    fresh = RSVPDTO(
        id=uuid4(),
        event_id="rooftop-party",
        name="Ana",
        email="ana@example.com",
        phone="55",
        plus_one=False,
        status=RSVPStatus.CONFIRMED,
        created_at=sent_at,
    )
    emailed = replace(
        fresh,
        email_sent=sent_at,
        email_history=(EmailHistoryEntryDTO(sent_at=sent_at, type=EmailVariant.CONFIRMATION),),
    )
    cancelled = replace(emailed, status=RSVPStatus.CANCELLED)

    assert infer_variant(fresh) == EmailVariant.CONFIRMATION
    assert infer_variant(emailed) == EmailVariant.REMINDER
    assert infer_variant(cancelled) == EmailVariant.RE_INVITATION


async def test_admin_send_picks_variant_from_state():
    harness = LifecycleHarness(events=[make_event(email_confirmation_enabled=False)])
    rsvp = (await submit(harness)).rsvp

    first = await harness.lifecycle.admin_send_email(ADMIN, rsvp.id)
    second = await harness.lifecycle.admin_send_email(ADMIN, rsvp.id)
    await harness.lifecycle.cancel_for_guest(rsvp.id, rsvp.cancel_token)
    third = await harness.lifecycle.admin_send_email(ADMIN, rsvp.id)

    assert [first.variant, second.variant, third.variant] == [
        EmailVariant.CONFIRMATION,
        EmailVariant.REMINDER,
        EmailVariant.RE_INVITATION,
    ]
    assert first.email_id == "email-1"
    assert len(third.rsvp.email_history) == 3
    assert [email["subject"] for email in harness.email_service.sent] == [
        "Confirmación - Rooftop Party",
        "Recordatorio - Rooftop Party",
        "Te extrañamos - Rooftop Party",
    ]


async def test_admin_send_grows_history_by_one():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    sent = await harness.lifecycle.admin_send_email(ADMIN, rsvp.id)

    assert len(sent.rsvp.email_history) == len(rsvp.email_history) + 1
    assert sent.rsvp.email_sent == sent.rsvp.email_history[-1].sent_at


async def test_admin_send_is_blocked_for_past_event():
    harness = LifecycleHarness(events=[make_event(date="1 de Enero 2025")])
    rsvp = (await submit(harness)).rsvp
    before = len(harness.email_service.sent)

    with pytest.raises(EventInPastError):
        await harness.lifecycle.admin_send_email(ADMIN, rsvp.id)

    assert len(harness.email_service.sent) == before


async def test_admin_send_surfaces_dispatch_failure():
    harness = LifecycleHarness(failing_emails={"ana@example.com"})
    rsvp = (await submit(harness)).rsvp

    with pytest.raises(EmailDispatchError):
        await harness.lifecycle.admin_send_email(ADMIN, rsvp.id)

    assert harness.memory[rsvp.id].email_history == ()


async def test_admin_send_unknown_rsvp():
    harness = LifecycleHarness()

    with pytest.raises(RSVPNotFoundError):
        await harness.lifecycle.admin_send_email(ADMIN, uuid4())


async def test_admin_update_changes_status_without_token():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    updated = await harness.lifecycle.admin_update(ADMIN, rsvp.id, RSVPUpdateDTO(status=RSVPStatus.CANCELLED))

    assert updated.status == RSVPStatus.CANCELLED
    assert updated.name == rsvp.name


async def test_admin_update_normalizes_email():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    updated = await harness.lifecycle.admin_update(ADMIN, rsvp.id, RSVPUpdateDTO(email=" NEW@Example.com"))

    assert updated.email == "new@example.com"


async def test_admin_update_without_changes():
    harness = LifecycleHarness()
    rsvp = (await submit(harness)).rsvp

    with pytest.raises(InvalidRSVPError):
        await harness.lifecycle.admin_update(ADMIN, rsvp.id, RSVPUpdateDTO())


async def test_bulk_send_counts_successes_and_failures():
    harness = LifecycleHarness(failing_emails={"beto@example.com"})
    ana = (await submit(harness)).rsvp
    beto = (await submit(harness, name="Beto", email="beto@example.com")).rsvp
    missing = uuid4()

    result = await harness.lifecycle.admin_send_bulk(ADMIN, "rooftop-party", [ana.id, beto.id, missing])

    assert (result.sent, result.failed) == (1, 2)
    assert len(result.errors) == 2
    assert str(missing) in result.errors[1]
    # Delay between sends, not before the first
    assert harness.sleeps == [0.1, 0.1]
    assert len(harness.memory[ana.id].email_history) == 2
    assert harness.memory[beto.id].email_history == ()


async def test_bulk_send_skips_rsvps_of_other_events():
    other = make_event(slug="other-party", title="Other Party")
    harness = LifecycleHarness(events=[make_event(), other])
    stranger = (await submit(harness, event_slug="other-party")).rsvp

    result = await harness.lifecycle.admin_send_bulk(ADMIN, "rooftop-party", [stranger.id])

    assert (result.sent, result.failed) == (0, 1)


async def test_bulk_send_blocked_for_past_event():
    harness = LifecycleHarness(events=[make_event(date="2024-06-01")])
    rsvp = (await submit(harness)).rsvp

    with pytest.raises(EventInPastError):
        await harness.lifecycle.admin_send_bulk(ADMIN, "rooftop-party", [rsvp.id])


async def test_list_and_stats():
    harness = LifecycleHarness()
    ana = (await submit(harness)).rsvp
    beto = (await submit(harness, name="Beto", email="beto@example.com")).rsvp
    await harness.lifecycle.cancel_for_guest(ana.id, ana.cancel_token)

    rsvps = await harness.lifecycle.list_rsvps(ADMIN, "rooftop-party")
    stats = await harness.lifecycle.get_stats(ADMIN, "rooftop-party")

    assert [rsvp.id for rsvp in rsvps] == [beto.id, ana.id]
    assert (stats.total, stats.confirmed, stats.cancelled) == (2, 1, 1)
