from party_rsvp.rsvps.tests.inmemory_models import LifecycleHarness, make_event
from party_rsvp.rsvps.urls import RSVP_URL

GUEST = {"name": "Ana López", "email": " Ana@Example.com ", "phone": "5512345678", "plusOne": True}


async def test_create_rsvp_sends_confirmation(client_factory):
    harness = LifecycleHarness()

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json=GUEST)

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "RSVP confirmed!"
    assert data["notification"] == {"status": "sent", "error": None}
    rsvp = data["rsvp"]
    assert rsvp["email"] == "ana@example.com"
    assert rsvp["plusOne"] is True
    assert rsvp["status"] == "confirmed"
    assert rsvp["eventId"] == "rooftop-party"
    assert [entry["type"] for entry in rsvp["emailHistory"]] == ["confirmation"]
    assert harness.token_service.verify(rsvp["cancelToken"], rsvp["id"], "ana@example.com")
    assert len(harness.email_service.sent) == 1


async def test_create_rsvp_for_named_event(client_factory):
    harness = LifecycleHarness(events=[make_event(), make_event(slug="pool-party", title="Pool Party")])

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json={**GUEST, "eventSlug": "pool-party"})

    assert response.status_code == 201
    assert response.json()["rsvp"]["eventId"] == "pool-party"


async def test_email_failure_still_creates_rsvp(client_factory):
    harness = LifecycleHarness(failing_emails={"ana@example.com"})

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json=GUEST)

    assert response.status_code == 201
    assert response.json()["notification"] == {
        "status": "failed",
        "error": "Resend rejected the message (HTTP 422)",
    }
    assert len(harness.memory) == 1


async def test_confirmation_disabled_is_skipped(client_factory):
    harness = LifecycleHarness(events=[make_event(email_confirmation_enabled=False)])

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json=GUEST)

    assert response.json()["notification"]["status"] == "skipped"
    assert harness.email_service.sent == []


async def test_duplicate_rsvp_conflicts(client_factory):
    harness = LifecycleHarness()

    async with client_factory(harness.overrides()) as client:
        await client.post(RSVP_URL, json=GUEST)
        response = await client.post(RSVP_URL, json={**GUEST, "email": "ANA@example.com"})

    assert response.status_code == 409
    assert len(harness.memory) == 1


async def test_missing_fields_are_rejected(client_factory):
    harness = LifecycleHarness()

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json={"name": "Ana", "email": "ana@example.com", "phone": "  "})

    assert response.status_code == 400
    assert response.json()["detail"] == "Name, email and phone are required"


async def test_invalid_email_is_rejected(client_factory):
    harness = LifecycleHarness()

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json={**GUEST, "email": "not-an-email"})

    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email address"


async def test_malformed_body_is_a_bad_request(client_factory):
    harness = LifecycleHarness()

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json={**GUEST, "plusOne": [1]})

    assert response.status_code == 400
    assert response.json() == {"detail": "Invalid request body"}


async def test_unknown_event(client_factory):
    harness = LifecycleHarness()

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json={**GUEST, "eventSlug": "nope"})

    assert response.status_code == 404


async def test_inactive_event_is_closed(client_factory):
    harness = LifecycleHarness(events=[make_event(is_active=False)])

    async with client_factory(harness.overrides()) as client:
        response = await client.post(RSVP_URL, json=GUEST)

    assert response.status_code == 400
    assert response.json()["detail"] == "This event is no longer accepting RSVPs"
    assert harness.memory == {}
