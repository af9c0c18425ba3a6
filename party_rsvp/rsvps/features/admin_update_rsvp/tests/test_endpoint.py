from uuid import uuid4

from party_rsvp.admin.dtos import AdminContext
from party_rsvp.rsvps.tests.inmemory_models import LifecycleHarness
from party_rsvp.rsvps.urls import ADMIN_UPDATE_RSVP_URL


async def test_admin_changes_status_and_email(client_factory):
    harness = LifecycleHarness()
    rsvp = await harness.add_guest("Ana", "ana@example.com")
    emails_before = len(harness.email_service.sent)

    async with client_factory(harness.overrides()) as client:
        response = await client.post(
            ADMIN_UPDATE_RSVP_URL,
            json={"rsvpId": str(rsvp.id), "updates": {"status": "cancelled", "email": "Ana2@Example.com"}},
        )

    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "RSVP updated"
    assert data["rsvp"]["status"] == "cancelled"
    assert data["rsvp"]["email"] == "ana2@example.com"
    assert data["rsvp"]["name"] == "Ana"
    assert len(harness.email_service.sent) == emails_before


async def test_admin_update_needs_changes(client_factory):
    harness = LifecycleHarness()
    rsvp = await harness.add_guest("Ana", "ana@example.com")

    async with client_factory(harness.overrides()) as client:
        response = await client.post(ADMIN_UPDATE_RSVP_URL, json={"rsvpId": str(rsvp.id), "updates": {}})

    assert response.status_code == 400
    assert response.json()["detail"] == "No changes given"


async def test_admin_update_validates_body(client_factory):
    harness = LifecycleHarness()
    rsvp = await harness.add_guest("Ana", "ana@example.com")

    async with client_factory(harness.overrides()) as client:
        bad_email = await client.post(
            ADMIN_UPDATE_RSVP_URL, json={"rsvpId": str(rsvp.id), "updates": {"email": "nope"}}
        )
        bad_status = await client.post(
            ADMIN_UPDATE_RSVP_URL, json={"rsvpId": str(rsvp.id), "updates": {"status": "maybe"}}
        )

    assert bad_email.status_code == 400
    assert bad_status.status_code == 400


async def test_admin_update_unknown_rsvp(client_factory):
    harness = LifecycleHarness()

    async with client_factory(harness.overrides()) as client:
        response = await client.post(ADMIN_UPDATE_RSVP_URL, json={"rsvpId": str(uuid4()), "updates": {"name": "X"}})

    assert response.status_code == 404


async def test_admin_update_to_taken_email(client_factory):
    harness = LifecycleHarness()
    rsvp = await harness.add_guest("Ana", "ana@example.com")
    await harness.add_guest("Beto", "beto@example.com")

    async with client_factory(harness.overrides()) as client:
        response = await client.post(
            ADMIN_UPDATE_RSVP_URL, json={"rsvpId": str(rsvp.id), "updates": {"email": "beto@example.com"}}
        )

    assert response.status_code == 409


async def test_admin_update_outside_scope(client_factory):
    harness = LifecycleHarness()
    rsvp = await harness.add_guest("Ana", "ana@example.com")
    scoped = AdminContext(username="pool-host", event_scope=("pool-party",))

    async with client_factory(harness.overrides(admin=scoped)) as client:
        response = await client.post(ADMIN_UPDATE_RSVP_URL, json={"rsvpId": str(rsvp.id), "updates": {"name": "X"}})

    assert response.status_code == 403
    assert harness.memory[rsvp.id].name == "Ana"
