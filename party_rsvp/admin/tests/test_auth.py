import pytest
from fastapi import HTTPException

from party_rsvp.admin.auth import ensure_event_access, require_admin
from party_rsvp.admin.dtos import AdminContext
from party_rsvp.config.settings import Settings, get_settings
from party_rsvp.events.urls import ADMIN_EVENT_SETTINGS_URL, EVENT_URL, EVENTS_URL
from party_rsvp.rsvps.tests.inmemory_models import LifecycleHarness
from party_rsvp.rsvps.urls import RSVP_URL, STATS_URL


def overrides(harness: LifecycleHarness, **settings) -> dict:
    """Real HTTP Basic check against the given settings."""
    dependency_overrides = harness.overrides()
    dependency_overrides.pop(require_admin)
    dependency_overrides[get_settings] = lambda: Settings(**settings)
    return dependency_overrides


@pytest.mark.parametrize("url", [RSVP_URL, STATS_URL])
async def test_valid_credentials(client_factory, url):
    harness = LifecycleHarness()

    async with client_factory(overrides(harness, admin_username="host", admin_password="pa55")) as client:
        response = await client.get(url, auth=("host", "pa55"))

    assert response.status_code == 200


@pytest.mark.parametrize(
    "auth",
    [None, ("host", "wrong"), ("guest", "pa55"), ("", "")],
)
async def test_bad_or_missing_credentials(client_factory, auth):
    harness = LifecycleHarness()

    async with client_factory(overrides(harness, admin_username="host", admin_password="pa55")) as client:
        response = await client.get(RSVP_URL, auth=auth)

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Basic"


async def test_rejects_everyone_when_unconfigured(client_factory):
    harness = LifecycleHarness()

    async with client_factory(overrides(harness, admin_username="", admin_password="")) as client:
        response = await client.get(RSVP_URL, auth=("", ""))

    assert response.status_code == 401


async def test_configured_scope_limits_events(client_factory):
    harness = LifecycleHarness()
    settings = {"admin_username": "host", "admin_password": "pa55", "admin_event_scope": ["pool-party"]}

    async with client_factory(overrides(harness, **settings)) as client:
        allowed = await client.get(RSVP_URL, params={"eventId": "pool-party"}, auth=("host", "pa55"))
        denied = await client.get(RSVP_URL, params={"eventId": "rooftop-party"}, auth=("host", "pa55"))

    assert allowed.status_code == 200
    assert denied.status_code == 403


def test_ensure_event_access():
    ensure_event_access(AdminContext(username="host"), "anything")

    with pytest.raises(HTTPException) as exc_info:
        ensure_event_access(AdminContext(username="host", event_scope=("a",)), "b")
    assert exc_info.value.status_code == 403


@pytest.mark.parametrize(
    "method, url",
    [
        ("GET", EVENTS_URL),
        ("POST", EVENTS_URL),
        ("GET", EVENT_URL.format(slug="rooftop-party")),
        ("PUT", EVENT_URL.format(slug="rooftop-party")),
        ("DELETE", EVENT_URL.format(slug="rooftop-party")),
        ("POST", ADMIN_EVENT_SETTINGS_URL),
    ],
)
async def test_event_management_needs_credentials(client_factory, method, url):
    harness = LifecycleHarness()

    async with client_factory(overrides(harness, admin_username="host", admin_password="pa55")) as client:
        response = await client.request(method, url, json={"slug": "x-party", "title": "X", "eventId": "x"})

    assert response.status_code == 401
    assert harness.events["rooftop-party"].is_active is True
