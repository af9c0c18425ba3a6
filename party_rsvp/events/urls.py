from party_rsvp.rsvps.urls import API_PREFIX

EVENTS_URL = f"{API_PREFIX}/events"
EVENT_URL = f"{API_PREFIX}/events/{{slug}}"

ADMIN_EVENT_SETTINGS_URL = f"{API_PREFIX}/admin/event-settings"
