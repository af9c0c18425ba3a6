API_PREFIX = "/api/v1"

RSVP_URL = f"{API_PREFIX}/rsvp"
CANCEL_RSVP_URL = f"{API_PREFIX}/rsvp/cancel"
GET_RSVP_URL = f"{API_PREFIX}/rsvp/get"
UPDATE_RSVP_URL = f"{API_PREFIX}/rsvp/update"
STATS_URL = f"{API_PREFIX}/stats"

ADMIN_SEND_EMAIL_URL = f"{API_PREFIX}/admin/send-email"
ADMIN_SEND_BULK_EMAIL_URL = f"{API_PREFIX}/admin/send-bulk-email"
ADMIN_UPDATE_RSVP_URL = f"{API_PREFIX}/admin/update-rsvp"

CRON_SEND_REMINDERS_URL = f"{API_PREFIX}/cron/send-reminders"
