from enum import Enum


class TableNames(str, Enum):
    EVENTS = "events"
    EVENT_SETTINGS = "event_settings"
    RSVPS = "rsvps"
    EMAIL_LOGS = "email_logs"
