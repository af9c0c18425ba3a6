import re
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from uuid import UUID


class EventNotFoundError(Exception):
    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"Event '{slug}' not found")


class EventAlreadyExistsError(Exception):
    def __init__(self, slug: str) -> None:
        self.slug = slug
        super().__init__(f"An event with slug '{slug}' already exists")


class InvalidEventError(Exception):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


# URL friendly: lowercase letters, digits and dashes
SLUG_PATTERN = re.compile(r"^[a-z0-9-]+$")


DEFAULT_THEME = {
    "primary_color": "#FF1493",
    "secondary_color": "#00FFFF",
    "accent_color": "#FFD700",
    "background_color": "#1a0033",
    "text_color": "#ffffff",
}


@dataclass(frozen=True)
class ThemeDTO:
    primary_color: str = DEFAULT_THEME["primary_color"]
    secondary_color: str = DEFAULT_THEME["secondary_color"]
    accent_color: str = DEFAULT_THEME["accent_color"]
    background_color: str = DEFAULT_THEME["background_color"]
    text_color: str = DEFAULT_THEME["text_color"]

    @classmethod
    def from_json(cls, data: dict | None) -> "ThemeDTO":
        data = data or {}
        return cls(**{key: data.get(key) or default for key, default in DEFAULT_THEME.items()})

    def to_json(self) -> dict:
        return {key: getattr(self, key) for key in DEFAULT_THEME}


@dataclass(frozen=True)
class EventDTO:
    """An event as guests and emails see it, display overrides applied."""

    id: UUID
    slug: str
    title: str
    subtitle: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    details: str = ""
    background_image_url: str = "/background.png"
    theme: ThemeDTO = field(default_factory=ThemeDTO)
    host_name: str = ""
    host_email: str = ""
    is_active: bool = True
    email_confirmation_enabled: bool = True
    reminder_enabled: bool = False
    reminder_scheduled_at: datetime | None = None
    reminder_sent_at: datetime | None = None


@dataclass(frozen=True)
class EventCreateDTO:
    slug: str
    title: str
    subtitle: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    details: str = ""
    background_image_url: str = "/background.png"
    theme: ThemeDTO = field(default_factory=ThemeDTO)
    host_name: str = ""
    host_email: str = ""
    is_active: bool = True
    email_confirmation_enabled: bool = True
    reminder_scheduled_at: datetime | None = None


@dataclass(frozen=True)
class EventUpdateDTO:
    """Partial update of an event's own fields. None means "keep"."""

    title: str | None = None
    subtitle: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    details: str | None = None
    background_image_url: str | None = None
    theme: ThemeDTO | None = None
    host_name: str | None = None
    host_email: str | None = None
    is_active: bool | None = None
    email_confirmation_enabled: bool | None = None
    reminder_enabled: bool | None = None
    reminder_scheduled_at: datetime | None = None

    def as_values(self) -> dict:
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True)
class EventOverridesDTO:
    """Optional display overrides layered over an event. None means "keep"."""

    title: str | None = None
    subtitle: str | None = None
    date: str | None = None
    time: str | None = None
    location: str | None = None
    details: str | None = None
    background_image_url: str | None = None
    primary_color: str | None = None
    secondary_color: str | None = None
    accent_color: str | None = None


_THEME_OVERRIDES = ("primary_color", "secondary_color", "accent_color")


def merge_event_overrides(event: EventDTO, *overrides: EventOverridesDTO) -> EventDTO:
    """Apply override structs in order; later ones win, None fields are skipped."""
    merged = event
    for override in overrides:
        event_changes = {}
        theme_changes = {}
        for f in fields(override):
            value = getattr(override, f.name)
            if value is None:
                continue
            if f.name in _THEME_OVERRIDES:
                theme_changes[f.name] = value
            else:
                event_changes[f.name] = value
        if theme_changes:
            event_changes["theme"] = replace(merged.theme, **theme_changes)
        merged = replace(merged, **event_changes)
    return merged


def validate_new_event(slug: str, title: str) -> None:
    """Raises InvalidEventError for a missing title or a slug that is not URL friendly."""
    if not slug or not (title or "").strip():
        raise InvalidEventError("Slug and title are required")
    if not SLUG_PATTERN.match(slug):
        raise InvalidEventError("The slug may only contain lowercase letters, numbers and dashes")
