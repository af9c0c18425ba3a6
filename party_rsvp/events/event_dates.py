"""Best-effort classification of free-text event dates.

Organizers type dates the way they would on an invitation ("Sábado 15 de
Marzo", "Sat, Mar 15 2025", "15/03/2025"), so the date is never exact. The
classifier answers past / future / unknown, and only a confident "past" is
allowed to block anything.
"""

import logging
import re
import unicodedata
from datetime import date, datetime, time, timedelta
from enum import Enum
from zoneinfo import ZoneInfo

from party_rsvp.config.settings import settings

logger = logging.getLogger(__name__)


class EventTiming(str, Enum):
    PAST = "past"
    FUTURE = "future"
    UNKNOWN = "unknown"


MONTHS = {
    # Spanish
    "enero": 1, "ene": 1,
    "febrero": 2, "feb": 2,
    "marzo": 3, "mar": 3,
    "abril": 4, "abr": 4,
    "mayo": 5, "may": 5,
    "junio": 6, "jun": 6,
    "julio": 7, "jul": 7,
    "agosto": 8, "ago": 8,
    "septiembre": 9, "setiembre": 9, "sep": 9, "sept": 9,
    "octubre": 10, "oct": 10,
    "noviembre": 11, "nov": 11,
    "diciembre": 12, "dic": 12,
    # English
    "january": 1, "jan": 1,
    "february": 2,
    "march": 3,
    "april": 4, "apr": 4,
    "june": 6,
    "july": 7,
    "august": 8, "aug": 8,
    "september": 9,
    "october": 10,
    "november": 11,
    "december": 12, "dec": 12,
}

# A yearless date further back than this is taken to be next year's
YEAR_ROLLOVER_WINDOW = timedelta(days=61)

END_OF_DAY = time(23, 59, 59)

ISO_DATE = re.compile(r"\b(\d{4})-(\d{1,2})-(\d{1,2})\b")
NUMERIC_DATE = re.compile(r"\b(\d{1,2})[/.-](\d{1,2})(?:[/.-](\d{2,4}))?\b")
WORDS = re.compile(r"[a-z]+|\d+")
CLOCK = re.compile(r"(\d{1,2})(?::(\d{2}))?\s*(am|pm|hrs|hr|h)?")


def _normalize(text: str) -> str:
    # "Sábado" -> "sabado"
    decomposed = unicodedata.normalize("NFKD", text.lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _parse_date(text: str) -> tuple[int | None, int, int] | None:
    """Return (year or None, month, day) or None when no date is recognizable."""
    iso = ISO_DATE.search(text)
    if iso:
        return int(iso.group(1)), int(iso.group(2)), int(iso.group(3))

    for numeric in NUMERIC_DATE.finditer(text):
        day, month, year = numeric.groups()
        # "10.30" is a clock time, not a date
        if 1 <= int(month) <= 12:
            return _expand_year(year), int(month), int(day)

    tokens = WORDS.findall(text)
    months = [MONTHS[token] for token in tokens if token in MONTHS]
    if not months:
        return None
    # "Mar 15 de Abril": the weekday abbreviation comes first, the month last
    month = months[-1]

    day = next(
        (int(token) for token in tokens if token.isdigit() and len(token) <= 2 and 1 <= int(token) <= 31),
        None,
    )
    if day is None:
        return None
    year = next((int(token) for token in tokens if token.isdigit() and len(token) == 4), None)
    return year, month, day


def _expand_year(year: str | None) -> int | None:
    if not year:
        return None
    if len(year) == 2:
        return 2000 + int(year)
    if len(year) == 4:
        return int(year)
    return None


def parse_event_time(time_text: str) -> time | None:
    """Parse "22:00", "10 PM", "9:30 pm" or "21 hrs". None when nothing usable is found."""
    if not time_text:
        return None
    match = CLOCK.search(_normalize(time_text).replace(".", ""))
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = match.group(3)
    if meridiem == "pm" and hour < 12:
        hour += 12
    elif meridiem == "am" and hour == 12:
        hour = 0

    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def classify_event_date(
    date_text: str,
    time_text: str = "",
    now: datetime | None = None,
    tz: ZoneInfo | None = None,
) -> EventTiming:
    tz = tz or ZoneInfo(settings.event_timezone)
    if now is None:
        now = datetime.now(tz)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=tz)
    else:
        now = now.astimezone(tz)

    if not date_text or not date_text.strip():
        return EventTiming.UNKNOWN

    parsed = _parse_date(_normalize(date_text))
    if parsed is None:
        return EventTiming.UNKNOWN

    year, month, day = parsed
    at = parse_event_time(time_text) or END_OF_DAY
    try:
        if year is not None:
            moment = datetime.combine(date(year, month, day), at, tzinfo=tz)
        else:
            moment = datetime.combine(date(now.year, month, day), at, tzinfo=tz)
            if moment < now - YEAR_ROLLOVER_WINDOW:
                moment = datetime.combine(date(now.year + 1, month, day), at, tzinfo=tz)
    except ValueError:
        # 31/02, or 29 Feb in a non-leap year
        logger.debug(f"Unparseable event date {date_text!r}")
        return EventTiming.UNKNOWN

    return EventTiming.PAST if moment < now else EventTiming.FUTURE


def is_event_in_past(date_text: str, time_text: str = "", now: datetime | None = None) -> bool:
    """Only a confident "past" counts; unknown dates never block sends."""
    return classify_event_date(date_text, time_text, now=now) == EventTiming.PAST
