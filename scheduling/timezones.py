import re
from datetime import datetime
from typing import Optional

import pytz

from models import GuildConfig, UserTimezonePreference, db_session
from utils.exceptions import ValidationError, VoidlingError

FALLBACK_TIMEZONE = "UTC"
LOCAL_TIME_FORMAT = "%Y-%m-%d %H:%M"
LOCAL_TIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}")
# discord refuses autocomplete responses with more choices than this
MAX_AUTOCOMPLETE_RESULTS = 25

COMMON_TIMEZONES = (
    "UTC",
    # Americas
    "America/New_York",
    "America/Chicago",
    "America/Denver",
    "America/Los_Angeles",
    "America/Toronto",
    "America/Vancouver",
    "America/Phoenix",
    "America/Anchorage",
    "America/Sao_Paulo",
    "America/Argentina/Buenos_Aires",
    "America/Mexico_City",
    # Europe
    "Europe/London",
    "Europe/Paris",
    "Europe/Berlin",
    "Europe/Amsterdam",
    "Europe/Madrid",
    "Europe/Rome",
    "Europe/Stockholm",
    "Europe/Moscow",
    "Europe/Athens",
    "Europe/Istanbul",
    # Asia
    "Asia/Tokyo",
    "Asia/Shanghai",
    "Asia/Hong_Kong",
    "Asia/Singapore",
    "Asia/Seoul",
    "Asia/Dubai",
    "Asia/Kolkata",
    "Asia/Bangkok",
    "Asia/Jakarta",
    "Asia/Manila",
    # Australia/Pacific
    "Australia/Sydney",
    "Australia/Melbourne",
    "Australia/Brisbane",
    "Australia/Perth",
    "Pacific/Auckland",
    "Pacific/Fiji",
    "Pacific/Honolulu",
)


def validate_timezone(label: Optional[str]) -> str:
    """Check label against the tz database and return its canonical name.

    pytz matches names case-insensitively, so "europe/london" comes back as
    "Europe/London".
    """
    if not label or not label.strip():
        raise ValidationError(VoidlingError.INVALID_TIMEZONE, "timezone cannot be empty")
    try:
        return pytz.timezone(label.strip()).zone
    except pytz.UnknownTimeZoneError as e:
        raise ValidationError(
            VoidlingError.INVALID_TIMEZONE, f"invalid timezone '{label}'"
        ) from e


def is_valid_timezone(label: Optional[str]) -> bool:
    try:
        validate_timezone(label)
    except ValidationError:
        return False
    return True


def resolve_timezone(
    guild_id: Optional[int],
    user_id: Optional[int],
    explicit: Optional[str] = None,
    session=db_session,
) -> str:
    """Pick the zone to interpret a time in.

    Explicit argument, then the user's preference, then the guild default, then
    UTC. Anything missing or no longer valid is skipped without complaint.
    """
    if is_valid_timezone(explicit):
        return validate_timezone(explicit)

    if user_id is not None:
        pref = session.get(UserTimezonePreference, user_id)
        if pref is not None and is_valid_timezone(pref.timezone):
            return validate_timezone(pref.timezone)

    if guild_id is not None:
        guild = session.get(GuildConfig, guild_id)
        if guild is not None and is_valid_timezone(guild.default_timezone):
            return validate_timezone(guild.default_timezone)

    return FALLBACK_TIMEZONE


def parse_local_datetime(text: str, label: str) -> datetime:
    """Read "YYYY-MM-DD HH:MM" as wall-clock time in label, returned in UTC"""
    try:
        zone = pytz.timezone(validate_timezone(label))
    except ValidationError as e:
        raise ValidationError(VoidlingError.INVALID_FORMAT, e.message) from e

    text = (text or "").strip()
    if not LOCAL_TIME_PATTERN.fullmatch(text):
        raise ValidationError(VoidlingError.INVALID_FORMAT, f"'{text}' is not YYYY-MM-DD HH:MM")
    try:
        naive = datetime.strptime(text, LOCAL_TIME_FORMAT)
    except ValueError as e:
        raise ValidationError(VoidlingError.INVALID_FORMAT, str(e)) from e

    return zone.localize(naive).astimezone(pytz.utc)


def search_timezones(query: str) -> list[str]:
    query = (query or "").lower()
    return [tz for tz in COMMON_TIMEZONES if query in tz.lower()][
        :MAX_AUTOCOMPLETE_RESULTS
    ]


def format_in_timezone(instant: datetime, label: str) -> str:
    """e.g. "January 15, 2025 8:00 PM EST", plain UTC if the label is bad"""
    if not is_valid_timezone(label):
        label = FALLBACK_TIMEZONE
    local = instant.astimezone(pytz.timezone(validate_timezone(label)))
    hour = local.hour % 12 or 12
    return f"{local:%B} {local.day}, {local.year} {hour}:{local:%M %p} {local:%Z}"


def discord_timestamp(instant: datetime, style: str = "F") -> str:
    """Render as a <t:...> tag so every reader sees their own local time"""
    return f"<t:{int(instant.timestamp())}:{style}>"
