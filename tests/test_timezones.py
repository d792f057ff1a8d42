from datetime import datetime

import pytest
import pytz

from models import GuildConfig, UserTimezonePreference
from scheduling.timezones import (
    COMMON_TIMEZONES,
    discord_timestamp,
    format_in_timezone,
    parse_local_datetime,
    resolve_timezone,
    search_timezones,
    validate_timezone,
)
from utils.exceptions import ValidationError, VoidlingError

GUILD = 42
USER = 1000


@pytest.mark.parametrize(
    "label", ["UTC", "America/New_York", "Europe/London", "Asia/Tokyo"]
)
def test_validate_known_zones(label):
    assert validate_timezone(label) == label


def test_validate_returns_canonical_name():
    assert validate_timezone("europe/london") == "Europe/London"


@pytest.mark.parametrize("label", ["", "   ", None, "Mars/Olympus_Mons", "EST5"])
def test_validate_rejects(label):
    with pytest.raises(ValidationError) as e:
        validate_timezone(label)
    assert e.value.err == VoidlingError.INVALID_TIMEZONE


def test_resolve_explicit_wins(database):
    database.add(GuildConfig(guild_id=GUILD, default_timezone="Europe/London"))
    database.add(UserTimezonePreference(discord_user_id=USER, timezone="Asia/Tokyo"))
    database.commit()

    assert resolve_timezone(GUILD, USER, "America/New_York", database) == "America/New_York"


def test_resolve_falls_back_to_user_preference(database):
    database.add(GuildConfig(guild_id=GUILD, default_timezone="Europe/London"))
    database.add(UserTimezonePreference(discord_user_id=USER, timezone="Asia/Tokyo"))
    database.commit()

    assert resolve_timezone(GUILD, USER, "", database) == "Asia/Tokyo"


def test_resolve_invalid_explicit_is_skipped(database):
    database.add(UserTimezonePreference(discord_user_id=USER, timezone="Asia/Tokyo"))
    database.commit()

    assert resolve_timezone(GUILD, USER, "Not/AZone", database) == "Asia/Tokyo"


def test_resolve_falls_back_to_guild_default(database):
    database.add(GuildConfig(guild_id=GUILD, default_timezone="Europe/London"))
    database.commit()

    assert resolve_timezone(GUILD, USER, None, database) == "Europe/London"


def test_resolve_skips_stale_stored_values(database):
    database.add(GuildConfig(guild_id=GUILD, default_timezone="Old/Zone"))
    database.add(UserTimezonePreference(discord_user_id=USER, timezone="Gone/Away"))
    database.commit()

    assert resolve_timezone(GUILD, USER, None, database) == "UTC"


def test_resolve_nothing_set(database):
    assert resolve_timezone(GUILD, USER, "", database) == "UTC"


def test_parse_new_york_winter():
    parsed = parse_local_datetime("2025-01-15 20:00", "America/New_York")
    assert parsed == datetime(2025, 1, 16, 1, 0, tzinfo=pytz.utc)


def test_parse_new_york_summer():
    parsed = parse_local_datetime("2025-07-15 20:00", "America/New_York")
    assert parsed == datetime(2025, 7, 16, 0, 0, tzinfo=pytz.utc)


def test_parse_ignores_surrounding_whitespace():
    parsed = parse_local_datetime("  2025-01-15 20:00\n", "UTC")
    assert parsed == datetime(2025, 1, 15, 20, 0, tzinfo=pytz.utc)


def test_parse_result_is_utc():
    parsed = parse_local_datetime("2025-03-01 09:30", "Asia/Tokyo")
    assert parsed.utcoffset().total_seconds() == 0
    assert parsed == datetime(2025, 3, 1, 0, 30, tzinfo=pytz.utc)


@pytest.mark.parametrize(
    "text",
    [
        "2025-1-15 20:00",
        "2025-01-15T20:00",
        "15/01/2025 20:00",
        "2025-01-15 20:00:00",
        "2025-13-01 20:00",
        "2025-02-30 10:00",
        "2025-01-15 25:00",
        "tomorrow at 8",
        "",
    ],
)
def test_parse_rejects_malformed(text):
    with pytest.raises(ValidationError) as e:
        parse_local_datetime(text, "UTC")
    assert e.value.err == VoidlingError.INVALID_FORMAT


def test_parse_rejects_bad_zone():
    with pytest.raises(ValidationError) as e:
        parse_local_datetime("2025-01-15 20:00", "Nowhere/Special")
    assert e.value.err == VoidlingError.INVALID_FORMAT


def test_search_is_case_insensitive():
    assert search_timezones("new_york") == ["America/New_York"]
    assert search_timezones("LONDON") == ["Europe/London"]


def test_search_empty_query_is_capped():
    results = search_timezones("")
    assert len(results) == 25
    assert results == list(COMMON_TIMEZONES[:25])


def test_search_no_match():
    assert search_timezones("atlantis") == []


def test_common_timezones_are_valid():
    for label in COMMON_TIMEZONES:
        assert validate_timezone(label) == label


def test_format_in_timezone():
    instant = datetime(2025, 1, 16, 1, 0, tzinfo=pytz.utc)
    assert format_in_timezone(instant, "America/New_York") == "January 15, 2025 8:00 PM EST"


def test_format_in_bad_timezone_uses_utc():
    instant = datetime(2025, 1, 16, 13, 5, tzinfo=pytz.utc)
    assert format_in_timezone(instant, "Bad/Zone") == "January 16, 2025 1:05 PM UTC"


def test_discord_timestamp():
    instant = datetime(2025, 1, 16, 1, 0, tzinfo=pytz.utc)
    assert discord_timestamp(instant) == "<t:1736989200:F>"
    assert discord_timestamp(instant, "R") == "<t:1736989200:R>"
