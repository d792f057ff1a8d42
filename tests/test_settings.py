import pytest

from models import GuildConfig
from settings import (
    get_guild_config,
    get_user_timezone,
    set_guild_default_timezone,
    set_user_timezone,
    update_guild_config,
)
from utils.exceptions import ValidationError, VoidlingError

GUILD = 42
USER = 1000


def test_update_creates_row(database):
    config = update_guild_config(GUILD, database, coordinator_role_id=555)

    assert config.coordinator_role_id == 555
    assert config.default_timezone is None
    assert get_guild_config(GUILD, database).coordinator_role_id == 555


def test_update_only_touches_given_fields(database):
    update_guild_config(GUILD, database, coordinator_role_id=555)
    update_guild_config(GUILD, database, event_notification_channel_id=777)

    config = get_guild_config(GUILD, database)
    assert config.coordinator_role_id == 555
    assert config.event_notification_channel_id == 777
    assert database.query(GuildConfig).count() == 1


def test_update_rejects_unknown_setting(database):
    with pytest.raises(ValueError):
        update_guild_config(GUILD, database, prefix="?")

    assert get_guild_config(GUILD, database) is None


def test_missing_guild_config(database):
    assert get_guild_config(GUILD, database) is None


def test_set_user_timezone(database):
    set_user_timezone(USER, "Asia/Tokyo", database)
    assert get_user_timezone(USER, database) == "Asia/Tokyo"

    set_user_timezone(USER, "europe/london", database)
    assert get_user_timezone(USER, database) == "Europe/London"


def test_set_user_timezone_rejects_unknown(database):
    with pytest.raises(ValidationError) as e:
        set_user_timezone(USER, "Moon/Base", database)

    assert e.value.err == VoidlingError.INVALID_TIMEZONE
    assert get_user_timezone(USER, database) is None


def test_set_guild_default_timezone(database):
    update_guild_config(GUILD, database, coordinator_role_id=555)

    config = set_guild_default_timezone(GUILD, "America/Chicago", database)

    assert config.default_timezone == "America/Chicago"
    assert config.coordinator_role_id == 555


def test_set_guild_default_timezone_rejects_unknown(database):
    with pytest.raises(ValidationError):
        set_guild_default_timezone(GUILD, "Nope", database)

    assert get_guild_config(GUILD, database) is None
