import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy_utils import ScalarListException

from models import GuildConfig, UserTimezonePreference, db_session
from scheduling.timezones import validate_timezone
from utils.exceptions import PersistenceError

GUILD_SETTINGS = frozenset(
    {
        "coordinator_role_id",
        "default_timezone",
        "competition_code_channel_id",
        "event_notification_channel_id",
        "event_notification_role_id",
    }
)


def get_guild_config(guild_id: int, session=db_session) -> Optional[GuildConfig]:
    return session.get(GuildConfig, guild_id)


def get_user_timezone(discord_user_id: int, session=db_session) -> Optional[str]:
    pref = session.get(UserTimezonePreference, discord_user_id)
    return pref.timezone if pref else None


def update_guild_config(guild_id: int, session=db_session, **values) -> GuildConfig:
    """Upsert the guild's settings row, only touching the given fields"""
    unknown = set(values) - GUILD_SETTINGS
    if unknown:
        raise ValueError(f"unknown guild settings: {', '.join(sorted(unknown))}")

    try:
        config = session.get(GuildConfig, guild_id)
        if config is None:
            config = GuildConfig(guild_id=guild_id)
            session.add(config)
        for key, value in values.items():
            setattr(config, key, value)
        session.commit()
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        raise PersistenceError(f"could not update config for guild {guild_id}") from e

    logging.info(f"Updated guild {guild_id} config: {', '.join(values)}")
    return config


def set_user_timezone(
    discord_user_id: int, timezone: str, session=db_session
) -> UserTimezonePreference:
    timezone = validate_timezone(timezone)
    try:
        pref = session.get(UserTimezonePreference, discord_user_id)
        if pref is None:
            pref = UserTimezonePreference(
                discord_user_id=discord_user_id, timezone=timezone
            )
            session.add(pref)
        else:
            pref.timezone = timezone
        session.commit()
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        raise PersistenceError(f"could not set timezone for {discord_user_id}") from e

    logging.info(f"Set timezone for {discord_user_id} to {timezone}")
    return pref


def set_guild_default_timezone(
    guild_id: int, timezone: str, session=db_session
) -> GuildConfig:
    timezone = validate_timezone(timezone)
    return update_guild_config(guild_id, session, default_timezone=timezone)
