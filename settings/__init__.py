from settings.guild import (
    get_guild_config,
    get_user_timezone,
    set_guild_default_timezone,
    set_user_timezone,
    update_guild_config,
)

__all__ = [
    "get_guild_config",
    "get_user_timezone",
    "set_guild_default_timezone",
    "set_user_timezone",
    "update_guild_config",
]
