from utils.utils import (
    coordinator_role_id,
    error_message,
    format_list,
    is_coordinator,
    is_guild_admin,
    member_is_admin,
    member_is_coordinator,
    parse_custom_id,
)

__all__ = [
    "coordinator_role_id",
    "error_message",
    "format_list",
    "is_coordinator",
    "is_guild_admin",
    "member_is_admin",
    "member_is_coordinator",
    "parse_custom_id",
]
