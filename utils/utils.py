import logging
from typing import Any, Optional

import discord
from discord.ext.commands import Bot, Context

from config import CONFIG
from models import GuildConfig, db_session
from utils.exceptions import VoidlingException

COORDINATOR_ROLE_NAME = "coordinator"


def coordinator_role_id(
    guild: discord.Guild, guild_config: Optional[GuildConfig]
) -> Optional[int]:
    """Which role counts as coordinator in this guild

    Checked in order: the role set with /config, the role id in config.yaml, then
    any role called "Coordinator".
    """
    if guild_config is not None and guild_config.coordinator_role_id:
        return guild_config.coordinator_role_id
    if CONFIG.COORDINATOR_ROLE_ID:
        return CONFIG.COORDINATOR_ROLE_ID
    role = next(
        (r for r in guild.roles if r.name.casefold() == COORDINATOR_ROLE_NAME), None
    )
    return role.id if role else None


def member_is_coordinator(member: discord.Member, session=db_session) -> bool:
    guild_config = session.get(GuildConfig, member.guild.id)
    role_id = coordinator_role_id(member.guild, guild_config)
    if role_id is None:
        logging.warning(f"No coordinator role found in guild {member.guild.id}")
        return False
    return any(role.id == role_id for role in member.roles)


def member_is_admin(member: discord.Member) -> bool:
    return member.guild.owner_id == member.id or member.guild_permissions.administrator


async def is_coordinator(ctx: Context[Bot], /):
    """Check whether the author may run competitions and events"""
    if ctx.guild is None or not isinstance(ctx.author, discord.Member):
        return False
    return member_is_coordinator(ctx.author)


async def is_guild_admin(ctx: Context[Bot], /):
    """Check whether the author owns or administers the guild"""
    if ctx.guild is None or not isinstance(ctx.author, discord.Member):
        return False
    return member_is_admin(ctx.author)


def error_message(e: VoidlingException) -> str:
    """Message to show for a failed operation, logging the ones that are our fault"""
    if e.retryable:
        logging.exception(e)
    return e.user_message


def format_list(el: list[Any], /):
    if len(el) == 1:
        return f"{el[0]}"
    elif len(el) == 2:
        return f"{el[0]} and {el[1]}"
    else:
        return f'{", ".join(el[:-1])}, and {el[-1]}'


def parse_custom_id(custom_id: str) -> tuple[str, list[str]]:
    """Split "action:arg1,arg2" into its action and args"""
    action, _, rest = custom_id.partition(":")
    return action, rest.split(",") if rest else []
