import discord
from discord import app_commands
from discord.ext import commands
from discord.ext.commands import Bot, Context

from scheduling.timezones import search_timezones
from settings import (
    get_guild_config,
    get_user_timezone,
    set_guild_default_timezone,
    set_user_timezone,
    update_guild_config,
)
from utils import error_message, is_guild_admin
from utils.embeds import error_embed, guild_config_embed, success_embed
from utils.exceptions import VoidlingException

LONG_HELP_TEXT = """
View and change how Voidling behaves in this server. Everything except `set-my-timezone` needs the server owner or an administrator.
"""
SHORT_HELP_TEXT = """Server and personal settings"""


async def timezone_autocomplete(
    interaction: discord.Interaction, current: str
) -> list[app_commands.Choice[str]]:
    return [app_commands.Choice(name=tz, value=tz) for tz in search_timezones(current)]


class Config(commands.Cog):
    def __init__(self, bot: Bot):
        self.bot = bot

    async def update(self, ctx: Context, message: str, **values):
        try:
            update_guild_config(ctx.guild.id, **values)
        except VoidlingException as e:
            await ctx.reply(embed=error_embed(error_message(e)), ephemeral=True)
            return
        await ctx.reply(embed=success_embed(message), ephemeral=True)

    @commands.hybrid_group(name="config", help=LONG_HELP_TEXT, brief=SHORT_HELP_TEXT)
    @commands.guild_only()
    async def config_group(self, ctx: Context):
        if not ctx.invoked_subcommand:
            await ctx.send("Subcommand not found")

    @config_group.command(brief="Show the current settings")
    @commands.check(is_guild_admin)
    async def show(self, ctx: Context):
        embed = guild_config_embed(
            get_guild_config(ctx.guild.id), get_user_timezone(ctx.author.id)
        )
        await ctx.reply(embed=embed, ephemeral=True)

    @config_group.command(
        name="set-coordinator-role", brief="Role allowed to run competitions and events"
    )
    @commands.check(is_guild_admin)
    async def set_coordinator_role(self, ctx: Context, role: discord.Role):
        await self.update(
            ctx,
            f"Coordinator role set to {role.mention}",
            coordinator_role_id=role.id,
        )

    @config_group.command(
        name="set-competition-code-channel",
        brief="Channel Wise Old Man verification codes are sent to",
    )
    @commands.check(is_guild_admin)
    async def set_competition_code_channel(
        self, ctx: Context, channel: discord.TextChannel
    ):
        await self.update(
            ctx,
            f"Competition codes will be sent to {channel.mention}",
            competition_code_channel_id=channel.id,
        )

    @config_group.command(
        name="set-event-notification-channel",
        brief="Channel new competitions and events are announced in",
    )
    @commands.check(is_guild_admin)
    async def set_event_notification_channel(
        self, ctx: Context, channel: discord.TextChannel
    ):
        await self.update(
            ctx,
            f"Events will be announced in {channel.mention}",
            event_notification_channel_id=channel.id,
        )

    @config_group.command(
        name="set-event-notification-role",
        brief="Role pinged when a competition or event is announced",
    )
    @commands.check(is_guild_admin)
    async def set_event_notification_role(self, ctx: Context, role: discord.Role):
        await self.update(
            ctx,
            f"{role.mention} will be pinged for new events",
            event_notification_role_id=role.id,
        )

    @config_group.command(
        name="set-default-timezone", brief="Timezone used when a member hasn't set one"
    )
    @commands.check(is_guild_admin)
    @app_commands.autocomplete(timezone=timezone_autocomplete)
    async def set_default_timezone(self, ctx: Context, timezone: str):
        try:
            config = set_guild_default_timezone(ctx.guild.id, timezone)
        except VoidlingException as e:
            await ctx.reply(embed=error_embed(error_message(e)), ephemeral=True)
            return
        await ctx.reply(
            embed=success_embed(f"Server default timezone set to **{config.default_timezone}**"),
            ephemeral=True,
        )

    @config_group.command(name="set-my-timezone", brief="Your own timezone for event times")
    @app_commands.autocomplete(timezone=timezone_autocomplete)
    async def set_my_timezone(self, ctx: Context, timezone: str):
        try:
            pref = set_user_timezone(ctx.author.id, timezone)
        except VoidlingException as e:
            await ctx.reply(embed=error_embed(error_message(e)), ephemeral=True)
            return
        await ctx.reply(
            embed=success_embed(f"Your timezone is now **{pref.timezone}**"),
            ephemeral=True,
        )


async def setup(bot: Bot):
    await bot.add_cog(Config(bot))
