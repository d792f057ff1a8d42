import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands
from discord.ext.commands import Bot, Context
from discord.ui import Button, View

from models import db_session
from scheduling.mass import DiscordCalendar, schedule_mass_event
from scheduling.timezones import format_in_timezone, search_timezones
from settings import get_guild_config
from utils import error_message, is_coordinator
from utils.embeds import error_embed, mass_embed
from utils.exceptions import VoidlingException

LONG_HELP_TEXT = """
Schedule a mass event. Time is `YYYY-MM-DD HH:MM` in your timezone: the one you pass, else the one you set with `/config set-my-timezone`, else the server default, else UTC.
Creates a Discord event and posts a message people can sign up from. Coordinators only.
"""
SHORT_HELP_TEXT = """Schedule a mass event"""

PARTICIPATE_ACTION = "participate-mass"
LIST_ACTION = "list-participants-mass"


def mass_view(discord_event_id: int) -> View:
    view = View(timeout=None)
    view.add_item(
        Button(
            label="Participate",
            style=discord.ButtonStyle.primary,
            custom_id=f"{PARTICIPATE_ACTION}:{discord_event_id}",
        )
    )
    view.add_item(
        Button(
            label="List Participants",
            style=discord.ButtonStyle.secondary,
            custom_id=f"{LIST_ACTION}:{discord_event_id}",
        )
    )
    return view


class Mass(commands.Cog):
    def __init__(self, bot: Bot):
        self.bot = bot

    async def cog_check(self, ctx: Context) -> bool:
        return await is_coordinator(ctx)

    @commands.hybrid_command(help=LONG_HELP_TEXT, brief=SHORT_HELP_TEXT)
    @app_commands.describe(
        activity="What's being massed, e.g. Corporeal Beast",
        location="Where to meet, e.g. World 444",
        time="Start time as YYYY-MM-DD HH:MM",
        duration="Length in minutes",
        timezone="Timezone the time is in, e.g. Europe/London",
    )
    async def mass(
        self,
        ctx: Context,
        activity: str,
        location: str,
        time: str,
        duration: int,
        timezone: Optional[str] = None,
    ):
        await ctx.defer()
        calendar = DiscordCalendar(ctx.guild)
        try:
            scheduled = await schedule_mass_event(
                calendar,
                activity,
                location,
                time,
                duration,
                timezone,
                ctx.guild.id,
                ctx.author.id,
            )
        except VoidlingException as e:
            await ctx.reply(embed=error_embed(error_message(e)), ephemeral=True)
            return

        embed = mass_embed(
            scheduled.activity,
            scheduled.location,
            scheduled.start,
            scheduled.end,
            scheduled.timezone,
            format_in_timezone(scheduled.start, scheduled.timezone),
        )
        view = mass_view(scheduled.discord_event_id)
        await ctx.reply(embed=embed, view=view)

        config = get_guild_config(ctx.guild.id, db_session)
        if config is None or not config.event_notification_channel_id:
            return
        role = (
            f"<@&{config.event_notification_role_id}> "
            if config.event_notification_role_id
            else ""
        )
        try:
            await calendar.post_notification(
                config.event_notification_channel_id,
                f"{role}A mass has been scheduled: **{scheduled.activity}**!",
                embed=embed,
                view=mass_view(scheduled.discord_event_id),
            )
        except VoidlingException as e:
            # the event is already up at this point
            logging.warning(f"Failed to post mass notification: {e}")

    @mass.autocomplete("timezone")
    async def timezone_autocomplete(
        self, interaction: discord.Interaction, current: str
    ) -> list[app_commands.Choice[str]]:
        return [app_commands.Choice(name=tz, value=tz) for tz in search_timezones(current)]


async def setup(bot: Bot):
    await bot.add_cog(Mass(bot))
