import logging
from typing import Optional

import discord
from discord import AllowedMentions, app_commands
from discord.ext import commands
from discord.ext.commands import Bot, Context
from discord.ui import Button, View

from competitions.lifecycle import finish_competition, start_competition
from models import CompetitionType, db_session
from settings import get_guild_config
from utils import error_message, is_coordinator
from utils.choices import (
    GROUP_BOSSES,
    QUEST_BOSSES,
    SKILLS,
    SLAYER_BOSSES,
    WILDY_BOSSES,
    WORLD_BOSSES,
    format_activity_name,
    format_number,
    to_choices,
)
from utils.embeds import (
    competition_embed,
    error_embed,
    verification_code_embed,
    winners_embed,
)
from utils.exceptions import VoidlingException
from wiseoldman import WiseOldManClient

BOTW_HELP_TEXT = """
Run Boss of the Week. Start one with the subcommand for the boss's category, e.g. `/botw wildy callisto`. This opens a thread, creates the Wise Old Man competition and posts a message people can register from.
`/botw finish` closes the running competition and announces the winners. Coordinators only.
"""
SOTW_HELP_TEXT = """
Run Skill of the Week. `/sotw start <skill>` creates the competition, `/sotw finish` announces the winners. Coordinators only.
"""

# custom_id prefixes, suffixed with -botw or -sotw
REGISTER_ACTION = "register-for"
LIST_ACTION = "list-participants"

SHORT_NAMES = {
    CompetitionType.BOSS_OF_THE_WEEK: "botw",
    CompetitionType.SKILL_OF_THE_WEEK: "sotw",
}


def competition_view(
    competition_type: CompetitionType, wom_competition_id: int, thread_id: Optional[int]
) -> View:
    short = SHORT_NAMES[competition_type]
    register_id = f"{REGISTER_ACTION}-{short}:{wom_competition_id}"
    if thread_id:
        register_id += f",{thread_id}"

    view = View(timeout=None)
    view.add_item(
        Button(label="Register", style=discord.ButtonStyle.primary, custom_id=register_id)
    )
    view.add_item(
        Button(
            label="List Participants",
            style=discord.ButtonStyle.secondary,
            custom_id=f"{LIST_ACTION}-{short}:{wom_competition_id}",
        )
    )
    return view


def check_metric(metric: str, options: dict[str, str]) -> str:
    """Accept either the display name or the metric, prefix commands get raw text"""
    metric = metric.strip()
    if metric in options.values():
        return metric
    for name, value in options.items():
        if name.casefold() == metric.casefold():
            return value
    raise commands.BadArgument(
        f"Unknown choice '{metric}', pick one of: {', '.join(options)}"
    )


class Competitions(commands.Cog):
    def __init__(self, bot: Bot):
        self.bot = bot
        self.wom = WiseOldManClient()

    async def cog_check(self, ctx: Context) -> bool:
        return await is_coordinator(ctx)

    async def start(self, ctx: Context, competition_type: CompetitionType, metric: str):
        await ctx.defer()
        title = f"{competition_type.display_name} - {format_activity_name(metric)}"

        thread = None
        if isinstance(ctx.channel, discord.TextChannel):
            try:
                thread = await ctx.channel.create_thread(
                    name=title,
                    type=discord.ChannelType.public_thread,
                    auto_archive_duration=10080,
                )
            except discord.HTTPException as e:
                logging.exception(e)
                await ctx.reply(
                    embed=error_embed("Failed to create event thread. Please try again.")
                )
                return

        try:
            started = await start_competition(
                self.wom,
                competition_type,
                metric,
                title,
                thread_id=thread.id if thread else None,
            )
        except VoidlingException as e:
            await ctx.reply(embed=error_embed(error_message(e)))
            return

        wom_id = started.competition.wom_competition_id
        if thread is not None:
            await thread.send(
                f"**{title}** event has started!\n\n"
                f"🔗 [View on Wise Old Man]({started.url})\n\n"
                "Click the Register button in the channel to join!"
            )

        await ctx.reply(
            embed=competition_embed(competition_type, metric, started.url),
            view=competition_view(competition_type, wom_id, thread.id if thread else None),
        )
        await self.announce(ctx, competition_type, metric, started)

    async def announce(self, ctx: Context, competition_type, metric, started):
        """Send the code to the coordinators' channel and ping the notification role"""
        config = get_guild_config(ctx.guild.id, db_session) if ctx.guild else None
        if config is None:
            return

        if config.competition_code_channel_id:
            channel = self.bot.get_channel(config.competition_code_channel_id)
            if channel is None:
                logging.warning(
                    f"Competition code channel {config.competition_code_channel_id} not found"
                )
            else:
                await channel.send(
                    embed=verification_code_embed(
                        competition_type, metric, started.url, started.verification_code
                    )
                )

        if config.event_notification_channel_id:
            channel = self.bot.get_channel(config.event_notification_channel_id)
            if channel is None:
                return
            role = (
                f"<@&{config.event_notification_role_id}> "
                if config.event_notification_role_id
                else ""
            )
            await channel.send(
                f"{role}{competition_type.display_name} has started: "
                f"**{format_activity_name(metric)}**! {ctx.channel.mention}",
                allowed_mentions=AllowedMentions(roles=True),
            )

    async def finish(self, ctx: Context, competition_type: CompetitionType):
        await ctx.defer()
        try:
            finished = await finish_competition(self.wom, competition_type)
        except VoidlingException as e:
            await ctx.reply(error_message(e))
            return

        first = finished.first_place
        metric = finished.competition.metric
        await ctx.reply(
            f"Winner of this week's {competition_type.display_name} is {first.mention} "
            f"with **{format_number(first.gained)} {competition_type.unit}**! "
            "Congratulations!",
            embed=winners_embed(competition_type, metric, finished.winners),
            allowed_mentions=AllowedMentions(users=True),
        )

    @commands.hybrid_group(help=BOTW_HELP_TEXT, brief="Run Boss of the Week")
    async def botw(self, ctx: Context):
        if not ctx.invoked_subcommand:
            await ctx.send("Subcommand not found")

    @botw.command(brief="Start a wilderness boss competition")
    @app_commands.choices(boss=to_choices(WILDY_BOSSES))
    async def wildy(self, ctx: Context, boss: str):
        await self.start(
            ctx, CompetitionType.BOSS_OF_THE_WEEK, check_metric(boss, WILDY_BOSSES)
        )

    @botw.command(brief="Start a group boss competition")
    @app_commands.choices(boss=to_choices(GROUP_BOSSES))
    async def group(self, ctx: Context, boss: str):
        await self.start(
            ctx, CompetitionType.BOSS_OF_THE_WEEK, check_metric(boss, GROUP_BOSSES)
        )

    @botw.command(brief="Start a quest boss competition")
    @app_commands.choices(boss=to_choices(QUEST_BOSSES))
    async def quest(self, ctx: Context, boss: str):
        await self.start(
            ctx, CompetitionType.BOSS_OF_THE_WEEK, check_metric(boss, QUEST_BOSSES)
        )

    @botw.command(brief="Start a slayer boss competition")
    @app_commands.choices(boss=to_choices(SLAYER_BOSSES))
    async def slayer(self, ctx: Context, boss: str):
        await self.start(
            ctx, CompetitionType.BOSS_OF_THE_WEEK, check_metric(boss, SLAYER_BOSSES)
        )

    @botw.command(brief="Start a world boss competition")
    @app_commands.choices(boss=to_choices(WORLD_BOSSES))
    async def world(self, ctx: Context, boss: str):
        await self.start(
            ctx, CompetitionType.BOSS_OF_THE_WEEK, check_metric(boss, WORLD_BOSSES)
        )

    @botw.command(name="finish", brief="Finish Boss of the Week and announce the winners")
    async def botw_finish(self, ctx: Context):
        await self.finish(ctx, CompetitionType.BOSS_OF_THE_WEEK)

    @commands.hybrid_group(help=SOTW_HELP_TEXT, brief="Run Skill of the Week")
    async def sotw(self, ctx: Context):
        if not ctx.invoked_subcommand:
            await ctx.send("Subcommand not found")

    @sotw.command(name="start", brief="Start a Skill of the Week competition")
    @app_commands.choices(skill=to_choices(SKILLS))
    async def sotw_start(self, ctx: Context, skill: str):
        await self.start(ctx, CompetitionType.SKILL_OF_THE_WEEK, check_metric(skill, SKILLS))

    @sotw.command(name="finish", brief="Finish Skill of the Week and announce the winners")
    async def sotw_finish(self, ctx: Context):
        await self.finish(ctx, CompetitionType.SKILL_OF_THE_WEEK)


async def setup(bot: Bot):
    await bot.add_cog(Competitions(bot))
