import logging
from types import MappingProxyType
from typing import Awaitable, Callable

import discord
from discord.ext import commands
from discord.ext.commands import Bot

from cogs.commands.register import LinkAccountModal, confirm_link
from competitions.lifecycle import (
    get_competition_by_wom_id,
    list_competition_participants,
    register_participant,
)
from models import CompetitionType
from scheduling.participants import list_participants, register_for_event
from utils import error_message, parse_custom_id
from utils.choices import format_activity_name
from utils.embeds import (
    error_embed,
    participants_embed,
    standings_embed,
    success_embed,
)
from utils.exceptions import VoidlingException
from wiseoldman import WiseOldManClient

Handler = Callable[[discord.Interaction, list[str]], Awaitable[None]]

NOT_YOUR_BUTTON = "Only the member who asked to link this account can answer."


async def respond(interaction: discord.Interaction, **kwargs):
    """Reply whether or not the interaction has been deferred already"""
    if interaction.response.is_done():
        await interaction.followup.send(ephemeral=True, **kwargs)
    else:
        await interaction.response.send_message(ephemeral=True, **kwargs)


class Interactions(commands.Cog):
    """Routes button presses on long-lived messages to whatever handles them

    Buttons carry their context in the custom_id as "action:arg1,arg2" so they
    keep working after a restart.
    """

    def __init__(self, bot: Bot):
        self.bot = bot
        self.wom = WiseOldManClient()
        self.handlers: MappingProxyType[str, Handler] = MappingProxyType(
            {
                "confirm-rsn": self.confirm_rsn,
                "cancel-rsn": self.cancel_rsn,
                "dm-link-rsn": self.open_link_modal,
                "register-for-botw": self.register_for_competition,
                "register-for-sotw": self.register_for_competition,
                "list-participants-botw": self.list_competition_participants,
                "list-participants-sotw": self.list_competition_participants,
                "participate-mass": self.participate,
                "list-participants-mass": self.list_event_participants,
            }
        )

    @commands.Cog.listener()
    async def on_interaction(self, interaction: discord.Interaction):
        if interaction.type != discord.InteractionType.component:
            return
        custom_id = (interaction.data or {}).get("custom_id", "")
        action, args = parse_custom_id(custom_id)
        handler = self.handlers.get(action)
        if handler is None:
            return

        try:
            await handler(interaction, args)
        except VoidlingException as e:
            await respond(interaction, embed=error_embed(error_message(e)))
        except (ValueError, IndexError) as e:
            logging.warning(f"Malformed custom_id {custom_id}: {e}")
            await respond(interaction, embed=error_embed("Invalid button, sorry!"))

    async def confirm_rsn(self, interaction: discord.Interaction, args: list[str]):
        username, requester_id = args[0], int(args[1])
        if interaction.user.id != requester_id:
            await respond(interaction, embed=error_embed(NOT_YOUR_BUTTON))
            return
        guild = interaction.guild
        if len(args) > 2:
            guild = self.bot.get_guild(int(args[2]))
        await interaction.response.defer(ephemeral=True)
        message = await confirm_link(interaction, username, guild)
        await interaction.edit_original_response(view=None)
        await interaction.followup.send(embed=success_embed(message), ephemeral=True)

    async def cancel_rsn(self, interaction: discord.Interaction, args: list[str]):
        username, requester_id = args[0], int(args[1])
        if interaction.user.id != requester_id:
            await respond(interaction, embed=error_embed(NOT_YOUR_BUTTON))
            return
        logging.info(f"{interaction.user} cancelled linking RSN {username}")
        await interaction.response.edit_message(
            content=f"Account linking cancelled for '{username}'.", embed=None, view=None
        )

    async def open_link_modal(self, interaction: discord.Interaction, args: list[str]):
        guild_id = int(args[0]) if args else None
        await interaction.response.send_modal(LinkAccountModal(self.wom, guild_id))

    async def register_for_competition(
        self, interaction: discord.Interaction, args: list[str]
    ):
        wom_competition_id = int(args[0])
        await interaction.response.defer(ephemeral=True, thinking=True)
        registration = await register_participant(
            self.wom, wom_competition_id, interaction.user.id
        )

        message = (
            f"Registered **{registration.runescape_name}** for "
            f"**{format_activity_name(registration.metric)}**! {registration.message}"
        )
        if registration.thread_id:
            thread = self.bot.get_channel(registration.thread_id)
            if thread is not None:
                try:
                    await thread.send(message)
                except discord.HTTPException as e:
                    logging.warning(f"Failed to post registration in thread: {e}")
        await interaction.followup.send(message, ephemeral=True)

    async def list_competition_participants(
        self, interaction: discord.Interaction, args: list[str]
    ):
        wom_competition_id = int(args[0])
        await interaction.response.defer(ephemeral=True, thinking=True)
        title, ranked = await list_competition_participants(self.wom, wom_competition_id)

        competition = get_competition_by_wom_id(wom_competition_id)
        competition_type = (
            competition.type if competition else CompetitionType.BOSS_OF_THE_WEEK
        )
        await interaction.followup.send(
            embed=standings_embed(title, ranked, competition_type.unit), ephemeral=True
        )

    async def participate(self, interaction: discord.Interaction, args: list[str]):
        discord_event_id = int(args[0])
        participation = register_for_event(discord_event_id, interaction.user.id)
        await respond(
            interaction,
            embed=success_embed(
                f"**{participation.account_link.runescape_name}** is signed up for "
                f"**{participation.event.activity}**!"
            ),
        )

    async def list_event_participants(
        self, interaction: discord.Interaction, args: list[str]
    ):
        event, participants = list_participants(int(args[0]))
        await respond(
            interaction,
            embed=participants_embed(
                f"Participants for {event.activity}",
                [name for _, name in participants],
            ),
        )


async def setup(bot: Bot):
    await bot.add_cog(Interactions(bot))
