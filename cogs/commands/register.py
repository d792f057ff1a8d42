import logging
from typing import Optional

import discord
from discord import ui
from discord.ext import commands
from discord.ext.commands import Bot, Context
from discord.ui import Button, View

from accounts.links import link_account, unlink_account
from utils import error_message
from utils.embeds import error_embed, player_embed, success_embed
from utils.exceptions import NotFoundError, VoidlingException
from wiseoldman import WiseOldManClient

LONG_HELP_TEXT = """
Link your RuneScape account to your Discord account. The name is looked up on Wise Old Man, and once you confirm it's you it's used to register you for competitions and events.
Linking a new name replaces your current link; your old links are kept so you can switch back at any time.
"""
SHORT_HELP_TEXT = """Link your RuneScape account"""

# RSNs are at most 12 characters
MAX_RSN_LENGTH = 12


def confirmation_view(
    username: str, requester_id: int, guild_id: Optional[int]
) -> View:
    """Confirm/cancel buttons that only the member who asked may press"""
    args = f"{username},{requester_id}"
    if guild_id:
        args += f",{guild_id}"
    view = View(timeout=None)
    view.add_item(
        Button(
            label="That's me!",
            style=discord.ButtonStyle.success,
            custom_id=f"confirm-rsn:{args}",
        )
    )
    view.add_item(
        Button(
            label="Not me",
            style=discord.ButtonStyle.danger,
            custom_id=f"cancel-rsn:{username},{requester_id}",
        )
    )
    return view


async def confirmation_message(
    wom: WiseOldManClient, username: str, requester_id: int, guild_id: Optional[int]
) -> tuple[discord.Embed, Optional[View]]:
    """Look the name up so the member can check it's really them before linking"""
    try:
        player = await wom.get_player(username)
    except NotFoundError:
        return (
            error_embed(
                f"Failed to fetch player data for '{username}'. "
                "Make sure the username is correct and try again."
            ),
            None,
        )
    except VoidlingException as e:
        return error_embed(error_message(e)), None
    return player_embed(player), confirmation_view(username, requester_id, guild_id)


async def confirm_link(
    interaction: discord.Interaction, username: str, guild: Optional[discord.Guild]
) -> str:
    """Link the account, then try to match the member's nickname to it"""
    link_account(interaction.user.id, username)
    message = f"Successfully linked your account to **{username}**!"
    if guild is None:
        return message

    nickname_failed = (
        message + "\n\n*Note: I couldn't update your server nickname automatically. "
        "Please ask a server admin to update it.*"
    )
    member = guild.get_member(interaction.user.id)
    if member is None:
        return nickname_failed
    try:
        await member.edit(nick=username, reason="Linked RuneScape account")
    except discord.HTTPException as e:
        logging.info(f"Failed to update nickname for {member} in {guild.id}: {e}")
        return nickname_failed
    logging.info(f"Updated nickname for {interaction.user.id} to {username} in {guild.id}")
    return message + " Your server nickname has been updated too!"


class LinkAccountModal(ui.Modal, title="Link RuneScape Account"):
    rsn = ui.TextInput(
        label="RuneScape Username",
        placeholder="Enter your RSN",
        min_length=1,
        max_length=MAX_RSN_LENGTH,
    )

    def __init__(self, wom: WiseOldManClient, guild_id: Optional[int]):
        super().__init__(custom_id="link-rsn-modal")
        self.wom = wom
        self.guild_id = guild_id

    async def on_submit(self, interaction: discord.Interaction):
        await interaction.response.defer(ephemeral=True, thinking=True)
        embed, view = await confirmation_message(
            self.wom, self.rsn.value.strip(), interaction.user.id, self.guild_id
        )
        if view is None:
            await interaction.followup.send(embed=embed, ephemeral=True)
        else:
            await interaction.followup.send(embed=embed, view=view, ephemeral=True)


class Register(commands.Cog):
    def __init__(self, bot: Bot):
        self.bot = bot
        self.wom = WiseOldManClient()

    @commands.hybrid_command(
        name="link-rsn", help=LONG_HELP_TEXT, brief=SHORT_HELP_TEXT
    )
    async def link_rsn(self, ctx: Context, *, rsn: Optional[str] = None):
        guild_id = ctx.guild.id if ctx.guild else None
        if rsn is None:
            if ctx.interaction is None:
                await ctx.reply("Usage: `link-rsn <your RSN>`")
                return
            await ctx.interaction.response.send_modal(
                LinkAccountModal(self.wom, guild_id)
            )
            return

        await ctx.defer(ephemeral=True)
        embed, view = await confirmation_message(
            self.wom, rsn.strip(), ctx.author.id, guild_id
        )
        if view is None:
            await ctx.reply(embed=embed, ephemeral=True)
        else:
            await ctx.reply(embed=embed, view=view, ephemeral=True)

    @commands.hybrid_command(
        name="unlink-rsn", brief="Unlink your RuneScape account"
    )
    async def unlink_rsn(self, ctx: Context):
        """Deactivate your current account link"""
        try:
            link = unlink_account(ctx.author.id)
        except VoidlingException as e:
            await ctx.reply(embed=error_embed(error_message(e)), ephemeral=True)
            return
        await ctx.reply(
            embed=success_embed(
                f"Successfully unlinked your account from **{link.runescape_name}**."
            ),
            ephemeral=True,
        )


async def setup(bot: Bot):
    await bot.add_cog(Register(bot))
