import logging
from pathlib import Path
from random import choice

import discord
import yaml
from discord import Member
from discord.ext.commands import Bot, Cog
from discord.ui import Button, View

from utils.embeds import INFO

LINK_BUTTON_ID = "dm-link-rsn"


def link_account_view(guild_id: int) -> View:
    view = View(timeout=None)
    view.add_item(
        Button(
            label="🔗 Link My RuneScape Account",
            style=discord.ButtonStyle.primary,
            custom_id=f"{LINK_BUTTON_ID}:{guild_id}",
        )
    )
    return view


class Welcome(Cog):
    def __init__(self, bot: Bot):
        self.bot = bot
        with open(Path("resources", "welcome_messages.yaml")) as f:
            parsed = yaml.full_load(f).get("welcome_messages")
        self.greetings = parsed.get("greetings")
        self.welcome_template = parsed.get("message")
        self.footer = parsed.get("footer")

    def generate_welcome_embed(self, member: Member) -> discord.Embed:
        description = self.welcome_template.format(
            greeting=choice(self.greetings),
            name=member.display_name,
            guild=member.guild.name,
        )
        embed = discord.Embed(title="👋 Welcome!", description=description, colour=INFO)
        if self.footer:
            embed.set_footer(text=self.footer)
        return embed

    @Cog.listener()
    async def on_member_join(self, member: Member):
        """DM new members a way to link their account straight away"""
        if member.bot:
            return
        try:
            await member.send(
                embed=self.generate_welcome_embed(member),
                view=link_account_view(member.guild.id),
            )
        except discord.Forbidden:
            # DMs closed
            logging.info(f"Could not DM new member {member}")
            return
        logging.info(f"Sent greeting DM to {member} in {member.guild.name}")


async def setup(bot: Bot):
    await bot.add_cog(Welcome(bot))
