#!/usr/bin/env python3
import asyncio
import logging

import discord
from discord import Intents
from discord.ext import commands
from discord.ext.commands import Bot, Context, check, errors, when_mentioned_or

from config import CONFIG
from utils import error_message, is_guild_admin
from utils.exceptions import VoidlingException

DESCRIPTION = """
Voidling runs Old School RuneScape community events on Discord: Boss of the Week and Skill of the Week competitions tracked on Wise Old Man, and scheduled mass events.
"""

# The command extensions to be loaded by the bot
EXTENSIONS = [
    "cogs.commands.competitions",
    "cogs.commands.config",
    "cogs.commands.mass",
    "cogs.commands.register",
    "cogs.interactions",
    "cogs.welcome",
]


intents = Intents.default()
intents.members = True
intents.message_content = True

bot = Bot(
    command_prefix=when_mentioned_or(CONFIG.PREFIX),
    description=DESCRIPTION,
    intents=intents,
)


@bot.command()
@check(is_guild_admin)
async def reload_cogs(ctx: Context[Bot]):
    for extension in EXTENSIONS:
        await bot.reload_extension(extension)
    await ctx.message.add_reaction("✅")


@bot.event
async def on_ready():
    logging.info("Logged in as")
    logging.info(str(bot.user))
    logging.info("------")


async def main():
    logging.basicConfig(
        level=logging.getLevelName(CONFIG.LOG_LEVEL),
        format="[%(asctime)s] [%(name)s] [%(levelname)s] %(message)s",
        handlers=[
            logging.FileHandler("voidling.log"),
            logging.StreamHandler(),
        ],
    )
    # PartialSuccessWarning and friends end up in the log
    logging.captureWarnings(True)

    async with bot:
        for extension in EXTENSIONS:
            try:
                logging.info(f"Attempting to load extension {extension}")
                await bot.load_extension(extension)
            except Exception as e:
                logging.exception(f"Failed to load extension {extension}", exc_info=e)
        await bot.start(CONFIG.DISCORD_TOKEN)


@bot.command()
@commands.guild_only()
@check(is_guild_admin)
async def sync(ctx: Context[Bot]) -> None:
    """
    Syncs slash commands to server
    """
    if CONFIG.GUILD_ID:
        guild = discord.Object(id=CONFIG.GUILD_ID)
        ctx.bot.tree.copy_global_to(guild=guild)
        synced = await ctx.bot.tree.sync(guild=guild)
        await ctx.reply(f"Synced {len(synced)} commands to the configured guild.")
    else:
        synced = await ctx.bot.tree.sync()
        await ctx.reply(f"Synced {len(synced)} commands globally.")


@bot.event
async def on_command_error(ctx: Context[Bot], error: Exception):
    message = ""
    reraise = None
    if isinstance(error, errors.CommandNotFound):
        pass
    elif isinstance(error, errors.NoPrivateMessage):
        message = "Cannot run this command in DMs"
    elif isinstance(error, errors.ExpectedClosingQuoteError):
        message = f"Mismatching quotes, {str(error)}"
    elif isinstance(error, errors.MissingRequiredArgument):
        assert ctx.command
        message = f"Argument {str(error.param.name)} is missing\nUsage: `{ctx.prefix}{ctx.command.name} {ctx.command.signature}`"
    elif isinstance(error, discord.Forbidden):
        message = f"Bot does not have permissions to do this. {str(error.text)}"
        reraise = error
    elif isinstance(error, errors.CheckFailure):
        message = "❌ You don't have permission to use this command."
    elif isinstance(error, VoidlingException):
        message = error_message(error)
    elif hasattr(error, "original"):
        await on_command_error(ctx, error.original)  # type: ignore
        return
    elif isinstance(error, errors.CommandError):
        message = str(error)
    else:
        message = f"{error}"
        reraise = error
    if reraise:
        logging.error(reraise, exc_info=True)

    if message:
        await ctx.reply(f"**Error:** `{message}`", ephemeral=True)
    if reraise:
        raise reraise


if __name__ == "__main__":
    asyncio.run(main())
