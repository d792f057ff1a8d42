from datetime import datetime, timezone
from typing import Iterable, Optional

import discord
from humanize import precisedelta

from models import CompetitionType
from scheduling.timezones import discord_timestamp
from utils.choices import format_activity_name, format_number

SUCCESS = discord.Colour(0x2ECC71)
ERROR = discord.Colour(0xE74C3C)
INFO = discord.Colour(0x3498DB)
BOTW = discord.Colour(0x9B59B6)
SOTW = discord.Colour(0x1ABC9C)
MASS = discord.Colour(0xE67E22)

OSRS_ICON = "https://oldschool.runescape.wiki/images/OSRS_icon.png"
MEDALS = ["🥇", "🥈", "🥉"]
COMBAT_SKILLS = ["attack", "strength", "defence", "hitpoints", "ranged", "magic"]

COMPETITION_STYLE = {
    CompetitionType.BOSS_OF_THE_WEEK: ("🏆", BOTW, "boss", "kill count"),
    CompetitionType.SKILL_OF_THE_WEEK: ("📚", SOTW, "skill", "experience gains"),
}


def _now():
    return datetime.now(timezone.utc)


def error_embed(message: str) -> discord.Embed:
    return discord.Embed(title="❌ Error", description=message, colour=ERROR, timestamp=_now())


def success_embed(message: str) -> discord.Embed:
    return discord.Embed(
        title="✅ Success", description=message, colour=SUCCESS, timestamp=_now()
    )


def player_embed(player) -> discord.Embed:
    """Summary of a WOM player, shown before they confirm a link"""
    overall = player.get_skill("overall")
    if overall is None:
        return discord.Embed(
            title="Data Unavailable",
            description="Player snapshot data is not available.",
            colour=ERROR,
            timestamp=_now(),
        )

    embed = discord.Embed(
        title=f"OSRS Player: {player.display_name}",
        description="Is this your account?",
        colour=INFO,
        timestamp=_now(),
    )
    embed.set_thumbnail(url=OSRS_ICON)
    embed.add_field(name="Total Level", value=str(overall.level))
    embed.add_field(name="Total XP", value=format_number(overall.experience))
    embed.add_field(name="Rank", value=f"#{format_number(overall.rank)}")
    embed.add_field(name="Combat Level", value=str(player.combat_level))
    embed.add_field(name="EHP", value=f"{player.ehp:.1f}")
    embed.add_field(name="EHB", value=f"{player.ehb:.1f}")

    combat = [
        f"**{name.capitalize()}**: {player.get_skill(name).level}"
        for name in COMBAT_SKILLS
        if player.get_skill(name) is not None
    ]
    if combat:
        embed.add_field(name="Combat Stats", value="\n".join(combat), inline=False)
    embed.set_footer(text="Data from Wise Old Man")
    return embed


def competition_embed(competition_type: CompetitionType, metric: str, url: str) -> discord.Embed:
    emoji, colour, kind, tracked = COMPETITION_STYLE[competition_type]
    embed = discord.Embed(
        title=f"{emoji} {competition_type.display_name}",
        description=(
            f"This week's {kind} challenge: **{format_activity_name(metric)}**\n\n"
            f"[View Competition on Wise Old Man]({url})\n\n"
            f"Click the button below to register and track your {tracked}!"
        ),
        colour=colour,
        timestamp=_now(),
    )
    embed.set_thumbnail(url=OSRS_ICON)
    embed.add_field(
        name="How it works",
        value=(
            f"Register to lock in your starting {competition_type.unit}. At the end of "
            "the week, we'll check your progress and crown the winner!"
        ),
        inline=False,
    )
    return embed


def verification_code_embed(
    competition_type: CompetitionType, metric: str, url: str, code: str
) -> discord.Embed:
    embed = discord.Embed(
        title=f"🔑 {competition_type.display_name}: {format_activity_name(metric)}",
        description=f"[Wise Old Man competition]({url})",
        colour=INFO,
        timestamp=_now(),
    )
    embed.add_field(name="Verification code", value=f"||{code}||", inline=False)
    return embed


def winners_embed(competition_type: CompetitionType, metric: str, winners) -> discord.Embed:
    emoji, colour, _, _ = COMPETITION_STYLE[competition_type]
    embed = discord.Embed(
        title=f"{emoji} {competition_type.display_name} - Winners",
        description=(
            f"**{format_activity_name(metric)}** has concluded!\n\n"
            "Here are the top performers:"
        ),
        colour=colour,
        timestamp=_now(),
    )
    unit = competition_type.unit
    for medal, winner in zip(MEDALS, winners):
        embed.add_field(
            name=f"{medal} {winner.display_name}",
            value=(
                f"Progress: **{format_number(winner.gained)} {unit}**\n"
                f"Start: {format_number(winner.start)} | End: {format_number(winner.end)}"
            ),
            inline=False,
        )
    return embed


def standings_embed(title: str, ranked, unit: str, limit: int = 25) -> discord.Embed:
    """Current standings of a running competition"""
    ranked = list(ranked)
    embed = discord.Embed(title=f"📋 {title}", colour=INFO, timestamp=_now())
    if not ranked:
        embed.description = "No one has registered yet."
        return embed

    lines = [
        f"{i}. **{p.player.display_name}** - {format_number(p.gained)} {unit}"
        for i, p in enumerate(ranked[:limit], start=1)
    ]
    if len(ranked) > limit:
        lines.append(f"...and {len(ranked) - limit} more")
    embed.description = "\n".join(lines)
    embed.set_footer(text=f"{len(ranked)} participants")
    return embed


def mass_embed(
    activity: str,
    location: str,
    start: datetime,
    end: datetime,
    timezone_label: str,
    local_time: Optional[str] = None,
) -> discord.Embed:
    embed = discord.Embed(
        title="⚔️ Mass Event",
        description=f"Join us for **{activity}**!",
        colour=MASS,
        timestamp=_now(),
    )
    embed.set_thumbnail(url=OSRS_ICON)
    embed.add_field(name="Location", value=location)
    embed.add_field(name="Time", value=discord_timestamp(start))
    embed.add_field(name="Countdown", value=discord_timestamp(start, "R"))
    embed.add_field(name="Duration", value=precisedelta(end - start))
    if local_time:
        embed.add_field(name=f"Organiser's time ({timezone_label})", value=local_time)
    return embed


def participants_embed(title: str, names: Iterable[str]) -> discord.Embed:
    names = list(names)
    embed = discord.Embed(title=f"👥 {title}", colour=INFO, timestamp=_now())
    if names:
        embed.description = "\n".join(f"{i}. {name}" for i, name in enumerate(names, start=1))
    else:
        embed.description = "No one has signed up yet."
    embed.set_footer(text=f"{len(names)} participants")
    return embed


def guild_config_embed(config, user_timezone: Optional[str]) -> discord.Embed:
    def mention(value, fmt):
        return fmt.format(value) if value else "Not set"

    embed = discord.Embed(title="⚙️ Server Configuration", colour=INFO, timestamp=_now())
    embed.add_field(
        name="Coordinator role",
        value=mention(config and config.coordinator_role_id, "<@&{}>"),
    )
    embed.add_field(
        name="Competition code channel",
        value=mention(config and config.competition_code_channel_id, "<#{}>"),
    )
    embed.add_field(
        name="Default timezone",
        value=(config and config.default_timezone) or "UTC",
    )
    embed.add_field(
        name="Event notification channel",
        value=mention(config and config.event_notification_channel_id, "<#{}>"),
    )
    embed.add_field(
        name="Event notification role",
        value=mention(config and config.event_notification_role_id, "<@&{}>"),
    )
    embed.add_field(name="Your timezone", value=user_timezone or "Not set")
    return embed
