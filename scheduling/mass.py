import asyncio
import logging
import warnings
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

import discord
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy_utils import ScalarListException

from config import CONFIG
from models import ScheduledEvent, ScheduledEventType, db_session
from scheduling.timezones import parse_local_datetime, resolve_timezone
from utils.exceptions import (
    ExternalServiceError,
    PartialSuccessWarning,
    ValidationError,
    VoidlingError,
)


class Calendar(Protocol):
    """Somewhere events can be put on a calendar and announced"""

    async def create_event(
        self,
        name: str,
        description: str,
        start: datetime,
        end: datetime,
        location: str,
    ) -> int:
        ...

    async def post_notification(
        self, channel_id: int, content: str, embed=None, view=None
    ) -> None:
        ...


class DiscordCalendar:
    """Guild scheduled events and channel messages, each call bounded by a timeout"""

    def __init__(self, guild: discord.Guild, timeout: float = CONFIG.DISCORD_TIMEOUT):
        self.guild = guild
        self.timeout = timeout

    async def _call(self, coro, action: str):
        try:
            return await asyncio.wait_for(coro, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ExternalServiceError(f"discord timed out trying to {action}") from e
        except discord.HTTPException as e:
            raise ExternalServiceError(
                f"discord failed to {action}: {e.text}", status=e.status
            ) from e

    async def create_event(self, name, description, start, end, location) -> int:
        event = await self._call(
            self.guild.create_scheduled_event(
                name=name,
                description=description,
                start_time=start,
                end_time=end,
                entity_type=discord.EntityType.external,
                privacy_level=discord.PrivacyLevel.guild_only,
                location=location,
            ),
            "create a scheduled event",
        )
        return event.id

    async def post_notification(self, channel_id, content, embed=None, view=None):
        channel = self.guild.get_channel(channel_id)
        if channel is None:
            logging.warning(f"Notification channel {channel_id} not found")
            return
        kwargs = {"content": content, "embed": embed}
        if view is not None:
            kwargs["view"] = view
        await self._call(channel.send(**kwargs), f"post in {channel_id}")


@dataclass
class ScheduledMass:
    # None when the calendar entry exists but could not be stored
    event: Optional[ScheduledEvent]
    discord_event_id: int
    activity: str
    location: str
    start: datetime
    end: datetime
    timezone: str


def mass_event_name(activity: str) -> str:
    return f"Mass: {activity}"


def mass_event_description(location: str) -> str:
    return (
        f"Join us for a mass event at {location}!\n\n"
        "Click 'Interested' to RSVP and get a reminder before the event starts."
    )


async def schedule_mass_event(
    calendar: Calendar,
    activity: str,
    location: str,
    when: str,
    duration_minutes: int,
    explicit_timezone: Optional[str],
    guild_id: Optional[int],
    user_id: Optional[int],
    session=db_session,
    now: Optional[datetime] = None,
) -> ScheduledMass:
    tz = resolve_timezone(guild_id, user_id, explicit_timezone, session)

    try:
        start = parse_local_datetime(when, tz)
    except ValidationError as e:
        raise ValidationError(VoidlingError.INVALID_TIME, e.message) from e

    now = now or datetime.now(timezone.utc)
    if start <= now:
        raise ValidationError(VoidlingError.PAST_TIME, f"{start} is not after {now}")

    if duration_minutes is None or duration_minutes <= 0:
        raise ValidationError(VoidlingError.INVALID_DURATION, str(duration_minutes))
    end = start + timedelta(minutes=duration_minutes)

    discord_event_id = await calendar.create_event(
        mass_event_name(activity), mass_event_description(location), start, end, location
    )
    logging.info(f"Created Discord event {discord_event_id} for mass {activity}")

    event = ScheduledEvent(
        type=ScheduledEventType.MASS,
        activity=activity,
        location=location,
        scheduled_at=start.replace(tzinfo=None),
        discord_event_id=discord_event_id,
        timezone=tz,
    )
    try:
        session.add(event)
        session.commit()
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        warnings.warn(
            f"Discord event {discord_event_id} was created but could not be stored",
            PartialSuccessWarning,
        )
        event = None

    return ScheduledMass(
        event=event,
        discord_event_id=discord_event_id,
        activity=activity,
        location=location,
        start=start,
        end=end,
        timezone=tz,
    )
