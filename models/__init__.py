from models.models import Base, db_session, engine, utcnow
from models.account_link import AccountLink
from models.competition import CompetitionStatus, CompetitionType, TrackedCompetition
from models.guild_config import GuildConfig, UserTimezonePreference
from models.scheduled_event import (
    EventParticipation,
    ScheduledEvent,
    ScheduledEventType,
)

__all__ = [
    "AccountLink",
    "Base",
    "CompetitionStatus",
    "CompetitionType",
    "EventParticipation",
    "GuildConfig",
    "ScheduledEvent",
    "ScheduledEventType",
    "TrackedCompetition",
    "UserTimezonePreference",
    "db_session",
    "engine",
    "utcnow",
]
