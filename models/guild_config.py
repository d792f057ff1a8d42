from typing import Optional

from sqlalchemy import BigInteger
from sqlalchemy.orm import Mapped, mapped_column

from models.models import Base, DiscordSnowflake


class GuildConfig(Base):
    __tablename__ = "guild_config"

    guild_id: Mapped[DiscordSnowflake] = mapped_column(primary_key=True)
    coordinator_role_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, default=None
    )
    default_timezone: Mapped[Optional[str]] = mapped_column(default=None)
    competition_code_channel_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, default=None
    )
    event_notification_channel_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, default=None
    )
    event_notification_role_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, default=None
    )


class UserTimezonePreference(Base):
    __tablename__ = "user_timezone_pref"

    discord_user_id: Mapped[DiscordSnowflake] = mapped_column(primary_key=True)
    timezone: Mapped[str]
