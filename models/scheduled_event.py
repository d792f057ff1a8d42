import enum
from datetime import datetime

from sqlalchemy import ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.account_link import AccountLink
from models.models import AccountLinkId, Base, DiscordSnowflake, IntPk, utcnow


class ScheduledEventType(enum.Enum):
    MASS = "MASS"
    WILDY_WEDNESDAY = "WILDY_WEDNESDAY"


class ScheduledEvent(Base):
    __tablename__ = "scheduled_event"

    id: Mapped[IntPk] = mapped_column(init=False)
    type: Mapped[ScheduledEventType]
    activity: Mapped[str]
    location: Mapped[str]
    # naive UTC, the label below is what the organiser typed the time in
    scheduled_at: Mapped[datetime]
    discord_event_id: Mapped[DiscordSnowflake] = mapped_column(unique=True)
    timezone: Mapped[str] = mapped_column(default="UTC")
    created_at: Mapped[datetime] = mapped_column(
        default_factory=utcnow, insert_default=func.current_timestamp()
    )

    participations: Mapped[list["EventParticipation"]] = relationship(
        back_populates="event",
        order_by="EventParticipation.id",
        init=False,
    )


class EventParticipation(Base):
    __tablename__ = "event_participation"
    __table_args__ = (UniqueConstraint("event_id", "account_link_id"),)

    id: Mapped[IntPk] = mapped_column(init=False)
    event_id: Mapped[int] = mapped_column(ForeignKey("scheduled_event.id"))
    account_link_id: Mapped[AccountLinkId]
    notified: Mapped[bool] = mapped_column(default=False)
    created_at: Mapped[datetime] = mapped_column(
        default_factory=utcnow, insert_default=func.current_timestamp()
    )

    event: Mapped["ScheduledEvent"] = relationship(
        back_populates="participations", init=False
    )
    account_link: Mapped["AccountLink"] = relationship(init=False)
