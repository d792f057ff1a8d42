import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, func
from sqlalchemy.orm import Mapped, mapped_column

from models.models import Base, IntPk, utcnow


class CompetitionType(enum.Enum):
    BOSS_OF_THE_WEEK = "BOSS_OF_THE_WEEK"
    SKILL_OF_THE_WEEK = "SKILL_OF_THE_WEEK"

    @property
    def display_name(self) -> str:
        return {
            CompetitionType.BOSS_OF_THE_WEEK: "Boss of the Week",
            CompetitionType.SKILL_OF_THE_WEEK: "Skill of the Week",
        }[self]

    @property
    def unit(self) -> str:
        return "KC" if self is CompetitionType.BOSS_OF_THE_WEEK else "XP"


class CompetitionStatus(enum.Enum):
    OPEN = "OPEN"
    FINISHED = "FINISHED"


class TrackedCompetition(Base):
    __tablename__ = "tracked_competition"

    id: Mapped[IntPk] = mapped_column(init=False)
    wom_competition_id: Mapped[int] = mapped_column(BigInteger, unique=True)
    verification_code: Mapped[str]
    metric: Mapped[str]
    type: Mapped[CompetitionType]
    discord_thread_id: Mapped[Optional[int]] = mapped_column(
        BigInteger, default=None
    )
    status: Mapped[CompetitionStatus] = mapped_column(default=CompetitionStatus.OPEN)
    created_at: Mapped[datetime] = mapped_column(
        default_factory=utcnow, insert_default=func.current_timestamp()
    )
    finished_at: Mapped[Optional[datetime]] = mapped_column(default=None)

    @property
    def url(self) -> str:
        return f"https://wiseoldman.net/competitions/{self.wom_competition_id}"
