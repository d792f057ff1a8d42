import logging
import warnings
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy_utils import ScalarListException

from accounts.links import find_active_link_by_name, get_active_link
from competitions.ranking import rank, top_n
from models import (
    CompetitionStatus,
    CompetitionType,
    TrackedCompetition,
    db_session,
    utcnow,
)
from utils.exceptions import (
    ExternalServiceError,
    NotFoundError,
    PartialSuccessWarning,
    PersistenceError,
    VoidlingError,
)
from wiseoldman import Participation

# WOM rejects competitions that start in the past
START_DELAY = timedelta(minutes=1)
COMPETITION_LENGTH = timedelta(days=7)
WINNER_COUNT = 3


@dataclass
class StartedCompetition:
    competition: TrackedCompetition
    verification_code: str
    starts_at: datetime
    ends_at: datetime

    @property
    def url(self) -> str:
        return self.competition.url


@dataclass
class Registration:
    runescape_name: str
    metric: str
    message: str
    thread_id: Optional[int]


@dataclass
class Winner:
    rank: int
    display_name: str
    start: int
    end: int
    gained: int
    discord_id: Optional[int] = None

    @property
    def mention(self) -> str:
        if self.discord_id:
            return f"<@{self.discord_id}>"
        return f"**{self.display_name}**"


@dataclass
class FinishedCompetition:
    competition: TrackedCompetition
    title: str
    winners: list[Winner]

    @property
    def first_place(self) -> Winner:
        return self.winners[0]


def get_competition_by_wom_id(
    wom_competition_id: int, session=db_session
) -> Optional[TrackedCompetition]:
    return (
        session.query(TrackedCompetition)
        .filter(TrackedCompetition.wom_competition_id == wom_competition_id)
        .one_or_none()
    )


def get_open_competition(
    competition_type: CompetitionType, session=db_session
) -> Optional[TrackedCompetition]:
    """Most recently started competition of this type that hasn't been finished"""
    return (
        session.query(TrackedCompetition)
        .filter(
            TrackedCompetition.type == competition_type,
            TrackedCompetition.status == CompetitionStatus.OPEN,
        )
        .order_by(TrackedCompetition.created_at.desc(), TrackedCompetition.id.desc())
        .first()
    )


async def start_competition(
    wom,
    competition_type: CompetitionType,
    metric: str,
    title: str,
    thread_id: Optional[int] = None,
    session=db_session,
    now: Optional[datetime] = None,
) -> StartedCompetition:
    now = now or datetime.now(timezone.utc)
    starts_at = now + START_DELAY
    ends_at = starts_at + COMPETITION_LENGTH

    created = await wom.create_competition(title, metric, starts_at, ends_at)
    wom_id = created.competition.id
    logging.info(f"Created WOM competition {wom_id} for {competition_type.value}")

    competition = TrackedCompetition(
        wom_competition_id=wom_id,
        verification_code=created.verification_code,
        metric=metric,
        type=competition_type,
        discord_thread_id=thread_id,
    )
    try:
        session.add(competition)
        session.commit()
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        # nothing rolls back the WOM side, make the orphan easy to find
        warnings.warn(
            f"WOM competition {wom_id} was created but could not be stored",
            PartialSuccessWarning,
        )
        raise PersistenceError(f"could not store competition {wom_id}") from e

    return StartedCompetition(
        competition=competition,
        verification_code=created.verification_code,
        starts_at=starts_at,
        ends_at=ends_at,
    )


async def register_participant(
    wom, wom_competition_id: int, discord_member_id: int, session=db_session
) -> Registration:
    competition = get_competition_by_wom_id(wom_competition_id, session)
    if competition is None:
        raise NotFoundError(VoidlingError.COMPETITION_NOT_FOUND, str(wom_competition_id))

    link = get_active_link(discord_member_id, session)
    if link is None:
        raise NotFoundError(VoidlingError.NOT_LINKED, str(discord_member_id))

    # fresh hiscores lock in an accurate starting point, but it's not essential
    try:
        await wom.update_player(link.runescape_name)
    except (ExternalServiceError, NotFoundError) as e:
        logging.warning(f"Failed to update player {link.runescape_name}: {e}")

    result = await wom.add_participants(
        wom_competition_id, [link.runescape_name], competition.verification_code
    )
    logging.info(
        f"Registered {link.runescape_name} for WOM competition {wom_competition_id}"
    )
    return Registration(
        runescape_name=link.runescape_name,
        metric=competition.metric,
        message=result.message,
        thread_id=competition.discord_thread_id,
    )


async def list_competition_participants(
    wom, wom_competition_id: int
) -> tuple[str, list[Participation]]:
    standings = await wom.get_competition(wom_competition_id)
    return standings.title, rank(standings.participations)


def mark_finished(competition: TrackedCompetition, session=db_session):
    try:
        competition.status = CompetitionStatus.FINISHED
        competition.finished_at = utcnow()
        session.commit()
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        raise PersistenceError(
            f"could not finish competition {competition.wom_competition_id}"
        ) from e


async def finish_competition(
    wom, competition_type: CompetitionType, session=db_session
) -> FinishedCompetition:
    """Close the open competition of this type and work out who won.

    A competition is only ever finished once; finishing again reports that there
    is nothing open rather than re-announcing the same winners.
    """
    competition = get_open_competition(competition_type, session)
    if competition is None:
        raise NotFoundError(
            VoidlingError.NO_ACTIVE_COMPETITION, competition_type.display_name
        )

    # failure here leaves the competition open so finish can be retried
    standings = await wom.get_competition(competition.wom_competition_id)

    if not standings.participations:
        mark_finished(competition, session)
        raise NotFoundError(VoidlingError.NO_PARTICIPANTS, standings.title)

    podium = [p for p in top_n(rank(standings.participations), WINNER_COUNT) if p.gained > 0]
    if not podium:
        mark_finished(competition, session)
        raise NotFoundError(VoidlingError.NO_PROGRESS, standings.title)

    winners = []
    for position, participation in enumerate(podium, start=1):
        link = find_active_link_by_name(participation.player.username, session)
        winners.append(
            Winner(
                rank=position,
                display_name=participation.player.display_name,
                start=participation.progress.start,
                end=participation.progress.end,
                gained=participation.gained,
                discord_id=link.discord_member_id if link else None,
            )
        )

    mark_finished(competition, session)
    logging.info(
        f"Finished WOM competition {competition.wom_competition_id}, "
        f"winner {winners[0].display_name}"
    )
    return FinishedCompetition(
        competition=competition, title=standings.title, winners=winners
    )
