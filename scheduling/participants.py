import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy_utils import ScalarListException

from accounts.links import get_active_link
from models import EventParticipation, ScheduledEvent, db_session
from utils.exceptions import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    VoidlingError,
)


def get_event(discord_event_id: int, session=db_session) -> ScheduledEvent:
    event = (
        session.query(ScheduledEvent)
        .filter(ScheduledEvent.discord_event_id == discord_event_id)
        .one_or_none()
    )
    if event is None:
        raise NotFoundError(VoidlingError.EVENT_NOT_FOUND, str(discord_event_id))
    return event


def register_for_event(
    discord_event_id: int, discord_member_id: int, session=db_session
) -> EventParticipation:
    link = get_active_link(discord_member_id, session)
    if link is None:
        raise NotFoundError(VoidlingError.NOT_LINKED, str(discord_member_id))

    event = get_event(discord_event_id, session)

    existing = (
        session.query(EventParticipation)
        .filter(
            EventParticipation.event_id == event.id,
            EventParticipation.account_link_id == link.id,
        )
        .one_or_none()
    )
    if existing is not None:
        raise ConflictError(VoidlingError.ALREADY_REGISTERED, link.runescape_name)

    participation = EventParticipation(event_id=event.id, account_link_id=link.id)
    try:
        session.add(participation)
        session.commit()
    except IntegrityError as e:
        # lost a race with a double click, the unique constraint caught it
        session.rollback()
        raise ConflictError(VoidlingError.ALREADY_REGISTERED, link.runescape_name) from e
    except (ScalarListException, SQLAlchemyError) as e:
        session.rollback()
        logging.exception(e)
        raise PersistenceError(f"could not register for event {discord_event_id}") from e

    logging.info(
        f"Registered {link.runescape_name} for {event.type.value} {discord_event_id}"
    )
    return participation


def list_participants(
    discord_event_id: int, session=db_session
) -> tuple[ScheduledEvent, list[tuple[EventParticipation, str]]]:
    """Participants in the order they signed up, with their RSNs"""
    event = get_event(discord_event_id, session)
    return event, [(p, p.account_link.runescape_name) for p in event.participations]
