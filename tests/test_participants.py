from datetime import datetime

import pytest

from accounts.links import link_account, unlink_account
from models import EventParticipation, ScheduledEvent, ScheduledEventType
from scheduling.participants import list_participants, register_for_event
from utils.exceptions import ConflictError, NotFoundError, VoidlingError

EVENT_ID = 987654321
MEMBER = 1000


@pytest.fixture
def event(database):
    event = ScheduledEvent(
        type=ScheduledEventType.MASS,
        activity="Corporeal Beast",
        location="World 444",
        scheduled_at=datetime(2025, 1, 16, 1, 0),
        discord_event_id=EVENT_ID,
        timezone="America/New_York",
    )
    database.add(event)
    database.commit()
    return event


def test_register_creates_unnotified_participation(database, event):
    link = link_account(MEMBER, "Zezima", database)

    participation = register_for_event(EVENT_ID, MEMBER, database)

    assert participation.event_id == event.id
    assert participation.account_link_id == link.id
    assert participation.notified is False


def test_register_twice_conflicts(database, event):
    link_account(MEMBER, "Zezima", database)
    register_for_event(EVENT_ID, MEMBER, database)

    with pytest.raises(ConflictError) as e:
        register_for_event(EVENT_ID, MEMBER, database)

    assert e.value.err == VoidlingError.ALREADY_REGISTERED
    assert database.query(EventParticipation).count() == 1


def test_register_requires_link(database, event):
    with pytest.raises(NotFoundError) as e:
        register_for_event(EVENT_ID, MEMBER, database)

    assert e.value.err == VoidlingError.NOT_LINKED


def test_register_requires_active_link(database, event):
    link_account(MEMBER, "Zezima", database)
    unlink_account(MEMBER, database)

    with pytest.raises(NotFoundError) as e:
        register_for_event(EVENT_ID, MEMBER, database)

    assert e.value.err == VoidlingError.NOT_LINKED


def test_register_unknown_event(database):
    link_account(MEMBER, "Zezima", database)

    with pytest.raises(NotFoundError) as e:
        register_for_event(123, MEMBER, database)

    assert e.value.err == VoidlingError.EVENT_NOT_FOUND


def test_new_link_can_register_again(database, event):
    # participation is per account link, not per member
    link_account(MEMBER, "Zezima", database)
    register_for_event(EVENT_ID, MEMBER, database)
    link_account(MEMBER, "Lynx Titan", database)

    register_for_event(EVENT_ID, MEMBER, database)

    assert database.query(EventParticipation).count() == 2


def test_list_participants_in_signup_order(database, event):
    for member, name in [(1, "Zezima"), (2, "Lynx Titan"), (3, "B0aty")]:
        link_account(member, name, database)
    for member in [2, 3, 1]:
        register_for_event(EVENT_ID, member, database)

    listed_event, participants = list_participants(EVENT_ID, database)

    assert listed_event.id == event.id
    assert [name for _, name in participants] == ["Lynx Titan", "B0aty", "Zezima"]


def test_list_participants_empty(database, event):
    _, participants = list_participants(EVENT_ID, database)
    assert participants == []


def test_list_participants_unknown_event(database):
    with pytest.raises(NotFoundError) as e:
        list_participants(EVENT_ID, database)

    assert e.value.err == VoidlingError.EVENT_NOT_FOUND
