from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import SQLAlchemyError

from accounts.links import link_account
from competitions.lifecycle import (
    finish_competition,
    list_competition_participants,
    register_participant,
    start_competition,
)
from models import CompetitionStatus, CompetitionType, TrackedCompetition
from tests.stubs import FakeWiseOldMan, make_participation
from utils.exceptions import (
    ExternalServiceError,
    NotFoundError,
    PartialSuccessWarning,
    PersistenceError,
    VoidlingError,
)

NOW = datetime(2025, 1, 12, 18, 0, tzinfo=timezone.utc)
BOTW = CompetitionType.BOSS_OF_THE_WEEK
SOTW = CompetitionType.SKILL_OF_THE_WEEK


async def start(wom, database, competition_type=BOTW, metric="callisto", thread_id=77):
    return await start_competition(
        wom,
        competition_type,
        metric,
        f"{competition_type.display_name} - Callisto",
        thread_id=thread_id,
        session=database,
        now=NOW,
    )


@pytest.mark.asyncio
async def test_start_creates_week_long_competition(database):
    wom = FakeWiseOldMan(next_id=1000, code="111-222-333")

    started = await start(wom, database)

    created = wom.created[0]
    assert created.starts_at == NOW + timedelta(minutes=1)
    assert created.ends_at == NOW + timedelta(minutes=1, days=7)
    assert started.verification_code == "111-222-333"
    assert started.url == "https://wiseoldman.net/competitions/1000"

    stored = database.query(TrackedCompetition).one()
    assert stored.wom_competition_id == 1000
    assert stored.verification_code == "111-222-333"
    assert stored.discord_thread_id == 77
    assert stored.type == BOTW
    assert stored.status == CompetitionStatus.OPEN


@pytest.mark.asyncio
async def test_start_wom_failure_stores_nothing(database):
    wom = FakeWiseOldMan()
    wom.fail_create = True

    with pytest.raises(ExternalServiceError):
        await start(wom, database)

    assert database.query(TrackedCompetition).count() == 0


@pytest.mark.asyncio
async def test_start_store_failure_warns_about_orphan(database, monkeypatch):
    wom = FakeWiseOldMan(next_id=4242)

    def broken_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(database, "commit", broken_commit)

    with pytest.warns(PartialSuccessWarning, match="4242"):
        with pytest.raises(PersistenceError):
            await start(wom, database)

    assert len(wom.created) == 1


@pytest.mark.asyncio
async def test_register_participant(database):
    wom = FakeWiseOldMan()
    await start(wom, database)
    link_account(1, "Zezima", database)

    registration = await register_participant(wom, 1000, 1, database)

    assert wom.updated == ["Zezima"]
    assert wom.added == [(1000, ["Zezima"], "123-456-789")]
    assert registration.runescape_name == "Zezima"
    assert registration.metric == "callisto"
    assert registration.thread_id == 77
    assert registration.message == "Successfully added 1 participants."


@pytest.mark.asyncio
async def test_register_survives_failed_player_update(database):
    wom = FakeWiseOldMan()
    wom.fail_update = True
    await start(wom, database)
    link_account(1, "Zezima", database)

    registration = await register_participant(wom, 1000, 1, database)

    assert registration.runescape_name == "Zezima"
    assert len(wom.added) == 1


@pytest.mark.asyncio
async def test_register_fails_when_add_fails(database):
    wom = FakeWiseOldMan()
    await start(wom, database)
    link_account(1, "Zezima", database)
    wom.fail_add = True

    with pytest.raises(ExternalServiceError):
        await register_participant(wom, 1000, 1, database)


@pytest.mark.asyncio
async def test_register_unknown_competition(database):
    link_account(1, "Zezima", database)

    with pytest.raises(NotFoundError) as e:
        await register_participant(FakeWiseOldMan(), 999, 1, database)

    assert e.value.err == VoidlingError.COMPETITION_NOT_FOUND


@pytest.mark.asyncio
async def test_register_requires_link(database):
    wom = FakeWiseOldMan()
    await start(wom, database)

    with pytest.raises(NotFoundError) as e:
        await register_participant(wom, 1000, 1, database)

    assert e.value.err == VoidlingError.NOT_LINKED
    assert wom.added == []


@pytest.mark.asyncio
async def test_list_participants_ranked():
    wom = FakeWiseOldMan(
        participations=[
            make_participation("low", 1),
            make_participation("high", 30),
            make_participation("mid", 10),
        ]
    )

    title, ranked = await list_competition_participants(wom, 1000)

    assert title == "Boss of the Week - Callisto"
    assert [p.player.username for p in ranked] == ["high", "mid", "low"]


@pytest.mark.asyncio
async def test_finish_announces_top_three(database):
    wom = FakeWiseOldMan(
        participations=[
            make_participation("zezima", 12, start=100),
            make_participation("lynx titan", 40, start=5),
            make_participation("b0aty", 7),
            make_participation("woox", 25),
            make_participation("afk", 0),
        ]
    )
    await start(wom, database)
    link_account(1, "Lynx Titan", database)

    finished = await finish_competition(wom, BOTW, database)

    assert [w.display_name for w in finished.winners] == ["lynx titan", "woox", "zezima"]
    assert [w.rank for w in finished.winners] == [1, 2, 3]
    first = finished.first_place
    assert first.discord_id == 1
    assert first.mention == "<@1>"
    assert (first.start, first.end, first.gained) == (5, 45, 40)
    assert finished.winners[1].discord_id is None
    assert finished.winners[1].mention == "**woox**"
    assert finished.competition.status == CompetitionStatus.FINISHED
    assert finished.competition.finished_at is not None


@pytest.mark.asyncio
async def test_finish_drops_winners_without_progress(database):
    wom = FakeWiseOldMan(
        participations=[
            make_participation("a", 10),
            make_participation("b", 0),
            make_participation("c", -3),
        ]
    )
    await start(wom, database)

    finished = await finish_competition(wom, BOTW, database)

    assert [w.display_name for w in finished.winners] == ["a"]


@pytest.mark.asyncio
async def test_finish_no_progress(database):
    wom = FakeWiseOldMan(
        participations=[make_participation("a", 0), make_participation("b", 0)]
    )
    await start(wom, database)

    with pytest.raises(NotFoundError) as e:
        await finish_competition(wom, BOTW, database)

    assert e.value.err == VoidlingError.NO_PROGRESS
    assert database.query(TrackedCompetition).one().status == CompetitionStatus.FINISHED


@pytest.mark.asyncio
async def test_finish_no_participants(database):
    wom = FakeWiseOldMan(participations=[])
    await start(wom, database)

    with pytest.raises(NotFoundError) as e:
        await finish_competition(wom, BOTW, database)

    assert e.value.err == VoidlingError.NO_PARTICIPANTS


@pytest.mark.asyncio
async def test_finish_without_competition(database):
    with pytest.raises(NotFoundError) as e:
        await finish_competition(FakeWiseOldMan(), BOTW, database)

    assert e.value.err == VoidlingError.NO_ACTIVE_COMPETITION


@pytest.mark.asyncio
async def test_finish_only_once(database):
    wom = FakeWiseOldMan(participations=[make_participation("a", 10)])
    await start(wom, database)
    await finish_competition(wom, BOTW, database)

    with pytest.raises(NotFoundError) as e:
        await finish_competition(wom, BOTW, database)

    assert e.value.err == VoidlingError.NO_ACTIVE_COMPETITION


@pytest.mark.asyncio
async def test_finish_is_per_type(database):
    wom = FakeWiseOldMan(participations=[make_participation("a", 10)])
    await start(wom, database, competition_type=SOTW, metric="fishing")

    with pytest.raises(NotFoundError) as e:
        await finish_competition(wom, BOTW, database)

    assert e.value.err == VoidlingError.NO_ACTIVE_COMPETITION
    finished = await finish_competition(wom, SOTW, database)
    assert finished.competition.metric == "fishing"


@pytest.mark.asyncio
async def test_finish_picks_latest_open(database):
    wom = FakeWiseOldMan(next_id=1, participations=[make_participation("a", 10)])
    await start(wom, database)
    await start(wom, database)

    finished = await finish_competition(wom, BOTW, database)

    assert finished.competition.wom_competition_id == 2


@pytest.mark.asyncio
async def test_finish_standings_failure_leaves_competition_open(database):
    wom = FakeWiseOldMan(participations=[make_participation("a", 10)])
    await start(wom, database)
    wom.fail_standings = True

    with pytest.raises(ExternalServiceError):
        await finish_competition(wom, BOTW, database)

    assert database.query(TrackedCompetition).one().status == CompetitionStatus.OPEN

    wom.fail_standings = False
    finished = await finish_competition(wom, BOTW, database)
    assert finished.first_place.display_name == "a"


@pytest.mark.asyncio
async def test_finished_at_is_naive_utc(database):
    wom = FakeWiseOldMan(participations=[make_participation("a", 10)])
    await start(wom, database)

    before = datetime.now(timezone.utc).replace(tzinfo=None)
    finished = await finish_competition(wom, BOTW, database)
    after = datetime.now(timezone.utc).replace(tzinfo=None)

    assert finished.competition.finished_at.tzinfo is None
    assert before <= finished.competition.finished_at <= after
