import pytest

from competitions.ranking import rank, top_n
from tests.stubs import make_participation


def names(participations):
    return [p.player.username for p in participations]


def test_rank_orders_by_gained():
    ranked = rank(
        [
            make_participation("a", 5),
            make_participation("b", 50),
            make_participation("c", 0),
            make_participation("d", 20),
        ]
    )
    assert names(ranked) == ["b", "d", "a", "c"]


def test_rank_keeps_input_order_on_ties():
    ranked = rank(
        [
            make_participation("first", 10),
            make_participation("second", 10),
            make_participation("top", 99),
            make_participation("third", 10),
        ]
    )
    assert names(ranked) == ["top", "first", "second", "third"]


def test_top_three_of_ten():
    participations = [make_participation(f"p{i}", i * 7) for i in range(10)]

    podium = top_n(rank(participations), 3)

    assert names(podium) == ["p9", "p8", "p7"]
    assert [p.gained for p in podium] == sorted((p.gained for p in podium), reverse=True)


TOP_N_CASES = {
    "fewer than n": (2, 3, 2),
    "exactly n": (3, 3, 3),
    "zero": (5, 0, 0),
    "negative": (5, -1, 0),
}


@pytest.mark.parametrize(
    ["count", "n", "expected"], TOP_N_CASES.values(), ids=TOP_N_CASES.keys()
)
def test_top_n_length(count, n, expected):
    participations = [make_participation(f"p{i}", i) for i in range(count)]
    assert len(top_n(rank(participations), n)) == expected


def test_rank_empty():
    assert rank([]) == []
    assert top_n([], 3) == []
