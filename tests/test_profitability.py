# tests/test_profitability.py

import asyncio
import math

import pytest

from src.core.profitability import coins_to_frame, pick_best, select_best, switch_handicap
from tests.helpers import FakeTransport, cryptonote_stats, make_coin

NOW = 1_700_000_000.0


def _coin(symbol, score, algo="X", hashrate=0):
    """A coin whose rewardperday * marketvalue equals `score`."""
    return make_coin(
        symbol=symbol,
        algo=algo,
        rewardperday=score,
        marketvalue=1.0,
        hashrate=hashrate,
    )


def test_picks_highest_score():
    coins = [_coin("A", 10), _coin("B", 30), _coin("C", 20)]

    assert pick_best(coins).symbol == "B"


def test_coins_with_errors_are_excluded():
    a = _coin("A", 10)
    b = _coin("B", 20)
    b.ticker.has_error = True
    c = _coin("C", 40)
    c.network.has_error = "URL failed to load"

    assert pick_best([a, b, c]) is a


def test_all_erroring_coins_yield_no_selection():
    a = _coin("A", 10)
    a.ticker.has_error = True
    b = _coin("B", 20)
    b.network.has_error = "API response error"

    assert pick_best([a, b]) is None
    assert pick_best([]) is None


def test_algorithm_switch_penalty():
    active = _coin("ACTIVE", 0, algo="X")
    same_algo = _coin("SAME", 10, algo="X")

    assert pick_best([same_algo, _coin("OTHER", 15, algo="Y")], active, 2) is same_algo
    assert pick_best([_coin("OTHER", 15, algo="Y"), same_algo], active, 2) is same_algo

    winner = _coin("OTHER", 25, algo="Y")
    assert pick_best([same_algo, winner], active, 2) is winner


def test_penalty_needs_an_active_coin():
    same = _coin("A", 10, algo="X")
    other = _coin("B", 15, algo="Y")

    assert pick_best([same, other], None, 2) is other


@pytest.mark.parametrize(
    "algo, active_algo, multiplier, expected",
    [
        ("X", "X", 2, 1.0),
        ("Y", "X", 2, 0.5),
        ("Y", None, 2, 1.0),
        ("Y", "X", 0, 1.0),
        ("Y", "X", 1, 1.0),
        ("Y", "X", 0.5, 2.0),
    ],
)
def test_switch_handicap(algo, active_algo, multiplier, expected):
    assert switch_handicap(_coin("A", 1, algo=algo), active_algo, multiplier) == expected


def test_negative_multiplier_is_rejected():
    with pytest.raises(ValueError):
        switch_handicap(_coin("A", 1, algo="Y"), "X", -1)


def test_ties_keep_the_earlier_coin():
    first = _coin("FIRST", 10)
    second = _coin("SECOND", 10)

    assert pick_best([first, second]) is first
    assert pick_best([second, first]) is second


def test_hashrate_weights_the_comparison():
    slow = _coin("SLOW", 10, hashrate=1)
    fast = _coin("FAST", 6, hashrate=2)

    assert pick_best([slow, fast]) is fast


def test_zero_hashrate_counts_as_one():
    unset = _coin("UNSET", 10, hashrate=0)
    one = _coin("ONE", 10, hashrate=1)

    assert pick_best([unset, one]) is unset


def test_select_best_refreshes_before_comparing():
    low = make_coin(symbol="LOW", api="https://low.test/api")
    high = make_coin(symbol="HIGH", api="https://high.test/api")
    transport = FakeTransport(
        {
            "https://low.test/api/stats": cryptonote_stats(reward=1_000_000_000),
            "https://high.test/api/stats": cryptonote_stats(reward=4_000_000_000),
            "https://ticker.test/api/LOW-BTC": {"last": 1.0},
            "https://ticker.test/api/HIGH-BTC": {"last": 1.0},
        }
    )

    best = asyncio.run(select_best([low, high], transport, now=NOW))

    assert best is high
    assert high.rewardperday == pytest.approx(4 * low.rewardperday)


def test_select_best_returns_none_when_every_refresh_fails():
    coins = [make_coin(symbol="A"), make_coin(symbol="B")]

    assert asyncio.run(select_best(coins, FakeTransport(), now=NOW)) is None


def test_coins_to_frame():
    active = _coin("A", 10, algo="X")
    other = _coin("B", 20, algo="Y", hashrate=2)
    broken = _coin("C", 30)
    broken.ticker.has_error = True

    df = coins_to_frame([active, other, broken], active, 2, selected=active)

    assert list(df["Symbol"]) == ["A", "B", "C"]
    assert list(df["Selected"]) == [True, False, False]
    assert list(df["Handicap"]) == [1.0, 0.5, 1.0]
    assert df.loc[1, "Score"] == pytest.approx(20.0)
    assert math.isnan(df.loc[2, "Score"])
    assert df.loc[2, "Status"] == "Ticker error"
    assert df.loc[0, "Status"] == "OK"


def test_coins_to_frame_empty():
    df = coins_to_frame([])

    assert df.empty
    assert "Score" in df.columns
