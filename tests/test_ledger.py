import numpy as np
import pytest

from radio.errors import InvalidArgument, NoRatingOnRecord
from radio.ledger import RatingLedger


@pytest.fixture
def ledger():
    ledger = RatingLedger()
    ledger.set_rating(1, 10, 5)
    ledger.set_rating(1, 20, 1)
    ledger.set_rating(2, 10, 4)
    return ledger


def test_lookups(ledger):
    # assert
    assert ledger.get_rating(1, 10) == 5
    assert ledger.get_rating(2, 20) is None
    assert ledger.ratings_for_user(1) == {10: 5, 20: 1}
    assert ledger.ratings_for_song(10) == {1: 5, 2: 4}
    assert len(ledger) == 3


def test_replacing_a_rating_keeps_one_triple(ledger):
    # act
    ledger.set_rating(1, 10, 2)

    # assert
    assert ledger.get_rating(1, 10) == 2
    assert len(ledger) == 3
    assert ledger.global_average() == pytest.approx(7 / 3)


def test_global_average(ledger):
    assert ledger.global_average() == pytest.approx(10 / 3)
    assert RatingLedger().global_average() is None


@pytest.mark.parametrize("value", [0, 6, -1, 3.5, "4", True, None])
def test_invalid_rating_values(ledger, value):
    with pytest.raises(InvalidArgument):
        ledger.set_rating(1, 30, value)


def test_numpy_integers_are_accepted():
    # arrange
    ledger = RatingLedger()

    # act
    ledger.set_rating(1, 10, np.int64(4))

    # assert
    assert ledger.get_rating(1, 10) == 4
    assert type(ledger.get_rating(1, 10)) is int


def test_none_identities_rejected(ledger):
    with pytest.raises(InvalidArgument):
        ledger.set_rating(None, 10, 3)
    with pytest.raises(InvalidArgument):
        ledger.clear_rating(1, None)


def test_clear_removes_triple(ledger):
    # act
    ledger.clear_rating(1, 10)

    # assert
    assert ledger.get_rating(1, 10) is None
    assert 1 not in ledger.ratings_for_song(10)
    assert len(ledger) == 2
    assert ledger.global_average() == pytest.approx(5 / 2)


def test_clear_twice_raises(ledger):
    # arrange
    ledger.clear_rating(1, 10)

    # act / assert
    with pytest.raises(NoRatingOnRecord):
        ledger.clear_rating(1, 10)


def test_clear_unknown_user_raises(ledger):
    with pytest.raises(NoRatingOnRecord):
        ledger.clear_rating(99, 10)


def test_remove_song(ledger):
    # act
    removed = ledger.remove_song(10)

    # assert
    assert removed == 2
    assert ledger.ratings_for_user(2) == {}
    assert ledger.ratings_for_user(1) == {20: 1}
    assert ledger.remove_song(10) == 0


def test_snapshot_reused_until_mutation(ledger):
    # act
    first = ledger.snapshot()
    second = ledger.snapshot()
    ledger.set_rating(3, 10, 3)
    third = ledger.snapshot()

    # assert
    assert first is second
    assert third is not first
    assert third.version > first.version
    assert third.rating(3, 10) == 3
    assert first.rating(3, 10) is None

