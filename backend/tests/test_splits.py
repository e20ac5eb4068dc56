import pytest

from utils.splits import compute_shares, calculate_equal_shares
from utils.errors import ValidationError, SplitMismatchError


def test_equal_split_even_total():
    shares = compute_shares(9000, [1, 2, 3], "equal")
    assert shares == {1: 3000, 2: 3000, 3: 3000}


def test_equal_split_remainder_goes_to_first_participants():
    shares = calculate_equal_shares(10000, [7, 8, 9])
    assert shares == {7: 3334, 8: 3333, 9: 3333}
    assert sum(shares.values()) == 10000


@pytest.mark.parametrize("total,count", [(1, 3), (100, 7), (99999, 11), (5, 5)])
def test_equal_split_always_sums_to_total(total, count):
    ids = list(range(1, count + 1))
    shares = compute_shares(total, ids, "equal")
    assert sum(shares.values()) == total
    assert set(shares.values()) <= {total // count, total // count + 1}


def test_manual_split_accepted():
    shares = compute_shares(5000, [1, 2, 3], "manual", {1: 2000, 2: 2000, 3: 1000})
    assert shares == {1: 2000, 2: 2000, 3: 1000}


def test_manual_split_rejected_with_discrepancy():
    with pytest.raises(SplitMismatchError) as exc_info:
        compute_shares(5000, [1, 2, 3], "manual", {1: 2000, 2: 2000, 3: 500})
    assert exc_info.value.discrepancy == 500
    assert "R$ 45,00" in exc_info.value.detail
    assert "R$ 50,00" in exc_info.value.detail


def test_manual_split_allows_one_cent_gap():
    shares = compute_shares(1000, [1, 2, 3], "manual", {1: 333, 2: 333, 3: 333})
    assert sum(shares.values()) == 999


def test_manual_split_missing_participant_counts_as_zero():
    shares = compute_shares(1000, [1, 2], "manual", {1: 1000})
    assert shares == {1: 1000, 2: 0}


def test_manual_split_rejects_values_outside_selection():
    with pytest.raises(ValidationError):
        compute_shares(1000, [1, 2], "manual", {1: 500, 3: 500})


def test_manual_split_rejects_negative_amounts():
    with pytest.raises(ValidationError):
        compute_shares(1000, [1, 2], "manual", {1: 1500, 2: -500})


def test_manual_split_requires_values():
    with pytest.raises(ValidationError):
        compute_shares(1000, [1, 2], "manual")


@pytest.mark.parametrize("total", [0, -100])
def test_total_must_be_positive(total):
    with pytest.raises(ValidationError):
        compute_shares(total, [1], "equal")


def test_requires_participants():
    with pytest.raises(ValidationError):
        compute_shares(1000, [], "equal")


def test_rejects_duplicate_participants():
    with pytest.raises(ValidationError):
        compute_shares(1000, [1, 1], "equal")


def test_rejects_unknown_split_type():
    with pytest.raises(ValidationError):
        compute_shares(1000, [1], "percent")
