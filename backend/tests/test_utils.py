from datetime import date

import pytest

from utils.currency import format_currency, cents_to_decimal_str
from utils.dates import normalize_date, month_bounds, resolve_month
from utils.errors import ValidationError
from utils.validation import validate_password


@pytest.mark.parametrize("cents,expected", [
    (0, "R$ 0,00"),
    (500, "R$ 5,00"),
    (123456, "R$ 1.234,56"),
    (-9000, "-R$ 90,00"),
])
def test_format_currency(cents, expected):
    assert format_currency(cents) == expected


def test_cents_to_decimal_str():
    assert cents_to_decimal_str(500) == "5.00"
    assert cents_to_decimal_str(-1) == "-0.01"


def test_normalize_date():
    assert normalize_date("2025-12-27T00:00:00.000Z") == "2025-12-27"
    assert normalize_date("2025-01-05") == "2025-01-05"
    with pytest.raises(ValidationError):
        normalize_date("27/12/2025")


def test_month_bounds():
    assert month_bounds(2024, 2) == ("2024-02-01", "2024-02-29")
    assert month_bounds(2025, 12) == ("2025-12-01", "2025-12-31")


def test_validate_password():
    validate_password("abcdefg1")
    for weak in ["abc1", "abcdefgh", "12345678"]:
        with pytest.raises(ValidationError):
            validate_password(weak)


def test_resolve_month_defaults_only_missing_values():
    today = date.today()
    assert resolve_month(None, None) == (today.year, today.month)
    assert resolve_month(2024, None) == (2024, today.month)
    assert resolve_month(None, 7) == (today.year, 7)


@pytest.mark.parametrize("year,month", [(2025, 0), (2025, 13), (0, 5), (10000, 1), (-1, 1)])
def test_resolve_month_out_of_range(year, month):
    with pytest.raises(ValidationError):
        resolve_month(year, month)
