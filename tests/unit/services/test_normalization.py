"""Tests for number and date normalization."""

from datetime import date

import pytest

from stockroom.core.services.normalization import (
    find_date,
    normalize_date,
    parse_number,
    parse_percentage,
)

TODAY = date(2024, 6, 1)


class TestParseNumber:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("25,50", 25.5),
            ("4.00", 4.0),
            ("1 234,56", 1234.56),
            ("1.234,56", 1234.56),
            ("1,234.56", 1234.56),
            (7, 7.0),
            (2.5, 2.5),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_number(value) == pytest.approx(expected)

    @pytest.mark.parametrize("value", [None, "", "abc", "nan", True])
    def test_invalid_uses_default(self, value):
        assert parse_number(value, 1.0) == 1.0


class TestParsePercentage:
    def test_forms(self):
        assert parse_percentage("23%") == 23
        assert parse_percentage(8.0) == 8
        assert parse_percentage("5") == 5

    def test_garbage_defaults(self):
        assert parse_percentage("n/a") == 23


class TestDates:
    def test_day_first(self):
        assert normalize_date("15.01.2024", TODAY) == "2024-01-15"

    def test_slashes_and_dashes(self):
        assert normalize_date("5/3/2024", TODAY) == "2024-03-05"
        assert normalize_date("05-03-2024", TODAY) == "2024-03-05"

    def test_year_first(self):
        assert normalize_date("2024/01/15", TODAY) == "2024-01-15"

    def test_iso_unchanged(self):
        assert normalize_date("2024-01-15", TODAY) == "2024-01-15"
        assert normalize_date(normalize_date("2024-01-15", TODAY), TODAY) == "2024-01-15"

    def test_impossible_date_falls_back_to_today(self):
        assert normalize_date("31.02.2024", TODAY) == "2024-06-01"

    @pytest.mark.parametrize("value", [None, "", "brak daty", 20240115])
    def test_missing_falls_back_to_today(self, value):
        assert normalize_date(value, TODAY) == "2024-06-01"

    def test_date_object(self):
        assert normalize_date(date(2023, 12, 31), TODAY) == "2023-12-31"

    def test_find_date_in_text(self):
        assert find_date("Data wystawienia: 15.01.2024 r.") == date(2024, 1, 15)
        assert find_date("bez daty") is None
