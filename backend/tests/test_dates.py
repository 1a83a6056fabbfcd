"""Tests for the Jalali date value type and the date-input clamp."""
from datetime import date

import pytest

from hse.core.dates import (
    JalaliDate,
    add_years,
    clamp_date_input,
    gregorian_to_jalali,
    normalize,
    normalize_time,
    parse_or_none,
)


class TestJalaliDate:
    def test_parse_and_format_zero_pads(self):
        assert str(JalaliDate.parse("1402/5/9")) == "1402/05/09"
        assert normalize(" 1399/12/30 ") == "1399/12/30"

    @pytest.mark.parametrize("text", ["1402-05-09", "1402/13/01", "1402/01/32", "1402/00/10", "", "abc"])
    def test_rejects_bad_text(self, text):
        with pytest.raises(ValueError):
            JalaliDate.parse(text)

    def test_parse_or_none_is_lenient(self):
        assert parse_or_none(None) is None
        assert parse_or_none("garbage") is None
        assert parse_or_none("1400/1/1") == JalaliDate(1400, 1, 1)

    def test_ordering_matches_padded_string_order(self):
        texts = ["1402/10/01", "1402/02/15", "1399/12/29", "1402/02/03"]
        by_date = sorted(texts, key=JalaliDate.parse)
        assert by_date == sorted(texts)

    def test_from_gregorian(self):
        assert gregorian_to_jalali(2023, 3, 21) == (1402, 1, 1)
        assert JalaliDate.from_gregorian(date(2024, 3, 19)) == JalaliDate(1402, 12, 29)

    def test_add_years(self):
        assert add_years(JalaliDate(1402, 5, 9), 1) == JalaliDate(1403, 5, 9)
        assert add_years(JalaliDate(1399, 12, 30), 1) == JalaliDate(1400, 12, 29)


class TestTime:
    def test_normalizes_hours(self):
        assert normalize_time("7:30") == "07:30"
        assert normalize_time("23:59") == "23:59"

    @pytest.mark.parametrize("text", ["24:00", "12:60", "noon", ""])
    def test_rejects_bad_time(self, text):
        with pytest.raises(ValueError):
            normalize_time(text)


class TestClampDateInput:
    @pytest.mark.parametrize(
        "typed, expected",
        [
            ("1402", "1402"),
            ("14025", "1402"),
            ("1402/", "1402/"),
            ("1402/1", "1402/1"),
            ("1402/00", "1402/01"),
            ("1402/13", "1402/12"),
            ("1402/05/45", "1402/05/31"),
            ("1402/05/00", "1402/05/01"),
            ("1402/123/4", "1402/12/4"),
            ("14a02/0x5", "1402/05"),
            ("1402/05/09/7", "1402/05/09"),
        ],
    )
    def test_progressive_clamp(self, typed, expected):
        assert clamp_date_input(typed) == expected

    def test_clamp_endpoint(self, client):
        from conftest import ADMIN

        resp = client.get("/api/v1/dates/clamp", params={"value": "1402/13/45"}, auth=ADMIN)
        assert resp.json() == {"value": "1402/12/31"}

    def test_today_endpoint(self, client):
        from conftest import ADMIN

        resp = client.get("/api/v1/dates/today", auth=ADMIN)
        assert JalaliDate.parse(resp.json()["value"])
