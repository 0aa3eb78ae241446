from datetime import date, timedelta

import pytest

from arthtrack.months import (
    current_month_id,
    format_date_to_id,
    iter_months,
    month_id_from_date_id,
    month_id_of,
    month_label,
    month_prefix,
    next_month_id,
    parse_id_to_date,
    parse_month,
)


def test_format_date_pads():
    assert format_date_to_id(date(2025, 1, 5)) == "20250105"
    assert format_date_to_id(date(999, 12, 31)) == "09991231"


def test_round_trip_across_leap_year():
    d = date(2023, 12, 25)
    end = date(2025, 1, 10)
    while d <= end:
        assert parse_id_to_date(format_date_to_id(d)) == d
        d += timedelta(days=1)


def test_parse_id_rejects_malformed():
    with pytest.raises(ValueError):
        parse_id_to_date("2025011")
    with pytest.raises(ValueError):
        parse_id_to_date("2025-1-1")
    with pytest.raises(ValueError):
        parse_id_to_date("20250230")


def test_month_ids():
    assert month_id_of(date(2025, 3, 9)) == 202503
    assert month_id_from_date_id("20251231") == 202512
    assert current_month_id(date(2024, 11, 30)) == 202411
    assert month_prefix(202501) == "202501%"


def test_next_month_december_rollover():
    assert next_month_id(202512) == 202601
    assert next_month_id(202503) == 202504
    assert next_month_id(202411) == 202412


def test_iter_months_excludes_stop():
    assert list(iter_months(202411, 202503)) == [202411, 202412, 202501, 202502]
    assert list(iter_months(202503, 202503)) == []
    assert list(iter_months(202504, 202503)) == []


def test_parse_month():
    assert parse_month("2025-01") == 202501
    assert parse_month("202512") == 202512
    assert parse_month("2025-13") is None
    assert parse_month("2025-00") is None
    assert parse_month("abc") is None
    assert parse_month("") is None
    assert parse_month(None) is None


def test_month_label():
    assert month_label(202503) == "March 2025"
