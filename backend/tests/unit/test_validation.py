"""Unit tests for schema-driven JSON validation."""

from datetime import datetime, timezone

import pytest

from resource_api.domain.validation import (
    Field,
    format_datetime,
    is_flat_metadata,
    is_number,
    is_string,
    is_valid_date_string,
    one_of,
    parse_datetime,
    validate_fields,
)

FIELDS = (
    Field("name", is_string),
    Field("size", is_number),
    Field("note", is_string, required=False),
)


def test_valid_input_has_no_invalid_fields():
    assert validate_fields({"name": "x", "size": 3}, FIELDS) == []


@pytest.mark.parametrize("raw", [None, "text", 5, ["name"]])
def test_non_object_input_reports_root(raw):
    assert validate_fields(raw, FIELDS) == ["root"]


def test_every_invalid_field_is_listed():
    invalid = validate_fields({"size": "big", "note": 1}, FIELDS)
    assert invalid == ["name", "size", "note"]


def test_optional_field_may_be_absent():
    assert validate_fields({"name": "x", "size": 1.5}, FIELDS) == []


def test_booleans_are_not_numbers():
    assert is_number(True) is False
    assert is_number(0) is True


def test_flat_metadata_rejects_nested_values():
    assert is_flat_metadata({"a": "b", "n": 1, "flag": False})
    assert not is_flat_metadata({"nested": {"a": 1}})
    assert not is_flat_metadata(["a"])


def test_one_of_case_insensitive():
    check = one_of("day", "week", case_sensitive=False)
    assert check("DAY")
    assert not check("month")
    assert not check(None)


def test_parse_datetime_accepts_z_suffix_and_normalises_to_utc():
    parsed = parse_datetime("2024-03-01T12:00:00+02:00")
    assert parsed == datetime(2024, 3, 1, 10, 0, tzinfo=timezone.utc)
    assert parse_datetime("2024-03-01T10:00:00Z") == parsed


def test_naive_timestamp_is_read_as_utc():
    assert parse_datetime("2024-03-01T10:00:00") == datetime(2024, 3, 1, 10, tzinfo=timezone.utc)


@pytest.mark.parametrize("value", ["", "not a date", "2024-13-45", 17])
def test_unparsable_dates_are_invalid_not_errors(value):
    assert is_valid_date_string(value) is False


@pytest.mark.parametrize(
    "value", ["0001-01-01T00:00:00+05:00", "9999-12-31T23:00:00-05:00"]
)
def test_dates_out_of_range_in_utc_are_invalid(value):
    assert parse_datetime(value) is None
    assert is_valid_date_string(value) is False
    assert validate_fields({"when": value}, (Field("when", is_valid_date_string),)) == ["when"]


def test_format_datetime_uses_z_and_keeps_microseconds():
    value = datetime(2024, 3, 1, 10, 0, 0, 123456, tzinfo=timezone.utc)
    assert format_datetime(value) == "2024-03-01T10:00:00.123456Z"
    assert parse_datetime(format_datetime(value)) == value
