# gpsd_link/tests/model/test_fields.py
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from gpsd_link.core.errors import DecodeError
from gpsd_link.model.base import Unknown, format_time
from gpsd_link.model.fields import as_object, opt_float, opt_list, parse_time, req_str


def test_parse_time_variants():
    expected = datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)
    assert parse_time("2024-05-06T07:08:09.123Z") == expected
    assert parse_time("2024-05-06T09:08:09.123+02:00") == expected
    assert parse_time("2024-05-06T07:08:09Z") == expected.replace(microsecond=0)
    # nanosecond fractions are truncated to microseconds
    assert parse_time("2024-05-06T07:08:09.123456789Z").microsecond == 123456


def test_parse_time_rejects_garbage():
    with pytest.raises(ValueError):
        parse_time("not a time")


def test_format_time_round_trips_milliseconds():
    dt = datetime(2024, 5, 6, 7, 8, 9, 123000, tzinfo=timezone.utc)
    assert format_time(dt) == "2024-05-06T07:08:09.123Z"


def test_as_object_rejects_non_mapping():
    with pytest.raises(DecodeError):
        as_object([1, 2], "TPV")


def test_getters():
    obj = {"a": "x", "n": 3, "z": None}
    assert req_str(obj, "a") == "x"
    assert opt_float(obj, "n") == 3.0
    assert opt_float(obj, "z") is None
    assert opt_list(obj, "missing", int) == []

    with pytest.raises(DecodeError) as ei:
        req_str(obj, "missing")
    assert ei.value.code == "decode_error"
    assert ei.value.details["member"] == "missing"


def test_unknown_str_and_declared_class():
    u = Unknown({"class": "FOO", "x": 1})
    assert str(u) == '{"class":"FOO","x":1}'
    assert u.declared_class == "FOO"

    raw = Unknown("not json")
    assert str(raw) == "not json"
    assert raw.declared_class is None
