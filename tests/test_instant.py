import pickle
from copy import copy, deepcopy
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from regiondate import (
    Duration,
    Instant,
    InvalidFormat,
    Region,
    WallTime,
)

from .common import AlwaysEqual, AlwaysLarger, AlwaysSmaller, NeverEqual


def test_no_direct_init():
    with pytest.raises(TypeError, match="from_"):
        Instant()


def test_now(frozen_now):
    assert Instant.now() == frozen_now


class TestTimestamp:

    def test_seconds(self):
        d = Instant.from_timestamp(1_123_000_000)
        assert d == Instant.from_canonical_format("2005-08-02T16:26:40Z")
        assert d.timestamp() == 1_123_000_000

    def test_fractional_seconds(self):
        d = Instant.from_timestamp(1_123_000_000.5)
        assert d == Instant.from_canonical_format("2005-08-02T16:26:40.5Z")
        assert d.timestamp_nanos() == 1_123_000_000_500_000_000

    def test_nanos(self):
        d = Instant.from_timestamp_nanos(1_500_000_000_000_000_001)
        assert d.timestamp_nanos() == 1_500_000_000_000_000_001
        assert str(d) == "2017-07-14T02:40:00.000000001Z"

    def test_before_epoch(self):
        d = Instant.from_timestamp_nanos(-1)
        assert str(d) == "1969-12-31T23:59:59.999999999Z"


class TestPyDatetime:

    def test_from_aware(self):
        d = Instant.from_py_datetime(
            datetime(2021, 1, 31, 16, tzinfo=timezone(timedelta(hours=1)))
        )
        assert d == Instant.from_canonical_format("2021-01-31T15:00:00Z")

    def test_from_naive(self):
        with pytest.raises(ValueError, match="aware"):
            Instant.from_py_datetime(datetime(2021, 1, 31))

    def test_to_region(self):
        d = Instant.from_canonical_format("2021-01-31T15:00:00.000001999Z")
        py = d.py_datetime(Region(tz="Asia/Tokyo"))
        assert py == datetime(
            2021, 2, 1, 0, 0, 0, 1, tzinfo=ZoneInfo("Asia/Tokyo")
        )
        assert py.tzinfo == ZoneInfo("Asia/Tokyo")

    def test_default_region(self):
        d = Instant.from_canonical_format("2021-01-31T15:00:00Z")
        assert d.py_datetime() == datetime(2021, 1, 31, 15, tzinfo=ZoneInfo("UTC"))


class TestCanonicalFormat:

    @pytest.mark.parametrize(
        "s, expect",
        [
            ("2021-01-31T15:00:00Z", "2021-01-31T15:00:00Z"),
            ("2021-01-31T15:00:00.5Z", "2021-01-31T15:00:00.500000000Z"),
            (
                "2021-01-31T15:00:00.000000007Z",
                "2021-01-31T15:00:00.000000007Z",
            ),
            ("0001-01-01T00:00:00Z", "0001-01-01T00:00:00Z"),
        ],
    )
    def test_roundtrip(self, s, expect):
        d = Instant.from_canonical_format(s)
        assert d.canonical_format() == expect
        assert str(d) == expect
        assert Instant.from_canonical_format(expect) == d

    @pytest.mark.parametrize(
        "s",
        [
            "2021-01-31T15:00:00",
            "2021-01-31 15:00:00Z",
            "2021-01-31T15:00:00+00:00",
            "2021-02-30T00:00:00Z",
            "2021-01-31T15:00:00.1234567890Z",
            "2021-01-31T15:00:00.Z",
        ],
    )
    def test_invalid(self, s):
        with pytest.raises(InvalidFormat):
            Instant.from_canonical_format(s)


def test_repr():
    d = Instant.from_canonical_format("2021-01-31T15:00:00Z")
    assert repr(d) == "Instant(2021-01-31T15:00:00Z)"


def test_equality():
    d = Instant.from_canonical_format("2021-01-31T15:00:00Z")
    same = Instant.from_fields(
        year=2021, month=1, day=31, hour=16, region=Region(tz="Europe/Paris")
    )
    different = d + Duration(nanoseconds=1)
    assert d == same
    assert not d == different
    assert d != different
    assert not d == NeverEqual()
    assert d == AlwaysEqual()
    assert d != NeverEqual()
    assert not d != AlwaysEqual()
    assert not d == 1_612_105_200

    assert hash(d) == hash(same)
    assert hash(d) != hash(different)


def test_comparison():
    d = Instant.from_canonical_format("2021-01-31T15:00:00Z")
    later = d + Duration(nanoseconds=1)
    earlier = d - Duration(nanoseconds=1)

    assert earlier < d < later
    assert earlier <= d <= later
    assert d <= d
    assert later > d > earlier
    assert later >= d >= earlier

    assert d < AlwaysLarger()
    assert d <= AlwaysLarger()
    assert not d > AlwaysLarger()
    assert not d >= AlwaysLarger()
    assert d > AlwaysSmaller()
    assert d >= AlwaysSmaller()
    assert not d < AlwaysSmaller()
    assert not d <= AlwaysSmaller()

    with pytest.raises(TypeError):
        d < 3  # type: ignore[operator]


def test_copy():
    d = Instant.from_canonical_format("2021-01-31T15:00:00Z")
    assert copy(d) is d
    assert deepcopy(d) is d


def test_pickle():
    d = Instant.from_canonical_format("2021-01-31T15:00:00.000000001Z")
    assert pickle.loads(pickle.dumps(d)) == d


def test_from_components():
    region = Region(tz="America/New_York")
    d = Instant.from_components(WallTime(1, 2021, 1, 31, 10), region)
    assert d == Instant.from_canonical_format("2021-01-31T15:00:00Z")
    assert Instant.from_components(d.in_region(region), region) == d


def test_fields_use_default_region():
    d = Instant.from_canonical_format("2021-01-31T15:04:05.000000006Z")
    assert d.era == 1
    assert d.year == 2021
    assert d.month == 1
    assert d.day == 31
    assert d.hour == 15
    assert d.minute == 4
    assert d.second == 5
    assert d.nanosecond == 6
    assert d.weekday == 7
    assert d.weekday_ordinal == 5
    assert d.week_of_year == 4
    assert d.year_for_week_of_year == 2021
    assert d.week_of_month == 5
    assert d.day_of_year == 31
    assert d.month_days == 31
    assert d.nearest_hour == 15
