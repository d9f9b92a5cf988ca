import pytest

import regiondate
from regiondate import Instant, Region, default_region, set_default_region


@pytest.fixture(autouse=True)
def english_utc_default():
    previous = default_region()
    set_default_region(Region(tz="UTC", locale="en_US"))
    yield
    set_default_region(previous)


@pytest.fixture
def frozen_now(monkeypatch):
    """Pin the clock to Sunday 2021-01-31, 15:00 UTC"""
    now = Instant.from_canonical_format("2021-01-31T15:00:00Z")
    monkeypatch.setattr(regiondate, "_time_ns", now.timestamp_nanos)
    return now
