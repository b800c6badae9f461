"""Shared fixtures built on the fake backend client."""

from datetime import date

import pytest

from date_range import DateRangeSelector
from fakes import FakeApiClient, make_store
from models import SyncStatus


@pytest.fixture()
def client():
    return FakeApiClient([make_store("1"), make_store("2", SyncStatus.FAILED)])


@pytest.fixture()
def selector():
    return DateRangeSelector(today=date(2024, 1, 31))
