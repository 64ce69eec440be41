from __future__ import annotations

from datetime import datetime

import pytest

from src.timeclock.timeclock.container import build_services
from tests.fakes import InMemoryEvents, InMemoryUsers, make_user


@pytest.fixture
def fixed_now() -> datetime:
    # A Wednesday.
    return datetime(2024, 3, 13, 9, 0, 0)


@pytest.fixture
def users() -> InMemoryUsers:
    return InMemoryUsers([make_user(1, "Alice"), make_user(2, "Bob")])


@pytest.fixture
def events(users) -> InMemoryEvents:
    return InMemoryEvents(users)


@pytest.fixture
def container(events, users):
    return build_services(events, users, users.notifications)
