"""Shared pytest fixtures for all tests."""

from datetime import datetime, timedelta, timezone

import pytest

from gridstore.config import GridStoreSettings
from gridstore.services.grid_service import GridStore


TEST_CHUNK_SIZE = 4


class FakeClock:
    """
    Controllable time source for upload timestamps and sweep grace periods.
    """

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now = self.now + timedelta(seconds=seconds)
        return self.now


@pytest.fixture
def db_path(tmp_path):
    """
    Path of a fresh SQLite database for one test.

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        Database path as a string
    """
    return str(tmp_path / "gridstore.db")


@pytest.fixture
def settings():
    """
    Settings for the default 'fs' root with a tiny chunk size.
    """
    return GridStoreSettings.from_root("fs", chunk_size=TEST_CHUNK_SIZE)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc))


@pytest.fixture
def store(db_path, settings, clock):
    """
    GridStore over the temporary database.
    """
    return GridStore.open(db_path, settings, clock=clock)


@pytest.fixture
def sample_file(tmp_path):
    """
    Create a sample file spanning several chunks.

    Returns:
        Path to sample binary file
    """
    file_path = tmp_path / 'sample.bin'
    file_path.write_bytes(bytes(range(10)) * 3)
    return file_path
