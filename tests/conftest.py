"""Shared test fixtures."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from unittest.mock import MagicMock

import pytest


class FakeDatabase:
    """Stands in for Database in service tests; records unit-of-work outcomes."""

    dialect = "postgresql"

    def __init__(self) -> None:
        self.session = MagicMock(name="session")
        self.committed = 0
        self.rolled_back = 0
        self.snapshots = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[MagicMock]:
        try:
            yield self.session
        except BaseException:
            self.rolled_back += 1
            raise
        self.committed += 1

    @asynccontextmanager
    async def snapshot(self) -> AsyncIterator[MagicMock]:
        self.snapshots += 1
        yield self.session


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()
