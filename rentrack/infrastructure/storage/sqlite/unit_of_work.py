"""SQLite unit of work."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from rentrack.core.interfaces.unit_of_work import IUnitOfWork
from rentrack.infrastructure.storage.sqlite.connection import get_transaction


class SQLiteUnitOfWork(IUnitOfWork):
    """Opens one transaction that the stores' own calls join."""

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with get_transaction():
            yield
