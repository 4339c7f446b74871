"""Shared pytest fixtures."""

from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from rentrack.config.settings import MovementSettings
from rentrack.core.entities import (
    CustomerLocation,
    Gate,
    Location,
)
from rentrack.core.interfaces import ILocationDirectory, IUnitOfWork

T0 = datetime(2024, 3, 1, 8, 0, tzinfo=UTC)


class FakeDirectory(ILocationDirectory):
    """In-memory location directory."""

    def __init__(
        self,
        locations: list[Location] | None = None,
        customer_locations: list[CustomerLocation] | None = None,
        gates: list[Gate] | None = None,
    ):
        self.locations = {loc.id: loc for loc in locations or []}
        self.customer_locations = {loc.id: loc for loc in customer_locations or []}
        self.gates = {gate.id: gate for gate in gates or []}

    async def get_location(self, location_id: str) -> Location | None:
        return self.locations.get(location_id)

    async def get_customer_location(self, location_id: str) -> CustomerLocation | None:
        return self.customer_locations.get(location_id)

    async def get_gate(self, gate_id: str) -> Gate | None:
        return self.gates.get(gate_id)


class FakeUnitOfWork(IUnitOfWork):
    """Records how many transactions were opened, committed and rolled back."""

    def __init__(self):
        self.opened = 0
        self.committed = 0
        self.rolled_back = 0

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        self.opened += 1
        try:
            yield
        except BaseException:
            self.rolled_back += 1
            raise
        self.committed += 1


@pytest.fixture
def directory() -> FakeDirectory:
    """Directory with one warehouse, two customers and ids colliding across spaces."""
    return FakeDirectory(
        locations=[
            Location(id="WH1", name="Main Warehouse"),
            Location(id="7", name="Yard 7"),
        ],
        customer_locations=[
            CustomerLocation(
                id="CL-TOY",
                customer_id="C-TOY",
                location_name="Toyota Plant",
                rate_table={"PLT": 50.0, "BIN": 12.0},
            ),
            CustomerLocation(
                id="CL-HON",
                customer_id="C-HON",
                location_name="Honda Plant",
                rate_table={"PLT": 70.0},
            ),
            CustomerLocation(
                id="BASE-RET",
                customer_id="C-BASE",
                location_name="Base Returns Dock",
            ),
            CustomerLocation(id="7", customer_id="C-7", location_name="Customer Seven"),
        ],
        gates=[Gate(id="G1", name="Gate 1", location_id="WH1", type="dispatch")],
    )


@pytest.fixture
def movement_settings() -> MovementSettings:
    return MovementSettings(
        base_return_location_id="BASE-RET",
        base_return_location_space="customer",
        require_receive_location_match=True,
        max_batch_size=50,
    )


@pytest.fixture
def clock():
    """Controllable clock; set ``clock.now`` to move time."""

    class _Clock:
        now = T0

        def __call__(self) -> datetime:
            return self.now

    return _Clock()


@pytest.fixture
async def sqlite_db(tmp_path: Path) -> AsyncGenerator[Path, None]:
    """Migrated temporary database wired into the global connection pool."""
    import rentrack.infrastructure.storage.sqlite.connection as conn_module
    from rentrack.infrastructure.storage.sqlite.migrations.migrator import initialize_database

    db_path = tmp_path / "rentrack_test.db"
    results = await initialize_database(db_path, create_backup_before=False)
    assert all(r.success for r in results)

    conn_module._pool = None
    mock_settings = MagicMock()
    mock_settings.storage.db_path = db_path
    mock_settings.storage.pool_size = 1
    mock_settings.storage.busy_timeout = 5000

    with patch.object(conn_module, "get_settings", return_value=mock_settings):
        try:
            yield db_path
        finally:
            await conn_module.close_pool()


@pytest.fixture
def unit_of_work() -> FakeUnitOfWork:
    return FakeUnitOfWork()


@pytest.fixture
async def seeded_db(sqlite_db: Path, directory: FakeDirectory) -> Path:
    """Temporary database loaded with the same master data as ``directory``."""
    from rentrack.infrastructure.storage.sqlite import SQLiteLocationDirectory

    sqlite_directory = SQLiteLocationDirectory()
    for location in directory.locations.values():
        await sqlite_directory.save_location(location)
    for customer_location in directory.customer_locations.values():
        await sqlite_directory.save_customer_location(customer_location)
    for gate in directory.gates.values():
        await sqlite_directory.save_gate(gate)
    return sqlite_db
