from datetime import date

import aiosqlite
import pytest

from arthtrack.db.database import SCHEMA
from arthtrack.events import UpdateBus
from arthtrack.services.tracker import Tracker

TODAY = date(2025, 3, 15)


class FixedClock:
    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


@pytest.fixture
async def test_db():
    conn = await aiosqlite.connect(":memory:")
    conn.row_factory = aiosqlite.Row
    await conn.execute("PRAGMA foreign_keys=ON")
    await conn.executescript(SCHEMA)
    await conn.commit()

    yield conn

    await conn.close()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(TODAY)


@pytest.fixture
def bus() -> UpdateBus:
    return UpdateBus()


@pytest.fixture
def emitted(bus: UpdateBus) -> list[int]:
    calls: list[int] = []
    bus.subscribe(lambda: calls.append(1))
    return calls


@pytest.fixture
async def tracker(test_db, bus, clock) -> Tracker:
    t = Tracker(bus=bus, today=clock)
    t.connect(test_db)
    await t.insert_default_data()
    return t


@pytest.fixture
async def refs(tracker: Tracker) -> dict[str, int]:
    """Ids of one seeded category per type and one payment type."""
    need = await tracker.categories.get_categories_by_type("Need")
    want = await tracker.categories.get_categories_by_type("Want")
    invest = await tracker.categories.get_categories_by_type("Invest")
    cash = await tracker.payment_types.get_payment_type_by_name("Cash")
    return {
        "Need": next(c.id for c in need if c.name == "Room Rent"),
        "Want": next(c.id for c in want if c.name == "Travel"),
        "Invest": next(c.id for c in invest if c.name == "SIP"),
        "cash": cash.id,
    }
