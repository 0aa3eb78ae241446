import aiosqlite

from arthtrack.errors import StoreUnavailable
from arthtrack.events import UpdateBus

SCHEMA = """
CREATE TABLE IF NOT EXISTS category (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    expense_type TEXT NOT NULL,
    is_active INTEGER DEFAULT 1
);

CREATE TABLE IF NOT EXISTS payment_type (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT UNIQUE NOT NULL,
    is_active INTEGER DEFAULT 1
);

CREATE TABLE IF NOT EXISTS allocation (
    id INTEGER PRIMARY KEY,
    need_amount REAL NOT NULL DEFAULT 0,
    want_amount REAL NOT NULL DEFAULT 0,
    invest_amount REAL NOT NULL DEFAULT 0,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS expense (
    expense_id INTEGER PRIMARY KEY AUTOINCREMENT,
    amount REAL NOT NULL,
    date TEXT NOT NULL,
    expense_type TEXT NOT NULL,
    category_id INTEGER REFERENCES category(id),
    payment_type_id INTEGER REFERENCES payment_type(id),
    split INTEGER DEFAULT 1,
    note TEXT
);

CREATE INDEX IF NOT EXISTS idx_expense_date ON expense(date);
CREATE INDEX IF NOT EXISTS idx_expense_type ON expense(expense_type);
CREATE INDEX IF NOT EXISTS idx_expense_category ON expense(category_id);
CREATE INDEX IF NOT EXISTS idx_category_type ON category(expense_type);
"""


async def open_db(path: str) -> aiosqlite.Connection:
    db = await aiosqlite.connect(path)
    db.row_factory = aiosqlite.Row
    if path != ":memory:":
        await db.execute("PRAGMA journal_mode=WAL")
    await db.execute("PRAGMA foreign_keys=ON")
    return db


async def init_db(db: aiosqlite.Connection) -> None:
    await db.executescript(SCHEMA)
    await db.commit()


async def close_db(db: aiosqlite.Connection | None) -> None:
    if db is not None:
        await db.close()


class Repository:
    """Base for the ledgers: a bound connection plus the bus they emit on."""

    def __init__(self, bus: UpdateBus):
        self.bus = bus
        self._db: aiosqlite.Connection | None = None

    def set_database(self, db: aiosqlite.Connection | None) -> None:
        self._db = db

    async def get_db(self) -> aiosqlite.Connection:
        if self._db is None:
            raise StoreUnavailable()
        return self._db
