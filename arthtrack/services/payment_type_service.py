import logging

from arthtrack.categories import DEFAULT_PAYMENT_TYPES
from arthtrack.db.database import Repository
from arthtrack.db.models import PaymentType

logger = logging.getLogger(__name__)


class PaymentTypeLedger(Repository):
    async def insert_default_data(self) -> bool:
        db = await self.get_db()
        cursor = await db.execute("SELECT COUNT(*) FROM payment_type")
        row = await cursor.fetchone()
        if row[0] > 0:
            return False
        for name in DEFAULT_PAYMENT_TYPES:
            await db.execute("INSERT INTO payment_type (name) VALUES (?)", (name,))
        await db.commit()
        logger.info("Default payment types inserted")
        return True

    async def get_payment_types(self) -> list[PaymentType]:
        db = await self.get_db()
        cursor = await db.execute("SELECT * FROM payment_type WHERE is_active = 1 ORDER BY name")
        rows = await cursor.fetchall()
        return [PaymentType(**dict(row)) for row in rows]

    async def get_payment_type_by_id(self, payment_type_id: int) -> PaymentType | None:
        db = await self.get_db()
        cursor = await db.execute("SELECT * FROM payment_type WHERE id = ?", (payment_type_id,))
        row = await cursor.fetchone()
        return PaymentType(**dict(row)) if row else None

    async def get_payment_type_by_name(self, name: str) -> PaymentType | None:
        """Exact-name lookup across active and inactive rows."""
        db = await self.get_db()
        cursor = await db.execute("SELECT * FROM payment_type WHERE name = ?", (name,))
        row = await cursor.fetchone()
        return PaymentType(**dict(row)) if row else None

    async def add_payment_type(self, name: str) -> int:
        db = await self.get_db()
        cursor = await db.execute("INSERT INTO payment_type (name) VALUES (?)", (name,))
        await db.commit()
        assert cursor.lastrowid is not None
        return cursor.lastrowid

    async def update_payment_type(self, payment_type_id: int, name: str) -> bool:
        db = await self.get_db()
        cursor = await db.execute("UPDATE payment_type SET name = ? WHERE id = ?", (name, payment_type_id))
        await db.commit()
        return cursor.rowcount > 0

    async def delete_payment_type(self, payment_type_id: int) -> bool:
        db = await self.get_db()
        cursor = await db.execute("UPDATE payment_type SET is_active = 0 WHERE id = ?", (payment_type_id,))
        await db.commit()
        return cursor.rowcount > 0

    async def restore_payment_type(self, payment_type_id: int) -> bool:
        db = await self.get_db()
        cursor = await db.execute("UPDATE payment_type SET is_active = 1 WHERE id = ?", (payment_type_id,))
        await db.commit()
        return cursor.rowcount > 0

    async def count_active(self) -> int:
        db = await self.get_db()
        cursor = await db.execute("SELECT COUNT(*) FROM payment_type WHERE is_active = 1")
        row = await cursor.fetchone()
        return row[0]
