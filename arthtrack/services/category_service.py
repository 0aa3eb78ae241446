import logging

from arthtrack.categories import DEFAULT_CATEGORIES
from arthtrack.db.database import Repository
from arthtrack.db.models import Category

logger = logging.getLogger(__name__)


class CategoryLedger(Repository):
    async def insert_default_data(self) -> bool:
        """Seed the default categories. Returns False if the table already has rows."""
        db = await self.get_db()
        cursor = await db.execute("SELECT COUNT(*) FROM category")
        row = await cursor.fetchone()
        if row[0] > 0:
            return False
        for expense_type, names in DEFAULT_CATEGORIES.items():
            for name in names:
                await db.execute(
                    "INSERT INTO category (name, expense_type) VALUES (?, ?)",
                    (name, str(expense_type)),
                )
        await db.commit()
        logger.info("Default categories inserted")
        return True

    async def get_categories(self) -> list[Category]:
        db = await self.get_db()
        cursor = await db.execute("SELECT * FROM category WHERE is_active = 1 ORDER BY expense_type, name")
        rows = await cursor.fetchall()
        return [Category(**dict(row)) for row in rows]

    async def get_categories_by_type(self, expense_type: str) -> list[Category]:
        db = await self.get_db()
        cursor = await db.execute(
            "SELECT * FROM category WHERE expense_type = ? AND is_active = 1 ORDER BY name",
            (str(expense_type),),
        )
        rows = await cursor.fetchall()
        return [Category(**dict(row)) for row in rows]

    async def get_category_by_id(self, category_id: int) -> Category | None:
        db = await self.get_db()
        cursor = await db.execute("SELECT * FROM category WHERE id = ?", (category_id,))
        row = await cursor.fetchone()
        return Category(**dict(row)) if row else None

    async def add_category(self, name: str, expense_type: str) -> int:
        db = await self.get_db()
        cursor = await db.execute(
            "INSERT INTO category (name, expense_type) VALUES (?, ?)",
            (name, str(expense_type)),
        )
        await db.commit()
        assert cursor.lastrowid is not None
        return cursor.lastrowid

    async def update_category(self, category_id: int, name: str, expense_type: str) -> bool:
        db = await self.get_db()
        cursor = await db.execute(
            "UPDATE category SET name = ?, expense_type = ? WHERE id = ?",
            (name, str(expense_type), category_id),
        )
        await db.commit()
        return cursor.rowcount > 0

    async def delete_category(self, category_id: int) -> bool:
        db = await self.get_db()
        cursor = await db.execute("UPDATE category SET is_active = 0 WHERE id = ?", (category_id,))
        await db.commit()
        return cursor.rowcount > 0

    async def restore_category(self, category_id: int) -> bool:
        db = await self.get_db()
        cursor = await db.execute("UPDATE category SET is_active = 1 WHERE id = ?", (category_id,))
        await db.commit()
        return cursor.rowcount > 0

    async def count_active(self) -> int:
        db = await self.get_db()
        cursor = await db.execute("SELECT COUNT(*) FROM category WHERE is_active = 1")
        row = await cursor.fetchone()
        return row[0]
