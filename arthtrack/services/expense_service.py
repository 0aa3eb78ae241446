import logging
from datetime import date

from arthtrack.db.database import Repository
from arthtrack.db.models import CategorySpending, Expense, ExpenseWithDetails, MonthlyTotal
from arthtrack.months import format_date_to_id, month_prefix

logger = logging.getLogger(__name__)

_DETAILS_SELECT = """
    SELECT e.*, c.name AS category_name, p.name AS payment_type_name
    FROM expense e
    LEFT JOIN category c ON e.category_id = c.id
    LEFT JOIN payment_type p ON e.payment_type_id = p.id
"""
_ORDER = " ORDER BY e.date DESC, e.expense_id DESC"


def _as_date_id(value: date | str) -> str:
    if isinstance(value, date):
        return format_date_to_id(value)
    return str(value)


class ExpenseLedger(Repository):
    async def add_expense(self, expense: Expense) -> int:
        db = await self.get_db()
        cursor = await db.execute(
            """INSERT INTO expense
            (amount, date, expense_type, category_id, payment_type_id, split, note)
            VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (
                expense.amount,
                expense.date,
                str(expense.expense_type),
                expense.category_id,
                expense.payment_type_id,
                expense.split,
                expense.note or None,
            ),
        )
        await db.commit()
        assert cursor.lastrowid is not None
        expense_id = cursor.lastrowid
        logger.debug("Expense added", extra={"expense_id": expense_id, "operation": "add_expense"})
        self.bus.emit()
        return expense_id

    async def get_expense_by_id(self, expense_id: int) -> ExpenseWithDetails | None:
        db = await self.get_db()
        cursor = await db.execute(_DETAILS_SELECT + " WHERE e.expense_id = ?", (expense_id,))
        row = await cursor.fetchone()
        return ExpenseWithDetails(**dict(row)) if row else None

    async def update_expense(self, expense_id: int, expense: Expense) -> bool:
        db = await self.get_db()
        cursor = await db.execute(
            """UPDATE expense SET amount = ?, date = ?, expense_type = ?, category_id = ?,
            payment_type_id = ?, split = ?, note = ? WHERE expense_id = ?""",
            (
                expense.amount,
                expense.date,
                str(expense.expense_type),
                expense.category_id,
                expense.payment_type_id,
                expense.split,
                expense.note or None,
                expense_id,
            ),
        )
        await db.commit()
        self.bus.emit()
        return cursor.rowcount > 0

    async def delete_expense(self, expense_id: int) -> bool:
        db = await self.get_db()
        cursor = await db.execute("DELETE FROM expense WHERE expense_id = ?", (expense_id,))
        await db.commit()
        self.bus.emit()
        return cursor.rowcount > 0

    async def _fetch_details(self, where: str, params: list) -> list[ExpenseWithDetails]:
        db = await self.get_db()
        query = _DETAILS_SELECT
        if where:
            query += " WHERE " + where
        cursor = await db.execute(query + _ORDER, params)
        rows = await cursor.fetchall()
        return [ExpenseWithDetails(**dict(row)) for row in rows]

    async def get_expenses_by_month(self, month_id: int) -> list[ExpenseWithDetails]:
        return await self._fetch_details("e.date LIKE ?", [month_prefix(month_id)])

    async def get_expenses_by_type_and_month(self, expense_type: str, month_id: int) -> list[ExpenseWithDetails]:
        return await self._fetch_details(
            "e.expense_type = ? AND e.date LIKE ?",
            [str(expense_type), month_prefix(month_id)],
        )

    async def get_expenses_by_date_range(self, start: date | str, end: date | str) -> list[ExpenseWithDetails]:
        return await self._fetch_details("e.date BETWEEN ? AND ?", [_as_date_id(start), _as_date_id(end)])

    async def get_expenses_by_category(self, category_id: int, month_id: int | None = None) -> list[ExpenseWithDetails]:
        where = "e.category_id = ?"
        params: list = [category_id]
        if month_id:
            where += " AND e.date LIKE ?"
            params.append(month_prefix(month_id))
        return await self._fetch_details(where, params)

    async def get_all_expenses(self) -> list[ExpenseWithDetails]:
        return await self._fetch_details("", [])

    async def get_total_spent_by_type(self, expense_type: str, month_id: int) -> float:
        db = await self.get_db()
        cursor = await db.execute(
            """SELECT COALESCE(SUM(amount / split), 0) AS total
            FROM expense WHERE expense_type = ? AND date LIKE ?""",
            (str(expense_type), month_prefix(month_id)),
        )
        row = await cursor.fetchone()
        return float(row["total"] or 0)

    async def get_total_spent_by_month(self, month_id: int) -> float:
        db = await self.get_db()
        cursor = await db.execute(
            "SELECT COALESCE(SUM(amount / split), 0) AS total FROM expense WHERE date LIKE ?",
            (month_prefix(month_id),),
        )
        row = await cursor.fetchone()
        return float(row["total"] or 0)

    async def get_lifetime_spent_by_type(self, expense_type: str) -> float:
        db = await self.get_db()
        cursor = await db.execute(
            "SELECT COALESCE(SUM(amount / split), 0) AS total FROM expense WHERE expense_type = ?",
            (str(expense_type),),
        )
        row = await cursor.fetchone()
        return float(row["total"] or 0)

    async def get_spending_by_category(self, expense_type: str, month_id: int) -> list[CategorySpending]:
        db = await self.get_db()
        cursor = await db.execute(
            """SELECT c.name AS category_name, COALESCE(SUM(e.amount / e.split), 0) AS total
            FROM expense e
            JOIN category c ON e.category_id = c.id
            WHERE e.expense_type = ? AND e.date LIKE ?
            GROUP BY c.id, c.name
            ORDER BY total DESC""",
            (str(expense_type), month_prefix(month_id)),
        )
        rows = await cursor.fetchall()
        return [CategorySpending(**dict(row)) for row in rows]

    async def get_monthly_spending_trend(self, expense_type: str | None = None) -> list[MonthlyTotal]:
        db = await self.get_db()
        query = """SELECT SUBSTR(date, 1, 6) AS month, COALESCE(SUM(amount / split), 0) AS total
                   FROM expense"""
        params: list = []
        if expense_type:
            query += " WHERE expense_type = ?"
            params.append(str(expense_type))
        query += " GROUP BY SUBSTR(date, 1, 6) ORDER BY month DESC LIMIT 12"
        cursor = await db.execute(query, params)
        rows = await cursor.fetchall()
        return [MonthlyTotal(**dict(row)) for row in rows]

    async def count_expenses(self, month_id: int | None = None) -> int:
        db = await self.get_db()
        if month_id:
            cursor = await db.execute("SELECT COUNT(*) FROM expense WHERE date LIKE ?", (month_prefix(month_id),))
        else:
            cursor = await db.execute("SELECT COUNT(*) FROM expense")
        row = await cursor.fetchone()
        return row[0]
