import logging
from collections.abc import Callable
from datetime import date

from arthtrack.db.database import Repository
from arthtrack.db.models import Allocation
from arthtrack.events import UpdateBus
from arthtrack.months import current_month_id

logger = logging.getLogger(__name__)


class AllocationLedger(Repository):
    """Monthly budgets keyed by ``YYYYMM``.

    Rows exist only for months where a budget was set explicitly. Months in
    between inherit the nearest earlier row, see
    :meth:`get_most_recent_allocation_for_month`.
    """

    def __init__(self, bus: UpdateBus, today: Callable[[], date] = date.today):
        super().__init__(bus)
        self._today = today

    def current_month_id(self) -> int:
        return current_month_id(self._today())

    async def get_allocation(self, month_id: int) -> Allocation | None:
        db = await self.get_db()
        cursor = await db.execute("SELECT * FROM allocation WHERE id = ?", (month_id,))
        row = await cursor.fetchone()
        if row:
            return Allocation(**dict(row))
        return None

    async def get_current_month_allocation(self) -> Allocation:
        month_id = self.current_month_id()
        allocation = await self.get_allocation(month_id)
        if allocation is None:
            return Allocation(id=month_id)
        return allocation

    async def get_most_recent_allocation_for_month(self, month_id: int) -> Allocation | None:
        db = await self.get_db()
        cursor = await db.execute(
            "SELECT * FROM allocation WHERE id <= ? ORDER BY id DESC LIMIT 1",
            (month_id,),
        )
        row = await cursor.fetchone()
        if row:
            return Allocation(**dict(row))
        return None

    async def get_all_allocations(self) -> list[Allocation]:
        db = await self.get_db()
        cursor = await db.execute("SELECT * FROM allocation ORDER BY id DESC")
        rows = await cursor.fetchall()
        return [Allocation(**dict(row)) for row in rows]

    async def set_allocation(
        self,
        month_id: int,
        need_amount: float,
        want_amount: float,
        invest_amount: float,
    ) -> None:
        db = await self.get_db()
        cursor = await db.execute("SELECT 1 FROM allocation WHERE id = ?", (month_id,))
        exists = await cursor.fetchone() is not None
        if exists:
            await db.execute(
                """UPDATE allocation SET need_amount = ?, want_amount = ?, invest_amount = ?,
                created_at = CURRENT_TIMESTAMP WHERE id = ?""",
                (need_amount, want_amount, invest_amount, month_id),
            )
        else:
            await db.execute(
                "INSERT INTO allocation (id, need_amount, want_amount, invest_amount) VALUES (?, ?, ?, ?)",
                (month_id, need_amount, want_amount, invest_amount),
            )
        await db.commit()
        logger.info(
            "Allocation %s",
            "updated" if exists else "created",
            extra={"month_id": month_id, "operation": "set_allocation"},
        )
        self.bus.emit()

    async def update_current_month_allocation(
        self,
        need_amount: float,
        want_amount: float,
        invest_amount: float,
    ) -> None:
        await self.set_allocation(self.current_month_id(), need_amount, want_amount, invest_amount)

    async def delete_allocation(self, month_id: int) -> bool:
        db = await self.get_db()
        cursor = await db.execute("DELETE FROM allocation WHERE id = ?", (month_id,))
        await db.commit()
        self.bus.emit()
        return cursor.rowcount > 0
