"""Budget arithmetic over the allocation and expense ledgers.

Nothing is cached: every call re-reads the store. Results here feed dashboards
that must keep rendering, so store failures are logged and turned into
zero-valued results instead of being raised.
"""

import logging

from arthtrack.db.models import (
    Allocation,
    AvailableBalance,
    ExpenseType,
    MonthSummary,
    TypeDetail,
    TypeSummary,
)
from arthtrack.months import iter_months, month_id_from_date_id
from arthtrack.services.allocation_service import AllocationLedger
from arthtrack.services.expense_service import ExpenseLedger

logger = logging.getLogger(__name__)


class BalanceEngine:
    def __init__(self, allocations: AllocationLedger, expenses: ExpenseLedger):
        self.allocations = allocations
        self.expenses = expenses

    def current_month_id(self) -> int:
        return self.allocations.current_month_id()

    async def get_allocation_for_month(self, month_id: int) -> Allocation | None:
        """Allocation in force for ``month_id``: its own row, else the nearest earlier one."""
        try:
            allocation = await self.allocations.get_allocation(month_id)
            if allocation is None:
                allocation = await self.allocations.get_most_recent_allocation_for_month(month_id)
            return allocation
        except Exception:
            logger.warning(
                "Failed to load allocation",
                exc_info=True,
                extra={"month_id": month_id, "operation": "get_allocation_for_month"},
            )
            return None

    async def _allocated_and_spent(self, month_id: int) -> dict[ExpenseType, tuple[float, float]]:
        allocation = await self.allocations.get_most_recent_allocation_for_month(month_id)
        result = {}
        for expense_type in ExpenseType:
            allocated = allocation.amount_for(expense_type) if allocation else 0.0
            spent = await self.expenses.get_total_spent_by_type(expense_type, month_id)
            result[expense_type] = (allocated, spent)
        return result

    async def current_month_summary(self) -> MonthSummary:
        """Home summary: remaining may go negative to show over-budget amounts."""
        month_id = self.current_month_id()
        try:
            figures = await self._allocated_and_spent(month_id)
        except Exception:
            logger.warning(
                "Failed to compute month summary",
                exc_info=True,
                extra={"month_id": month_id, "operation": "current_month_summary"},
            )
            figures = {t: (0.0, 0.0) for t in ExpenseType}
        return MonthSummary(
            month_id=month_id,
            types=[
                TypeSummary(
                    expense_type=expense_type,
                    allocated=allocated,
                    spent=spent,
                    remaining=allocated - spent,
                )
                for expense_type, (allocated, spent) in figures.items()
            ],
        )

    async def type_detail(self, expense_type: str) -> TypeDetail:
        """Per-type card view: remaining never drops below zero."""
        expense_type = ExpenseType(expense_type)
        month_id = self.current_month_id()
        try:
            allocation = await self.allocations.get_most_recent_allocation_for_month(month_id)
            allocated = allocation.amount_for(expense_type) if allocation else 0.0
            spent = await self.expenses.get_total_spent_by_type(expense_type, month_id)
            expenses = await self.expenses.get_expenses_by_type_and_month(expense_type, month_id)
        except Exception:
            logger.warning(
                "Failed to compute type detail",
                exc_info=True,
                extra={"month_id": month_id, "expense_type": str(expense_type), "operation": "type_detail"},
            )
            allocated, spent, expenses = 0.0, 0.0, []
        return TypeDetail(
            expense_type=expense_type,
            month_id=month_id,
            allocated=allocated,
            spent=spent,
            remaining=max(0.0, allocated - spent),
            expenses=expenses,
        )

    async def calculate_total_available_balance(self) -> AvailableBalance:
        """Unspent Need/Want budget carried over from every completed month.

        Months run from the earliest allocation up to, but not including, the
        current month. A month without its own allocation row uses the most
        recent earlier one.
        """
        current = self.current_month_id()
        try:
            allocations = await self.allocations.get_all_allocations()
            if not allocations:
                return AvailableBalance()
            all_expenses = await self.expenses.get_all_expenses()

            ordered = sorted(allocations, key=lambda a: a.id)
            start = ordered[0].id

            need_allocated = 0.0
            want_allocated = 0.0
            i = 0
            for month in iter_months(start, current):
                while i + 1 < len(ordered) and ordered[i + 1].id <= month:
                    i += 1
                need_allocated += ordered[i].need_amount
                want_allocated += ordered[i].want_amount

            need_spent = 0.0
            want_spent = 0.0
            for expense in all_expenses:
                month = month_id_from_date_id(expense.date)
                if not start <= month < current:
                    continue
                if expense.expense_type == ExpenseType.NEED:
                    need_spent += expense.effective_amount
                elif expense.expense_type == ExpenseType.WANT:
                    want_spent += expense.effective_amount
        except Exception:
            logger.warning(
                "Failed to calculate available balance",
                exc_info=True,
                extra={"month_id": current, "operation": "calculate_total_available_balance"},
            )
            return AvailableBalance()

        need = need_allocated - need_spent
        want = want_allocated - want_spent
        logger.debug(
            "Available balance need=%.2f want=%.2f",
            need,
            want,
            extra={"month_id": current, "operation": "calculate_total_available_balance"},
        )
        return AvailableBalance(need=need, want=want, total=need + want)

    async def calculate_total_investment(self) -> float:
        try:
            return await self.expenses.get_lifetime_spent_by_type(ExpenseType.INVEST)
        except Exception:
            logger.warning(
                "Failed to calculate total investment",
                exc_info=True,
                extra={"operation": "calculate_total_investment"},
            )
            return 0.0
