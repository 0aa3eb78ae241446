import logging
import sqlite3
from collections.abc import Callable
from datetime import date

import aiosqlite
import pydantic
from pydantic import BaseModel, Field, field_validator

from arthtrack.charts import budget_overview_chart, monthly_trend_chart, spending_by_category_chart
from arthtrack.db.models import DatabaseStats, Expense, ExpenseType
from arthtrack.errors import ValidationError
from arthtrack.events import UpdateBus
from arthtrack.months import format_date_to_id, parse_id_to_date
from arthtrack.services.allocation_service import AllocationLedger
from arthtrack.services.balance_service import BalanceEngine
from arthtrack.services.category_service import CategoryLedger
from arthtrack.services.expense_service import ExpenseLedger
from arthtrack.services.export_service import SCOPES, export_expenses
from arthtrack.services.payment_type_service import PaymentTypeLedger

logger = logging.getLogger(__name__)


class ExpenseInput(BaseModel):
    amount: float = Field(gt=0)
    date: str
    expense_type: ExpenseType
    category_id: int
    payment_type_id: int
    split: int = Field(default=1, ge=1)
    note: str | None = None

    @field_validator("date", mode="before")
    @classmethod
    def encode_date(cls, v):
        if isinstance(v, date):
            return format_date_to_id(v)
        v = str(v).strip()
        parse_id_to_date(v)
        return v

    @field_validator("note")
    @classmethod
    def blank_note(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None

    def to_expense(self) -> Expense:
        return Expense(
            expense_id=None,
            amount=self.amount,
            date=self.date,
            expense_type=str(self.expense_type),
            category_id=self.category_id,
            payment_type_id=self.payment_type_id,
            split=self.split,
            note=self.note,
        )


class AllocationInput(BaseModel):
    need_amount: float = Field(default=0, ge=0)
    want_amount: float = Field(default=0, ge=0)
    invest_amount: float = Field(default=0, ge=0)


def _validate(model: type[BaseModel], **fields) -> BaseModel:
    try:
        return model(**fields)
    except pydantic.ValidationError as e:
        raise ValidationError(str(e)) from e


def _require_name(name: str | None, label: str) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError(f"{label} name is required")
    return name


class Tracker:
    """Application façade over the ledgers.

    Validates caller input, then delegates to the ledgers; reads go straight to
    ``tracker.expenses``, ``tracker.allocations``, ``tracker.categories``,
    ``tracker.payment_types`` and ``tracker.balance``.
    """

    def __init__(self, bus: UpdateBus | None = None, today: Callable[[], date] = date.today):
        self.bus = bus or UpdateBus()
        self.categories = CategoryLedger(self.bus)
        self.payment_types = PaymentTypeLedger(self.bus)
        self.allocations = AllocationLedger(self.bus, today=today)
        self.expenses = ExpenseLedger(self.bus)
        self.balance = BalanceEngine(self.allocations, self.expenses)

    def connect(self, db: aiosqlite.Connection | None) -> None:
        for ledger in (self.categories, self.payment_types, self.allocations, self.expenses):
            ledger.set_database(db)

    async def insert_default_data(self) -> None:
        await self.categories.insert_default_data()
        await self.payment_types.insert_default_data()

    # Expenses

    async def add_expense(self, **fields) -> int:
        data = _validate(ExpenseInput, **fields)
        return await self.expenses.add_expense(data.to_expense())

    async def update_expense(self, expense_id: int, **fields) -> bool:
        data = _validate(ExpenseInput, **fields)
        return await self.expenses.update_expense(expense_id, data.to_expense())

    async def delete_expense(self, expense_id: int) -> bool:
        return await self.expenses.delete_expense(expense_id)

    # Allocations

    async def set_allocation(
        self, month_id: int, need_amount: float = 0, want_amount: float = 0, invest_amount: float = 0
    ) -> None:
        data = _validate(
            AllocationInput, need_amount=need_amount, want_amount=want_amount, invest_amount=invest_amount
        )
        if month_id % 100 not in range(1, 13):
            raise ValidationError(f"Invalid month id: {month_id}")
        await self.allocations.set_allocation(month_id, data.need_amount, data.want_amount, data.invest_amount)

    async def update_current_month_allocation(
        self, need_amount: float = 0, want_amount: float = 0, invest_amount: float = 0
    ) -> None:
        await self.set_allocation(self.allocations.current_month_id(), need_amount, want_amount, invest_amount)

    # Categories

    async def add_category(self, name: str, expense_type: str) -> int:
        name = _require_name(name, "Category")
        return await self.categories.add_category(name, _expense_type(expense_type))

    async def update_category(self, category_id: int, name: str, expense_type: str) -> bool:
        name = _require_name(name, "Category")
        return await self.categories.update_category(category_id, name, _expense_type(expense_type))

    async def delete_category(self, category_id: int) -> bool:
        return await self.categories.delete_category(category_id)

    async def restore_category(self, category_id: int) -> bool:
        return await self.categories.restore_category(category_id)

    # Payment types

    async def add_payment_type(self, name: str) -> int:
        name = _require_name(name, "Payment type")
        if await self.payment_types.get_payment_type_by_name(name) is not None:
            raise ValidationError(f"Payment type {name!r} already exists")
        try:
            return await self.payment_types.add_payment_type(name)
        except sqlite3.IntegrityError as e:
            raise ValidationError(f"Payment type {name!r} already exists") from e

    async def update_payment_type(self, payment_type_id: int, name: str) -> bool:
        name = _require_name(name, "Payment type")
        existing = await self.payment_types.get_payment_type_by_name(name)
        if existing is not None and existing.id != payment_type_id:
            raise ValidationError(f"Payment type {name!r} already exists")
        try:
            return await self.payment_types.update_payment_type(payment_type_id, name)
        except sqlite3.IntegrityError as e:
            raise ValidationError(f"Payment type {name!r} already exists") from e

    async def delete_payment_type(self, payment_type_id: int) -> bool:
        current = await self.payment_types.get_payment_type_by_id(payment_type_id)
        if current is None or not current.is_active:
            return False
        if await self.payment_types.count_active() <= 1:
            raise ValidationError("At least one payment type must remain active")
        return await self.payment_types.delete_payment_type(payment_type_id)

    async def restore_payment_type(self, payment_type_id: int) -> bool:
        return await self.payment_types.restore_payment_type(payment_type_id)

    # Maintenance

    async def clear_all_data(self) -> None:
        db = await self.expenses.get_db()
        await db.executescript(
            """
            DELETE FROM expense;
            DELETE FROM allocation;
            DELETE FROM category;
            DELETE FROM payment_type;
            """
        )
        await db.commit()
        await self.insert_default_data()
        logger.info("All data cleared", extra={"operation": "clear_all_data"})
        self.bus.emit()

    async def export_data(self) -> dict[str, list]:
        return {
            "categories": await self.categories.get_categories(),
            "payment_types": await self.payment_types.get_payment_types(),
            "allocations": await self.allocations.get_all_allocations(),
            "expenses": await self.expenses.get_all_expenses(),
        }

    async def get_database_stats(self) -> DatabaseStats:
        return DatabaseStats(
            total_expenses=await self.expenses.count_expenses(),
            total_categories=await self.categories.count_active(),
            total_payment_types=await self.payment_types.count_active(),
            current_month_expenses=await self.expenses.count_expenses(self.allocations.current_month_id()),
        )

    async def export_csv(self, scope: str = "all", month_id: int | None = None) -> tuple[str, str, int]:
        if scope not in SCOPES:
            raise ValidationError(f"Unknown export scope: {scope!r}")
        if scope == "month" and month_id is None:
            raise ValidationError("A month is required for the 'month' export scope")
        return await export_expenses(
            self.expenses, scope, month_id, current_month_id=self.allocations.current_month_id()
        )

    # Charts

    async def category_chart(
        self, expense_type: str, month_id: int | None = None, cur: str | None = None
    ) -> str | None:
        month_id = month_id or self.allocations.current_month_id()
        data = await self.expenses.get_spending_by_category(_expense_type(expense_type), month_id)
        return await spending_by_category_chart(data, cur)

    async def trend_chart(self, expense_type: str | None = None, cur: str | None = None) -> str | None:
        if expense_type is not None:
            expense_type = _expense_type(expense_type)
        data = await self.expenses.get_monthly_spending_trend(expense_type)
        return await monthly_trend_chart(data, cur)

    async def budget_chart(self, cur: str | None = None) -> str | None:
        return await budget_overview_chart(await self.balance.current_month_summary(), cur)


def _expense_type(value: str) -> ExpenseType:
    try:
        return ExpenseType(value)
    except ValueError as e:
        raise ValidationError(f"Unknown expense type: {value!r}") from e
