from dataclasses import dataclass, field
from enum import StrEnum


class ExpenseType(StrEnum):
    NEED = "Need"
    WANT = "Want"
    INVEST = "Invest"


@dataclass(slots=True)
class Expense:
    expense_id: int | None
    amount: float
    date: str
    expense_type: str
    category_id: int | None
    payment_type_id: int | None
    split: int = 1
    note: str | None = None

    @property
    def effective_amount(self) -> float:
        return self.amount / (self.split or 1)

    @property
    def month_id(self) -> int:
        return int(self.date[:6])


@dataclass(slots=True)
class ExpenseWithDetails(Expense):
    category_name: str | None = None
    payment_type_name: str | None = None


@dataclass(slots=True)
class Category:
    id: int | None
    name: str
    expense_type: str
    is_active: int = 1


@dataclass(slots=True)
class PaymentType:
    id: int | None
    name: str
    is_active: int = 1


@dataclass(slots=True)
class Allocation:
    id: int
    need_amount: float = 0.0
    want_amount: float = 0.0
    invest_amount: float = 0.0
    created_at: str | None = None

    def amount_for(self, expense_type: str) -> float:
        if expense_type == ExpenseType.NEED:
            return self.need_amount
        if expense_type == ExpenseType.WANT:
            return self.want_amount
        if expense_type == ExpenseType.INVEST:
            return self.invest_amount
        raise ValueError(f"Unknown expense type: {expense_type!r}")


@dataclass(slots=True)
class CategorySpending:
    category_name: str
    total: float


@dataclass(slots=True)
class MonthlyTotal:
    month: str
    total: float


@dataclass(slots=True)
class AvailableBalance:
    need: float = 0.0
    want: float = 0.0
    total: float = 0.0


@dataclass(slots=True)
class TypeSummary:
    expense_type: str
    allocated: float
    spent: float
    remaining: float


@dataclass(slots=True)
class MonthSummary:
    month_id: int
    types: list[TypeSummary] = field(default_factory=list)

    @property
    def total_allocated(self) -> float:
        return sum(t.allocated for t in self.types)

    @property
    def total_spent(self) -> float:
        return sum(t.spent for t in self.types)

    @property
    def total_remaining(self) -> float:
        return self.total_allocated - self.total_spent

    def for_type(self, expense_type: str) -> TypeSummary:
        return next(t for t in self.types if t.expense_type == expense_type)


@dataclass(slots=True)
class TypeDetail:
    expense_type: str
    month_id: int
    allocated: float
    spent: float
    remaining: float
    expenses: list[ExpenseWithDetails] = field(default_factory=list)


@dataclass(slots=True)
class DatabaseStats:
    total_expenses: int
    total_categories: int
    total_payment_types: int
    current_month_expenses: int
