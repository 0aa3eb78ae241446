import csv
import io
import logging

from arthtrack import months
from arthtrack.db.models import ExpenseWithDetails
from arthtrack.months import parse_id_to_date
from arthtrack.services.expense_service import ExpenseLedger

logger = logging.getLogger(__name__)

CSV_HEADER = ["Date", "Expense Type", "Amount", "Category Name", "Payment Type", "Note"]
SCOPES = ("all", "current-month", "month")


def expenses_to_csv(expenses: list[ExpenseWithDetails]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL)
    writer.writerow(CSV_HEADER)
    for e in expenses:
        writer.writerow(
            [
                parse_id_to_date(e.date).strftime("%d/%m/%Y"),
                e.expense_type,
                e.amount,
                e.category_name or "Unknown",
                e.payment_type_name or "Unknown",
                e.note or "",
            ]
        )
    return buf.getvalue()


async def export_expenses(
    ledger: ExpenseLedger,
    scope: str = "all",
    month_id: int | None = None,
    *,
    current_month_id: int | None = None,
) -> tuple[str, str, int]:
    """Return ``(filename, csv_text, count)`` for the requested scope.

    ``current-month`` resolves against ``current_month_id``, defaulting to today's month.
    """
    if scope == "all":
        expenses = await ledger.get_all_expenses()
        filename = "expenses_all.csv"
    elif scope == "current-month":
        current = current_month_id or months.current_month_id()
        expenses = await ledger.get_expenses_by_month(current)
        filename = f"expenses_{current}.csv"
    elif scope == "month":
        if month_id is None:
            raise ValueError("month_id is required for the 'month' scope")
        expenses = await ledger.get_expenses_by_month(month_id)
        filename = f"expenses_{month_id}.csv"
    else:
        raise ValueError(f"Unknown export scope: {scope!r}")

    logger.info("Exporting %d expenses", len(expenses), extra={"operation": "export"})
    return filename, expenses_to_csv(expenses), len(expenses)
