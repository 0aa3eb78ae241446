import asyncio
import logging

from arthtrack.config import settings
from arthtrack.currency import describe_remaining, format_amount
from arthtrack.db.database import close_db, init_db, open_db
from arthtrack.events import UpdateBus
from arthtrack.logging import setup_logging
from arthtrack.services.tracker import Tracker

logger = logging.getLogger(__name__)


async def create_tracker(db_path: str | None = None, bus: UpdateBus | None = None) -> Tracker:
    """Open the store, make sure schema and seed rows exist, and wire the ledgers to one bus."""
    db = await open_db(db_path or settings.db_path)
    tracker = Tracker(bus=bus or UpdateBus())
    try:
        await init_db(db)
        tracker.connect(db)
        await tracker.insert_default_data()
    except Exception:
        logger.error("Failed to initialize store", exc_info=True, extra={"operation": "create_tracker"})
        tracker.connect(None)
        await close_db(db)
        raise
    return tracker


async def run(db_path: str | None = None) -> None:
    tracker = await create_tracker(db_path)
    db = await tracker.expenses.get_db()
    try:
        summary = await tracker.balance.current_month_summary()
        for t in summary.types:
            logger.info(
                "%s: allocated %s, spent %s, %s",
                t.expense_type,
                format_amount(t.allocated),
                format_amount(t.spent),
                describe_remaining(t.remaining),
                extra={"month_id": summary.month_id, "expense_type": str(t.expense_type)},
            )
        logger.info("Total: %s", describe_remaining(summary.total_remaining), extra={"month_id": summary.month_id})

        balance = await tracker.balance.calculate_total_available_balance()
        logger.info(
            "Available balance: need %s, want %s, total %s",
            format_amount(balance.need),
            format_amount(balance.want),
            format_amount(balance.total),
        )
    finally:
        tracker.connect(None)
        await close_db(db)


def main() -> None:
    setup_logging(level=logging.DEBUG if settings.debug else logging.INFO)
    asyncio.run(run())


if __name__ == "__main__":
    main()
