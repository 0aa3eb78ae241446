from arthtrack.charts.templates import (
    budget_overview_chart,
    monthly_trend_chart,
    spending_by_category_chart,
)

__all__ = [
    "budget_overview_chart",
    "monthly_trend_chart",
    "spending_by_category_chart",
]
