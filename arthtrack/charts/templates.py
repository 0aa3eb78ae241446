from __future__ import annotations

import tempfile
from typing import Any

import numpy as np
import plotly.graph_objects as go
import plotly.io as pio

from arthtrack.categories import EXPENSE_TYPE_COLORS
from arthtrack.currency import PREFIX_SYMBOLS, currency_symbol
from arthtrack.db.models import CategorySpending, MonthlyTotal, MonthSummary
from arthtrack.months import month_label

THEME: dict[str, Any] = {
    "colors": {
        "palette": [
            "#10B981",
            "#F59E0B",
            "#3B82F6",
            "#8B5CF6",
            "#EF4444",
            "#14B8A6",
            "#EC4899",
            "#6B7280",
            "#84CC16",
            "#F97316",
            "#0EA5E9",
        ],
        "primary": "#3B82F6",
        "trend_line": "#EF4444",
        "muted_bar": "#CBD5E1",
        "grid": "#E5E5E5",
        "background": "#FAFAFA",
        "text": "#2D3436",
    },
    "font": {
        "family": "Inter, sans-serif",
        "size": 13,
        "title_size": 16,
    },
    "size": {
        "width": 800,
        "height": 500,
        "scale": 2,
    },
    "margin": {"l": 60, "r": 30, "t": 60, "b": 50},
}

PIE_CATEGORY_THRESHOLD = 6

_custom_template = pio.templates["plotly_white"]
_custom_template.layout.font = dict(
    family=THEME["font"]["family"],
    size=THEME["font"]["size"],
    color=THEME["colors"]["text"],
)
_custom_template.layout.title = dict(
    font=dict(size=THEME["font"]["title_size"], color=THEME["colors"]["text"]),
    x=0.5,
    xanchor="center",
)
_custom_template.layout.plot_bgcolor = THEME["colors"]["background"]
_custom_template.layout.xaxis = dict(gridcolor=THEME["colors"]["grid"])
_custom_template.layout.yaxis = dict(gridcolor=THEME["colors"]["grid"])
pio.templates["arthtrack"] = _custom_template
pio.templates.default = "arthtrack"


def _fmt_amount(value: float, cur: str | None = None) -> str:
    sym = currency_symbol(cur)
    if value >= 1000:
        number = f"{value:,.0f}"
    else:
        number = f"{value:.0f}" if value == int(value) else f"{value:.2f}"
    if sym in PREFIX_SYMBOLS:
        return f"{sym}{number}"
    return f"{number} {sym}"


def _base_layout() -> dict[str, Any]:
    return {
        "margin": THEME["margin"],
        "width": THEME["size"]["width"],
        "height": THEME["size"]["height"],
    }


def _save(fig: go.Figure) -> str:
    tmp = tempfile.NamedTemporaryFile(suffix=".png", delete=False)  # noqa: SIM115
    tmp.close()
    fig.write_image(tmp.name, scale=THEME["size"]["scale"])
    return tmp.name


def category_figure(data: list[CategorySpending], cur: str | None = None) -> go.Figure:
    categories = [row.category_name for row in data]
    totals = [row.total for row in data]
    palette = THEME["colors"]["palette"]
    colors = [palette[i % len(palette)] for i in range(len(categories))]

    if len(categories) <= PIE_CATEGORY_THRESHOLD:
        fig = go.Figure(
            go.Pie(
                labels=categories,
                values=totals,
                marker=dict(colors=colors),
                textinfo="label+percent",
                texttemplate="%{label}<br>%{percent:.0%}",
                hole=0.35,
                sort=False,
            )
        )
        fig.update_layout(**_base_layout(), title="Spending by Category", showlegend=False)
        fig.add_annotation(
            text=_fmt_amount(sum(totals), cur),
            x=0.5,
            y=0.5,
            showarrow=False,
            font=dict(size=18, color=THEME["colors"]["text"]),
        )
        return fig

    fig = go.Figure(
        go.Bar(
            x=totals,
            y=categories,
            orientation="h",
            marker_color=colors,
            text=[_fmt_amount(v, cur) for v in totals],
            textposition="outside",
        )
    )
    fig.update_layout(**_base_layout(), title="Spending by Category", xaxis_title=currency_symbol(cur))
    fig.update_yaxes(autorange="reversed")
    return fig


def trend_figure(data: list[MonthlyTotal], cur: str | None = None) -> go.Figure:
    """Bars oldest to newest; ``data`` arrives most recent first."""
    ordered = list(reversed(data))
    months = [month_label(int(row.month)) for row in ordered]
    totals = [row.total for row in ordered]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=months,
            y=totals,
            marker_color=THEME["colors"]["primary"],
            text=[_fmt_amount(v, cur) for v in totals],
            textposition="outside",
            name="Monthly total",
        )
    )

    if len(totals) >= 3:
        x_idx = list(range(len(totals)))
        z = np.polyfit(x_idx, totals, 1)
        trend = np.polyval(z, x_idx)
        fig.add_trace(
            go.Scatter(
                x=months,
                y=trend.tolist(),
                mode="lines",
                line=dict(color=THEME["colors"]["trend_line"], width=2, dash="dash"),
                name="Trend",
                hoverinfo="skip",
            )
        )

    fig.update_layout(
        **_base_layout(),
        title="Monthly Spending",
        yaxis_title=currency_symbol(cur),
        showlegend=len(totals) >= 3,
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def budget_figure(summary: MonthSummary, cur: str | None = None) -> go.Figure:
    types = [str(t.expense_type) for t in summary.types]
    allocated = [t.allocated for t in summary.types]
    spent = [t.spent for t in summary.types]

    fig = go.Figure()
    fig.add_trace(
        go.Bar(
            x=types,
            y=allocated,
            name="Allocated",
            marker_color=THEME["colors"]["muted_bar"],
            text=[_fmt_amount(v, cur) for v in allocated],
            textposition="outside",
        )
    )
    fig.add_trace(
        go.Bar(
            x=types,
            y=spent,
            name="Spent",
            marker_color=[EXPENSE_TYPE_COLORS.get(t, THEME["colors"]["primary"]) for t in types],
            text=[_fmt_amount(v, cur) for v in spent],
            textposition="outside",
        )
    )
    fig.update_layout(
        **_base_layout(),
        title=f"Budget: {month_label(summary.month_id)}",
        barmode="group",
        yaxis_title=currency_symbol(cur),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


async def spending_by_category_chart(data: list[CategorySpending], cur: str | None = None) -> str | None:
    if not data:
        return None
    return _save(category_figure(data, cur))


async def monthly_trend_chart(data: list[MonthlyTotal], cur: str | None = None) -> str | None:
    if not data:
        return None
    return _save(trend_figure(data, cur))


async def budget_overview_chart(summary: MonthSummary, cur: str | None = None) -> str | None:
    if not summary.types:
        return None
    return _save(budget_figure(summary, cur))
