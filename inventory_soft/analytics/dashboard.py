"""
Dashboard KPIs

Headline numbers for the dashboard, read from a metrics snapshot plus the
sizes of the snapshot's lists.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from inventory_soft.domain.models import CalendarEvent, DerivedMetrics, Product, Sale


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class DashboardSummary:
    total_revenue: float
    total_profit: float
    profit_margin: float
    low_stock_count: int
    total_products: int
    total_sales: int
    total_categories: int
    total_events: int
    sales_last_month: float
    revenue_trend: Trend
    profit_trend: Trend


def _trend(value: float) -> Trend:
    if value > 0:
        return Trend.UP
    if value < 0:
        return Trend.DOWN
    return Trend.STABLE


def dashboard_summary(
    metrics: DerivedMetrics,
    products: Sequence[Product],
    sales: Sequence[Sale],
    categories: Sequence[str],
    events: Sequence[CalendarEvent],
) -> DashboardSummary:
    return DashboardSummary(
        total_revenue=metrics.total_revenue,
        total_profit=metrics.total_profit,
        profit_margin=round(metrics.profit_margin, 1),
        low_stock_count=len(metrics.low_stock_products),
        total_products=len(products),
        total_sales=len(sales),
        total_categories=len(categories),
        total_events=len(events),
        sales_last_month=metrics.sales_last_month,
        revenue_trend=_trend(metrics.total_revenue),
        profit_trend=_trend(metrics.total_profit),
    )
