"""
Analytics Module
"""
from .aggregation import MetricsEngine, compute_metrics, fingerprint, one_month_before
from .calendar import CalendarDay, month_grid, upcoming_events
from .dashboard import DashboardSummary, Trend, dashboard_summary
from .inventory_report import CategoryStockSummary, StockLevel, category_report, filter_products, stock_level
from .performance import (
    DailySalesSummary,
    PerformancePoint,
    average_sale_value,
    daily_sales_summary,
    product_performance,
    return_percentage,
    sale_return_percentage,
    sales_on,
)

__all__ = [
    "MetricsEngine",
    "compute_metrics",
    "fingerprint",
    "one_month_before",
    "CalendarDay",
    "month_grid",
    "upcoming_events",
    "DashboardSummary",
    "Trend",
    "dashboard_summary",
    "CategoryStockSummary",
    "StockLevel",
    "category_report",
    "filter_products",
    "stock_level",
    "DailySalesSummary",
    "PerformancePoint",
    "average_sale_value",
    "daily_sales_summary",
    "product_performance",
    "return_percentage",
    "sale_return_percentage",
    "sales_on",
]
