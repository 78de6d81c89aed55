"""
Unit Tests - Secondary Analytics
"""
from datetime import date, datetime

import pytest

from inventory_soft.analytics.calendar import GRID_DAYS, month_grid, upcoming_events
from inventory_soft.analytics.dashboard import Trend, dashboard_summary
from inventory_soft.analytics.inventory_report import (
    StockLevel,
    category_report,
    filter_products,
    stock_level,
)
from inventory_soft.analytics.performance import (
    average_sale_value,
    daily_sales_summary,
    product_performance,
    return_percentage,
    sale_return_percentage,
    sales_on,
)
from inventory_soft.analytics.aggregation import compute_metrics
from inventory_soft.domain import CalendarEvent, EventType


class TestProductPerformance:
    """Tests for the per-product daily series"""

    def test_groups_by_day_and_sorts(self, product_factory, sale_factory):
        products = [product_factory("p1", purchase_price=2.0)]
        sales = [
            sale_factory("s1", "p1", quantity=2, total_price=10.0, date=datetime(2025, 3, 2, 15, 0)),
            sale_factory("s2", "p1", quantity=1, total_price=5.0, date=datetime(2025, 3, 1, 9, 0)),
            sale_factory("s3", "p1", quantity=3, total_price=15.0, date=datetime(2025, 3, 2, 9, 0)),
            sale_factory("s4", "other", quantity=7, total_price=70.0, date=datetime(2025, 3, 1, 9, 0)),
        ]

        series = product_performance("p1", products, sales)

        assert [p.date for p in series] == [date(2025, 3, 1), date(2025, 3, 2)]
        assert (series[0].sales, series[0].revenue, series[0].profit) == (1, 5.0, 3.0)
        assert (series[1].sales, series[1].revenue, series[1].profit) == (5, 25.0, 15.0)

    def test_unknown_product_is_empty(self, sample_products, sample_sales):
        assert product_performance("missing", sample_products, sample_sales) == []

    def test_product_without_sales_is_empty(self, sample_products, sample_sales):
        assert product_performance("p3", sample_products, sample_sales) == []


class TestDailySales:
    """Tests for per-day sale lookups"""

    def test_sales_on_day(self, sample_sales):
        day_sales = sales_on(sample_sales, date(2025, 3, 10))
        assert [s.id for s in day_sales] == ["s1"]

    def test_daily_summary(self, sample_sales):
        summary = daily_sales_summary(sample_sales, date(2025, 3, 12))
        assert (summary.sales_count, summary.total_revenue, summary.total_items) == (1, 10.0, 4)
        assert summary.average_sale_value == pytest.approx(10.0)

    def test_empty_day(self, sample_sales):
        summary = daily_sales_summary(sample_sales, date(2025, 4, 1))
        assert (summary.sales_count, summary.total_revenue, summary.total_items) == (0, 0, 0)
        assert summary.average_sale_value == 0.0

    def test_return_percentage(self, product_factory):
        assert return_percentage(product_factory("p1", purchase_price=4.0), 5.0) == 25.0
        assert return_percentage(product_factory("p2", purchase_price=0.0), 5.0) == 0.0

    def test_sale_return_percentage(self, product_factory, sale_factory):
        products = {"p1": product_factory("p1", purchase_price=4.0)}
        sale = sale_factory("s1", "p1", quantity=2, total_price=12.0)
        dangling = sale_factory("s2", "gone", quantity=1, total_price=5.0)

        assert sale_return_percentage(sale, products) == pytest.approx(50.0)
        assert sale_return_percentage(dangling, products) == 0.0

    def test_average_sale_value(self, sample_sales):
        assert average_sale_value(sample_sales) == pytest.approx(10.0)
        assert average_sale_value([]) == 0.0


class TestInventoryReport:
    """Tests for stock levels and the category rollup"""

    @pytest.mark.parametrize(
        "stock,min_stock,expected",
        [
            (2, 2, StockLevel.LOW),
            (0, 0, StockLevel.LOW),
            (4, 2, StockLevel.NORMAL),
            (5, 2, StockLevel.HIGH),
        ],
    )
    def test_stock_level(self, product_factory, stock, min_stock, expected):
        assert stock_level(product_factory("p", stock=stock, min_stock=min_stock)) == expected

    def test_filter_by_category_and_level(self, sample_products):
        assert [p.id for p in filter_products(sample_products, category="electronics")] == ["p1"]
        assert [p.id for p in filter_products(sample_products, level="low")] == ["p2"]
        assert [p.id for p in filter_products(sample_products, level=StockLevel.HIGH)] == ["p1", "p3"]
        assert filter_products(sample_products, category="all", level="all") == sample_products

    def test_category_report(self, product_factory):
        products = [
            product_factory("a", category="tools", stock=4, min_stock=5, sale_price=2.0),
            product_factory("b", category="toys", stock=10, min_stock=1, sale_price=1.5),
            product_factory("c", category="tools", stock=6, min_stock=1, sale_price=3.0),
        ]

        rows = category_report(products)

        assert [r.category for r in rows] == ["tools", "toys"]
        tools = rows[0]
        assert (tools.product_count, tools.total_stock, tools.low_stock_count) == (2, 10, 1)
        assert tools.total_value == pytest.approx(26.0)

    def test_category_report_empty(self):
        assert category_report([]) == []


class TestCalendar:
    """Tests for the month grid and upcoming events"""

    def test_grid_starts_on_sunday(self):
        grid = month_grid(2025, 3, [], [])

        assert len(grid) == GRID_DAYS
        # March 1st 2025 is a Saturday
        assert grid[0].date == date(2025, 2, 23)
        assert grid[0].date.weekday() == 6
        assert not grid[0].is_current_month
        assert grid[6].date == date(2025, 3, 1)
        assert grid[6].is_current_month

    def test_month_starting_on_sunday(self):
        # June 1st 2025 is a Sunday
        assert month_grid(2025, 6, [], [])[0].date == date(2025, 6, 1)

    def test_events_and_sales_per_day(self, sample_sales):
        event = CalendarEvent(id="e1", title="Delivery", date=datetime(2025, 3, 10, 8, 0),
                              type=EventType.DELIVERY)

        grid = month_grid(2025, 3, [event], sample_sales)
        day = next(d for d in grid if d.date == date(2025, 3, 10))

        assert day.events == (event,)
        assert day.sales_count == 1

    def test_invalid_month(self):
        with pytest.raises(ValueError):
            month_grid(2025, 13, [], [])

    def test_upcoming_events(self):
        now = datetime(2025, 3, 10, 12, 0)
        events = [
            CalendarEvent(id="past", title="Past", date=datetime(2025, 3, 1, 9, 0)),
            CalendarEvent(id="later", title="Later", date=datetime(2025, 3, 20, 9, 0)),
            CalendarEvent(id="soon", title="Soon", date=datetime(2025, 3, 11, 9, 0)),
        ]

        assert [e.id for e in upcoming_events(events, now=now)] == ["soon", "later"]
        assert [e.id for e in upcoming_events(events, now=now, limit=1)] == ["soon"]


class TestDashboard:
    """Tests for the KPI summary"""

    def test_summary(self, sample_products, sample_sales):
        metrics = compute_metrics(sample_products, sample_sales, today=date(2025, 3, 15))

        summary = dashboard_summary(metrics, sample_products, sample_sales, ["electronics"], [])

        assert summary.total_products == 3
        assert summary.total_sales == 3
        assert summary.total_categories == 1
        assert summary.low_stock_count == 1
        assert summary.revenue_trend == Trend.UP
        assert summary.profit_trend == Trend.UP

    def test_trend_without_sales(self, sample_products):
        metrics = compute_metrics(sample_products, [], today=date(2025, 3, 15))

        summary = dashboard_summary(metrics, sample_products, [], [], [])

        assert summary.revenue_trend == Trend.STABLE
        assert summary.profit_margin == 0.0
