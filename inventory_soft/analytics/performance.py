"""
Sales Performance

Per-product daily series for charts and per-day sales summaries for the
calendar view.
"""

from dataclasses import dataclass
from datetime import date
from typing import List, Mapping, Sequence

import polars as pl

from inventory_soft.domain.models import Product, Sale


@dataclass(frozen=True)
class PerformancePoint:
    """One day of sales for one product"""
    date: date
    sales: int
    revenue: float
    profit: float


@dataclass(frozen=True)
class DailySalesSummary:
    """Totals over the sales of one day"""
    day: date
    sales_count: int
    total_revenue: float
    total_items: int
    average_sale_value: float = 0.0


def product_performance(
    product_id: str,
    products: Sequence[Product],
    sales: Sequence[Sale],
) -> List[PerformancePoint]:
    """
    Daily units, revenue and profit of one product, oldest day first.

    Profit uses the product's current purchase price. Unknown products yield
    an empty series.
    """
    product = next((p for p in products if p.id == product_id), None)
    if product is None:
        return []

    product_sales = [s for s in sales if s.product_id == product_id]
    if not product_sales:
        return []

    df = pl.DataFrame(
        {
            "date": [s.date.date() for s in product_sales],
            "quantity": [s.quantity for s in product_sales],
            "revenue": [float(s.total_price) for s in product_sales],
        },
        schema={"date": pl.Date, "quantity": pl.Int64, "revenue": pl.Float64},
    )
    daily = (
        df.group_by("date")
        .agg(
            pl.col("quantity").sum().alias("sales"),
            pl.col("revenue").sum().alias("revenue"),
        )
        .with_columns(
            (pl.col("revenue") - pl.col("sales") * product.purchase_price).alias("profit")
        )
        .sort("date")
    )

    return [
        PerformancePoint(
            date=row["date"],
            sales=int(row["sales"]),
            revenue=float(row["revenue"]),
            profit=float(row["profit"]),
        )
        for row in daily.iter_rows(named=True)
    ]


def sales_on(sales: Sequence[Sale], day: date) -> List[Sale]:
    """Sales dated on the given calendar day, in input order"""
    return [s for s in sales if s.date.date() == day]


def daily_sales_summary(sales: Sequence[Sale], day: date) -> DailySalesSummary:
    day_sales = sales_on(sales, day)
    return DailySalesSummary(
        day=day,
        sales_count=len(day_sales),
        total_revenue=sum(s.total_price for s in day_sales),
        total_items=sum(s.quantity for s in day_sales),
        average_sale_value=average_sale_value(day_sales),
    )


def return_percentage(product: Product, unit_price: float) -> float:
    """Markup of a sale price over the purchase price, in percent; 0 without a cost"""
    if product.purchase_price == 0:
        return 0.0
    return (unit_price - product.purchase_price) / product.purchase_price * 100


def sale_return_percentage(sale: Sale, products_by_id: Mapping[str, Product]) -> float:
    """Return percentage of a sale at its unit price; 0 once the product is gone"""
    product = products_by_id.get(sale.product_id)
    if product is None:
        return 0.0
    return return_percentage(product, sale.unit_price)


def average_sale_value(sales: Sequence[Sale]) -> float:
    if not sales:
        return 0.0
    return sum(s.total_price for s in sales) / len(sales)
