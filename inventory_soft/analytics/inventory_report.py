"""
Inventory Report

Stock level classification, report filters and the per-category rollup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import polars as pl

from inventory_soft.domain.models import Product


class StockLevel(str, Enum):
    """Stock level relative to the reorder threshold"""
    LOW = "low"  # at or below min_stock
    NORMAL = "normal"  # up to twice min_stock
    HIGH = "high"


@dataclass(frozen=True)
class CategoryStockSummary:
    """Stock rollup for one category"""
    category: str
    product_count: int
    total_stock: int
    total_value: float
    low_stock_count: int


def stock_level(product: Product) -> StockLevel:
    if product.stock <= product.min_stock:
        return StockLevel.LOW
    if product.stock <= product.min_stock * 2:
        return StockLevel.NORMAL
    return StockLevel.HIGH


def filter_products(
    products: Sequence[Product],
    category: Optional[str] = None,
    level: Optional[StockLevel] = None,
) -> List[Product]:
    """
    Products matching a category and a stock level, in input order.

    ``None`` or "all" disables a filter.
    """
    selected = list(products)
    if category and category != "all":
        selected = [p for p in selected if p.category == category]
    if level is not None and level != "all":
        level = StockLevel(level)
        selected = [p for p in selected if stock_level(p) == level]
    return selected


def category_report(products: Sequence[Product]) -> List[CategoryStockSummary]:
    """Product count, stock, value at sale price and low-stock count per category"""
    if not products:
        return []

    df = pl.DataFrame(
        {
            "category": [p.category for p in products],
            "stock": [p.stock for p in products],
            "value": [float(p.inventory_value) for p in products],
            "low_stock": [p.is_low_stock for p in products],
        },
        schema={
            "category": pl.Utf8,
            "stock": pl.Int64,
            "value": pl.Float64,
            "low_stock": pl.Boolean,
        },
    )
    grouped = df.group_by("category", maintain_order=True).agg(
        pl.len().alias("product_count"),
        pl.col("stock").sum().alias("total_stock"),
        pl.col("value").sum().alias("total_value"),
        pl.col("low_stock").sum().alias("low_stock_count"),
    )

    return [
        CategoryStockSummary(
            category=row["category"],
            product_count=int(row["product_count"]),
            total_stock=int(row["total_stock"]),
            total_value=float(row["total_value"]),
            low_stock_count=int(row["low_stock_count"]),
        )
        for row in grouped.iter_rows(named=True)
    ]
