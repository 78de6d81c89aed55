"""
Derived Metrics Aggregation

Maps the full product and sale lists of one owner to a DerivedMetrics
snapshot in a single linear pass:

- Revenue, cost, profit and margin
- Low-stock products in input order
- Top five products by units sold, ties kept in input order
- Revenue per category, with sales of deleted products under "uncategorized"
- Revenue over the last calendar month

compute_metrics is pure. MetricsEngine wraps it with a one-entry memo keyed
by a content fingerprint, because snapshots are rebuilt from fresh objects on
every fetch and object identity says nothing about content.
"""

import calendar
import hashlib
from datetime import date, datetime
from types import MappingProxyType
from typing import Dict, Optional, Sequence, Tuple

import structlog

from inventory_soft.domain.models import (
    UNCATEGORIZED,
    DerivedMetrics,
    Product,
    ProductSalesSummary,
    Sale,
)

logger = structlog.get_logger(__name__)

TOP_SELLING_LIMIT = 5


def one_month_before(day: date) -> date:
    """
    Same day-of-month one calendar month earlier, clamped to month end.

    2024-03-31 -> 2024-02-29, 2025-01-15 -> 2024-12-15
    """
    year, month = (day.year - 1, 12) if day.month == 1 else (day.year, day.month - 1)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _as_date(value: datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def compute_metrics(
    products: Sequence[Product],
    sales: Sequence[Sale],
    today: Optional[date] = None,
) -> DerivedMetrics:
    """
    Compute the derived metrics snapshot.

    Args:
        products: Products of one owner, in display order
        sales: Sales of the same owner
        today: Reference day for the last-month window (defaults to today)

    Returns:
        DerivedMetrics for exactly these inputs
    """
    today = today or date.today()
    product_map: Dict[str, Product] = {p.id: p for p in products}

    total_revenue = 0.0
    total_cost = 0.0
    sales_by_category: Dict[str, float] = {}
    quantity_by_product: Dict[str, int] = {}
    revenue_by_product: Dict[str, float] = {}
    window_start = one_month_before(today)
    sales_last_month = 0.0

    for sale in sales:
        total_revenue += sale.total_price

        product = product_map.get(sale.product_id)
        if product is not None:
            total_cost += product.purchase_price * sale.quantity
        category = product.category if product is not None and product.category else UNCATEGORIZED
        sales_by_category[category] = sales_by_category.get(category, 0.0) + sale.total_price

        quantity_by_product[sale.product_id] = quantity_by_product.get(sale.product_id, 0) + sale.quantity
        revenue_by_product[sale.product_id] = revenue_by_product.get(sale.product_id, 0.0) + sale.total_price

        if window_start <= _as_date(sale.date) <= today:
            sales_last_month += sale.total_price

    total_profit = total_revenue - total_cost
    profit_margin = (total_profit / total_revenue) * 100 if total_revenue != 0 else 0.0

    low_stock_products = tuple(p for p in products if p.stock <= p.min_stock)

    # Every product takes part, sold or not; sorted() is stable so ties keep input order
    product_sales = [
        ProductSalesSummary(
            product_id=p.id,
            product_name=p.name,
            total_quantity=quantity_by_product.get(p.id, 0),
            total_revenue=revenue_by_product.get(p.id, 0.0),
        )
        for p in products
    ]
    top_selling = sorted(product_sales, key=lambda s: s.total_quantity, reverse=True)

    return DerivedMetrics(
        total_revenue=total_revenue,
        total_cost=total_cost,
        total_profit=total_profit,
        profit_margin=profit_margin,
        low_stock_products=low_stock_products,
        top_selling_products=tuple(top_selling[:TOP_SELLING_LIMIT]),
        sales_by_category=MappingProxyType(sales_by_category),
        sales_last_month=sales_last_month,
    )


def fingerprint(products: Sequence[Product], sales: Sequence[Sale], today: date) -> str:
    """
    Content fingerprint of everything compute_metrics reads.

    Products contribute every field because low-stock output carries whole
    records. Sales contribute the fields that feed the sums. Order matters:
    it decides low-stock order and top-selling ties.
    """
    digest = hashlib.sha256()
    digest.update(today.isoformat().encode())
    for p in products:
        digest.update(repr((
            "p", p.id, p.name, p.category, p.stock, p.min_stock,
            p.purchase_price, p.sale_price, p.description, p.supplier,
            p.last_updated.isoformat() if p.last_updated else None,
        )).encode())
    for s in sales:
        digest.update(repr((
            "s", s.id, s.product_id, s.quantity, s.total_price, s.date.isoformat(),
        )).encode())
    return digest.hexdigest()


class MetricsEngine:
    """
    compute_metrics behind a one-entry memo.

    A fingerprint match returns the stored snapshot; anything else recomputes
    and replaces it. The memo only saves work, results are identical either way.

    Example:
        engine = MetricsEngine()
        metrics = engine.compute(products, sales)
    """

    def __init__(self):
        self._cached: Optional[Tuple[str, DerivedMetrics]] = None
        self.hits = 0
        self.misses = 0

    def compute(
        self,
        products: Sequence[Product],
        sales: Sequence[Sale],
        today: Optional[date] = None,
    ) -> DerivedMetrics:
        today = today or date.today()
        key = fingerprint(products, sales, today)

        if self._cached is not None and self._cached[0] == key:
            self.hits += 1
            logger.debug("Metrics served from cache", hits=self.hits)
            return self._cached[1]

        self.misses += 1
        metrics = compute_metrics(products, sales, today)
        self._cached = (key, metrics)
        logger.debug(
            "Metrics recomputed",
            products=len(products),
            sales=len(sales),
            total_revenue=metrics.total_revenue,
            low_stock=len(metrics.low_stock_products),
        )
        return metrics

    def invalidate(self) -> None:
        """Forget the stored snapshot"""
        self._cached = None

    @property
    def is_warm(self) -> bool:
        return self._cached is not None
