"""
Inventory State Container

Holds the last-fetched snapshot of one owner's products, sales, categories,
events and profile, plus the derived metrics computed from them.

Fetches replace a slice wholesale in a single assignment, so a stale result
simply wins over an older one. Mutations are serialized by a per-state lock,
validate before writing, await the store write before touching the snapshot,
and recompute metrics whenever products or sales changed. A failed operation
records its message in ``error`` and leaves the snapshot as it was.
"""

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, AsyncGenerator, List, Mapping, Optional, Sequence, Tuple, Union

import structlog

from inventory_soft.analytics.aggregation import MetricsEngine
from inventory_soft.analytics.dashboard import DashboardSummary, dashboard_summary
from inventory_soft.analytics import performance
from inventory_soft.analytics.performance import PerformancePoint
from inventory_soft.domain.models import (
    CalendarEvent,
    DerivedMetrics,
    EventCreate,
    EventUpdate,
    Product,
    ProductCreate,
    ProductUpdate,
    Profile,
    ProfileUpdate,
    Sale,
    SaleCreate,
    parse_input,
)
from inventory_soft.errors import (
    InsufficientStockError,
    InventoryError,
    InventoryValidationError,
    RecordStoreError,
    StockAdjustmentError,
)
from inventory_soft.store.record_store import RecordStore

logger = structlog.get_logger(__name__)

Payload = Mapping[str, Any]


@dataclass
class LoadingState:
    """Per-section in-flight flags"""
    products: bool = False
    sales: bool = False
    categories: bool = False
    events: bool = False


def distinct_categories(products: Sequence[Product]) -> Tuple[str, ...]:
    """Non-empty categories of the products, first-seen order"""
    seen = {}
    for product in products:
        if product.category:
            seen.setdefault(product.category, None)
    return tuple(seen)


class InventoryState:
    """
    Snapshot and mutation surface for one signed-in owner.

    Example:
        state = InventoryState(store, owner_id)
        await state.fetch_all()
        await state.add_sale({"product_id": product_id, "quantity": 2})
        state.metrics.total_revenue
    """

    def __init__(
        self,
        store: RecordStore,
        owner_id: str,
        engine: Optional[MetricsEngine] = None,
    ):
        self._store = store
        self.owner_id = owner_id
        self._engine = engine or MetricsEngine()
        self._lock = asyncio.Lock()

        self.products: Tuple[Product, ...] = ()
        self.sales: Tuple[Sale, ...] = ()
        self.categories: Tuple[str, ...] = ()
        self.events: Tuple[CalendarEvent, ...] = ()
        self.profile: Optional[Profile] = None
        self.metrics: DerivedMetrics = DerivedMetrics.empty()
        self.error: Optional[str] = None
        self.loading = LoadingState()

    @property
    def engine(self) -> MetricsEngine:
        return self._engine

    @asynccontextmanager
    async def _operation(self, name: str, section: Optional[str] = None) -> AsyncGenerator[None, None]:
        async with self._lock:
            if section:
                setattr(self.loading, section, True)
            try:
                yield
            except InventoryError as e:
                self.error = e.message
                logger.warning(
                    "Inventory operation failed",
                    operation=name,
                    owner_id=self.owner_id,
                    error=e.message,
                    error_type=type(e).__name__,
                )
                raise
            else:
                self.error = None
            finally:
                if section:
                    setattr(self.loading, section, False)

    def _recompute(self) -> None:
        self.metrics = self._engine.compute(self.products, self.sales)

    def _product(self, product_id: str) -> Optional[Product]:
        return next((p for p in self.products if p.id == product_id), None)

    def _with_category(self, category: str) -> None:
        if category and category not in self.categories:
            self.categories = self.categories + (category,)

    def _replace_product(self, product: Product) -> None:
        self.products = tuple(product if p.id == product.id else p for p in self.products)

    # =========================================================================
    # FETCH
    # =========================================================================

    async def fetch_all(self) -> None:
        """
        Load every slice concurrently.

        A slice whose fetch fails keeps its previous value; the last failure
        is left in ``error``. Categories are derived from the fetched products.
        """
        async with self._lock:
            self.loading = LoadingState(products=True, sales=True, categories=True, events=True)
            try:
                results = await asyncio.gather(
                    self._store.list_products(self.owner_id),
                    self._store.list_sales(self.owner_id),
                    self._store.list_events(self.owner_id),
                    self._store.get_profile(self.owner_id),
                    return_exceptions=True,
                )
            finally:
                self.loading = LoadingState()

            for result in results:
                if isinstance(result, BaseException) and not isinstance(result, InventoryError):
                    raise result

            products, sales, events, profile = results
            failures = [r for r in results if isinstance(r, InventoryError)]

            if not isinstance(products, InventoryError):
                self.products = tuple(products)
                self.categories = distinct_categories(self.products)
            if not isinstance(sales, InventoryError):
                self.sales = tuple(sales)
            if not isinstance(events, InventoryError):
                self.events = tuple(events)
            if not isinstance(profile, InventoryError):
                self.profile = profile

            self.error = failures[-1].message if failures else None
            self._recompute()

        logger.info(
            "Inventory state loaded",
            owner_id=self.owner_id,
            products=len(self.products),
            sales=len(self.sales),
            events=len(self.events),
            failures=len(failures),
        )

    async def fetch_products(self) -> None:
        async with self._operation("fetch_products", "products"):
            self.products = tuple(await self._store.list_products(self.owner_id))
            self._recompute()

    async def fetch_sales(self) -> None:
        async with self._operation("fetch_sales", "sales"):
            self.sales = tuple(await self._store.list_sales(self.owner_id))
            self._recompute()

    async def fetch_categories(self) -> None:
        """Replace the category list with the distinct categories in the store"""
        async with self._operation("fetch_categories", "categories"):
            self.categories = distinct_categories(await self._store.list_products(self.owner_id))

    async def fetch_events(self) -> None:
        async with self._operation("fetch_events", "events"):
            self.events = tuple(await self._store.list_events(self.owner_id))

    async def fetch_profile(self) -> None:
        async with self._operation("fetch_profile"):
            self.profile = await self._store.get_profile(self.owner_id)

    # =========================================================================
    # PRODUCTS
    # =========================================================================

    async def add_product(self, data: Union[ProductCreate, Payload]) -> Product:
        async with self._operation("add_product", "products"):
            payload = parse_input(ProductCreate, data)
            product = await self._store.insert_product(self.owner_id, payload.model_dump())
            self.products = (product,) + self.products
            self._with_category(product.category)
            self._recompute()
            logger.info("Product added", owner_id=self.owner_id, product_id=product.id)
            return product

    async def update_product(self, product_id: str, data: Union[ProductUpdate, Payload]) -> Product:
        async with self._operation("update_product", "products"):
            changes = parse_input(ProductUpdate, data).changes()
            product = await self._store.update_product(product_id, self.owner_id, changes)
            if self._product(product_id) is None:
                self.products = (product,) + self.products
            else:
                self._replace_product(product)
            self._with_category(product.category)
            self._recompute()
            return product

    async def delete_product(self, product_id: str) -> None:
        """Remove a product. Its sales stay and count as uncategorized."""
        async with self._operation("delete_product", "products"):
            await self._store.delete_product(product_id, self.owner_id)
            self.products = tuple(p for p in self.products if p.id != product_id)
            self._recompute()
            logger.info("Product deleted", owner_id=self.owner_id, product_id=product_id)

    # =========================================================================
    # SALES
    # =========================================================================

    async def add_sale(self, data: Union[SaleCreate, Payload]) -> Sale:
        """
        Record a sale and take its units out of stock.

        The sale and the stock decrement are two writes. If the decrement
        fails the sale is kept, both locally and in the store.

        Raises:
            InventoryValidationError: Unknown product
            InsufficientStockError: Quantity exceeds the product's stock
            StockAdjustmentError: Sale recorded but stock not decremented
        """
        async with self._operation("add_sale", "sales"):
            payload = parse_input(SaleCreate, data)
            product = self._product(payload.product_id)
            if product is None:
                raise InventoryValidationError(f"Unknown product {payload.product_id}")
            if payload.quantity > product.stock:
                raise InsufficientStockError(product.name, product.stock, payload.quantity)

            unit_price = payload.unit_price if payload.unit_price is not None else product.sale_price
            sale = await self._store.insert_sale(self.owner_id, {
                "product_id": product.id,
                "product_name": product.name,
                "quantity": payload.quantity,
                "unit_price": unit_price,
                "total_price": unit_price * payload.quantity,
                "date": payload.date or datetime.now(),
                "customer": payload.customer,
                "customer_email": payload.customer_email,
            })
            self.sales = (sale,) + self.sales

            try:
                updated = await self._store.update_product(
                    product.id, self.owner_id, {"stock": product.stock - payload.quantity}
                )
            except RecordStoreError as e:
                self._recompute()
                raise StockAdjustmentError(
                    f"Sale {sale.id} recorded but stock of {product.name} was not updated: {e.message}"
                ) from e

            self._replace_product(updated)
            self._recompute()
            logger.info(
                "Sale recorded",
                owner_id=self.owner_id,
                sale_id=sale.id,
                product_id=product.id,
                quantity=sale.quantity,
                total_price=sale.total_price,
            )
            return sale

    async def delete_sale(self, sale_id: str) -> None:
        """Remove a sale record; stock is not restored"""
        async with self._operation("delete_sale", "sales"):
            await self._store.delete_sale(sale_id, self.owner_id)
            self.sales = tuple(s for s in self.sales if s.id != sale_id)
            self._recompute()

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    async def add_category(self, name: str) -> str:
        async with self._operation("add_category", "categories"):
            name = (name or "").strip()
            if not name:
                raise InventoryValidationError("Category name must not be empty")
            if name in self.categories:
                raise InventoryValidationError(f"Category {name} already exists")
            self.categories = self.categories + (name,)
            return name

    async def remove_category(self, name: str) -> None:
        """Drop a category from the list; products keep their category"""
        async with self._operation("remove_category", "categories"):
            if name not in self.categories:
                raise InventoryValidationError(f"Unknown category {name}")
            self.categories = tuple(c for c in self.categories if c != name)

    # =========================================================================
    # EVENTS
    # =========================================================================

    def _sorted_events(self, events: Sequence[CalendarEvent]) -> Tuple[CalendarEvent, ...]:
        return tuple(sorted(events, key=lambda e: e.date))

    async def add_event(self, data: Union[EventCreate, Payload]) -> CalendarEvent:
        async with self._operation("add_event", "events"):
            payload = parse_input(EventCreate, data)
            event = await self._store.insert_event(self.owner_id, payload.model_dump())
            self.events = self._sorted_events(self.events + (event,))
            return event

    async def update_event(self, event_id: str, data: Union[EventUpdate, Payload]) -> CalendarEvent:
        async with self._operation("update_event", "events"):
            changes = parse_input(EventUpdate, data).changes()
            event = await self._store.update_event(event_id, self.owner_id, changes)
            others = tuple(e for e in self.events if e.id != event_id)
            self.events = self._sorted_events(others + (event,))
            return event

    async def delete_event(self, event_id: str) -> None:
        async with self._operation("delete_event", "events"):
            await self._store.delete_event(event_id, self.owner_id)
            self.events = tuple(e for e in self.events if e.id != event_id)

    # =========================================================================
    # PROFILE
    # =========================================================================

    async def update_profile(self, data: Union[ProfileUpdate, Payload]) -> Profile:
        async with self._operation("update_profile"):
            changes = parse_input(ProfileUpdate, data).changes()
            self.profile = await self._store.update_profile(self.owner_id, changes)
            return self.profile

    # =========================================================================
    # QUERIES
    # =========================================================================

    def search_products(self, term: str) -> List[Product]:
        """Case-insensitive match on name, category or description"""
        term = (term or "").strip().lower()
        if not term:
            return list(self.products)
        return [
            p for p in self.products
            if term in p.name.lower()
            or term in p.category.lower()
            or (p.description and term in p.description.lower())
        ]

    def sales_on(self, day: date) -> List[Sale]:
        return performance.sales_on(self.sales, day)

    def product_performance(self, product_id: str) -> List[PerformancePoint]:
        return performance.product_performance(product_id, self.products, self.sales)

    def chart_products(self) -> List[Tuple[str, str]]:
        """(id, name) pairs for chart product pickers"""
        return [(p.id, p.name) for p in self.products]

    def dashboard(self) -> DashboardSummary:
        return dashboard_summary(self.metrics, self.products, self.sales, self.categories, self.events)

    def recompute(self) -> DerivedMetrics:
        """Recompute metrics now; an unchanged snapshot is served from the memo"""
        self._recompute()
        return self.metrics

    def clear(self) -> None:
        """Empty every slice, reset metrics and forget the memo"""
        self.products = ()
        self.sales = ()
        self.categories = ()
        self.events = ()
        self.profile = None
        self.metrics = DerivedMetrics.empty()
        self.error = None
        self.loading = LoadingState()
        self._engine.invalidate()
