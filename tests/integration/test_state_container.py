"""
Integration Tests - Inventory State
"""
from datetime import date, datetime, timedelta

import pytest

from inventory_soft.data import DemoDataGenerator, seed_inventory
from inventory_soft.database.models import utcnow
from inventory_soft.domain import ProductCreate
from inventory_soft.errors import (
    InsufficientStockError,
    InventoryValidationError,
    RecordNotFoundError,
    RecordStoreError,
    StockAdjustmentError,
)
from inventory_soft.state import InventoryState, SessionRegistry


def product_payload(**overrides):
    payload = {
        "name": "Wireless Mouse",
        "category": "electronics",
        "stock": 5,
        "min_stock": 10,
        "purchase_price": 2.0,
        "sale_price": 5.0,
    }
    payload.update(overrides)
    return payload


async def failing(*args, **kwargs):
    raise RecordStoreError("connection refused")


class TestFetch:
    """Tests for loading the snapshot"""

    async def test_fetch_all_loads_every_slice(self, store):
        await store.insert_product("owner-1", {**product_payload(), "category": "electronics"})
        await store.insert_product("owner-1", {**product_payload(name="Pen"), "category": "stationery"})
        await store.insert_product("owner-1", {**product_payload(name="Cable"), "category": "electronics"})
        await store.insert_event("owner-1", {"title": "Delivery", "date": datetime(2025, 3, 1, 9, 0)})

        state = InventoryState(store, "owner-1")
        await state.fetch_all()

        assert len(state.products) == 3
        assert sorted(state.categories) == ["electronics", "stationery"]
        assert len(state.categories) == 2
        assert [e.title for e in state.events] == ["Delivery"]
        assert state.error is None
        assert state.loading.products is False

    async def test_failed_slice_keeps_previous_value(self, state, store, monkeypatch):
        product = await state.add_product(product_payload())
        monkeypatch.setattr(store, "list_products", failing)

        await state.fetch_all()

        assert state.products == (product,)
        assert state.error == "connection refused"

    async def test_single_fetch_records_and_raises(self, state, store, monkeypatch):
        monkeypatch.setattr(store, "list_sales", failing)

        with pytest.raises(RecordStoreError):
            await state.fetch_sales()

        assert state.error == "connection refused"
        assert state.loading.sales is False


class TestProducts:
    """Tests for product mutations"""

    async def test_add_product_recomputes(self, state):
        product = await state.add_product(product_payload())

        assert state.products[0] == product
        assert state.categories == ("electronics",)
        assert state.metrics.low_stock_products == (product,)

    async def test_invalid_product_is_rejected_before_write(self, state, store):
        with pytest.raises(InventoryValidationError):
            await state.add_product(product_payload(stock=-1))

        assert state.products == ()
        assert await store.list_products(state.owner_id) == []
        assert state.error is not None

    async def test_store_failure_leaves_snapshot_untouched(self, state, store, monkeypatch):
        existing = await state.add_product(product_payload())
        metrics_before = state.metrics
        monkeypatch.setattr(store, "insert_product", failing)

        with pytest.raises(RecordStoreError):
            await state.add_product(product_payload(name="Keyboard"))

        assert state.products == (existing,)
        assert state.metrics is metrics_before
        assert state.error == "connection refused"

    async def test_success_clears_error(self, state, store, monkeypatch):
        monkeypatch.setattr(store, "insert_product", failing)
        with pytest.raises(RecordStoreError):
            await state.add_product(product_payload())
        monkeypatch.undo()

        await state.add_product(ProductCreate(**product_payload()))

        assert state.error is None

    async def test_update_echoes_store_record(self, state):
        product = await state.add_product(product_payload())

        updated = await state.update_product(product.id, {"stock": 50, "category": "peripherals"})

        assert state.products == (updated,)
        assert updated.stock == 50
        assert "peripherals" in state.categories
        assert state.metrics.low_stock_products == ()

    async def test_update_unknown_product(self, state):
        with pytest.raises(RecordNotFoundError):
            await state.update_product("missing", {"stock": 1})

    async def test_delete_product_keeps_its_sales(self, state):
        product = await state.add_product(product_payload())
        await state.add_sale({"product_id": product.id, "quantity": 2})

        await state.delete_product(product.id)

        assert state.products == ()
        assert len(state.sales) == 1
        assert state.metrics.total_revenue == 10.0
        assert state.metrics.total_cost == 0.0
        assert state.metrics.sales_by_category == {"uncategorized": 10.0}


class TestSales:
    """Tests for recording sales"""

    async def test_add_sale_decrements_stock(self, state, store):
        product = await state.add_product(product_payload())

        sale = await state.add_sale({"product_id": product.id, "quantity": 3})

        assert sale.unit_price == 5.0
        assert sale.total_price == 15.0
        assert sale.product_name == "Wireless Mouse"
        assert state.products[0].stock == 2
        assert (await store.list_products(state.owner_id))[0].stock == 2
        assert state.metrics.total_revenue == 15.0
        assert state.metrics.total_cost == 6.0
        assert state.metrics.total_profit == 9.0
        assert state.metrics.profit_margin == 60.0

    async def test_explicit_unit_price(self, state):
        product = await state.add_product(product_payload())

        sale = await state.add_sale({"product_id": product.id, "quantity": 2, "unit_price": 4.5})

        assert sale.total_price == 9.0

    async def test_insufficient_stock_rejected_before_write(self, state, store):
        product = await state.add_product(product_payload(stock=2))

        with pytest.raises(InsufficientStockError) as exc_info:
            await state.add_sale({"product_id": product.id, "quantity": 3})

        assert exc_info.value.available == 2
        assert state.products[0].stock == 2
        assert state.sales == ()
        assert await store.list_sales(state.owner_id) == []
        assert (await store.list_products(state.owner_id))[0].stock == 2
        assert "Only 2 units" in state.error

    async def test_unknown_product_rejected(self, state):
        with pytest.raises(InventoryValidationError):
            await state.add_sale({"product_id": "missing", "quantity": 1})

    async def test_failed_decrement_keeps_sale(self, state, store, monkeypatch):
        product = await state.add_product(product_payload())
        monkeypatch.setattr(store, "update_product", failing)

        with pytest.raises(StockAdjustmentError):
            await state.add_sale({"product_id": product.id, "quantity": 1})

        assert len(state.sales) == 1
        assert len(await store.list_sales(state.owner_id)) == 1
        assert state.products[0].stock == 5
        assert state.metrics.total_revenue == 5.0
        assert "was not updated" in state.error

    async def test_delete_sale_does_not_restore_stock(self, state):
        product = await state.add_product(product_payload())
        sale = await state.add_sale({"product_id": product.id, "quantity": 2})

        await state.delete_sale(sale.id)

        assert state.sales == ()
        assert state.products[0].stock == 3
        assert state.metrics.total_revenue == 0.0

    async def test_sales_on_day(self, state):
        product = await state.add_product(product_payload())
        await state.add_sale({"product_id": product.id, "quantity": 1, "date": datetime(2025, 3, 10, 12, 0)})

        assert len(state.sales_on(date(2025, 3, 10))) == 1
        assert state.sales_on(date(2025, 3, 11)) == []
        assert len(state.product_performance(product.id)) == 1


class TestCategories:
    """Tests for the category list"""

    async def test_add_category_trims(self, state):
        assert await state.add_category("  garden ") == "garden"
        assert state.categories == ("garden",)

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_empty_category_rejected(self, state, name):
        with pytest.raises(InventoryValidationError):
            await state.add_category(name)

    async def test_duplicate_category_rejected(self, state):
        await state.add_category("garden")
        with pytest.raises(InventoryValidationError):
            await state.add_category("garden")

    async def test_remove_category_does_not_cascade(self, state):
        product = await state.add_product(product_payload())

        await state.remove_category("electronics")

        assert state.categories == ()
        assert state.products == (product,)
        assert state.products[0].category == "electronics"


class TestEventsAndProfile:
    async def test_events_kept_in_date_order(self, state):
        await state.add_event({"title": "Later", "date": datetime(2025, 4, 1, 9, 0)})
        await state.add_event({"title": "Sooner", "date": datetime(2025, 3, 1, 9, 0)})

        assert [e.title for e in state.events] == ["Sooner", "Later"]

    async def test_update_and_delete_event(self, state):
        event = await state.add_event({"title": "Count", "date": datetime(2025, 4, 1, 9, 0), "type": "reminder"})

        updated = await state.update_event(event.id, {"title": "Stock count"})
        assert state.events == (updated,)

        await state.delete_event(event.id)
        assert state.events == ()


class TestQueries:
    async def test_search_products(self, state):
        await state.add_product(product_payload(description="Bluetooth, silent clicks"))
        await state.add_product(product_payload(name="Notebook", category="stationery"))

        assert [p.name for p in state.search_products("BLUETOOTH")] == ["Wireless Mouse"]
        assert [p.name for p in state.search_products("station")] == ["Notebook"]
        assert len(state.search_products("")) == 2

    async def test_recompute_served_from_memo(self, state):
        await state.add_product(product_payload())

        first = state.recompute()
        second = state.recompute()

        assert second is first
        assert state.engine.hits >= 1

    async def test_clear(self, state):
        await state.add_product(product_payload())

        state.clear()

        assert state.products == ()
        assert state.categories == ()
        assert state.metrics.total_revenue == 0.0
        assert not state.engine.is_warm


class TestSessionRegistry:
    async def test_open_get_close(self, store):
        await store.insert_product("owner-1", product_payload())
        registry = SessionRegistry(store)

        state = await registry.open("token-1", "owner-1")
        assert len(state.products) == 1
        assert await registry.get("token-1", "owner-1") is state

        registry.close("token-1")

        assert "token-1" not in registry
        assert state.products == ()

    async def test_get_reopens_lazily(self, store):
        registry = SessionRegistry(store)

        state = await registry.get("token-1", "owner-1")

        assert "token-1" in registry
        assert state.owner_id == "owner-1"

    async def test_sessions_do_not_share_state(self, store):
        await store.insert_product("owner-1", product_payload())
        registry = SessionRegistry(store)

        first = await registry.open("token-1", "owner-1")
        second = await registry.open("token-2", "owner-2")

        assert len(first.products) == 1
        assert second.products == ()

    async def test_expired_states_dropped_on_open(self, store):
        registry = SessionRegistry(store)
        stale = await registry.open("token-1", "owner-1", utcnow() - timedelta(minutes=1))

        await registry.open("token-2", "owner-2", utcnow() + timedelta(hours=1))

        assert "token-1" not in registry
        assert "token-2" in registry
        assert stale.products == ()

    async def test_prune_expired(self, store, auth):
        await auth.sign_up("ana@shop.test", "secret123", "Ana")
        registry = SessionRegistry(store)
        for _ in range(3):
            session = await auth.sign_in("ana@shop.test", "secret123")
            await registry.open(session.token, session.owner_id, session.expires_at)

        assert registry.prune_expired() == 0
        assert registry.prune_expired(now=utcnow() + timedelta(hours=2)) == 3
        assert len(registry) == 0


class TestDemoSeeding:
    async def test_seed_inventory_keeps_invariants(self, state):
        await seed_inventory(state, products=5, sales=15, events=3, seed=7)

        assert len(state.products) == 5
        assert len(state.events) == 3
        assert 0 < len(state.sales) <= 15
        assert all(p.stock >= 0 for p in state.products)
        assert set(state.categories) == {p.category for p in state.products}
        assert state.metrics.total_revenue == pytest.approx(
            sum(s.total_price for s in state.sales)
        )

    async def test_generator_is_deterministic_with_seed(self):
        first = [p.name for p in DemoDataGenerator(seed=3).products(4)]
        second = [p.name for p in DemoDataGenerator(seed=3).products(4)]

        assert first == second
