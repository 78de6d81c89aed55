"""
Test Suite Configuration
"""
from datetime import datetime

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from inventory_soft.config import Settings
from inventory_soft.config.settings import DatabaseSettings, ReportSettings, SecuritySettings
from inventory_soft.database import Base, create_session_factory
from inventory_soft.domain import Product, Sale
from inventory_soft.services.auth import AuthService
from inventory_soft.state import InventoryState
from inventory_soft.store import RecordStore

OWNER_ID = "owner-1"
OTHER_OWNER_ID = "owner-2"


@pytest.fixture
def test_settings(tmp_path) -> Settings:
    """Create test settings backed by a throwaway SQLite file"""
    return Settings(
        APP_ENV="testing",
        database=DatabaseSettings(url=f"sqlite+aiosqlite:///{tmp_path / 'api.sqlite3'}"),
        security=SecuritySettings(BCRYPT_ROUNDS=4, SESSION_TTL_HOURS=1),
        reports=ReportSettings(company_name="Test Shop", listing_limit=3),
    )


@pytest.fixture
async def test_engine(tmp_path):
    """Create test database engine"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'store.sqlite3'}",
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return create_session_factory(test_engine)


@pytest.fixture
def store(session_factory) -> RecordStore:
    return RecordStore(session_factory)


@pytest.fixture
def auth(session_factory) -> AuthService:
    return AuthService(session_factory, SecuritySettings(BCRYPT_ROUNDS=4, SESSION_TTL_HOURS=1))


@pytest.fixture
async def state(store) -> InventoryState:
    """Loaded, empty inventory state for OWNER_ID"""
    state = InventoryState(store, OWNER_ID)
    await state.fetch_all()
    return state


def make_product(
    product_id: str,
    name: str = "Widget",
    category: str = "tools",
    stock: int = 10,
    min_stock: int = 2,
    purchase_price: float = 3.0,
    sale_price: float = 5.0,
    description=None,
) -> Product:
    return Product(
        id=product_id,
        name=name,
        category=category,
        stock=stock,
        min_stock=min_stock,
        purchase_price=purchase_price,
        sale_price=sale_price,
        last_updated=datetime(2025, 1, 1, 9, 0),
        description=description,
    )


def make_sale(
    sale_id: str,
    product_id: str,
    quantity: int = 1,
    total_price: float = 5.0,
    date: datetime = datetime(2025, 3, 10, 12, 0),
    product_name: str = "Widget",
) -> Sale:
    return Sale(
        id=sale_id,
        product_id=product_id,
        product_name=product_name,
        quantity=quantity,
        unit_price=total_price / quantity,
        total_price=total_price,
        date=date,
    )


@pytest.fixture
def product_factory():
    """Build Product records with defaults"""
    return make_product


@pytest.fixture
def sale_factory():
    """Build Sale records with defaults"""
    return make_sale


@pytest.fixture
def sample_products():
    """Three products: one low on stock, one without sales"""
    return [
        make_product("p1", name="Wireless Mouse", category="electronics", stock=10, min_stock=2,
                     purchase_price=3.0, sale_price=5.0, description="Bluetooth mouse"),
        make_product("p2", name="Notebook", category="stationery", stock=1, min_stock=5,
                     purchase_price=1.0, sale_price=2.5),
        make_product("p3", name="Desk Lamp", category="home", stock=8, min_stock=2,
                     purchase_price=10.0, sale_price=20.0),
    ]


@pytest.fixture
def sample_sales():
    return [
        make_sale("s1", "p1", quantity=3, total_price=15.0, date=datetime(2025, 3, 10, 12, 0)),
        make_sale("s2", "p2", quantity=4, total_price=10.0, date=datetime(2025, 3, 12, 9, 30),
                  product_name="Notebook"),
        make_sale("s3", "p1", quantity=1, total_price=5.0, date=datetime(2025, 1, 5, 16, 0)),
    ]
