"""
Demo Data Generator

Realistic products, sales and calendar events for trying the application
out. Generated data goes through the inventory state like user input, so
sales respect stock and decrement it.
"""

import random
from datetime import datetime, timedelta
from typing import List, Optional

import structlog
from faker import Faker

from inventory_soft.domain.models import EventCreate, EventType, ProductCreate, SaleCreate
from inventory_soft.errors import InsufficientStockError
from inventory_soft.state import InventoryState

logger = structlog.get_logger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

CATEGORIES = [
    ("electronics", ["Headphones", "Charger", "Keyboard", "Mouse", "Speaker"], (15, 250)),
    ("stationery", ["Notebook", "Pen Set", "Planner", "Marker", "Folder"], (2, 30)),
    ("groceries", ["Coffee", "Tea", "Olive Oil", "Honey", "Pasta"], (3, 25)),
    ("cleaning", ["Detergent", "Sponge Pack", "Glass Cleaner", "Mop", "Gloves"], (2, 40)),
    ("toys", ["Puzzle", "Board Game", "Plush", "Building Set", "Kite"], (8, 80)),
]

EVENT_TITLES = {
    EventType.DELIVERY: ["Supplier delivery", "Restock arrival", "Courier pickup"],
    EventType.MEETING: ["Supplier meeting", "Team meeting", "Bank appointment"],
    EventType.REMINDER: ["Inventory count", "Pay invoices", "Update prices"],
    EventType.OTHER: ["Store cleaning", "Window display change"],
}


# =============================================================================
# GENERATORS
# =============================================================================

class DemoDataGenerator:
    """Generate demo input payloads"""

    def __init__(self, seed: Optional[int] = None):
        self.fake = Faker()
        self.random = random.Random(seed)
        if seed is not None:
            self.fake.seed_instance(seed)

    def products(self, n: int = 20) -> List[ProductCreate]:
        products = []
        for _ in range(n):
            category, kinds, (low, high) = self.random.choice(CATEGORIES)
            purchase_price = round(self.random.uniform(low, high), 2)
            products.append(ProductCreate(
                name=f"{self.fake.word().title()} {self.random.choice(kinds)}",
                category=category,
                stock=self.random.randint(0, 120),
                min_stock=self.random.randint(3, 15),
                purchase_price=purchase_price,
                sale_price=round(purchase_price * self.random.uniform(1.2, 2.0), 2),
                description=self.fake.sentence(nb_words=10),
                supplier=self.fake.company(),
            ))
        return products

    def sale(self, product_id: str, max_quantity: int, now: Optional[datetime] = None) -> SaleCreate:
        now = now or datetime.now()
        return SaleCreate(
            product_id=product_id,
            quantity=self.random.randint(1, max(1, min(max_quantity, 5))),
            date=now - timedelta(days=self.random.randint(0, 90), minutes=self.random.randint(0, 600)),
            customer=self.fake.name() if self.random.random() > 0.3 else None,
            customer_email=self.fake.email() if self.random.random() > 0.5 else None,
        )

    def events(self, n: int = 8, now: Optional[datetime] = None) -> List[EventCreate]:
        now = now or datetime.now()
        events = []
        for _ in range(n):
            event_type = self.random.choice(list(EVENT_TITLES))
            start = (now + timedelta(days=self.random.randint(-15, 30))).replace(
                hour=self.random.randint(8, 17), minute=0, second=0, microsecond=0
            )
            events.append(EventCreate(
                title=self.random.choice(EVENT_TITLES[event_type]),
                date=start,
                type=event_type,
                description=self.fake.sentence(nb_words=8),
                end_date=start + timedelta(hours=1),
            ))
        return events


async def seed_inventory(
    state: InventoryState,
    products: int = 20,
    sales: int = 60,
    events: int = 8,
    seed: Optional[int] = None,
) -> None:
    """
    Fill an owner's inventory with demo data.

    Sales go through the regular sale path; a pick whose product has run out
    of stock is skipped.
    """
    generator = DemoDataGenerator(seed)

    for payload in generator.products(products):
        await state.add_product(payload)

    recorded = 0
    for _ in range(sales):
        in_stock = [p for p in state.products if p.stock > 0]
        if not in_stock:
            break
        product = generator.random.choice(in_stock)
        try:
            await state.add_sale(generator.sale(product.id, product.stock))
            recorded += 1
        except InsufficientStockError:
            continue

    for payload in generator.events(events):
        await state.add_event(payload)

    logger.info(
        "Demo data seeded",
        owner_id=state.owner_id,
        products=products,
        sales=recorded,
        events=events,
    )
