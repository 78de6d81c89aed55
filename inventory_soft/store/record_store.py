"""
Record Store

Owner-scoped create/read/update/delete over the four record kinds:
inventory items, sales, events and profiles. Every statement filters by the
owner id, so a row belonging to another owner behaves exactly like a missing
one.

Rows are translated to frozen domain records on the way out; callers never
see ORM objects. Any SQLAlchemy failure is logged and re-raised as
RecordStoreError with the session rolled back.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, List, Mapping, Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from inventory_soft.database.models import (
    EventRecord,
    InventoryItem,
    ProfileRecord,
    SaleRecord,
    utcnow,
)
from inventory_soft.domain.models import CalendarEvent, EventType, Product, Profile, Sale
from inventory_soft.errors import RecordNotFoundError, RecordStoreError

logger = structlog.get_logger(__name__)


# Domain field name -> column name
PRODUCT_COLUMNS = {
    "name": "name",
    "category": "category",
    "stock": "quantity",
    "min_stock": "low_stock_threshold",
    "purchase_price": "purchase_price",
    "sale_price": "sale_price",
    "description": "description",
    "supplier": "supplier",
}

SALE_COLUMNS = {
    "product_id": "item_id",
    "product_name": "product_name",
    "quantity": "quantity",
    "unit_price": "unit_price",
    "total_price": "total_amount",
    "date": "sale_date",
    "customer": "customer_name",
    "customer_email": "customer_email",
}

EVENT_COLUMNS = {
    "title": "title",
    "description": "description",
    "type": "event_type",
    "date": "start_date",
    "end_date": "end_date",
    "color": "color",
}

PROFILE_COLUMNS = {
    "name": "name",
    "email": "email",
    "company": "company",
    "role": "role",
    "avatar": "avatar",
}


def to_columns(mapping: Dict[str, str], fields: Mapping[str, Any]) -> Dict[str, Any]:
    """Rename domain fields to column names, rejecting unknown fields"""
    unknown = set(fields) - set(mapping)
    if unknown:
        raise ValueError(f"Unknown fields: {sorted(unknown)}")
    return {mapping[key]: value for key, value in fields.items()}


# =============================================================================
# ROW -> DOMAIN
# =============================================================================

def product_from_row(row: InventoryItem) -> Product:
    return Product(
        id=row.id,
        name=row.name,
        category=row.category,
        stock=row.quantity,
        min_stock=row.low_stock_threshold or 0,
        purchase_price=float(row.purchase_price or 0),
        sale_price=float(row.sale_price or 0),
        description=row.description,
        supplier=row.supplier,
        last_updated=row.updated_at or row.created_at,
    )


def sale_from_row(row: SaleRecord) -> Sale:
    return Sale(
        id=row.id,
        product_id=row.item_id,
        product_name=row.product_name,
        quantity=row.quantity,
        unit_price=float(row.unit_price),
        total_price=float(row.total_amount),
        date=row.sale_date,
        customer=row.customer_name,
        customer_email=row.customer_email,
    )


def event_from_row(row: EventRecord) -> CalendarEvent:
    return CalendarEvent(
        id=row.id,
        title=row.title,
        description=row.description,
        date=row.start_date,
        end_date=row.end_date,
        type=EventType(row.event_type),
        color=row.color,
    )


def profile_from_row(row: ProfileRecord) -> Profile:
    return Profile(
        id=row.id,
        name=row.name,
        email=row.email,
        company=row.company,
        role=row.role,
        avatar=row.avatar,
    )


class RecordStore:
    """
    Owner-scoped data access for one database.

    Example:
        store = RecordStore(get_session_factory())
        products = await store.list_products(owner_id)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str, **context: Any) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
            await session.commit()
        except RecordStoreError:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(
                "Record store operation failed",
                operation=operation,
                error=str(e),
                error_type=type(e).__name__,
                **context,
            )
            raise RecordStoreError(f"{operation} failed: {e}") from e
        finally:
            await session.close()

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    async def list_products(self, owner_id: str) -> List[Product]:
        """Products of the owner, newest first"""
        async with self._session("list_products", owner_id=owner_id) as db:
            result = await db.execute(
                select(InventoryItem)
                .where(InventoryItem.user_id == owner_id)
                .order_by(InventoryItem.created_at.desc())
            )
            return [product_from_row(row) for row in result.scalars().all()]

    async def insert_product(self, owner_id: str, fields: Mapping[str, Any]) -> Product:
        async with self._session("insert_product", owner_id=owner_id) as db:
            row = InventoryItem(user_id=owner_id, **to_columns(PRODUCT_COLUMNS, fields))
            db.add(row)
            await db.flush()
            logger.debug("Product inserted", owner_id=owner_id, product_id=row.id)
            return product_from_row(row)

    async def update_product(
        self, product_id: str, owner_id: str, fields: Mapping[str, Any]
    ) -> Product:
        """Apply a partial update and return the canonical row"""
        async with self._session("update_product", owner_id=owner_id, product_id=product_id) as db:
            row = await self._owned(db, InventoryItem, product_id, owner_id, "product")
            for column, value in to_columns(PRODUCT_COLUMNS, fields).items():
                setattr(row, column, value)
            row.updated_at = utcnow()
            await db.flush()
            return product_from_row(row)

    async def delete_product(self, product_id: str, owner_id: str) -> None:
        await self._delete(InventoryItem, product_id, owner_id, "product")

    # -------------------------------------------------------------------------
    # Sales
    # -------------------------------------------------------------------------

    async def list_sales(self, owner_id: str) -> List[Sale]:
        """Sales of the owner, most recent sale date first"""
        async with self._session("list_sales", owner_id=owner_id) as db:
            result = await db.execute(
                select(SaleRecord)
                .where(SaleRecord.user_id == owner_id)
                .order_by(SaleRecord.sale_date.desc())
            )
            return [sale_from_row(row) for row in result.scalars().all()]

    async def insert_sale(self, owner_id: str, fields: Mapping[str, Any]) -> Sale:
        async with self._session("insert_sale", owner_id=owner_id) as db:
            row = SaleRecord(user_id=owner_id, **to_columns(SALE_COLUMNS, fields))
            db.add(row)
            await db.flush()
            logger.debug("Sale inserted", owner_id=owner_id, sale_id=row.id, item_id=row.item_id)
            return sale_from_row(row)

    async def update_sale(self, sale_id: str, owner_id: str, fields: Mapping[str, Any]) -> Sale:
        async with self._session("update_sale", owner_id=owner_id, sale_id=sale_id) as db:
            row = await self._owned(db, SaleRecord, sale_id, owner_id, "sale")
            for column, value in to_columns(SALE_COLUMNS, fields).items():
                setattr(row, column, value)
            await db.flush()
            return sale_from_row(row)

    async def delete_sale(self, sale_id: str, owner_id: str) -> None:
        await self._delete(SaleRecord, sale_id, owner_id, "sale")

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def list_events(self, owner_id: str) -> List[CalendarEvent]:
        """Events of the owner, earliest first"""
        async with self._session("list_events", owner_id=owner_id) as db:
            result = await db.execute(
                select(EventRecord)
                .where(EventRecord.user_id == owner_id)
                .order_by(EventRecord.start_date.asc())
            )
            return [event_from_row(row) for row in result.scalars().all()]

    async def insert_event(self, owner_id: str, fields: Mapping[str, Any]) -> CalendarEvent:
        columns = to_columns(EVENT_COLUMNS, fields)
        if columns.get("end_date") is None:
            columns["end_date"] = columns.get("start_date")
        async with self._session("insert_event", owner_id=owner_id) as db:
            row = EventRecord(user_id=owner_id, **columns)
            db.add(row)
            await db.flush()
            return event_from_row(row)

    async def update_event(
        self, event_id: str, owner_id: str, fields: Mapping[str, Any]
    ) -> CalendarEvent:
        columns = to_columns(EVENT_COLUMNS, fields)
        async with self._session("update_event", owner_id=owner_id, event_id=event_id) as db:
            row = await self._owned(db, EventRecord, event_id, owner_id, "event")
            # Moving a single-day event moves its end with it
            if "start_date" in columns and "end_date" not in columns and row.end_date == row.start_date:
                columns["end_date"] = columns["start_date"]
            if "end_date" in columns and columns["end_date"] is None:
                columns["end_date"] = columns.get("start_date", row.start_date)
            for column, value in columns.items():
                setattr(row, column, value)
            row.updated_at = utcnow()
            await db.flush()
            return event_from_row(row)

    async def delete_event(self, event_id: str, owner_id: str) -> None:
        await self._delete(EventRecord, event_id, owner_id, "event")

    # -------------------------------------------------------------------------
    # Profiles
    # -------------------------------------------------------------------------

    async def get_profile(self, owner_id: str) -> Optional[Profile]:
        async with self._session("get_profile", owner_id=owner_id) as db:
            row = await db.get(ProfileRecord, owner_id)
            return profile_from_row(row) if row is not None else None

    async def update_profile(self, owner_id: str, fields: Mapping[str, Any]) -> Profile:
        async with self._session("update_profile", owner_id=owner_id) as db:
            row = await db.get(ProfileRecord, owner_id)
            if row is None:
                raise RecordNotFoundError("profile", owner_id)
            for column, value in to_columns(PROFILE_COLUMNS, fields).items():
                setattr(row, column, value)
            row.updated_at = utcnow()
            await db.flush()
            return profile_from_row(row)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    async def _owned(db: AsyncSession, model: Any, record_id: str, owner_id: str, kind: str) -> Any:
        row = await db.scalar(
            select(model).where(model.id == record_id, model.user_id == owner_id)
        )
        if row is None:
            raise RecordNotFoundError(kind, record_id)
        return row

    async def _delete(self, model: Any, record_id: str, owner_id: str, kind: str) -> None:
        async with self._session(f"delete_{kind}", owner_id=owner_id, record_id=record_id) as db:
            result = await db.execute(
                delete(model).where(model.id == record_id, model.user_id == owner_id)
            )
            if result.rowcount == 0:
                raise RecordNotFoundError(kind, record_id)
            logger.debug("Record deleted", kind=kind, owner_id=owner_id, record_id=record_id)
