"""
Domain Models

Records held in the in-memory snapshot are frozen dataclasses so that no
consumer can mutate what the aggregation engine reads. Inputs coming from
callers are Pydantic models that carry the boundary validation: names and
categories present, stock and prices never negative, sale quantity at least 1.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from inventory_soft.errors import InventoryValidationError

UNCATEGORIZED = "uncategorized"


# =============================================================================
# ENUMERATIONS
# =============================================================================

class EventType(str, Enum):
    """Calendar event type"""
    MEETING = "meeting"
    DELIVERY = "delivery"
    REMINDER = "reminder"
    OTHER = "other"


# =============================================================================
# RECORDS
# =============================================================================

@dataclass(frozen=True)
class Product:
    """Inventory item owned by one account"""
    id: str
    name: str
    category: str
    stock: int
    min_stock: int
    purchase_price: float
    sale_price: float
    last_updated: datetime
    description: Optional[str] = None
    supplier: Optional[str] = None

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def inventory_value(self) -> float:
        """Stock valued at sale price"""
        return self.stock * self.sale_price


@dataclass(frozen=True)
class Sale:
    """
    Recorded sale.

    ``product_name`` is the name at sale time and ``total_price`` is fixed at
    creation. ``product_id`` may point at a product that no longer exists.
    """
    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float
    date: datetime
    customer: Optional[str] = None
    customer_email: Optional[str] = None


@dataclass(frozen=True)
class CalendarEvent:
    """Calendar entry"""
    id: str
    title: str
    date: datetime
    type: EventType = EventType.OTHER
    description: Optional[str] = None
    end_date: Optional[datetime] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class Profile:
    """Account profile"""
    id: str
    name: str
    email: str
    company: Optional[str] = None
    role: Optional[str] = None
    avatar: Optional[str] = None

    @property
    def display_name(self) -> str:
        return self.name or self.email.split("@")[0] or "User"

    @property
    def display_company(self) -> str:
        return self.company or "No company"

    @property
    def display_role(self) -> str:
        return self.role or "User"


@dataclass(frozen=True)
class ProductSalesSummary:
    """Units and revenue sold for one product"""
    product_id: str
    product_name: str
    total_quantity: int
    total_revenue: float


@dataclass(frozen=True)
class DerivedMetrics:
    """
    Snapshot produced by the aggregation engine; never persisted.

    The engine hands the same instance to every caller until its inputs
    change, so the category breakdown is a read-only view.
    """
    total_revenue: float
    total_cost: float
    total_profit: float
    profit_margin: float
    low_stock_products: Tuple[Product, ...]
    top_selling_products: Tuple[ProductSalesSummary, ...]
    sales_by_category: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    sales_last_month: float = 0.0

    @classmethod
    def empty(cls) -> "DerivedMetrics":
        return cls(
            total_revenue=0.0,
            total_cost=0.0,
            total_profit=0.0,
            profit_margin=0.0,
            low_stock_products=(),
            top_selling_products=(),
        )


# =============================================================================
# INPUTS
# =============================================================================

def local_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Aware timestamps are converted to local time; the snapshot works in naive local time"""
    if value is not None and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class ProductCreate(BaseModel):
    """New product as entered by the user"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    category: str = Field(min_length=1, max_length=100)
    stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)
    purchase_price: float = Field(default=0.0, ge=0)
    sale_price: float = Field(default=0.0, ge=0)
    description: Optional[str] = None
    supplier: Optional[str] = None


class ProductUpdate(BaseModel):
    """Partial product edit; unset fields are left alone"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    stock: Optional[int] = Field(default=None, ge=0)
    min_stock: Optional[int] = Field(default=None, ge=0)
    purchase_price: Optional[float] = Field(default=None, ge=0)
    sale_price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    supplier: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the caller set. Only description and supplier may be cleared."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in ("description", "supplier")
        }


class SaleCreate(BaseModel):
    """
    New sale. ``unit_price`` defaults to the product's sale price and
    ``date`` to now.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    product_id: str = Field(min_length=1)
    quantity: int = Field(ge=1)
    unit_price: Optional[float] = Field(default=None, ge=0)
    date: Optional[datetime] = None
    customer: Optional[str] = None
    customer_email: Optional[str] = None

    normalize_date = field_validator("date")(local_naive)


class EventCreate(BaseModel):
    """New calendar event"""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=200)
    date: datetime
    type: EventType = EventType.OTHER
    description: Optional[str] = None
    end_date: Optional[datetime] = None
    color: Optional[str] = None

    normalize_dates = field_validator("date", "end_date")(local_naive)


class EventUpdate(BaseModel):
    """Partial event edit"""
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    date: Optional[datetime] = None
    type: Optional[EventType] = None
    description: Optional[str] = None
    end_date: Optional[datetime] = None
    color: Optional[str] = None

    normalize_dates = field_validator("date", "end_date")(local_naive)

    def changes(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key in ("description", "end_date", "color")
        }


class ProfileUpdate(BaseModel):
    """Profile edit"""
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    company: Optional[str] = None
    role: Optional[str] = None
    avatar: Optional[str] = None

    def changes(self) -> Dict[str, Any]:
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key != "name"
        }


InputT = TypeVar("InputT", bound=BaseModel)


def parse_input(model: Type[InputT], data: Union[InputT, Mapping[str, Any]]) -> InputT:
    """
    Coerce caller data into an input model.

    Raises:
        InventoryValidationError: If the data does not satisfy the model
    """
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or model.__name__}: {err['msg']}"
            for err in e.errors()
        )
        raise InventoryValidationError(problems) from e
