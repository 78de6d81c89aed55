"""
API Response Models

Pydantic views over the frozen domain records, read with
``from_attributes`` so record properties (low stock, inventory value,
display names) are serialized alongside the fields.
"""

from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from inventory_soft.domain.models import EventType


class ProductResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
    is_low_stock: bool
    inventory_value: float


class SaleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float
    date: datetime
    customer: Optional[str] = None
    customer_email: Optional[str] = None


class EventResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    date: datetime
    type: EventType
    description: Optional[str] = None
    end_date: Optional[datetime] = None
    color: Optional[str] = None


class ProfileResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    company: Optional[str] = None
    role: Optional[str] = None
    avatar: Optional[str] = None
    display_name: str
    display_company: str
    display_role: str


class ProductSalesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: str
    product_name: str
    total_quantity: int
    total_revenue: float


class MetricsResponse(BaseModel):
    """Derived metrics snapshot"""
    model_config = ConfigDict(from_attributes=True)

    total_revenue: float
    total_cost: float
    total_profit: float
    profit_margin: float
    low_stock_products: List[ProductResponse]
    top_selling_products: List[ProductSalesResponse]
    sales_by_category: Dict[str, float]
    sales_last_month: float


class PerformancePointResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    sales: int
    revenue: float
    profit: float
