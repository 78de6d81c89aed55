"""
Domain Module
"""
from .models import (
    UNCATEGORIZED,
    CalendarEvent,
    DerivedMetrics,
    EventCreate,
    EventType,
    EventUpdate,
    Product,
    ProductCreate,
    ProductSalesSummary,
    ProductUpdate,
    Profile,
    ProfileUpdate,
    Sale,
    SaleCreate,
    parse_input,
)

__all__ = [
    "UNCATEGORIZED",
    "CalendarEvent",
    "DerivedMetrics",
    "EventCreate",
    "EventType",
    "EventUpdate",
    "Product",
    "ProductCreate",
    "ProductSalesSummary",
    "ProductUpdate",
    "Profile",
    "ProfileUpdate",
    "Sale",
    "SaleCreate",
    "parse_input",
]
