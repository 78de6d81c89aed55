"""
Reports API Endpoints

Filtered inventory listing, per-category stock rollup and the monthly PDF,
all built from the session snapshot without a store round trip.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict

from inventory_soft.analytics.inventory_report import (
    StockLevel,
    category_report,
    filter_products,
    stock_level,
)
from inventory_soft.config import Settings
from inventory_soft.reporting import build_monthly_summary, render_monthly_report, report_filename
from inventory_soft.serving.api.dependencies import get_app_settings, get_state
from inventory_soft.serving.api.schemas import ProductResponse
from inventory_soft.state import InventoryState

router = APIRouter()


class InventoryRow(ProductResponse):
    stock_level: StockLevel


class CategoryStockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    category: str
    product_count: int
    total_stock: int
    total_value: float
    low_stock_count: int


@router.get("/inventory", response_model=List[InventoryRow])
async def inventory_report(
    category: Optional[str] = Query(None, description="Category name or 'all'"),
    level: Optional[str] = Query(None, pattern="^(all|low|normal|high)$"),
    state: InventoryState = Depends(get_state),
) -> List[InventoryRow]:
    products = filter_products(state.products, category=category, level=level)
    return [
        InventoryRow(
            **ProductResponse.model_validate(p).model_dump(),
            stock_level=stock_level(p),
        )
        for p in products
    ]


@router.get("/categories", response_model=List[CategoryStockResponse])
async def categories_report(state: InventoryState = Depends(get_state)) -> List[CategoryStockResponse]:
    return [CategoryStockResponse.model_validate(row) for row in category_report(state.products)]


@router.get("/monthly.pdf")
async def monthly_report(
    state: InventoryState = Depends(get_state),
    settings: Settings = Depends(get_app_settings),
) -> Response:
    summary = build_monthly_summary(state.products, state.sales)
    company = settings.reports.company_name
    if state.profile is not None and state.profile.company:
        company = state.profile.company
    content = render_monthly_report(summary, company, settings.reports.listing_limit)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(summary)}"'},
    )
