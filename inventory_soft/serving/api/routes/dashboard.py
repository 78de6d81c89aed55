"""
Dashboard API Endpoints

The derived metrics snapshot and the KPI cards built on it.
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict

from inventory_soft.analytics.dashboard import Trend
from inventory_soft.serving.api.dependencies import get_state
from inventory_soft.serving.api.schemas import MetricsResponse
from inventory_soft.state import InventoryState

router = APIRouter()


class KpiResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_revenue: float
    total_profit: float
    profit_margin: float
    low_stock_count: int
    total_products: int
    total_sales: int
    total_categories: int
    total_events: int
    sales_last_month: float
    revenue_trend: Trend
    profit_trend: Trend


@router.get("/metrics", response_model=MetricsResponse)
async def get_metrics(state: InventoryState = Depends(get_state)) -> MetricsResponse:
    return MetricsResponse.model_validate(state.recompute())


@router.get("/kpis", response_model=KpiResponse)
async def get_kpis(state: InventoryState = Depends(get_state)) -> KpiResponse:
    return KpiResponse.model_validate(state.dashboard())
