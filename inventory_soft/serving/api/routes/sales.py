"""
Sales API Endpoints

Recording a sale takes its units out of stock; deleting one does not put
them back.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from inventory_soft.analytics.performance import daily_sales_summary, sale_return_percentage
from inventory_soft.domain.models import SaleCreate
from inventory_soft.serving.api.dependencies import get_state
from inventory_soft.serving.api.schemas import SaleResponse
from inventory_soft.state import InventoryState

router = APIRouter()


class DailySaleResponse(SaleResponse):
    """Sale with its return over the product's current purchase price"""
    return_percentage: float


class DailySalesResponse(BaseModel):
    """Sales of one day with their totals"""
    day: date
    sales_count: int
    total_revenue: float
    total_items: int
    average_sale_value: float
    sales: List[DailySaleResponse]


@router.get("", response_model=List[SaleResponse])
async def list_sales(state: InventoryState = Depends(get_state)) -> List[SaleResponse]:
    """Sales, most recent first"""
    return [SaleResponse.model_validate(s) for s in state.sales]


@router.get("/by-day", response_model=DailySalesResponse)
async def sales_by_day(
    day: date = Query(...),
    state: InventoryState = Depends(get_state),
) -> DailySalesResponse:
    summary = daily_sales_summary(state.sales, day)
    products_by_id = {p.id: p for p in state.products}
    return DailySalesResponse(
        day=summary.day,
        sales_count=summary.sales_count,
        total_revenue=summary.total_revenue,
        total_items=summary.total_items,
        average_sale_value=summary.average_sale_value,
        sales=[
            DailySaleResponse(
                **SaleResponse.model_validate(s).model_dump(),
                return_percentage=sale_return_percentage(s, products_by_id),
            )
            for s in state.sales_on(day)
        ],
    )


@router.post("", response_model=SaleResponse, status_code=status.HTTP_201_CREATED)
async def create_sale(body: SaleCreate, state: InventoryState = Depends(get_state)) -> SaleResponse:
    return SaleResponse.model_validate(await state.add_sale(body))


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_sale(sale_id: str, state: InventoryState = Depends(get_state)) -> None:
    await state.delete_sale(sale_id)
