"""
Products API Endpoints

Catalog CRUD and per-product sales performance for the caller's inventory.
"""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from inventory_soft.domain.models import ProductCreate, ProductUpdate
from inventory_soft.serving.api.dependencies import get_state
from inventory_soft.serving.api.schemas import PerformancePointResponse, ProductResponse
from inventory_soft.state import InventoryState

router = APIRouter()


class ChartOption(BaseModel):
    id: str
    name: str


@router.get("", response_model=List[ProductResponse])
async def list_products(state: InventoryState = Depends(get_state)) -> List[ProductResponse]:
    """Products, newest first"""
    return [ProductResponse.model_validate(p) for p in state.products]


@router.get("/search", response_model=List[ProductResponse])
async def search_products(
    q: str = Query("", max_length=200),
    state: InventoryState = Depends(get_state),
) -> List[ProductResponse]:
    """Case-insensitive match on name, category or description"""
    return [ProductResponse.model_validate(p) for p in state.search_products(q)]


@router.get("/chart-options", response_model=List[ChartOption])
async def chart_options(state: InventoryState = Depends(get_state)) -> List[ChartOption]:
    return [ChartOption(id=product_id, name=name) for product_id, name in state.chart_products()]


@router.post("", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    body: ProductCreate,
    state: InventoryState = Depends(get_state),
) -> ProductResponse:
    return ProductResponse.model_validate(await state.add_product(body))


@router.patch("/{product_id}", response_model=ProductResponse)
async def update_product(
    product_id: str,
    body: ProductUpdate,
    state: InventoryState = Depends(get_state),
) -> ProductResponse:
    return ProductResponse.model_validate(await state.update_product(product_id, body))


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, state: InventoryState = Depends(get_state)) -> None:
    await state.delete_product(product_id)


@router.get("/{product_id}/performance", response_model=List[PerformancePointResponse])
async def product_performance(
    product_id: str,
    state: InventoryState = Depends(get_state),
) -> List[PerformancePointResponse]:
    """Daily units, revenue and profit, oldest day first"""
    return [PerformancePointResponse.model_validate(p) for p in state.product_performance(product_id)]
