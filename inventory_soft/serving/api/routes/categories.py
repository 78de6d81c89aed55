"""
Categories API Endpoints

The category list lives in the session state only; removing a category
leaves products that use it untouched.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from inventory_soft.serving.api.dependencies import get_state
from inventory_soft.state import InventoryState

router = APIRouter()


class CategoryCreate(BaseModel):
    name: str = Field(max_length=100)


@router.get("", response_model=List[str])
async def list_categories(state: InventoryState = Depends(get_state)) -> List[str]:
    return list(state.categories)


@router.post("", response_model=List[str], status_code=status.HTTP_201_CREATED)
async def add_category(body: CategoryCreate, state: InventoryState = Depends(get_state)) -> List[str]:
    await state.add_category(body.name)
    return list(state.categories)


@router.delete("/{name}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_category(name: str, state: InventoryState = Depends(get_state)) -> None:
    await state.remove_category(name)
