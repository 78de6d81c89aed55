"""
Calendar API Endpoints

Event CRUD, the six-week month grid and the upcoming-events list.
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict

from inventory_soft.analytics.calendar import month_grid, upcoming_events
from inventory_soft.domain.models import EventCreate, EventUpdate
from inventory_soft.serving.api.dependencies import get_state
from inventory_soft.serving.api.schemas import EventResponse
from inventory_soft.state import InventoryState

router = APIRouter()


class CalendarDayResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: date
    is_current_month: bool
    events: List[EventResponse]
    sales_count: int


@router.get("", response_model=List[EventResponse])
async def list_events(state: InventoryState = Depends(get_state)) -> List[EventResponse]:
    """Events, earliest first"""
    return [EventResponse.model_validate(e) for e in state.events]


@router.get("/calendar", response_model=List[CalendarDayResponse])
async def calendar_grid(
    year: int = Query(..., ge=1, le=9999),
    month: int = Query(..., ge=1, le=12),
    state: InventoryState = Depends(get_state),
) -> List[CalendarDayResponse]:
    grid = month_grid(year, month, state.events, state.sales)
    return [CalendarDayResponse.model_validate(day) for day in grid]


@router.get("/upcoming", response_model=List[EventResponse])
async def list_upcoming(
    limit: int = Query(5, ge=1, le=50),
    state: InventoryState = Depends(get_state),
) -> List[EventResponse]:
    return [EventResponse.model_validate(e) for e in upcoming_events(state.events, limit=limit)]


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(body: EventCreate, state: InventoryState = Depends(get_state)) -> EventResponse:
    return EventResponse.model_validate(await state.add_event(body))


@router.patch("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    body: EventUpdate,
    state: InventoryState = Depends(get_state),
) -> EventResponse:
    return EventResponse.model_validate(await state.update_event(event_id, body))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(event_id: str, state: InventoryState = Depends(get_state)) -> None:
    await state.delete_event(event_id)
