"""
Calendar View Data

Month grid with events and sale counts per day, and the upcoming-events list.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Sequence, Tuple

from inventory_soft.domain.models import CalendarEvent, Sale

GRID_DAYS = 42  # six weeks


@dataclass(frozen=True)
class CalendarDay:
    """One cell of the month grid"""
    date: date
    is_current_month: bool
    events: Tuple[CalendarEvent, ...] = field(default_factory=tuple)
    sales_count: int = 0


def month_grid(
    year: int,
    month: int,
    events: Sequence[CalendarEvent],
    sales: Sequence[Sale],
) -> List[CalendarDay]:
    """
    Six-week grid for a month, starting on the Sunday on or before the 1st.

    Raises:
        ValueError: If month is not in 1..12
    """
    first = date(year, month, 1)
    # weekday(): Monday=0 .. Sunday=6
    start = first - timedelta(days=(first.weekday() + 1) % 7)
    end = start + timedelta(days=GRID_DAYS)

    events_by_day: Dict[date, List[CalendarEvent]] = {}
    for event in events:
        day = event.date.date()
        if start <= day < end:
            events_by_day.setdefault(day, []).append(event)

    sales_by_day: Dict[date, int] = {}
    for sale in sales:
        day = sale.date.date()
        if start <= day < end:
            sales_by_day[day] = sales_by_day.get(day, 0) + 1

    grid = []
    for offset in range(GRID_DAYS):
        day = start + timedelta(days=offset)
        grid.append(CalendarDay(
            date=day,
            is_current_month=day.month == month,
            events=tuple(events_by_day.get(day, ())),
            sales_count=sales_by_day.get(day, 0),
        ))
    return grid


def upcoming_events(
    events: Sequence[CalendarEvent],
    now: Optional[datetime] = None,
    limit: int = 5,
) -> List[CalendarEvent]:
    """Events from now on, soonest first"""
    now = now or datetime.now()
    upcoming = sorted((e for e in events if e.date >= now), key=lambda e: e.date)
    return upcoming[:limit]
