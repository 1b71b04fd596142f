from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Hashable, List, Optional, Tuple

from ..domain import ViewBy


def week_days(anchor: date) -> List[date]:
    """Monday through Sunday of the week containing ``anchor``."""

    monday = anchor - timedelta(days=anchor.weekday())
    return [monday + timedelta(days=offset) for offset in range(7)]


def _span(first: date, last: date) -> Tuple[datetime, datetime]:
    return datetime.combine(first, time.min), datetime.combine(last, time.max)


def view_range(view: ViewBy, selected: date) -> Tuple[datetime, datetime]:
    view = ViewBy(view)
    if view is ViewBy.DAY:
        return _span(selected, selected)
    if view is ViewBy.WEEK:
        days = week_days(selected)
        return _span(days[0], days[-1])
    if view is ViewBy.MONTH:
        last = calendar.monthrange(selected.year, selected.month)[1]
        return _span(selected.replace(day=1), selected.replace(day=last))
    return _span(date(selected.year, 1, 1), date(selected.year, 12, 31))


def fetch_token(view: ViewBy, selected: date) -> Optional[Hashable]:
    """Identity of the loaded range; ``None`` means always refetch."""

    view = ViewBy(view)
    if view is ViewBy.WEEK:
        return (view.value, view_range(view, selected))
    if view is ViewBy.MONTH:
        return (view.value, selected.year, selected.month)
    if view is ViewBy.YEAR:
        return (view.value, selected.year)
    return None


__all__ = ["fetch_token", "view_range", "week_days"]
