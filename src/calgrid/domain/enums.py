from __future__ import annotations

from enum import Enum


class CellKind(str, Enum):
    TIMED = "timed"
    ALL_DAY = "allDay"


class ViewBy(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class DropAction(str, Enum):
    MOVED = "moved"
    UNSCHEDULED = "unscheduled"
    IGNORED = "ignored"
    DUPLICATE = "duplicate"
    REENTRANT = "reentrant"
