"""Encoding and decoding of bucket keys.

Buckets are addressed by dash-delimited strings::

    event-<year>-<mm>-<dd>-<hour>-<slot>    timed, hour without leading zero
    all-day-<year>-<mm>-<dd>                all-day

The string format is only handled here; everything else works with
:class:`TimedCellKey` and :class:`AllDayCellKey`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional, Union

from ..domain import CellKind
from .config import SLOT_MINUTES, SLOTS_PER_HOUR

TIMED_PREFIX = "event"
ALL_DAY_PREFIX = "all-day"
EVENT_LIST = "event-list"


def day_token(day: date) -> str:
    return f"{day.year}-{day.month:02d}-{day.day:02d}"


@dataclass(frozen=True, slots=True)
class TimedCellKey:
    year: int
    month: int
    day: int
    hour: int
    slot: int

    @property
    def kind(self) -> CellKind:
        return CellKind.TIMED

    @property
    def date(self) -> date:
        return date(self.year, self.month, self.day)

    @property
    def starts_at(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.slot * SLOT_MINUTES)

    def encode(self) -> str:
        return f"{TIMED_PREFIX}-{day_token(self.date)}-{self.hour}-{self.slot}"

    def with_date(self, day: date) -> "TimedCellKey":
        return TimedCellKey(day.year, day.month, day.day, self.hour, self.slot)


@dataclass(frozen=True, slots=True)
class AllDayCellKey:
    year: int
    month: int
    day: int

    @property
    def kind(self) -> CellKind:
        return CellKind.ALL_DAY

    @property
    def date(self) -> date:
        return date(self.year, self.month, self.day)

    def encode(self) -> str:
        return f"{ALL_DAY_PREFIX}-{day_token(self.date)}"


CellKey = Union[TimedCellKey, AllDayCellKey]


def timed_key_for(moment: datetime) -> TimedCellKey:
    return TimedCellKey(moment.year, moment.month, moment.day, moment.hour, moment.minute // SLOT_MINUTES)


def all_day_key_for(day: date) -> AllDayCellKey:
    return AllDayCellKey(day.year, day.month, day.day)


def _to_ints(fields: list[str]) -> Optional[list[int]]:
    try:
        return [int(field, 10) for field in fields]
    except ValueError:
        return None


def parse_cell_key(key: object) -> Optional[CellKey]:
    """Decode ``key``; anything unrecognized yields ``None``."""

    if not isinstance(key, str):
        return None
    if key.startswith(f"{ALL_DAY_PREFIX}-"):
        numbers = _to_ints(key[len(ALL_DAY_PREFIX) + 1 :].split("-"))
        if numbers is None or len(numbers) != 3:
            return None
        candidate: CellKey = AllDayCellKey(*numbers)
    elif key.startswith(f"{TIMED_PREFIX}-"):
        numbers = _to_ints(key[len(TIMED_PREFIX) + 1 :].split("-"))
        if numbers is None or len(numbers) != 5:
            return None
        candidate = TimedCellKey(*numbers)
        if not (0 <= candidate.hour <= 23 and 0 <= candidate.slot < SLOTS_PER_HOUR):
            return None
    else:
        return None
    try:
        candidate.date
    except ValueError:
        return None
    return candidate


def build_cell_key(parts: Union[CellKey, Mapping[str, object]]) -> str:
    """Encode a cell key variant, or a mapping carrying ``kind`` and date parts."""

    if isinstance(parts, (TimedCellKey, AllDayCellKey)):
        return parts.encode()
    kind = CellKind(parts.get("kind", CellKind.TIMED))
    year, month, day = (int(parts[name]) for name in ("year", "month", "day"))
    if kind is CellKind.ALL_DAY:
        return AllDayCellKey(year, month, day).encode()
    return TimedCellKey(year, month, day, int(parts["hour"]), int(parts["slot"])).encode()


__all__ = [
    "ALL_DAY_PREFIX",
    "AllDayCellKey",
    "CellKey",
    "EVENT_LIST",
    "TIMED_PREFIX",
    "TimedCellKey",
    "all_day_key_for",
    "build_cell_key",
    "day_token",
    "parse_cell_key",
    "timed_key_for",
]
