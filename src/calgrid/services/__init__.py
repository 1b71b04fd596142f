"""Application services orchestrating the event store and the grid engine."""

from __future__ import annotations

from .calendar import CalendarService
from .context import ServiceContext, build_store

__all__ = ["CalendarService", "ServiceContext", "build_store"]
