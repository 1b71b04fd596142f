from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..services import CalendarService, ServiceContext


@dataclass(slots=True)
class ApiState:
    _context: Optional[ServiceContext] = None
    _calendar: Optional[CalendarService] = field(default=None, init=False)

    @property
    def context(self) -> ServiceContext:
        if self._context is None:
            self._context = ServiceContext()
        return self._context

    @property
    def calendar(self) -> CalendarService:
        if self._calendar is None:
            self._calendar = CalendarService(self.context)
        return self._calendar

    def configure(self, context: ServiceContext) -> None:
        """Swap in a different service context, e.g. one with another store."""

        self._context = context
        self._calendar = CalendarService(context)


api_state = ApiState()
