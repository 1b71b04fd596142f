from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List
from uuid import uuid4

from ...domain import Event, EventDraft, EventId
from ..store import EventNotFoundError
from ..supabase import SupabaseGateway


@dataclass(slots=True)
class SupabaseEventStore:
    """Event store backed by a Supabase table with the event JSON columns."""

    gateway: SupabaseGateway
    table_name: str

    def list(self, start: datetime, end: datetime) -> List[Event]:
        response = (
            self.gateway.table(self.table_name)
            .select("*")
            .gte("start", start.isoformat())
            .lte("start", end.isoformat())
            .order("start", desc=False)
            .execute()
        )
        return [Event.from_record(record) for record in response.data or []]

    def create(self, draft: EventDraft) -> Event:
        payload = draft.with_id(str(uuid4())).to_record()
        response = self.gateway.table(self.table_name).insert(payload).execute()
        rows = response.data or [payload]
        return Event.from_record(rows[0])

    def update(self, event: Event) -> Event:
        payload = event.to_record()
        response = (
            self.gateway.table(self.table_name)
            .update(payload)
            .eq("id", event.id)
            .execute()
        )
        rows = response.data or []
        if not rows:
            raise EventNotFoundError(f"Event {event.id} not found.")
        return Event.from_record(rows[0])

    def delete(self, event_id: EventId) -> None:
        response = self.gateway.table(self.table_name).delete().eq("id", event_id).execute()
        if not response.data:
            raise EventNotFoundError(f"Event {event_id} not found.")
