from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..core import DragPreview, DropOutcome, LayoutEntry
from ..core.drag import PersistResult
from ..domain import Event, EventDraft, ScheduledEvent


class EventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Union[str, int]
    title: str
    description: Optional[str] = Field(default=None)
    start: Optional[str] = Field(default=None)
    end: Optional[str] = Field(default=None)
    all_day: bool = Field(default=False, alias="allDay")
    type: str = Field(default="other")
    colour: str = Field(default="")

    @classmethod
    def from_domain(cls, event: Event) -> "EventPayload":
        return cls.model_validate(event.to_record())

    def to_domain(self) -> Event:
        return Event.from_record(self.model_dump(by_alias=True))


class EventDraftPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    start: str
    end: Optional[str] = Field(default=None)
    all_day: bool = Field(default=False, alias="allDay")
    description: Optional[str] = Field(default=None)
    type: str = Field(default="other")
    colour: str = Field(default="")

    def to_domain(self) -> EventDraft:
        return EventDraft(
            title=self.title,
            start=self.start,
            end=self.end,
            all_day=self.all_day,
            description=self.description,
            type=self.type,
            colour=self.colour,
        )


class ScheduledEventPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: Union[str, int]
    title: str
    description: Optional[str] = Field(default=None)
    start: str
    end: str
    duration: int
    all_day: bool = Field(default=False, alias="allDay")
    slot: Optional[int] = Field(default=None)
    type: str = Field(default="other")
    colour: str = Field(default="")

    @classmethod
    def from_domain(cls, event: ScheduledEvent) -> "ScheduledEventPayload":
        return cls(
            id=event.id,
            title=event.title,
            description=event.description,
            start=event.start.isoformat(),
            end=event.end.isoformat(),
            duration=event.duration,
            all_day=event.all_day,
            slot=event.slot,
            type=event.type,
            colour=event.colour,
        )


class LayoutPayload(BaseModel):
    width: float
    left: float

    @classmethod
    def from_domain(cls, entry: LayoutEntry) -> "LayoutPayload":
        return cls(width=entry.width, left=entry.left)


class DragPreviewPayload(BaseModel):
    column_size: int
    row_size: int
    max_visible_events: int

    @classmethod
    def from_domain(cls, preview: DragPreview) -> "DragPreviewPayload":
        return cls(
            column_size=preview.column_size,
            row_size=preview.row_size,
            max_visible_events=preview.max_visible_events,
        )


class PersistResultPayload(BaseModel):
    ok: bool
    error: Optional[str] = Field(default=None)

    @classmethod
    def from_domain(cls, result: PersistResult) -> "PersistResultPayload":
        return cls(ok=result.ok, error=result.error)


class DropOutcomePayload(BaseModel):
    action: str
    event_id: Optional[Union[str, int]] = Field(default=None)
    origin_key: Optional[str] = Field(default=None)
    target_key: Optional[str] = Field(default=None)
    moved: Optional[ScheduledEventPayload] = Field(default=None)
    persisted: Optional[PersistResultPayload] = Field(default=None)

    @classmethod
    def from_domain(cls, outcome: DropOutcome) -> "DropOutcomePayload":
        return cls(
            action=outcome.action.value,
            event_id=outcome.event_id,
            origin_key=outcome.origin_key,
            target_key=outcome.target_key,
            moved=ScheduledEventPayload.from_domain(outcome.moved) if outcome.moved else None,
            persisted=PersistResultPayload.from_domain(outcome.persisted) if outcome.persisted else None,
        )

