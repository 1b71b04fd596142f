from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Protocol, Tuple

from ..domain import EventId

from .config import CELL_HEIGHT, CELL_WIDTH, EVENT_ROW_HEIGHT


class GeometryProvider(Protocol):
    def cell_size(self, event_id: EventId) -> Optional[Tuple[int, int]]:
        """Return ``(width, height)`` in pixels of the cell holding the event."""


@dataclass(frozen=True, slots=True)
class DragPreview:
    column_size: int = CELL_WIDTH
    row_size: int = CELL_HEIGHT

    @property
    def max_visible_events(self) -> int:
        return self.row_size // EVENT_ROW_HEIGHT - 1


@dataclass(frozen=True, slots=True)
class Transform:
    x: float
    y: float
    scale_x: float = 1.0
    scale_y: float = 1.0


def preview_for(provider: Optional[GeometryProvider], event_id: EventId) -> DragPreview:
    size = provider.cell_size(event_id) if provider is not None else None
    if not size:
        return DragPreview()
    width, height = size
    return DragPreview(column_size=width or CELL_WIDTH, row_size=height or CELL_HEIGHT)


def snap_to_quarter_hour(
    transform: Optional[Transform],
    column_size: float,
    scroll_correction: Tuple[float, float] = (0.0, 0.0),
    *,
    cell_height: float = CELL_HEIGHT,
) -> Transform:
    """Snap a drag transform onto the quarter-hour grid.

    Grid lines sit at ``k * cell_height - correction_y`` once the container
    has scrolled, so the vertical offset is rounded in scrolled coordinates.
    """

    if transform is None:
        return Transform(0.0, 0.0)
    _, correction_y = scroll_correction
    y = round((transform.y + correction_y) / cell_height) * cell_height - correction_y
    x = round(transform.x / column_size) * column_size
    return replace(transform, x=x, y=y)


__all__ = ["DragPreview", "GeometryProvider", "Transform", "preview_for", "snap_to_quarter_hour"]
