# lanegrid/model.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from .validate import assert_valid_window

MIN_MS = 60_000

SEGMENT_WHOLE = "whole"
SEGMENT_START = "start"
SEGMENT_MIDDLE = "middle"
SEGMENT_END = "end"

ORIENTATION_VERTICAL = "vertical"
ORIENTATION_HORIZONTAL = "horizontal"


@dataclass(frozen=True)
class Appointment:
    id: str
    start_ms: int          # UTC epoch ms
    end_ms: int            # UTC epoch ms, exclusive
    resource_id: Optional[str] = None   # None = unassigned
    payload: Any = field(default=None, compare=False)


@dataclass(frozen=True)
class BusinessWindow:
    open_min: int
    close_min: int
    tz: str = "UTC"

    def __post_init__(self) -> None:
        assert_valid_window(self.open_min, self.close_min)

    @property
    def span_min(self) -> int:
        return self.close_min - self.open_min


@dataclass(frozen=True)
class WallClock:
    year: int
    month: int
    day: int
    minute_of_day: int

    @property
    def date(self) -> dt.date:
        return dt.date(self.year, self.month, self.day)


@dataclass(frozen=True)
class DisplayedInterval:
    appointment_id: str
    calendar_day: dt.date
    start_offset_min: int  # minutes after window open
    duration_min: int
    segment: str = SEGMENT_WHOLE

    @property
    def end_offset_min(self) -> int:
        return self.start_offset_min + self.duration_min


@dataclass(frozen=True)
class LaneAssignment:
    lane_index: int
    lane_count: int


@dataclass(frozen=True)
class Scale:
    px_per_min: float = 1.0
    track_px: float = 100.0
    min_display_min: int = 0
    orientation: str = ORIENTATION_VERTICAL

    def __post_init__(self) -> None:
        if not self.px_per_min > 0:
            raise ValueError(f"px_per_min must be > 0 (got {self.px_per_min!r})")
        if not self.track_px > 0:
            raise ValueError(f"track_px must be > 0 (got {self.track_px!r})")
        if self.min_display_min < 0:
            raise ValueError(f"min_display_min must be >= 0 (got {self.min_display_min!r})")
        if self.orientation not in (ORIENTATION_VERTICAL, ORIENTATION_HORIZONTAL):
            raise ValueError(f"unknown orientation: {self.orientation!r}")


@dataclass(frozen=True)
class Geometry:
    left: float
    width: float
    top: float
    height: float
    display_min: int       # floored display length; duration_min is untouched


@dataclass(frozen=True)
class PlacedBlock:
    resource_id: Optional[str]
    interval: DisplayedInterval
    lane: LaneAssignment
    payload: Any = field(default=None, compare=False)
    geometry: Optional[Geometry] = None

    @property
    def appointment_id(self) -> str:
        return self.interval.appointment_id

    @property
    def calendar_day(self) -> dt.date:
        return self.interval.calendar_day

    @property
    def start_offset_min(self) -> int:
        return self.interval.start_offset_min

    @property
    def duration_min(self) -> int:
        return self.interval.duration_min

    @property
    def lane_index(self) -> int:
        return self.lane.lane_index

    @property
    def lane_count(self) -> int:
        return self.lane.lane_count

    def to_record(self) -> Dict[str, Any]:
        rec: Dict[str, Any] = {
            "appointment_id": self.interval.appointment_id,
            "start_offset_min": self.interval.start_offset_min,
            "duration_min": self.interval.duration_min,
            "lane_index": self.lane.lane_index,
            "lane_count": self.lane.lane_count,
            "segment": self.interval.segment,
            "payload": self.payload,
        }
        if self.geometry is not None:
            g = self.geometry
            rec["geometry"] = {
                "left": g.left,
                "width": g.width,
                "top": g.top,
                "height": g.height,
                "display_min": g.display_min,
            }
        return rec


@dataclass(frozen=True)
class DaySummary:
    block_count: int
    lane_count: int
    load_min: int
    busy_min: int
    overlap_count: int
    gaps: Tuple[Tuple[int, int], ...]


@dataclass(frozen=True)
class AxisTick:
    minute_of_day: int
    offset_px: float
    is_hour_mark: bool
    label: str


# Output shape: resource -> day -> ordered blocks
ResourceCalendar = Dict[Optional[str], Dict[dt.date, list]]
LayoutConfig = Dict[str, Any]


__all__ = [
    "Appointment",
    "AxisTick",
    "BusinessWindow",
    "DaySummary",
    "DisplayedInterval",
    "Geometry",
    "LaneAssignment",
    "LayoutConfig",
    "PlacedBlock",
    "ResourceCalendar",
    "Scale",
    "WallClock",
]
