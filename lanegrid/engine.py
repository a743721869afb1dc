# lanegrid/engine.py
from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Any, Dict, Iterable, List, Optional, Sequence

from .clip import clip, clip_days
from .geometry import time_axis, to_geometry
from .lanes import assign_lanes
from .model import (
    Appointment,
    AxisTick,
    BusinessWindow,
    DaySummary,
    DisplayedInterval,
    Geometry,
    LaneAssignment,
    LayoutConfig,
    PlacedBlock,
    ResourceCalendar,
    Scale,
    WallClock,
)
from .normalize import normalize
from .util.timeparse import parse_workhours
from .util.tz import normalize_tz_name, resolve_tz
from .validate import InvalidWindowError
from .view import build_view, summarize_day

DEFAULT_TZ = "America/New_York"
DEFAULT_OPEN_MIN = 8 * 60
DEFAULT_CLOSE_MIN = 18 * 60


class LayoutEngine:
    """One business window + zone, validated once, reused for every layout call.

    The engine keeps no state between calls; it only carries configuration.
    """

    def __init__(
        self,
        window: BusinessWindow,
        *,
        min_display_min: int = 0,
        include_empty_resource_rows: bool = False,
        scale: Optional[Scale] = None,
    ) -> None:
        if not isinstance(min_display_min, int) or min_display_min < 0:
            raise InvalidWindowError(f"min_display_min must be int >= 0 (got {min_display_min!r})")

        self.window = window
        self.tzinfo = resolve_tz(window.tz)
        self.min_display_min = min_display_min
        self.include_empty_resource_rows = bool(include_empty_resource_rows)
        if scale is not None and min_display_min > scale.min_display_min:
            scale = dataclasses.replace(scale, min_display_min=min_display_min)
        self.scale = scale

    @classmethod
    def from_config(cls, cfg: LayoutConfig) -> "LayoutEngine":
        """Build from a cfg dict (tz, work_start_min/work_end_min or workhours, ...)."""
        tz = normalize_tz_name(cfg.get("tz") or DEFAULT_TZ)
        if cfg.get("workhours"):
            try:
                open_min, close_min = parse_workhours(str(cfg["workhours"]))
            except ValueError as ex:
                raise InvalidWindowError(str(ex)) from ex
        else:
            open_min = cfg.get("work_start_min", DEFAULT_OPEN_MIN)
            close_min = cfg.get("work_end_min", DEFAULT_CLOSE_MIN)

        min_display_min = int(cfg.get("min_display_min", 0) or 0)
        scale = None
        if cfg.get("px_per_min") is not None:
            scale = Scale(
                px_per_min=float(cfg["px_per_min"]),
                track_px=float(cfg.get("track_px", 100.0)),
                min_display_min=min_display_min,
                orientation=str(cfg.get("orientation") or "vertical"),
            )

        return cls(
            BusinessWindow(open_min=open_min, close_min=close_min, tz=tz),
            min_display_min=min_display_min,
            include_empty_resource_rows=bool(cfg.get("include_empty_resource_rows", False)),
            scale=scale,
        )

    def normalize(self, instant_ms: int) -> WallClock:
        return normalize(instant_ms, self.tzinfo)

    def clip(self, appointment: Appointment, calendar_day: dt.date) -> Optional[DisplayedInterval]:
        return clip(appointment, calendar_day, self.window, tzinfo=self.tzinfo)

    def clip_days(self, appointment: Appointment, days: Iterable[dt.date]) -> List[DisplayedInterval]:
        return clip_days(appointment, days, self.window, tzinfo=self.tzinfo)

    def assign_lanes(self, intervals: Iterable[DisplayedInterval]) -> Dict[str, LaneAssignment]:
        return assign_lanes(intervals)

    def to_geometry(self, interval: DisplayedInterval, lane: LaneAssignment, scale: Optional[Scale] = None) -> Geometry:
        sc = scale or self.scale
        if sc is None:
            raise ValueError("no scale configured")
        return to_geometry(interval, lane, sc)

    def build_view(
        self,
        appointments: Iterable[Appointment],
        days: Iterable[dt.date],
        *,
        resources: Optional[Sequence[str]] = None,
        include_empty_resource_rows: Optional[bool] = None,
    ) -> ResourceCalendar:
        include_empty = self.include_empty_resource_rows if include_empty_resource_rows is None else include_empty_resource_rows
        return build_view(
            appointments,
            days,
            self.window,
            include_empty_resource_rows=include_empty,
            resources=resources,
            scale=self.scale,
            tzinfo=self.tzinfo,
        )

    def summarize(self, blocks: Sequence[PlacedBlock]) -> DaySummary:
        return summarize_day(blocks, self.window)

    def time_axis(self, slot_min: int = 15) -> List[AxisTick]:
        return time_axis(self.window, self.scale or Scale(), slot_min=slot_min)

    def describe(self) -> Dict[str, Any]:
        return {
            "tz": self.window.tz,
            "work_start_min": self.window.open_min,
            "work_end_min": self.window.close_min,
            "min_display_min": self.min_display_min,
            "include_empty_resource_rows": self.include_empty_resource_rows,
        }
