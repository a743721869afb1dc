# lanegrid/geometry.py
from __future__ import annotations

from typing import List

from .model import (
    ORIENTATION_VERTICAL,
    AxisTick,
    BusinessWindow,
    DisplayedInterval,
    Geometry,
    LaneAssignment,
    Scale,
)


def to_geometry(interval: DisplayedInterval, lane: LaneAssignment, scale: Scale) -> Geometry:
    """Linear mapping of minutes and lanes onto pixels.

    The time axis uses px_per_min; the lane axis splits track_px evenly.
    Block length never drops below scale.min_display_min worth of pixels.
    """
    count = max(1, lane.lane_count)
    display_min = max(interval.duration_min, scale.min_display_min)

    t_pos = interval.start_offset_min * scale.px_per_min
    t_len = display_min * scale.px_per_min
    l_len = scale.track_px / count
    l_pos = lane.lane_index * l_len

    if scale.orientation == ORIENTATION_VERTICAL:
        return Geometry(left=l_pos, width=l_len, top=t_pos, height=t_len, display_min=display_min)
    return Geometry(left=t_pos, width=t_len, top=l_pos, height=l_len, display_min=display_min)


def _tick_label(minute_of_day: int, is_hour_mark: bool) -> str:
    hour, minute = divmod(minute_of_day, 60)
    hour12 = hour % 12 or 12
    if is_hour_mark:
        period = "AM" if hour % 24 < 12 else "PM"
        return f"{hour12}:00 {period}"
    return f"{hour12}:{minute:02d}"


def time_axis(window: BusinessWindow, scale: Scale, slot_min: int = 15) -> List[AxisTick]:
    """Ticks every slot_min minutes from open through close (inclusive)."""
    if slot_min <= 0:
        raise ValueError(f"slot_min must be > 0 (got {slot_min})")

    out: List[AxisTick] = []
    m = window.open_min
    while m <= window.close_min:
        is_hour = m % 60 == 0
        out.append(
            AxisTick(
                minute_of_day=m,
                offset_px=(m - window.open_min) * scale.px_per_min,
                is_hour_mark=is_hour,
                label=_tick_label(m, is_hour),
            )
        )
        m += slot_min
    return out
