# lanegrid/clip.py
from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Optional

from .model import (
    MIN_MS,
    SEGMENT_END,
    SEGMENT_MIDDLE,
    SEGMENT_START,
    SEGMENT_WHOLE,
    Appointment,
    BusinessWindow,
    DisplayedInterval,
)
from .normalize import normalize
from .util.tz import resolve_tz


def clip(
    appointment: Appointment,
    calendar_day: dt.date,
    window: BusinessWindow,
    *,
    tzinfo: Optional[dt.tzinfo] = None,
) -> Optional[DisplayedInterval]:
    """
    Portion of `appointment` visible inside `window` on `calendar_day`.

    Single-day appointments are clamped to [open, close).
    Multi-day appointments show:
      - start day:  [start, close)
      - end day:    [open, end)
      - in between: [open, close)
    each clamped to the window. Returns None when nothing remains.
    """
    tz = tzinfo if tzinfo is not None else resolve_tz(window.tz)
    start = normalize(appointment.start_ms, tz)
    end = normalize(appointment.end_ms, tz)
    start_day = start.date
    end_day = end.date

    if start_day == end_day:
        if calendar_day != start_day:
            return None
        lo, hi = start.minute_of_day, end.minute_of_day
        if hi <= lo:
            # Fall-back hour: the wall clock repeats, so keep the elapsed length.
            hi = lo + (appointment.end_ms - appointment.start_ms) // MIN_MS
        segment = SEGMENT_WHOLE
    elif calendar_day == start_day:
        lo, hi = start.minute_of_day, window.close_min
        segment = SEGMENT_START
    elif calendar_day == end_day:
        lo, hi = window.open_min, end.minute_of_day
        segment = SEGMENT_END
    elif start_day < calendar_day < end_day:
        lo, hi = window.open_min, window.close_min
        segment = SEGMENT_MIDDLE
    else:
        return None

    lo = max(lo, window.open_min)
    hi = min(hi, window.close_min)
    if hi <= lo:
        return None

    return DisplayedInterval(
        appointment_id=appointment.id,
        calendar_day=calendar_day,
        start_offset_min=lo - window.open_min,
        duration_min=hi - lo,
        segment=segment,
    )


def clip_days(
    appointment: Appointment,
    days: Iterable[dt.date],
    window: BusinessWindow,
    *,
    tzinfo: Optional[dt.tzinfo] = None,
) -> List[DisplayedInterval]:
    tz = tzinfo if tzinfo is not None else resolve_tz(window.tz)
    out: List[DisplayedInterval] = []
    for d in days:
        iv = clip(appointment, d, window, tzinfo=tz)
        if iv is not None:
            out.append(iv)
    return out
