# lanegrid/view.py
from __future__ import annotations

import datetime as dt
import time
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .clip import clip_days
from .geometry import to_geometry
from .lanes import assign_lanes, overlapping_ids
from .model import (
    Appointment,
    BusinessWindow,
    DaySummary,
    DisplayedInterval,
    PlacedBlock,
    ResourceCalendar,
    Scale,
)
from .util.console import eprint, obs_enabled
from .util.tz import resolve_tz
from .validate import assert_valid_appointments

_Cell = List[Tuple[DisplayedInterval, Appointment]]


def _unique_days(days: Iterable[dt.date]) -> List[dt.date]:
    out: List[dt.date] = []
    seen: set[dt.date] = set()
    for d in days:
        if d in seen:
            continue
        seen.add(d)
        out.append(d)
    return out


def _row_order(present: Iterable[Optional[str]], roster: Sequence[str]) -> List[Optional[str]]:
    out: List[Optional[str]] = []
    seen: set[Optional[str]] = set()
    for rid in roster:
        if rid not in seen:
            seen.add(rid)
            out.append(rid)
    rest = sorted({r for r in present if r not in seen and r is not None}, key=str)
    out.extend(rest)
    if None in set(present) and None not in seen:
        out.append(None)
    return out


def _layout_cell(resource_id: Optional[str], cell: _Cell, scale: Optional[Scale]) -> List[PlacedBlock]:
    if not cell:
        return []
    lanes = assign_lanes(iv for iv, _a in cell)
    blocks: List[PlacedBlock] = []
    for iv, appt in cell:
        lane = lanes[iv.appointment_id]
        geom = to_geometry(iv, lane, scale) if scale is not None else None
        blocks.append(PlacedBlock(resource_id=resource_id, interval=iv, lane=lane, payload=appt.payload, geometry=geom))
    blocks.sort(key=lambda b: (b.start_offset_min, b.lane_index, b.appointment_id))
    return blocks


def build_view(
    appointments: Iterable[Appointment],
    days: Iterable[dt.date],
    window: BusinessWindow,
    *,
    include_empty_resource_rows: bool = False,
    resources: Optional[Sequence[str]] = None,
    scale: Optional[Scale] = None,
    tzinfo: Optional[dt.tzinfo] = None,
) -> ResourceCalendar:
    """
    Resource rows x day columns of laid-out blocks.

    Every appointment is validated before any layout happens. Each
    (resource, day) cell is clipped and lane-assigned independently.
    Rows follow `resources` first, then other ids sorted, unassigned (None) last.
    """
    t0 = time.monotonic()
    appts = list(appointments)
    assert_valid_appointments(appts)
    tz = tzinfo if tzinfo is not None else resolve_tz(window.tz)
    day_list = _unique_days(days)

    cells: Dict[Optional[str], Dict[dt.date, _Cell]] = {}
    for a in appts:
        for iv in clip_days(a, day_list, window, tzinfo=tz):
            cells.setdefault(a.resource_id, {}).setdefault(iv.calendar_day, []).append((iv, a))

    roster = list(resources or [])
    if include_empty_resource_rows:
        present = {a.resource_id for a in appts} | set(cells.keys())
    else:
        present = set(cells.keys())
        roster = [r for r in roster if r in cells]

    view: ResourceCalendar = {}
    n_blocks = 0
    for rid in _row_order(present, roster):
        by_day = cells.get(rid, {})
        row: Dict[dt.date, List[PlacedBlock]] = {}
        for d in day_list:
            row[d] = _layout_cell(rid, by_day.get(d, []), scale)
            n_blocks += len(row[d])
        view[rid] = row

    if obs_enabled():
        ms = int((time.monotonic() - t0) * 1000)
        eprint(f"[lanegrid.view] view.ok ms={ms} appointments={len(appts)} resources={len(view)} days={len(day_list)} blocks={n_blocks}")
    return view


def summarize_day(blocks: Sequence[PlacedBlock], window: BusinessWindow) -> DaySummary:
    """Load, busy time, overlaps and free gaps for one cell."""
    ints = sorted((b.start_offset_min, b.interval.end_offset_min) for b in blocks)
    merged: List[Tuple[int, int]] = []
    for s, e in ints:
        if not merged or s > merged[-1][1]:
            merged.append((s, e))
        else:
            merged[-1] = (merged[-1][0], max(merged[-1][1], e))

    gaps: List[Tuple[int, int]] = []
    cur = 0
    for s, e in merged:
        if s > cur:
            gaps.append((cur, s))
        cur = max(cur, e)
    if cur < window.span_min:
        gaps.append((cur, window.span_min))

    return DaySummary(
        block_count=len(blocks),
        lane_count=max((b.lane_count for b in blocks), default=0),
        load_min=sum(b.duration_min for b in blocks),
        busy_min=sum(e - s for s, e in merged),
        overlap_count=len(overlapping_ids(b.interval for b in blocks)),
        gaps=tuple(gaps),
    )


def week_days(anchor: dt.date, show_weekends: bool = False) -> List[dt.date]:
    """Days of the Sunday-started week containing `anchor`.

    With weekends: Sunday..Saturday. Without: Monday..Friday.
    """
    sunday = anchor - dt.timedelta(days=(anchor.weekday() + 1) % 7)
    if show_weekends:
        return [sunday + dt.timedelta(days=i) for i in range(7)]
    return [sunday + dt.timedelta(days=i) for i in range(1, 6)]


def has_weekend_appointments(
    appointments: Iterable[Appointment],
    anchor: dt.date,
    window: BusinessWindow,
    *,
    tzinfo: Optional[dt.tzinfo] = None,
) -> bool:
    """True when any appointment shows on a Saturday/Sunday of anchor's week."""
    tz = tzinfo if tzinfo is not None else resolve_tz(window.tz)
    weekend = [d for d in week_days(anchor, show_weekends=True) if d.weekday() >= 5]
    return any(clip_days(a, weekend, window, tzinfo=tz) for a in appointments)
