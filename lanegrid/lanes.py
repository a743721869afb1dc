# lanegrid/lanes.py
from __future__ import annotations

from typing import Dict, Iterable, List, Set, Tuple

from .model import DisplayedInterval, LaneAssignment


def _sorted_intervals(intervals: Iterable[DisplayedInterval]) -> List[DisplayedInterval]:
    items = list(intervals)
    days = {iv.calendar_day for iv in items}
    if len(days) > 1:
        raise ValueError(f"assign_lanes expects one calendar day per call, got {len(days)}")
    return sorted(items, key=lambda iv: (iv.start_offset_min, iv.appointment_id))


def assign_lanes(intervals: Iterable[DisplayedInterval]) -> Dict[str, LaneAssignment]:
    """
    Greedy first-fit lane partitioning for one (resource, day) group.

    Intervals are visited by start offset (ties by appointment id) and go to
    the lowest lane whose last end is <= their start. The resulting lane
    count equals max_overlap() of the same intervals.
    """
    ordered = _sorted_intervals(intervals)

    lane_ends: List[int] = []
    lane_of: List[Tuple[str, int]] = []
    for iv in ordered:
        lane_index = -1
        for i, lane_end in enumerate(lane_ends):
            if lane_end <= iv.start_offset_min:
                lane_index = i
                break
        if lane_index < 0:
            lane_index = len(lane_ends)
            lane_ends.append(iv.end_offset_min)
        else:
            lane_ends[lane_index] = iv.end_offset_min
        lane_of.append((iv.appointment_id, lane_index))

    total = len(lane_ends)
    return {aid: LaneAssignment(lane_index=idx, lane_count=total) for aid, idx in lane_of}


def max_overlap(intervals: Iterable[DisplayedInterval]) -> int:
    """Largest number of intervals covering one instant (sweep line)."""
    pts: List[Tuple[int, int]] = []
    for iv in intervals:
        pts.append((iv.start_offset_min, +1))
        pts.append((iv.end_offset_min, -1))
    # Ends sort before starts at the same instant: [a, b) and [b, c) do not overlap.
    pts.sort()

    active = 0
    best = 0
    for _t, kind in pts:
        active += kind
        best = max(best, active)
    return best


def overlapping_ids(intervals: Iterable[DisplayedInterval]) -> Set[str]:
    """Ids of intervals that overlap at least one other interval."""
    ordered = sorted(intervals, key=lambda iv: (iv.start_offset_min, iv.end_offset_min, iv.appointment_id))
    out: Set[str] = set()
    # Running max end of everything seen so far, and who owns it.
    max_end = None
    max_owner = None
    for iv in ordered:
        if max_end is not None and iv.start_offset_min < max_end:
            out.add(iv.appointment_id)
            out.add(max_owner)
        if max_end is None or iv.end_offset_min > max_end:
            max_end = iv.end_offset_min
            max_owner = iv.appointment_id
    return out
