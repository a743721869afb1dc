"""lanegrid.api

Stable *library* entrypoint for lanegrid.

Policy:
  - Only names listed in __all__ are considered public API.
  - Everything else is internal and may change without notice.
"""

from __future__ import annotations

from lanegrid.clip import clip, clip_days
from lanegrid.engine import LayoutEngine
from lanegrid.geometry import time_axis, to_geometry
from lanegrid.lanes import assign_lanes, max_overlap
from lanegrid.model import (
    Appointment,
    AxisTick,
    BusinessWindow,
    DaySummary,
    DisplayedInterval,
    Geometry,
    LaneAssignment,
    PlacedBlock,
    Scale,
    WallClock,
)
from lanegrid.normalize import normalize, normalize_appointment
from lanegrid.payload import (
    appointments_from_records,
    dumps_payload,
    load_appointments_json,
    view_to_payload,
)
from lanegrid.validate import (
    DuplicateAppointmentError,
    InvalidIntervalError,
    InvalidTimeZoneError,
    InvalidWindowError,
    LayoutError,
    validate_appointments,
)
from lanegrid.view import build_view, has_weekend_appointments, summarize_day, week_days


__all__ = [
    "Appointment",
    "AxisTick",
    "BusinessWindow",
    "DaySummary",
    "DisplayedInterval",
    "DuplicateAppointmentError",
    "Geometry",
    "InvalidIntervalError",
    "InvalidTimeZoneError",
    "InvalidWindowError",
    "LaneAssignment",
    "LayoutEngine",
    "LayoutError",
    "PlacedBlock",
    "Scale",
    "WallClock",
    "appointments_from_records",
    "assign_lanes",
    "build_view",
    "clip",
    "clip_days",
    "dumps_payload",
    "has_weekend_appointments",
    "load_appointments_json",
    "max_overlap",
    "normalize",
    "normalize_appointment",
    "summarize_day",
    "time_axis",
    "to_geometry",
    "validate_appointments",
    "view_to_payload",
    "week_days",
]
