# lanegrid/normalize.py
from __future__ import annotations

import datetime as dt
from typing import Any, Dict, Optional

from .model import Appointment, WallClock
from .util.console import eprint, obs_enabled
from .util.timeparse import parse_instant_ms
from .util.tz import TzLike, local_datetime, resolve_tz
from .validate import InvalidIntervalError

_ID_KEYS = ("id", "_id", "appointment_id")
_START_KEYS = ("start_ms", "start", "startTime", "start_time")
_END_KEYS = ("end_ms", "end", "endTime", "end_time")
_RESOURCE_KEYS = ("resource_id", "resourceId", "technician", "technician_id")


def normalize(instant_ms: int, tz: TzLike) -> WallClock:
    """Wall-clock view of an instant in the reference zone (seconds floored)."""
    tzinfo = resolve_tz(tz)
    t = local_datetime(instant_ms, tzinfo)
    return WallClock(year=t.year, month=t.month, day=t.day, minute_of_day=t.hour * 60 + t.minute)


def day_key(instant_ms: int, tz: TzLike) -> str:
    return normalize(instant_ms, tz).date.isoformat()


def calendar_day(instant_ms: int, tz: TzLike) -> dt.date:
    return normalize(instant_ms, tz).date


def _first(rec: Dict[str, Any], keys: tuple[str, ...]) -> Any:
    for k in keys:
        if k in rec and rec[k] is not None:
            return rec[k]
    return None


def _resource_id(raw: Any) -> Optional[str]:
    if raw is None:
        return None
    if isinstance(raw, dict):
        raw = raw.get("_id") or raw.get("id")
        if raw is None:
            return None
    s = str(raw).strip()
    return s or None


def normalize_appointment(rec: Dict[str, Any]) -> Appointment:
    """Turn a loosely typed appointment record into an Appointment.

    Keys not used for id/start/end/resource are kept in `payload` as-is.
    Raises InvalidIntervalError when the id or either timestamp is unusable.
    """
    if not isinstance(rec, dict):
        raise InvalidIntervalError(f"appointment record must be dict, got {type(rec).__name__}")

    raw_id = _first(rec, _ID_KEYS)
    aid = "" if raw_id is None else str(raw_id).strip()
    if not aid:
        raise InvalidIntervalError("appointment record missing id")

    start_raw = _first(rec, _START_KEYS)
    end_raw = _first(rec, _END_KEYS)
    start_ms = parse_instant_ms(start_raw)
    end_ms = parse_instant_ms(end_raw)
    if start_ms is None or end_ms is None:
        if obs_enabled():
            eprint(f"[lanegrid.normalize] WARN: invalid timestamp id={aid!r} start={start_raw!r} end={end_raw!r}")
        raise InvalidIntervalError(
            f"appointment {aid!r}: unparseable start/end ({start_raw!r}, {end_raw!r})",
            appointment_id=aid,
        )

    used = set(_ID_KEYS) | set(_START_KEYS) | set(_END_KEYS) | set(_RESOURCE_KEYS)
    payload = {k: v for k, v in rec.items() if k not in used}
    tech = rec.get("technician")
    if isinstance(tech, dict):
        # Renderers still want the technician's display fields.
        payload["technician"] = dict(tech)

    return Appointment(
        id=aid,
        start_ms=int(start_ms),
        end_ms=int(end_ms),
        resource_id=_resource_id(_first(rec, _RESOURCE_KEYS)),
        payload=payload,
    )
