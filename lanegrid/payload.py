# lanegrid/payload.py
from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from .model import Appointment, BusinessWindow, ResourceCalendar
from .normalize import normalize_appointment
from .util.timeparse import format_workhours
from .view import summarize_day

try:
    import orjson  # type: ignore
except Exception:  # pragma: no cover
    orjson = None  # type: ignore

SCHEMA_VERSION = 1

JsonPath = Union[str, Path]
Payload = Dict[str, Any]


def appointments_from_records(records: Iterable[Dict[str, Any]]) -> List[Appointment]:
    return [normalize_appointment(r) for r in records]


def load_appointments_json(path: JsonPath) -> List[Appointment]:
    """Read appointments from a JSON list or an {"appointments": [...]} object."""
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(raw, dict) and isinstance(raw.get("appointments"), list):
        records = raw["appointments"]
    elif isinstance(raw, list):
        records = raw
    else:
        raise ValueError("appointments JSON must be a list or {\"appointments\": [...]}")
    return appointments_from_records(records)


def view_to_payload(
    view: ResourceCalendar,
    *,
    window: BusinessWindow,
    days: Sequence[dt.date],
    generated_at: Optional[str] = None,
) -> Payload:
    """Plain-JSON shape of a built view (rows in view order, days as YYYY-MM-DD keys)."""
    if generated_at is None:
        generated_at = dt.datetime.now(dt.timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")

    rows: List[Dict[str, Any]] = []
    for rid, by_day in view.items():
        day_out: Dict[str, List[Dict[str, Any]]] = {}
        summary_out: Dict[str, Dict[str, Any]] = {}
        for d, blocks in by_day.items():
            key = d.isoformat()
            day_out[key] = [b.to_record() for b in blocks]
            s = summarize_day(blocks, window)
            summary_out[key] = {
                "block_count": s.block_count,
                "lane_count": s.lane_count,
                "load_min": s.load_min,
                "busy_min": s.busy_min,
                "overlap_count": s.overlap_count,
                "gaps": [list(g) for g in s.gaps],
            }
        rows.append({"resource_id": rid, "days": day_out, "summary": summary_out})

    return {
        "schema_version": SCHEMA_VERSION,
        "cfg": {
            "tz": window.tz,
            "work_start_min": window.open_min,
            "work_end_min": window.close_min,
            "workhours": format_workhours(window.open_min, window.close_min),
            "days": [d.isoformat() for d in days],
        },
        "rows": rows,
        "meta": {"generated_at": generated_at},
    }


def dumps_payload(payload: Payload) -> str:
    if orjson is not None:
        return orjson.dumps(payload).decode("utf-8")
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
