from __future__ import annotations

import argparse
import datetime as dt
import os
import sys
from pathlib import Path
from typing import List, Optional

from .engine import DEFAULT_TZ, LayoutEngine
from .payload import dumps_payload, load_appointments_json, view_to_payload
from .util.timeparse import parse_date_yyyy_mm_dd
from .util.tz import today_date
from .validate import LayoutError
from .view import has_weekend_appointments, week_days


def _die(msg: str, rc: int = 2) -> int:
    print(f"[lanegrid] ERROR: {msg}", file=sys.stderr)
    return rc


def _split_csv(s: Optional[str]) -> List[str]:
    if not s:
        return []
    return [x.strip() for x in s.split(",") if x.strip()]


def main(argv: List[str] | None = None) -> int:
    ap = argparse.ArgumentParser(
        prog="lanegrid",
        description="Lay out technician appointments into per-day lanes and write the layout JSON.",
    )
    ap.add_argument("--in", dest="in_json", required=True, help="Appointments JSON (list or {\"appointments\": [...]})")
    ap.add_argument("--start", default=None, help="First day YYYY-MM-DD (default: today in --tz)")
    ap.add_argument("--days", type=int, default=7, help="Number of days to lay out (default: 7)")
    ap.add_argument("--week", action="store_true", help="Lay out the week containing --start instead of --days")
    ap.add_argument(
        "--show-weekends",
        choices=("auto", "yes", "no"),
        default="auto",
        help="With --week: include Sat/Sun columns (auto: only when appointments fall on them)",
    )
    ap.add_argument(
        "--workhours",
        default=os.getenv("LANEGRID_WORKHOURS", "08:00-18:00"),
        help="Business window, e.g. 08:00-18:00 (default: env LANEGRID_WORKHOURS or 08:00-18:00)",
    )
    ap.add_argument(
        "--tz",
        default=os.getenv("LANEGRID_TZ", DEFAULT_TZ),
        help=f"Reference timezone for calendar days (default: env LANEGRID_TZ or {DEFAULT_TZ})",
    )
    ap.add_argument("--min-display-min", type=int, default=0, help="Presentation floor for block length in minutes")
    ap.add_argument("--include-empty-rows", action="store_true", help="Keep resources that have no blocks on the requested days")
    ap.add_argument("--resources", default=None, help="Comma-separated roster; listed resources come first")
    ap.add_argument("--px-per-min", type=float, default=None, help="Attach pixel geometry at this scale")
    ap.add_argument("--track-px", type=float, default=100.0, help="Lane track size in pixels (default: 100)")
    ap.add_argument("--orientation", choices=("vertical", "horizontal"), default="vertical")
    ap.add_argument("--out", default=None, help="Output JSON path (default: stdout)")
    ns = ap.parse_args(argv)

    if ns.days < 1:
        return _die(f"--days must be >= 1 (got {ns.days})")

    cfg = {
        "tz": ns.tz,
        "workhours": ns.workhours,
        "min_display_min": ns.min_display_min,
        "include_empty_resource_rows": ns.include_empty_rows,
        "px_per_min": ns.px_per_min,
        "track_px": ns.track_px,
        "orientation": ns.orientation,
    }
    try:
        engine = LayoutEngine.from_config(cfg)
    except (LayoutError, ValueError) as e:
        return _die(f"Invalid configuration: {e}")

    in_path = Path(ns.in_json)
    if not in_path.exists():
        return _die(f"Missing input JSON: {in_path}")
    try:
        appointments = load_appointments_json(in_path)
    except (LayoutError, ValueError) as e:
        return _die(f"Failed to load appointments: {in_path} ({e})")

    try:
        start = parse_date_yyyy_mm_dd(ns.start) if ns.start else today_date(engine.tzinfo)
    except ValueError as e:
        return _die(f"Invalid --start value: {e}")

    if ns.week:
        if ns.show_weekends == "auto":
            show = has_weekend_appointments(appointments, start, engine.window, tzinfo=engine.tzinfo)
        else:
            show = ns.show_weekends == "yes"
        days = week_days(start, show_weekends=show)
    else:
        days = [start + dt.timedelta(days=i) for i in range(ns.days)]

    try:
        view = engine.build_view(appointments, days, resources=_split_csv(ns.resources))
    except LayoutError as e:
        aid = getattr(e, "appointment_id", None)
        suffix = f" (appointment_id={aid})" if aid else ""
        return _die(f"{e}{suffix}")

    text = dumps_payload(view_to_payload(view, window=engine.window, days=days))

    if ns.out:
        out_path = Path(ns.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(text, encoding="utf-8")
        print(str(out_path))
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
