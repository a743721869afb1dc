from __future__ import annotations

import datetime as dt
import re
from typing import Any, Optional, Tuple

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_COMPACT_UTC_RE = re.compile(r"^(\d{8})T(\d{6})Z$")  # e.g. 20240401T130000Z


def parse_hhmm(s: str) -> Tuple[int, int]:
    m = _HHMM_RE.match(s.strip())
    if not m:
        raise ValueError(f"Invalid HH:MM: {s!r}")
    hh = int(m.group(1))
    mm = int(m.group(2))
    # 24:00 is allowed so a window can close at midnight.
    if not ((0 <= hh <= 23 and 0 <= mm <= 59) or (hh == 24 and mm == 0)):
        raise ValueError(f"Invalid HH:MM: {s!r}")
    return hh, mm


def parse_workhours(s: str) -> Tuple[int, int]:
    parts = s.split("-")
    if len(parts) != 2:
        raise ValueError("workhours must be like 08:00-18:00")
    sh, sm = parse_hhmm(parts[0])
    eh, em = parse_hhmm(parts[1])
    start = sh * 60 + sm
    end = eh * 60 + em
    if end <= start:
        raise ValueError("workhours end must be after start")
    return start, end


def format_workhours(open_min: int, close_min: int) -> str:
    return f"{open_min // 60:02d}:{open_min % 60:02d}-{close_min // 60:02d}:{close_min % 60:02d}"


def parse_date_yyyy_mm_dd(s: str) -> dt.date:
    return dt.datetime.strptime(s, "%Y-%m-%d").date()


def parse_instant_ms(v: Any) -> Optional[int]:
    """Parse an absolute instant into UTC epoch ms.

    Accepts epoch-ms ints, ISO-8601 strings ("Z" or offset; naive means UTC),
    datetimes, and compact "YYYYMMDDTHHMMSSZ". Returns None when unparseable.
    """
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, dt.datetime):
        d = v if v.tzinfo is not None else v.replace(tzinfo=dt.timezone.utc)
        return int(d.timestamp() * 1000)
    if not isinstance(v, str):
        return None

    s = v.strip()
    if not s:
        return None

    m = _COMPACT_UTC_RE.match(s)
    if m:
        ymd, hms = m.group(1), m.group(2)
        try:
            aware = dt.datetime(
                int(ymd[0:4]), int(ymd[4:6]), int(ymd[6:8]),
                int(hms[0:2]), int(hms[2:4]), int(hms[4:6]),
                tzinfo=dt.timezone.utc,
            )
        except ValueError:
            return None
        return int(aware.timestamp() * 1000)

    try:
        d = dt.datetime.fromisoformat(s.replace("Z", "+00:00"))
    except ValueError:
        return None
    if d.tzinfo is None:
        d = d.replace(tzinfo=dt.timezone.utc)
    return int(d.timestamp() * 1000)
