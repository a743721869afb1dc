# lanegrid/util/tz.py
from __future__ import annotations

import datetime as dt
import re
from typing import Optional, Union

from zoneinfo import ZoneInfo

from ..validate import InvalidTimeZoneError

_OFFSET_RE = re.compile(r"^([+-])(\d{2}):?(\d{2})$")

_ALIASES = {
    "local": "local",
    "system": "local",
    "native": "local",
    "utc": "UTC",
    "z": "UTC",
    "gmt": "UTC",
    "utc0": "UTC",
    "utc+0": "UTC",
}

TzLike = Union[str, dt.tzinfo, None]


def normalize_tz_name(name: Optional[str]) -> str:
    """Canonical zone name: "local", "UTC", or the identifier as given (IANA or +HH:MM)."""
    s = "" if name is None else str(name).strip()
    if not s:
        return "local"
    return _ALIASES.get(s.lower(), s)


def _fixed_offset(tz_name: str) -> Optional[dt.tzinfo]:
    m = _OFFSET_RE.match(tz_name)
    if not m:
        return None
    sign_s, hh_s, mm_s = m.groups()
    hh, mm = int(hh_s), int(mm_s)
    if hh > 23 or mm > 59:
        raise InvalidTimeZoneError(f"Invalid timezone offset: {tz_name!r}", tz=tz_name)
    minutes = hh * 60 + mm
    return dt.timezone(dt.timedelta(minutes=minutes if sign_s == "+" else -minutes))


def resolve_tz(name: TzLike) -> dt.tzinfo:
    """tzinfo for a zone name; a tzinfo argument is returned as is.

    Unknown names raise InvalidTimeZoneError.
    """
    if isinstance(name, dt.tzinfo):
        return name

    tz_name = normalize_tz_name(name)
    if tz_name == "UTC":
        return dt.timezone.utc
    if tz_name == "local":
        return dt.datetime.now().astimezone().tzinfo or dt.timezone.utc

    fixed = _fixed_offset(tz_name)
    if fixed is not None:
        return fixed

    try:
        return ZoneInfo(tz_name)
    except (KeyError, ValueError, OSError) as ex:
        # ZoneInfoNotFoundError is a KeyError; malformed keys raise ValueError.
        raise InvalidTimeZoneError(f"Invalid timezone identifier: {tz_name!r}", tz=tz_name) from ex


def today_date(tz: dt.tzinfo) -> dt.date:
    return dt.datetime.now(tz=tz).date()


def local_datetime(ms: int, tz: dt.tzinfo) -> dt.datetime:
    return dt.datetime.fromtimestamp(int(ms) / 1000.0, tz=tz)


def midnight_epoch_ms(d: dt.date, tz: dt.tzinfo) -> int:
    aware = dt.datetime(d.year, d.month, d.day, 0, 0, 0, tzinfo=tz)
    return int(aware.timestamp() * 1000)
