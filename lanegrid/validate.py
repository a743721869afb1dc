"""Input and configuration validation (library-facing)."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional


class LayoutError(ValueError):
    """Base class for layout input/configuration errors."""


class InvalidIntervalError(LayoutError):
    """Raised when an appointment does not end strictly after it starts."""

    def __init__(self, msg: str, *, appointment_id: Optional[str] = None) -> None:
        super().__init__(msg)
        self.appointment_id = appointment_id


class DuplicateAppointmentError(LayoutError):
    """Raised when two appointments share one id."""

    def __init__(self, msg: str, *, appointment_id: Optional[str] = None) -> None:
        super().__init__(msg)
        self.appointment_id = appointment_id


class InvalidTimeZoneError(LayoutError):
    """Raised for an unrecognized timezone identifier."""

    def __init__(self, msg: str, *, tz: Optional[str] = None) -> None:
        super().__init__(msg)
        self.tz = tz


class InvalidWindowError(LayoutError):
    """Raised for a malformed business window."""


MINUTES_PER_DAY = 1440


def _require(cond: bool, msg: str, errs: List[str]) -> None:
    if not cond:
        errs.append(msg)


def validate_window(open_min: Any, close_min: Any) -> List[str]:
    errs: List[str] = []
    ok_types = isinstance(open_min, int) and isinstance(close_min, int)
    _require(ok_types, "window: open_min/close_min must be int minutes of day", errs)
    if not ok_types:
        return errs
    _require(0 <= open_min <= MINUTES_PER_DAY, f"window: open_min out of range: {open_min}", errs)
    _require(0 <= close_min <= MINUTES_PER_DAY, f"window: close_min out of range: {close_min}", errs)
    _require(open_min < close_min, f"window: open_min must be < close_min (got {open_min} >= {close_min})", errs)
    return errs


def assert_valid_window(open_min: Any, close_min: Any) -> None:
    errs = validate_window(open_min, close_min)
    if errs:
        raise InvalidWindowError(errs[0])


def _problems(appointments: Iterable[Any]) -> List[tuple[str, Optional[str], type]]:
    out: List[tuple[str, Optional[str], type]] = []
    seen: set[str] = set()
    for i, a in enumerate(appointments):
        aid = getattr(a, "id", None)
        if not isinstance(aid, str) or not aid:
            out.append((f"appointments[{i}].id must be non-empty string", None, InvalidIntervalError))
            continue
        if aid in seen:
            out.append((f"appointments[{i}]: duplicate id {aid!r}", aid, DuplicateAppointmentError))
        seen.add(aid)

        start_ms = getattr(a, "start_ms", None)
        end_ms = getattr(a, "end_ms", None)
        if not isinstance(start_ms, int) or not isinstance(end_ms, int):
            out.append((f"appointment {aid!r}: start_ms/end_ms must be int epoch ms", aid, InvalidIntervalError))
            continue
        if end_ms <= start_ms:
            out.append(
                (f"appointment {aid!r}: end must be after start (start_ms={start_ms}, end_ms={end_ms})", aid, InvalidIntervalError)
            )
    return out


def validate_appointments(appointments: Iterable[Any]) -> List[str]:
    """Return every problem found; empty list means the input is usable."""
    return [msg for msg, _aid, _cls in _problems(appointments)]


def assert_valid_appointments(appointments: Iterable[Any]) -> None:
    probs = _problems(appointments)
    if probs:
        msg, aid, cls = probs[0]
        raise cls(msg, appointment_id=aid)


__all__ = [
    "DuplicateAppointmentError",
    "InvalidIntervalError",
    "InvalidTimeZoneError",
    "InvalidWindowError",
    "LayoutError",
    "assert_valid_appointments",
    "assert_valid_window",
    "validate_appointments",
    "validate_window",
]
