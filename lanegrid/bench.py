from __future__ import annotations

import datetime as dt
import random
from typing import List, Sequence
from uuid import NAMESPACE_DNS, uuid5

from .model import MIN_MS, Appointment, DisplayedInterval

RESOURCE_POOL = ("tech.alpha", "tech.beta", "tech.gamma", "tech.delta")
STATUS_POOL = ("Scheduled", "Confirmed", "In Progress", "Completed")


def _synthetic_id(kind: str, seed: int, i: int) -> str:
    return str(uuid5(NAMESPACE_DNS, f"lanegrid.{kind}.v1:{seed}:{i}"))


def synthetic_appointments(
    n: int,
    *,
    seed: int = 1,
    base_ms: int = 1704067200000,  # 2024-01-01T00:00:00Z
    span_days: int = 5,
    resources: Sequence[str] = RESOURCE_POOL,
    max_duration_min: int = 240,
    multi_day_every: int = 9,
    unassigned_every: int = 13,
) -> List[Appointment]:
    """Deterministic appointment set for property checks and benchmarks.

    Starts land on 5-minute marks; every `multi_day_every`-th appointment
    runs 1-3 days, every `unassigned_every`-th has no resource.
    """
    if n < 0:
        raise ValueError("n must be >= 0")
    rng = random.Random(seed)
    out: List[Appointment] = []
    for i in range(n):
        start_min = rng.randrange(0, span_days * 1440, 5)
        if multi_day_every and i % multi_day_every == multi_day_every - 1:
            dur_min = rng.randrange(1440, 3 * 1440, 5)
        else:
            dur_min = rng.randrange(5, max_duration_min + 5, 5)
        if unassigned_every and i % unassigned_every == unassigned_every - 1:
            rid = None
        else:
            rid = resources[rng.randrange(len(resources))] if resources else None
        start_ms = base_ms + start_min * MIN_MS
        out.append(
            Appointment(
                id=_synthetic_id("appt", seed, i),
                start_ms=start_ms,
                end_ms=start_ms + dur_min * MIN_MS,
                resource_id=rid,
                payload={"status": STATUS_POOL[i % len(STATUS_POOL)], "n": i},
            )
        )
    return out


def synthetic_intervals(
    n: int,
    *,
    seed: int = 1,
    span_min: int = 600,
    max_duration_min: int = 180,
    day: dt.date = dt.date(2024, 1, 1),
) -> List[DisplayedInterval]:
    """Random displayed intervals inside one window of `span_min` minutes."""
    rng = random.Random(seed)
    out: List[DisplayedInterval] = []
    for i in range(n):
        start = rng.randrange(0, span_min)
        dur = rng.randrange(1, min(max_duration_min, span_min - start) + 1)
        out.append(
            DisplayedInterval(
                appointment_id=f"iv-{seed}-{i:04d}",
                calendar_day=day,
                start_offset_min=start,
                duration_min=dur,
            )
        )
    return out
