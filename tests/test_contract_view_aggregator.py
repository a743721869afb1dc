from __future__ import annotations

import copy
import datetime as dt
import unittest

from lanegrid.bench import synthetic_appointments
from lanegrid.lanes import max_overlap
from lanegrid.model import Appointment, BusinessWindow, Scale
from lanegrid.validate import DuplicateAppointmentError, InvalidIntervalError, InvalidWindowError
from lanegrid.view import build_view, has_weekend_appointments, summarize_day, week_days

BASE = 1711929600000  # 2024-04-01T00:00:00Z, a Monday
H = 60 * 60000
M = 60000

MON = dt.date(2024, 4, 1)
TUE = dt.date(2024, 4, 2)
WED = dt.date(2024, 4, 3)
DAYS = [MON, TUE, WED]

WINDOW = BusinessWindow(open_min=480, close_min=1080, tz="UTC")


def _appt(aid: str, start_min: int, end_min: int, rid, **payload) -> Appointment:
    return Appointment(id=aid, start_ms=BASE + start_min * M, end_ms=BASE + end_min * M, resource_id=rid, payload=payload or None)


def _fixture():
    return [
        _appt("A", 9 * 60, 10 * 60, "t1", status="Scheduled"),
        _appt("B", 9 * 60 + 30, 10 * 60 + 30, "t1"),
        _appt("C", 10 * 60, 11 * 60, "t1"),
        _appt("X", 16 * 60, 2 * 1440 + 10 * 60, "t2"),
        _appt("FRI", 4 * 1440 + 9 * 60, 4 * 1440 + 10 * 60, "t3"),
        _appt("U", 1440 + 9 * 60, 1440 + 10 * 60, None),
    ]


def _records(view):
    return {
        rid: {d: [(b.appointment_id, b.start_offset_min, b.duration_min, b.lane_index, b.lane_count) for b in blocks]
              for d, blocks in row.items()}
        for rid, row in view.items()
    }


class TestViewAggregatorContract(unittest.TestCase):
    def test_rows_cells_and_lanes(self) -> None:
        view = build_view(_fixture(), DAYS, WINDOW)

        self.assertEqual(list(view), ["t1", "t2", None])
        for row in view.values():
            self.assertEqual(list(row), DAYS)

        t1_mon = view["t1"][MON]
        self.assertEqual(
            [(b.appointment_id, b.lane_index, b.lane_count) for b in t1_mon],
            [("A", 0, 2), ("B", 1, 2), ("C", 0, 2)],
        )
        self.assertEqual(t1_mon[0].payload, {"status": "Scheduled"})
        self.assertEqual(view["t1"][TUE], [])

        x = [view["t2"][d][0] for d in DAYS]
        self.assertEqual([(b.start_offset_min, b.duration_min) for b in x], [(480, 120), (0, 600), (0, 120)])
        self.assertEqual([b.interval.segment for b in x], ["start", "middle", "end"])
        self.assertEqual([b.lane_count for b in x], [1, 1, 1])

        self.assertEqual([b.appointment_id for b in view[None][TUE]], ["U"])

    def test_empty_rows_flag(self) -> None:
        view = build_view(_fixture(), DAYS, WINDOW, include_empty_resource_rows=True, resources=["t9", "t1"])
        self.assertEqual(list(view), ["t9", "t1", "t2", "t3", None])
        self.assertEqual(view["t9"], {MON: [], TUE: [], WED: []})
        self.assertEqual(view["t3"], {MON: [], TUE: [], WED: []})

    def test_roster_order_without_empty_rows(self) -> None:
        view = build_view(_fixture(), DAYS, WINDOW, resources=["t9", "t2"])
        self.assertEqual(list(view), ["t2", "t1", None])

    def test_duplicate_days_collapse(self) -> None:
        view = build_view(_fixture(), [MON, MON, TUE], WINDOW)
        self.assertEqual(list(view["t1"]), [MON, TUE])

    def test_scale_attaches_geometry(self) -> None:
        view = build_view(_fixture(), DAYS, WINDOW, scale=Scale(px_per_min=1.0, track_px=100.0, min_display_min=30))
        b = view["t1"][MON][1]
        self.assertEqual((b.geometry.top, b.geometry.left, b.geometry.width), (90.0, 50.0, 50.0))
        self.assertIsNone(build_view(_fixture(), DAYS, WINDOW)["t1"][MON][0].geometry)

    def test_invalid_interval_is_reported_by_id(self) -> None:
        appts = _fixture() + [_appt("broken", 600, 600, "t1")]
        with self.assertRaises(InvalidIntervalError) as cm:
            build_view(appts, DAYS, WINDOW)
        self.assertEqual(cm.exception.appointment_id, "broken")

        with self.assertRaises(InvalidIntervalError):
            build_view([_appt("rev", 700, 600, "t1")], DAYS, WINDOW)

    def test_inverted_window_is_rejected(self) -> None:
        for open_min, close_min in ((1080, 480), (600, 600), (0, 1441)):
            with self.assertRaises(InvalidWindowError, msg=f"{open_min}-{close_min}"):
                build_view(_fixture(), DAYS, BusinessWindow(open_min, close_min, tz="UTC"))

    def test_duplicate_ids_are_rejected(self) -> None:
        with self.assertRaises(DuplicateAppointmentError) as cm:
            build_view(_fixture() + [_appt("A", 0, 10, "t2")], DAYS, WINDOW)
        self.assertEqual(cm.exception.appointment_id, "A")

    def test_input_is_not_mutated_and_order_does_not_matter(self) -> None:
        appts = _fixture()
        before = copy.deepcopy(appts)
        first = _records(build_view(appts, DAYS, WINDOW))
        self.assertEqual(appts, before)
        self.assertEqual(_records(build_view(list(reversed(appts)), DAYS, WINDOW)), first)

    def test_synthetic_cells_keep_lane_invariants(self) -> None:
        appts = synthetic_appointments(250, seed=7)
        days = [dt.date(2024, 1, 1) + dt.timedelta(days=i) for i in range(7)]
        view = build_view(appts, days, WINDOW)
        n = 0
        for row in view.values():
            for blocks in row.values():
                if not blocks:
                    continue
                n += len(blocks)
                ivs = [b.interval for b in blocks]
                self.assertEqual({b.lane_count for b in blocks}, {max_overlap(ivs)})
                for i, x in enumerate(blocks):
                    for y in blocks[i + 1:]:
                        if x.lane_index == y.lane_index:
                            self.assertTrue(
                                x.interval.end_offset_min <= y.start_offset_min
                                or y.interval.end_offset_min <= x.start_offset_min
                            )
        self.assertGreater(n, 50)


class TestDaySummaryContract(unittest.TestCase):
    def test_summary_for_overlapping_cell(self) -> None:
        view = build_view(_fixture(), DAYS, WINDOW)
        s = summarize_day(view["t1"][MON], WINDOW)
        self.assertEqual(s.block_count, 3)
        self.assertEqual(s.lane_count, 2)
        self.assertEqual(s.load_min, 180)
        self.assertEqual(s.busy_min, 120)
        self.assertEqual(s.overlap_count, 3)
        self.assertEqual(s.gaps, ((0, 60), (180, 600)))

    def test_summary_for_empty_and_full_cells(self) -> None:
        s = summarize_day([], WINDOW)
        self.assertEqual((s.block_count, s.lane_count, s.load_min), (0, 0, 0))
        self.assertEqual(s.gaps, ((0, 600),))

        view = build_view(_fixture(), DAYS, WINDOW)
        self.assertEqual(summarize_day(view["t2"][TUE], WINDOW).gaps, ())


class TestWeekHelpersContract(unittest.TestCase):
    def test_week_days(self) -> None:
        self.assertEqual(week_days(WED), [MON + dt.timedelta(days=i) for i in range(5)])
        self.assertEqual(
            week_days(WED, show_weekends=True),
            [dt.date(2024, 3, 31) + dt.timedelta(days=i) for i in range(7)],
        )
        self.assertEqual(week_days(dt.date(2024, 3, 31))[0], MON)
        self.assertEqual(week_days(dt.date(2024, 4, 6), show_weekends=True)[-1], dt.date(2024, 4, 6))

    def test_weekend_detection(self) -> None:
        weekday_only = [_appt("A", 9 * 60, 10 * 60, "t1")]
        self.assertFalse(has_weekend_appointments(weekday_only, WED, WINDOW))

        saturday = weekday_only + [_appt("S", 5 * 1440 + 10 * 60, 5 * 1440 + 11 * 60, "t1")]
        self.assertTrue(has_weekend_appointments(saturday, WED, WINDOW))

        # Saturday 20:00-22:00 never shows inside the window.
        after_hours = [_appt("N", 5 * 1440 + 20 * 60, 5 * 1440 + 22 * 60, "t1")]
        self.assertFalse(has_weekend_appointments(after_hours, WED, WINDOW))


if __name__ == "__main__":
    unittest.main(verbosity=2)
