import os
import sys
import datetime
import unittest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from models import Exercise, WorkoutSet
from stats_service import StatisticsService
from tools import MathTools


def _log() -> dict:
    return {
        "2024-05-01": [
            Exercise(
                name="Squat",
                sets=[WorkoutSet(reps=10, weight=60.0), WorkoutSet(reps=8, weight=65.0)],
            )
        ]
    }


class EmptyLogTest(unittest.TestCase):
    def test_empty_log(self) -> None:
        self.assertEqual(StatisticsService.total_workout_days({}), 0)
        stats = StatisticsService.weekly_stats({})
        self.assertEqual(len(stats), 7)
        self.assertTrue(all(d["total_sets"] == 0 and d["total_volume"] == 0 for d in stats))
        self.assertFalse(StatisticsService.has_workout({}, datetime.date.today()))
        self.assertFalse(
            any(d["has_workout"] for d in StatisticsService.month_calendar({}, 2024, 5))
        )
        self.assertEqual(StatisticsService.recent_summary_text({}), "")


class StatisticsServiceTest(unittest.TestCase):
    def test_weekly_stats_window(self) -> None:
        today = datetime.date(2024, 5, 1)
        stats = StatisticsService.weekly_stats(_log(), today)
        self.assertEqual([d["date"] for d in stats][0], "2024-04-25")
        self.assertEqual(stats[-1]["date"], "2024-05-01")
        self.assertEqual(stats[-1]["label"], "5/1")
        self.assertEqual(stats[-1]["total_sets"], 2)
        self.assertEqual(stats[-1]["total_volume"], 10 * 60 + 8 * 65)
        self.assertEqual(StatisticsService.weekly_total_sets(_log(), today), 2)

    def test_weekly_stats_ignores_out_of_window_dates(self) -> None:
        log = _log()
        log["2023-01-01"] = list(log["2024-05-01"])
        log["2024-05-09"] = list(log["2024-05-01"])
        stats = StatisticsService.weekly_stats(log, datetime.date(2024, 5, 1))
        self.assertEqual(len(stats), 7)
        self.assertEqual(sum(d["total_sets"] for d in stats), 2)

    def test_has_workout_and_total_days(self) -> None:
        log = _log()
        log["2024-05-02"] = []
        self.assertTrue(StatisticsService.has_workout(log, "2024-05-01"))
        self.assertTrue(StatisticsService.has_workout(log, datetime.date(2024, 5, 1)))
        self.assertFalse(StatisticsService.has_workout(log, "2024-05-02"))
        self.assertFalse(StatisticsService.has_workout(log, "2024-05-03"))
        self.assertEqual(StatisticsService.total_workout_days(log), 1)

    def test_month_calendar(self) -> None:
        days = StatisticsService.month_calendar(_log(), 2024, 5)
        self.assertEqual(len(days), 31)
        self.assertEqual(days[0], {"date": "2024-05-01", "day": 1, "weekday": 3, "has_workout": True})
        self.assertFalse(days[1]["has_workout"])
        # 2024-05-01 is a Wednesday
        self.assertEqual(StatisticsService.leading_blank_days(2024, 5), 3)
        # 2024-09-01 is a Sunday
        self.assertEqual(StatisticsService.leading_blank_days(2024, 9), 0)

    def test_recent_summary_text(self) -> None:
        text = StatisticsService.recent_summary_text(_log())
        self.assertIn("Squat: 2 sets (Best: 65kg)", text)
        self.assertEqual(text, "Date: 2024-05-01 | Activities: Squat: 2 sets (Best: 65kg)")

    def test_recent_summary_orders_and_limits(self) -> None:
        log = {}
        for day in range(1, 10):
            log[f"2024-05-{day:02d}"] = [
                Exercise(name="Row", sets=[WorkoutSet(reps=5, weight=42.5)])
            ]
        log["2024-05-10"] = []
        lines = StatisticsService.recent_summary_text(log, 3).split("\n")
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith("Date: 2024-05-09"))
        self.assertTrue(lines[2].startswith("Date: 2024-05-07"))
        self.assertIn("Row: 1 sets (Best: 42.5kg)", lines[0])
        self.assertEqual(StatisticsService.recent_summary_text(log, 0), "")

    def test_summary_weight_unit(self) -> None:
        text = StatisticsService.recent_summary_text(_log(), weight_unit="lb")
        self.assertIn("Squat: 2 sets (Best: 65lb)", text)

    def test_summary_for_exercise_without_sets(self) -> None:
        log = {"2024-05-01": [Exercise(name="Plank")]}
        self.assertIn("Plank: 0 sets (Best: 0kg)", StatisticsService.recent_summary_text(log))

    def test_day_summary(self) -> None:
        summary = StatisticsService.day_summary(_log(), "2024-05-01")
        self.assertEqual(summary, {"exercises": 1, "total_sets": 2, "total_volume": 1120.0})


class MathToolsTestCase(unittest.TestCase):
    def test_volume(self) -> None:
        sets = [WorkoutSet(reps=10, weight=100.0), WorkoutSet(reps=5, weight=150.0)]
        self.assertEqual(MathTools.volume(sets), 10 * 100.0 + 5 * 150.0)
        self.assertEqual(MathTools.volume([]), 0.0)

    def test_best_weight(self) -> None:
        sets = [WorkoutSet(reps=10, weight=60.0), WorkoutSet(reps=8, weight=65.0)]
        self.assertEqual(MathTools.best_weight(sets), 65.0)
        self.assertEqual(MathTools.best_weight([]), 0.0)

    def test_format_number(self) -> None:
        self.assertEqual(MathTools.format_number(65.0), "65")
        self.assertEqual(MathTools.format_number(62.5), "62.5")
        self.assertEqual(MathTools.format_number(0), "0")


if __name__ == "__main__":
    unittest.main()
