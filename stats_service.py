from __future__ import annotations
import datetime
from typing import Dict, List

from date_utils import as_date_key, date_key, days_in_month, last_n_days
from models import WorkoutLog
from tools import MathTools


def _best(exercise) -> str:
    return MathTools.format_number(MathTools.best_weight(exercise.sets))


class StatisticsService:
    """Compute derived views of a workout log.

    Every method works on the log value it is given; nothing is cached, so
    callers simply pass the latest snapshot.
    """

    @staticmethod
    def has_workout(log: WorkoutLog, date: str | datetime.date) -> bool:
        return bool(log.get(as_date_key(date)))

    @staticmethod
    def total_workout_days(log: WorkoutLog) -> int:
        """Count dates that hold at least one exercise."""
        return sum(1 for exercises in log.values() if exercises)

    @staticmethod
    def day_summary(log: WorkoutLog, date: str | datetime.date) -> Dict[str, float]:
        exercises = log.get(as_date_key(date), [])
        return {
            "exercises": len(exercises),
            "total_sets": sum(len(ex.sets) for ex in exercises),
            "total_volume": sum(MathTools.volume(ex.sets) for ex in exercises),
        }

    @staticmethod
    def weekly_stats(
        log: WorkoutLog, today: datetime.date | None = None
    ) -> List[Dict[str, object]]:
        """Return set counts and volume for the last 7 days, oldest first."""
        stats = []
        for day in last_n_days(7, today):
            summary = StatisticsService.day_summary(log, day)
            stats.append(
                {
                    "date": date_key(day),
                    "label": f"{day.month}/{day.day}",
                    "total_sets": summary["total_sets"],
                    "total_volume": summary["total_volume"],
                }
            )
        return stats

    @staticmethod
    def weekly_total_sets(log: WorkoutLog, today: datetime.date | None = None) -> int:
        return sum(d["total_sets"] for d in StatisticsService.weekly_stats(log, today))

    @staticmethod
    def leading_blank_days(year: int, month: int) -> int:
        """Number of empty cells before day 1 in a Sunday-first grid."""
        return (datetime.date(year, month, 1).weekday() + 1) % 7

    @staticmethod
    def month_calendar(log: WorkoutLog, year: int, month: int) -> List[Dict[str, object]]:
        return [
            {
                "date": date_key(day),
                "day": day.day,
                "weekday": (day.weekday() + 1) % 7,
                "has_workout": StatisticsService.has_workout(log, day),
            }
            for day in days_in_month(year, month)
        ]

    @staticmethod
    def recent_summary_text(
        log: WorkoutLog, max_days: int = 7, weight_unit: str = "kg"
    ) -> str:
        """Summarize the most recent logged dates, newest first, one line each."""
        dates = sorted((d for d, exs in log.items() if exs), reverse=True)[: max(max_days, 0)]
        lines = []
        for day in dates:
            details = ", ".join(
                f"{ex.name}: {len(ex.sets)} sets (Best: {_best(ex)}{weight_unit})"
                for ex in log[day]
            )
            lines.append(f"Date: {day} | Activities: {details}")
        return "\n".join(lines)
