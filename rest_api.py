from typing import List

from fastapi import FastAPI, HTTPException, Body

from advice_service import AdviceService, TextGenerator
from date_utils import parse_date_key, today_key
from db import BlobRepository, SettingsRepository, WorkoutLogRepository
from localization import translator
from log_service import WorkoutLogService
from models import Exercise, log_to_dict, EXERCISE_LIST
from stats_service import StatisticsService


class FitTrackAPI:
    """Provides REST endpoints for the workout log."""

    def __init__(
        self,
        db_path: str = "workout.db",
        yaml_path: str = "settings.yaml",
        *,
        generator: TextGenerator | None = None,
    ) -> None:
        self.db_path = db_path
        self.settings = SettingsRepository(db_path, yaml_path)
        translator.set_language(self.settings.get_text("language", "en"))
        self.blobs = BlobRepository(db_path)
        self.logs = WorkoutLogRepository(self.blobs)
        self.advisor = AdviceService.from_settings(self.settings, generator)
        self.service = WorkoutLogService(self.logs, self.advisor)
        self.statistics = StatisticsService()
        self.app = FastAPI(
            title="FitTrack API",
            description="REST API for workout logging and coaching",
        )
        self._setup_routes()

    @staticmethod
    def _date(key: str) -> str:
        try:
            parse_date_key(key)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return key

    def _exercises(self, key: str) -> list:
        return EXERCISE_LIST.dump_python(self.service.exercises_for(key), mode="json")

    def _setup_routes(self) -> None:
        @self.app.get("/health")
        def health():
            """Return API and database connection status."""
            try:
                self.blobs.fetch_all("SELECT 1;")
                return {"status": "ok"}
            except Exception as e:  # pragma: no cover - connectivity failure
                raise HTTPException(status_code=500, detail=str(e))

        @self.app.get("/log")
        def get_log():
            return log_to_dict(self.service.snapshot())

        @self.app.get("/log/{date}")
        def get_day(date: str):
            return self._exercises(self._date(date))

        @self.app.put("/log/{date}")
        def save_day(date: str, exercises: List[Exercise] = Body(...)):
            key = self._date(date)
            self.service.save(key, exercises)
            return self._exercises(key)

        @self.app.post("/log/{date}/copy")
        def copy_day(date: str, target: str):
            source = self._date(date)
            dest = self._date(target)
            self.service.copy(source, dest)
            return self._exercises(dest)

        @self.app.get("/calendar/{year}/{month}")
        def calendar_month(year: int, month: int):
            if not 1 <= month <= 12 or not 1 <= year <= 9999:
                raise HTTPException(status_code=400, detail="invalid month")
            return {
                "leading_blank_days": self.statistics.leading_blank_days(year, month),
                "days": self.statistics.month_calendar(
                    self.service.snapshot(), year, month
                ),
            }

        @self.app.get("/stats/weekly")
        def weekly_stats():
            return self.statistics.weekly_stats(self.service.snapshot())

        @self.app.get("/stats/overview")
        def overview():
            log = self.service.snapshot()
            return {
                "total_workout_days": self.statistics.total_workout_days(log),
                "weekly_sets": self.statistics.weekly_total_sets(log),
            }

        @self.app.get("/stats/summary")
        def summary(max_days: int = 7):
            text = self.statistics.recent_summary_text(
                self.service.snapshot(),
                max_days,
                self.settings.get_text("weight_unit", "kg"),
            )
            return {"summary": text}

        @self.app.post("/advice")
        async def advice(date: str | None = None):
            key = self._date(date) if date else today_key()
            return {"advice": await self.service.request_advice(key)}


def create_app() -> FastAPI:
    """Build the app for ``uvicorn --factory rest_api:create_app``."""
    import os

    return FitTrackAPI(
        db_path=os.environ.get("DB_PATH", "workout.db"),
        yaml_path=os.environ.get("YAML_PATH", "settings.yaml"),
    ).app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(create_app())
