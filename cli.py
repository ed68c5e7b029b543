import argparse
import asyncio
import logging
import os
import shutil

from advice_service import AdviceService
from date_utils import today_key
from db import BlobRepository, SettingsRepository, WorkoutLogRepository
from localization import translator
from log_service import WorkoutLogService, add_exercise, add_set, update_set
from models import log_from_json, log_to_json
from stats_service import StatisticsService
from tools import MathTools


def _service(db_path: str) -> WorkoutLogService:
    return WorkoutLogService(WorkoutLogRepository(BlobRepository(db_path)))


def export_log(db_path: str, out_path: str) -> None:
    log = _service(db_path).snapshot()
    with open(out_path, "w", encoding="utf-8") as f:
        f.write(log_to_json(log))


def import_log(json_path: str, db_path: str) -> bool:
    """Replace the stored log with a validated JSON export."""
    with open(json_path, "r", encoding="utf-8") as f:
        raw = f.read()
    try:
        log = log_from_json(raw)
    except ValueError as e:
        print(f"Invalid log file: {e}")
        return False
    _service(db_path).repo.save(log)
    return True


def backup_db(db_path: str, backup_path: str) -> None:
    shutil.copy(db_path, backup_path)


def restore_db(backup_path: str, db_path: str) -> None:
    shutil.copy(backup_path, db_path)


def demo_data(db_path: str) -> None:
    """Populate the log with a demo workout if it is empty."""
    service = _service(db_path)
    if service.snapshot():
        print("Log already contains workouts")
        return
    exercises = add_exercise([], "Squat")
    exercises = update_set(exercises, 0, 0, "weight", 60.0)
    exercises = add_set(exercises, 0)
    exercises = update_set(exercises, 0, 1, "reps", 8)
    exercises = update_set(exercises, 0, 1, "weight", 65.0)
    service.save(today_key(), exercises)
    print("Demo data inserted")


def copy_day(db_path: str, source: str, target: str) -> None:
    _service(db_path).copy(source, target)
    print(f"Copied {source} to {target}")


def print_weekly_stats(db_path: str) -> None:
    log = _service(db_path).snapshot()
    print(f"Total workout days: {StatisticsService.total_workout_days(log)}")
    for day in StatisticsService.weekly_stats(log):
        volume = MathTools.format_number(day["total_volume"])
        print(f"{day['date']}  sets={day['total_sets']}  volume={volume}")


def summary(db_path: str, yaml_path: str, days: int = 7) -> str:
    unit = SettingsRepository(db_path, yaml_path).get_text("weight_unit", "kg")
    log = _service(db_path).snapshot()
    return StatisticsService.recent_summary_text(log, days, unit) or "No recent history."


def advice(db_path: str, yaml_path: str, date: str | None = None) -> str:
    settings = SettingsRepository(db_path, yaml_path)
    translator.set_language(settings.get_text("language", "en"))
    service = WorkoutLogService(
        WorkoutLogRepository(BlobRepository(db_path)),
        AdviceService.from_settings(settings),
    )
    return asyncio.run(service.request_advice(date or today_key()))


def main() -> None:
    parser = argparse.ArgumentParser(description="Utility commands")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--db", default=os.environ.get("DB_PATH", "workout.db"))
    parser.add_argument("--yaml", default=os.environ.get("YAML_PATH", "settings.yaml"))
    sub = parser.add_subparsers(dest="cmd", required=True)

    exp = sub.add_parser("export")
    exp.add_argument("--out", default="workout_log.json")

    imp = sub.add_parser("import")
    imp.add_argument("path")

    bkp = sub.add_parser("backup")
    bkp.add_argument("--out", default="backup.db")

    rst = sub.add_parser("restore")
    rst.add_argument("--in", dest="src", default="backup.db")

    sub.add_parser("demo")

    cp = sub.add_parser("copy")
    cp.add_argument("source")
    cp.add_argument("target")

    sub.add_parser("stats")

    smry = sub.add_parser("summary")
    smry.add_argument("--days", type=int, default=7)

    adv = sub.add_parser("advice")
    adv.add_argument("--date", default=None)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.cmd == "export":
            export_log(args.db, args.out)
        elif args.cmd == "import":
            if not import_log(args.path, args.db):
                raise SystemExit(1)
        elif args.cmd == "backup":
            backup_db(args.db, args.out)
        elif args.cmd == "restore":
            restore_db(args.src, args.db)
        elif args.cmd == "demo":
            demo_data(args.db)
        elif args.cmd == "copy":
            copy_day(args.db, args.source, args.target)
        elif args.cmd == "stats":
            print_weekly_stats(args.db)
        elif args.cmd == "summary":
            print(summary(args.db, args.yaml, args.days))
        elif args.cmd == "advice":
            print(advice(args.db, args.yaml, args.date))
    except ValueError as e:
        print(f"Error: {e}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
