import os
import sys
import json
import sqlite3
import unittest
import yaml

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from db import STORAGE_KEY, BlobRepository, Database, SettingsRepository, WorkoutLogRepository
from models import Exercise, WorkoutSet, log_to_json


class WorkoutLogRepositoryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_log_repo.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)
        self.blobs = BlobRepository(self.db_path)
        self.repo = WorkoutLogRepository(self.blobs)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_absent_blob_loads_empty(self) -> None:
        self.assertEqual(self.repo.load(), {})
        self.assertEqual(self.repo.current, {})

    def test_save_and_reload(self) -> None:
        log = {
            "2024-05-01": [
                Exercise(
                    name="Squat",
                    sets=[WorkoutSet(reps=10, weight=60.0), WorkoutSet(reps=8, weight=65.5)],
                )
            ],
            "2024-05-02": [],
        }
        self.repo.save(log)
        reloaded = WorkoutLogRepository(BlobRepository(self.db_path)).load()
        self.assertEqual(reloaded, log)
        self.assertEqual(self.blobs.get(STORAGE_KEY), log_to_json(log))

    def test_blob_is_plain_json(self) -> None:
        self.repo.save({"2024-05-01": [Exercise(id="e1", name="Row", sets=[WorkoutSet(id="s1")])]})
        data = json.loads(self.blobs.get(STORAGE_KEY))
        self.assertEqual(
            data,
            {
                "2024-05-01": [
                    {
                        "id": "e1",
                        "name": "Row",
                        "sets": [{"id": "s1", "reps": 10, "weight": 0.0}],
                    }
                ]
            },
        )

    def test_accepts_integer_weights(self) -> None:
        self.blobs.set(
            STORAGE_KEY,
            '{"2024-05-01": [{"id": "a", "name": "Row", "sets": [{"id": "b", "reps": 5, "weight": 40}]}]}',
        )
        log = self.repo.load()
        self.assertEqual(log["2024-05-01"][0].sets[0].weight, 40.0)

    def test_malformed_blob_loads_empty(self) -> None:
        self.blobs.set(STORAGE_KEY, "not json")
        with self.assertLogs("db", level="WARNING"):
            self.assertEqual(self.repo.load(), {})

    def test_wrong_structure_loads_empty(self) -> None:
        bad = [
            '{"2024-05-01": [{"id": "a", "name": "Row", "sets": [{"id": "b", "reps": "5", "weight": 1}]}]}',
            '{"May 1": []}',
            '{"2024-02-30": []}',
            '{"2024-13-45": []}',
            '{"2024-05-01": {"id": "a"}}',
            "[]",
        ]
        for raw in bad:
            self.blobs.set(STORAGE_KEY, raw)
            with self.assertLogs("db", level="WARNING"):
                self.assertEqual(self.repo.load(), {})

    def test_custom_storage_key(self) -> None:
        other = WorkoutLogRepository(self.blobs, storage_key="other_log")
        other.save({"2024-05-01": []})
        self.assertEqual(self.repo.load(), {})
        self.blobs.delete("other_log")
        self.assertIsNone(self.blobs.get("other_log"))


class SchemaTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_schema.db"
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def tearDown(self) -> None:
        if os.path.exists(self.db_path):
            os.remove(self.db_path)

    def test_tables_created(self) -> None:
        Database(self.db_path)
        conn = sqlite3.connect(self.db_path)
        names = {
            r[0]
            for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table';")
        }
        conn.close()
        self.assertTrue({"blobs", "settings"}.issubset(names))

    def test_mismatched_table_rejected(self) -> None:
        conn = sqlite3.connect(self.db_path)
        conn.execute("CREATE TABLE blobs (key TEXT, payload BLOB);")
        conn.commit()
        conn.close()
        with self.assertRaises(RuntimeError):
            Database(self.db_path)


class SettingsRepositoryTest(unittest.TestCase):
    def setUp(self) -> None:
        self.db_path = "test_settings_repo.db"
        self.yaml_path = "test_settings_repo.yaml"
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def tearDown(self) -> None:
        for path in (self.db_path, self.yaml_path):
            if os.path.exists(path):
                os.remove(path)

    def test_defaults_written_to_yaml(self) -> None:
        repo = SettingsRepository(self.db_path, self.yaml_path)
        self.assertEqual(repo.get_text("language", ""), "en")
        self.assertEqual(repo.get_int("summary_days", 0), 7)
        with open(self.yaml_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        self.assertEqual(data["weight_unit"], "kg")
        self.assertEqual(data["summary_days"], 7)

    def test_yaml_edits_are_picked_up(self) -> None:
        repo = SettingsRepository(self.db_path, self.yaml_path)
        with open(self.yaml_path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"language": "zh-TW", "summary_days": 14}, f)
        self.assertEqual(repo.get_text("language", "en"), "zh-TW")
        self.assertEqual(repo.get_int("summary_days", 7), 14)

    def test_invalid_yaml_rejected(self) -> None:
        with open(self.yaml_path, "w", encoding="utf-8") as f:
            yaml.safe_dump({"summary_days": 0}, f)
        with self.assertRaises(ValueError):
            SettingsRepository(self.db_path, self.yaml_path)

    def test_set_values(self) -> None:
        repo = SettingsRepository(self.db_path, self.yaml_path)
        repo.set_text("weight_unit", "lb")
        repo.set_int("summary_days", 3)
        settings = repo.all_settings()
        self.assertEqual(settings["weight_unit"], "lb")
        self.assertEqual(settings["summary_days"], 3)
        with open(self.yaml_path, "r", encoding="utf-8") as f:
            self.assertEqual(yaml.safe_load(f)["weight_unit"], "lb")


if __name__ == "__main__":
    unittest.main()
