import sqlite3
import aiosqlite
import logging
from contextlib import contextmanager, asynccontextmanager
from typing import List, Tuple, Optional

from pydantic import ValidationError

from config import YamlConfig
from models import WorkoutLog, log_from_json, log_to_json
from settings_schema import validate_settings

logger = logging.getLogger(__name__)

STORAGE_KEY = "fittrack_log_v1"


class Database:
    """Provides SQLite connection management and schema initialization."""

    _TABLE_DEFINITIONS = {
        "blobs": (
            """CREATE TABLE blobs (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                );""",
            ["key", "value"],
        ),
        "settings": (
            """CREATE TABLE settings (
                    key TEXT PRIMARY KEY,
                    value TEXT
                );""",
            ["key", "value"],
        ),
    }

    _DEFAULT_SETTINGS = {
        "language": "en",
        "weight_unit": "kg",
        "ai_model": "gemini-3-flash-preview",
        "advice_language": "Traditional Chinese (zh-TW)",
        "summary_days": "7",
    }

    def __init__(self, db_path: str = "workout.db") -> None:
        self._db_path = db_path
        self._ensure_schema()
        self._init_settings()

    @contextmanager
    def _connection(self):
        connection = sqlite3.connect(self._db_path)
        try:
            yield connection
            connection.commit()
        finally:
            connection.close()

    def _ensure_schema(self) -> None:
        with self._connection() as conn:
            for table, (sql, columns) in self._TABLE_DEFINITIONS.items():
                self._ensure_table(conn, table, sql, columns)

    def _ensure_table(
        self, conn: sqlite3.Connection, table: str, sql: str, columns: List[str]
    ) -> None:
        cur = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name=?;", (table,)
        )
        if cur.fetchone() is None:
            conn.execute(sql)
            return
        cur = conn.execute(f"PRAGMA table_info({table});")
        existing_cols = [row[1] for row in cur.fetchall()]
        if existing_cols != columns:
            raise RuntimeError(
                f"table {table} has columns {existing_cols}, expected {columns}"
            )

    def _init_settings(self) -> None:
        with self._connection() as conn:
            for key, value in self._DEFAULT_SETTINGS.items():
                conn.execute(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?);",
                    (key, value),
                )


class BaseRepository(Database):
    """Base repository providing helper methods."""

    def execute(self, query: str, params: Tuple = ()) -> int:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.lastrowid

    def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        with self._connection() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return cursor.fetchall()


class AsyncDatabase(Database):
    """Provides asynchronous connection management."""

    @asynccontextmanager
    async def _async_connection(self):
        conn = await aiosqlite.connect(self._db_path)
        try:
            yield conn
            await conn.commit()
        finally:
            await conn.close()


class AsyncBaseRepository(AsyncDatabase):
    """Asynchronous variant of BaseRepository using aiosqlite."""

    async def execute(self, query: str, params: Tuple = ()) -> int:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            await conn.commit()
            return cursor.lastrowid

    async def fetch_all(self, query: str, params: Tuple = ()) -> List[Tuple]:
        async with self._async_connection() as conn:
            cursor = await conn.execute(query, params)
            rows = await cursor.fetchall()
            return rows


class BlobRepository(BaseRepository):
    """Named text slots backing the persisted log."""

    def get(self, key: str) -> Optional[str]:
        rows = self.fetch_all("SELECT value FROM blobs WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    def set(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO blobs (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )

    def delete(self, key: str) -> None:
        self.execute("DELETE FROM blobs WHERE key = ?;", (key,))


class AsyncBlobRepository(AsyncBaseRepository):
    """Async repository for named text slots."""

    async def get(self, key: str) -> Optional[str]:
        rows = await self.fetch_all("SELECT value FROM blobs WHERE key = ?;", (key,))
        return rows[0][0] if rows else None

    async def set(self, key: str, value: str) -> None:
        await self.execute(
            "INSERT INTO blobs (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )

    async def delete(self, key: str) -> None:
        await self.execute("DELETE FROM blobs WHERE key = ?;", (key,))


def _decode_log(raw: Optional[str], key: str) -> WorkoutLog:
    if raw is None:
        return {}
    try:
        return log_from_json(raw)
    except ValidationError as e:
        logger.warning(
            "Stored log %s is malformed, starting empty (%d errors)", key, e.error_count()
        )
        return {}


class WorkoutLogRepository:
    """Load and persist the whole workout log as a single blob."""

    def __init__(self, blobs: BlobRepository, storage_key: str = STORAGE_KEY) -> None:
        self.blobs = blobs
        self.storage_key = storage_key
        self._current: WorkoutLog | None = None

    @property
    def current(self) -> WorkoutLog:
        if self._current is None:
            return self.load()
        return self._current

    def load(self) -> WorkoutLog:
        """Read the stored log, falling back to an empty one."""
        self._current = _decode_log(self.blobs.get(self.storage_key), self.storage_key)
        return self._current

    def save(self, log: WorkoutLog) -> None:
        self.blobs.set(self.storage_key, log_to_json(log))
        self._current = log


class AsyncWorkoutLogRepository:
    """Async variant of :class:`WorkoutLogRepository`."""

    def __init__(
        self, blobs: AsyncBlobRepository, storage_key: str = STORAGE_KEY
    ) -> None:
        self.blobs = blobs
        self.storage_key = storage_key
        self.current: WorkoutLog = {}

    async def load(self) -> WorkoutLog:
        self.current = _decode_log(await self.blobs.get(self.storage_key), self.storage_key)
        return self.current

    async def save(self, log: WorkoutLog) -> None:
        await self.blobs.set(self.storage_key, log_to_json(log))
        self.current = log


class SettingsRepository(BaseRepository):
    """Repository for general application settings synchronized with YAML."""

    _INT_KEYS = {"summary_days"}

    def __init__(
        self, db_path: str = "workout.db", yaml_path: str = "settings.yaml"
    ) -> None:
        super().__init__(db_path)
        self._yaml = YamlConfig(yaml_path)
        self._sync_from_yaml()
        self._sync_to_yaml()

    def _raw_all_settings(self) -> dict:
        rows = self.fetch_all("SELECT key, value FROM settings ORDER BY key;")
        result: dict[str, int | str] = {}
        for k, v in rows:
            if k in self._INT_KEYS:
                try:
                    result[k] = int(v)
                    continue
                except (TypeError, ValueError):
                    pass
            result[k] = v
        return result

    def _sync_from_yaml(self) -> None:
        data = self._yaml.load()
        if not data:
            return
        validate_settings(data)
        with self._connection() as conn:
            for key, value in data.items():
                conn.execute(
                    "INSERT INTO settings (key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
                    (key, str(value)),
                )

    def _sync_to_yaml(self) -> None:
        self._yaml.save(self._raw_all_settings())

    def get_text(self, key: str, default: str) -> str:
        self._sync_from_yaml()
        rows = self.fetch_all("SELECT value FROM settings WHERE key = ?;", (key,))
        return rows[0][0] if rows else default

    def set_text(self, key: str, value: str) -> None:
        self.execute(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value=excluded.value;",
            (key, value),
        )
        self._sync_to_yaml()

    def get_int(self, key: str, default: int) -> int:
        try:
            return int(float(self.get_text(key, str(default))))
        except ValueError:
            return default

    def set_int(self, key: str, value: int) -> None:
        self.set_text(key, str(value))

    def all_settings(self) -> dict:
        self._sync_from_yaml()
        return self._raw_all_settings()
