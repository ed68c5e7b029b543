from __future__ import annotations
import datetime
import logging
from typing import List

from advice_service import CREDENTIAL_MISSING, AdviceService
from date_utils import as_date_key
from db import WorkoutLogRepository
from localization import translator
from models import (
    DEFAULT_REPS,
    DEFAULT_WEIGHT,
    Exercise,
    WorkoutLog,
    WorkoutSet,
)

logger = logging.getLogger(__name__)

SET_FIELDS = ("reps", "weight")


def new_set(reps: int = DEFAULT_REPS, weight: float = DEFAULT_WEIGHT) -> WorkoutSet:
    return WorkoutSet(reps=reps, weight=weight)


def new_exercise(name: str) -> Exercise:
    """Return an exercise seeded with a single default set."""
    return Exercise(name=name, sets=[new_set()])


def set_exercises_for_date(
    log: WorkoutLog, date: str, exercises: List[Exercise]
) -> WorkoutLog:
    """Return a copy of ``log`` with ``date`` mapped to ``exercises``."""
    updated = dict(log)
    updated[date] = list(exercises)
    return updated


def copy_date(log: WorkoutLog, source: str, target: str) -> WorkoutLog:
    """Append fresh duplicates of ``source``'s exercises to ``target``.

    Copying a date onto itself doubles its entries.
    """
    copied = [ex.duplicate() for ex in log.get(source, [])]
    updated = dict(log)
    updated[target] = list(log.get(target, [])) + copied
    return updated


def add_exercise(exercises: List[Exercise], name: str) -> List[Exercise]:
    if not name or not name.strip():
        return list(exercises)
    return list(exercises) + [new_exercise(name.strip())]


def remove_exercise(exercises: List[Exercise], index: int) -> List[Exercise]:
    return [ex for i, ex in enumerate(exercises) if i != index]


def rename_exercise(exercises: List[Exercise], index: int, name: str) -> List[Exercise]:
    if not name or not name.strip():
        return list(exercises)
    updated = list(exercises)
    updated[index] = updated[index].model_copy(update={"name": name.strip()})
    return updated


def _replace_sets(
    exercises: List[Exercise], index: int, sets: List[WorkoutSet]
) -> List[Exercise]:
    updated = list(exercises)
    updated[index] = updated[index].model_copy(update={"sets": sets})
    return updated


def add_set(exercises: List[Exercise], index: int) -> List[Exercise]:
    """Append a set that repeats the previous set's reps and weight."""
    sets = exercises[index].sets
    if sets:
        added = new_set(sets[-1].reps, sets[-1].weight)
    else:
        added = new_set()
    return _replace_sets(exercises, index, list(sets) + [added])


def remove_set(exercises: List[Exercise], index: int, set_index: int) -> List[Exercise]:
    sets = [s for i, s in enumerate(exercises[index].sets) if i != set_index]
    return _replace_sets(exercises, index, sets)


def update_set(
    exercises: List[Exercise],
    index: int,
    set_index: int,
    field: str,
    value: float,
) -> List[Exercise]:
    """Change one numeric field of one set; invalid values raise ``ValueError``."""
    if field not in SET_FIELDS:
        raise ValueError(f"unknown set field: {field}")
    sets = list(exercises[index].sets)
    current = sets[set_index]
    data = {"id": current.id, "reps": current.reps, "weight": current.weight}
    data[field] = value
    sets[set_index] = WorkoutSet(**data)
    return _replace_sets(exercises, index, sets)


class WorkoutLogService:
    """Entry points used by the presentation layers."""

    def __init__(
        self, repo: WorkoutLogRepository, advisor: AdviceService | None = None
    ) -> None:
        self.repo = repo
        self.advisor = advisor

    def snapshot(self) -> WorkoutLog:
        return self.repo.current

    def exercises_for(self, date: str | datetime.date) -> List[Exercise]:
        return list(self.repo.current.get(as_date_key(date), []))

    def save(self, date: str | datetime.date, exercises: List[Exercise]) -> WorkoutLog:
        key = as_date_key(date)
        log = set_exercises_for_date(self.repo.current, key, exercises)
        self.repo.save(log)
        logger.info("Saved %d exercises for %s", len(exercises), key)
        return log

    def copy(
        self, source: str | datetime.date, target: str | datetime.date
    ) -> WorkoutLog:
        src = as_date_key(source)
        dst = as_date_key(target)
        log = copy_date(self.repo.current, src, dst)
        self.repo.save(log)
        logger.info("Copied %s to %s", src, dst)
        return log

    async def request_advice(self, date: str | datetime.date) -> str:
        if self.advisor is None:
            logger.warning("No advice service configured")
            return translator.gettext(CREDENTIAL_MISSING)
        return await self.advisor.request_advice(self.repo.current, as_date_key(date))
