from __future__ import annotations
import uuid
from typing import Annotated, Dict, List

from pydantic import AfterValidator, BaseModel, Field, TypeAdapter

from date_utils import parse_date_key

DEFAULT_REPS = 10
DEFAULT_WEIGHT = 0.0


def _check_date_key(key: str) -> str:
    parse_date_key(key)
    return key


DateKey = Annotated[str, AfterValidator(_check_date_key)]


def new_id() -> str:
    """Return a fresh random identity token."""
    return uuid.uuid4().hex


class WorkoutSet(BaseModel):
    """One performance unit of an exercise."""

    id: str = Field(default_factory=new_id, strict=True)
    reps: int = Field(default=DEFAULT_REPS, ge=0, strict=True)
    weight: float = Field(
        default=DEFAULT_WEIGHT, ge=0, strict=True, allow_inf_nan=False
    )


class Exercise(BaseModel):
    """A named movement performed on a given date."""

    id: str = Field(default_factory=new_id, strict=True)
    name: str = Field(min_length=1, strict=True)
    sets: List[WorkoutSet] = Field(default_factory=list)

    def duplicate(self) -> "Exercise":
        """Return a deep copy carrying new identities."""
        return Exercise(
            id=new_id(),
            name=self.name,
            sets=[WorkoutSet(reps=s.reps, weight=s.weight) for s in self.sets],
        )


WorkoutLog = Dict[str, List[Exercise]]

EXERCISE_LIST = TypeAdapter(List[Exercise])
WORKOUT_LOG = TypeAdapter(Dict[DateKey, List[Exercise]])


def log_to_json(log: WorkoutLog) -> str:
    return WORKOUT_LOG.dump_json(log).decode("utf-8")


def log_from_json(text: str) -> WorkoutLog:
    """Parse and validate a serialized log, raising ``ValueError`` on bad input."""
    return WORKOUT_LOG.validate_json(text)


def log_to_dict(log: WorkoutLog) -> dict:
    return WORKOUT_LOG.dump_python(log, mode="json")
