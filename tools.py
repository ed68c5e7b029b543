from typing import Iterable

from models import WorkoutSet


class MathTools:
    """Provides essential mathematical utilities for workout calculations."""

    @staticmethod
    def volume(sets: Iterable[WorkoutSet]) -> float:
        """Compute training volume as the sum of reps times weight."""
        vol = 0.0
        for s in sets:
            vol += s.reps * s.weight
        return vol

    @staticmethod
    def best_weight(sets: Iterable[WorkoutSet]) -> float:
        """Return the heaviest weight among ``sets`` or 0 when there are none."""
        return max((s.weight for s in sets), default=0.0)

    @staticmethod
    def format_number(value: float) -> str:
        """Render whole numbers without a trailing ``.0``."""
        if float(value).is_integer():
            return str(int(value))
        return repr(float(value))
