"""Exercise bank loading from YAML."""

from functools import lru_cache
from pathlib import Path

import yaml

from study_streak.config import get_settings
from study_streak.models.lesson import ExerciseBank, LevelExercises


def load_exercise_bank(path: Path | None = None) -> ExerciseBank:
    """Load and validate an exercise bank (level -> category -> items)."""
    bank_path = path or get_settings().exercise_bank_path
    if not bank_path.exists():
        raise FileNotFoundError(f"Exercise bank not found: {bank_path}")
    with open(bank_path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    levels = data.get("levels", {})
    return {
        str(level): LevelExercises.model_validate(items or {})
        for level, items in levels.items()
    }


@lru_cache(maxsize=1)
def get_exercise_bank() -> ExerciseBank:
    return load_exercise_bank()
