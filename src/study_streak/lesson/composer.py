"""Daily lesson composition from a per-level exercise bank."""

from collections.abc import Sequence
from typing import Protocol, TypeVar

from study_streak.models.lesson import (
    CaseStudyStep,
    ExerciseBank,
    ExerciseCategory,
    ExplanationStep,
    FlashcardStep,
    LessonStep,
    MultipleChoiceStep,
)
from study_streak.models.user import Feeling

T = TypeVar("T")

LESSON_THEME = "Le Droit des Obligations"

# Case-study affinity per feeling: 0 demotes every case study, 2 keeps them all.
FEELING_AFFINITY: dict[Feeling, float] = {
    Feeling.VERY_LOW: 0.0,
    Feeling.LOW: 0.5,
    Feeling.MID: 1.0,
    Feeling.HIGH: 1.5,
    Feeling.VERY_HIGH: 2.0,
}

CATEGORIES = (
    ExerciseCategory.MULTIPLE_CHOICE,
    ExerciseCategory.FLASHCARD,
    ExerciseCategory.CASE_STUDY,
)

_STEP_TYPES = {
    ExerciseCategory.MULTIPLE_CHOICE: MultipleChoiceStep,
    ExerciseCategory.FLASHCARD: FlashcardStep,
    ExerciseCategory.CASE_STUDY: CaseStudyStep,
}


class RandomSource(Protocol):
    """Subset of ``random.Random`` the composer relies on."""

    def random(self) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


class LessonCompositionError(Exception):
    """Base class for lesson composition failures."""


class InvalidLevelError(LessonCompositionError):
    def __init__(self, level: str):
        super().__init__(f"No exercises for level {level!r}")
        self.level = level


class EmptyCategoryError(LessonCompositionError):
    def __init__(self, level: str, category: ExerciseCategory):
        super().__init__(f"No {category.value} exercises for level {level!r}")
        self.level = level
        self.category = category


def exercise_count(duration_preference: int) -> int:
    """One exercise per 10 minutes of session, at least one."""
    return max(1, duration_preference // 10)


def explanation_text(level: str, duration_preference: int) -> str:
    text = f"Leçon sur le thème : {LESSON_THEME} - Année {level}."
    if duration_preference >= 30:
        text += f" Explication détaillée pour {duration_preference} minutes de session."
    elif duration_preference >= 20:
        text += f" Explication modérée pour {duration_preference} minutes de session."
    else:
        text += f" Explication courte pour {duration_preference} minutes de session."
    return text


def _pick_category(affinity: float, rng: RandomSource) -> ExerciseCategory:
    category = rng.choice(CATEGORIES)
    if category == ExerciseCategory.CASE_STUDY and rng.random() < 1 - affinity / 2:
        category = rng.choice(
            (ExerciseCategory.MULTIPLE_CHOICE, ExerciseCategory.FLASHCARD)
        )
    return category


def compose_lesson(
    level: str,
    feeling: Feeling,
    duration_preference: int,
    exercise_bank: ExerciseBank,
    rng: RandomSource,
) -> list[LessonStep]:
    """Build the ordered steps of a lesson: one explanation, then exercises.

    Low feelings make case studies less likely: a drawn case study is
    demoted to a multiple-choice question or a flashcard with probability
    ``1 - affinity / 2``.

    Args:
        level: Key into ``exercise_bank``.
        feeling: Self-reported feeling, drives the case-study affinity.
        duration_preference: Session length in minutes.
        exercise_bank: Exercises per level and category.
        rng: Injected randomness, e.g. ``random.Random(seed)``.

    Returns:
        ``1 + exercise_count(duration_preference)`` steps.

    Raises:
        InvalidLevelError: ``level`` is not in the bank.
        EmptyCategoryError: A selected category has no exercises.
    """
    if level not in exercise_bank:
        raise InvalidLevelError(level)
    exercises = exercise_bank[level]
    affinity = FEELING_AFFINITY[Feeling(feeling)]

    steps: list[LessonStep] = [
        ExplanationStep(
            title="Introduction",
            text=explanation_text(level, duration_preference),
        )
    ]
    for i in range(exercise_count(duration_preference)):
        category = _pick_category(affinity, rng)
        pool = exercises.for_category(category)
        if not pool:
            raise EmptyCategoryError(level, category)
        step_type = _STEP_TYPES[category]
        steps.append(step_type(title=f"Exercise {i + 1}", exercise=rng.choice(pool)))

    return steps
