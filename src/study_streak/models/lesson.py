"""Exercise and lesson step models."""

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

MIN_CASE_STUDY_ANSWER_LENGTH = 20


class ExerciseCategory(StrEnum):
    """Exercise categories a lesson draws from."""

    MULTIPLE_CHOICE = "multiple_choice"
    FLASHCARD = "flashcard"
    CASE_STUDY = "case_study"


class MultipleChoiceExercise(BaseModel):
    model_config = ConfigDict(frozen=True)

    question: str
    options: tuple[str, ...]
    answer: str
    rationale: str = ""

    @model_validator(mode="after")
    def _answer_in_options(self) -> "MultipleChoiceExercise":
        if self.answer not in self.options:
            raise ValueError("answer must be one of the options")
        return self

    def is_correct(self, choice: str) -> bool:
        return choice == self.answer


class FlashcardExercise(BaseModel):
    model_config = ConfigDict(frozen=True)

    front: str
    back: str
    hint: str | None = None


class CaseStudyExercise(BaseModel):
    model_config = ConfigDict(frozen=True)

    prompt: str
    hint: str = ""

    def accepts(self, answer: str) -> bool:
        """Case studies are not graded; only too-short analyses are refused."""
        return len(answer.strip()) >= MIN_CASE_STUDY_ANSWER_LENGTH


class LevelExercises(BaseModel):
    """Exercise pool for one level, split by category."""

    multiple_choice: list[MultipleChoiceExercise] = Field(default_factory=list)
    flashcard: list[FlashcardExercise] = Field(default_factory=list)
    case_study: list[CaseStudyExercise] = Field(default_factory=list)

    def for_category(
        self, category: ExerciseCategory
    ) -> list[MultipleChoiceExercise] | list[FlashcardExercise] | list[CaseStudyExercise]:
        return getattr(self, category.value)


ExerciseBank = dict[str, LevelExercises]


class ExplanationStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["explanation"] = "explanation"
    title: str
    text: str


class MultipleChoiceStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["multiple_choice"] = "multiple_choice"
    title: str
    exercise: MultipleChoiceExercise


class FlashcardStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["flashcard"] = "flashcard"
    title: str
    exercise: FlashcardExercise


class CaseStudyStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["case_study"] = "case_study"
    title: str
    exercise: CaseStudyExercise


LessonStep = Annotated[
    ExplanationStep | MultipleChoiceStep | FlashcardStep | CaseStudyStep,
    Field(discriminator="type"),
]
