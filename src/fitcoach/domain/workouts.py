"""Workout template models.

Exercise composition is a closed tagged union keyed by ``type``. Payloads are
validated once, when rows are read from the store, so everything downstream
works with one of the variant models below.
"""

from dataclasses import dataclass, field
from typing import Annotated, Literal
from uuid import UUID

from pydantic import BaseModel, Field, TypeAdapter


class ExerciseRef(BaseModel):
    """An exercise taking part in a grouped set."""

    exercise_id: UUID
    reps: str | None = None
    weight_kg: float | None = Field(default=None, ge=0)


class DropStep(BaseModel):
    """One drop within a drop set."""

    reps: str
    weight_kg: float | None = Field(default=None, ge=0)
    load_percentage: float | None = Field(default=None, gt=0, le=100)


class StraightSet(BaseModel):
    type: Literal["straight_set"] = "straight_set"
    sets: int = Field(ge=1)
    reps: str
    rest_seconds: int | None = Field(default=None, ge=0)


class Superset(BaseModel):
    type: Literal["superset"]
    superset_exercise_id: UUID
    sets: int = Field(ge=1)
    reps: str
    superset_reps: str | None = None
    rest_seconds: int | None = Field(default=None, ge=0)


class Circuit(BaseModel):
    type: Literal["circuit"]
    circuit_sets: list[ExerciseRef] = Field(min_length=2)
    rounds: int = Field(ge=1)
    rest_between_rounds_seconds: int | None = Field(default=None, ge=0)


class GiantSet(BaseModel):
    type: Literal["giant_set"]
    giant_set_exercises: list[ExerciseRef] = Field(min_length=3)
    sets: int = Field(ge=1)
    rest_seconds: int | None = Field(default=None, ge=0)


class Amrap(BaseModel):
    type: Literal["amrap"]
    duration_minutes: int = Field(ge=1)
    target_reps: int | None = Field(default=None, ge=1)


class Tabata(BaseModel):
    type: Literal["tabata"]
    work_seconds: int = Field(default=20, ge=1)
    rest_seconds: int = Field(default=10, ge=0)
    rounds: int = Field(default=8, ge=1)


class DropSet(BaseModel):
    type: Literal["drop_set"]
    drop_sets: list[DropStep] = Field(min_length=1)


ExerciseComposition = Annotated[
    StraightSet | Superset | Circuit | GiantSet | Amrap | Tabata | DropSet,
    Field(discriminator="type"),
]

composition_adapter: TypeAdapter[ExerciseComposition] = TypeAdapter(
    ExerciseComposition
)


@dataclass(frozen=True)
class WorkoutExercise:
    """A validated exercise entry within a template."""

    exercise_id: UUID
    order_index: int
    composition: StraightSet | Superset | Circuit | GiantSet | Amrap | Tabata | DropSet


@dataclass(frozen=True)
class InvalidExercise:
    """A template row whose composition payload failed validation."""

    exercise_id: UUID | None
    order_index: int
    error: str


@dataclass(frozen=True)
class WorkoutTemplate:
    """Resolved workout template."""

    id: UUID
    source: str
    exercises: list[WorkoutExercise] = field(default_factory=list)
    invalid_exercises: list[InvalidExercise] = field(default_factory=list)
