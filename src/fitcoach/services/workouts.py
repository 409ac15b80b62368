"""Workout template resolution."""

import json
import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from fitcoach.domain.workouts import (
    InvalidExercise,
    WorkoutExercise,
    WorkoutTemplate,
    composition_adapter,
)
from fitcoach.services.resolution import LookupResult, ResolutionChain

_logger = logging.getLogger(__name__)


class WorkoutTemplateRepository(Protocol):
    """Persistence interface for template exercise rows."""

    def list_template_exercises(self, template_id: UUID) -> LookupResult:
        """Return normalised exercise rows for a template."""

    def list_legacy_exercises(self, template_id: UUID) -> LookupResult:
        """Return exercise rows stored inline on the template."""


def decode_notes(notes: object) -> dict[str, object] | None:
    """Return the composition payload stored in a notes field.

    Plain-text notes carry no payload. JSON that isn't an object raises
    ValueError.
    """
    if isinstance(notes, dict):
        return notes
    if not isinstance(notes, str) or not notes.strip().startswith(("{", "[")):
        return None
    decoded = json.loads(notes)
    if not isinstance(decoded, dict):
        raise ValueError("composition payload must be a JSON object")
    return decoded


def parse_exercise_row(
    row: dict[str, object], position: int
) -> WorkoutExercise | InvalidExercise:
    """Validate one template row into a typed exercise."""
    order_index = row.get("order_index")
    if not isinstance(order_index, int):
        order_index = position
    raw_id = row.get("exercise_id")
    try:
        exercise_id = UUID(str(raw_id))
    except ValueError:
        return InvalidExercise(
            exercise_id=None, order_index=order_index, error="invalid exercise_id"
        )

    payload: dict[str, object] = {"type": "straight_set"}
    for column in ("sets", "reps", "rest_seconds"):
        if row.get(column) is not None:
            payload[column] = row[column]
    if "reps" in payload:
        payload["reps"] = str(payload["reps"])
    try:
        payload.update(decode_notes(row.get("notes")) or {})
        composition = composition_adapter.validate_python(payload)
    except (ValueError, ValidationError) as exc:
        return InvalidExercise(
            exercise_id=exercise_id, order_index=order_index, error=str(exc)
        )
    return WorkoutExercise(
        exercise_id=exercise_id, order_index=order_index, composition=composition
    )


@dataclass
class WorkoutTemplateService:
    """Resolves a template's exercises from whichever source has them."""

    repository: WorkoutTemplateRepository

    def get_template(self, template_id: UUID) -> WorkoutTemplate:
        """Return the validated exercises of a template."""
        chain: ResolutionChain[UUID, list[dict[str, object]]] = ResolutionChain(
            strategies=[
                ("template_exercises", self.repository.list_template_exercises),
                ("legacy_template", self.repository.list_legacy_exercises),
            ]
        )
        resolution = chain.resolve(template_id)
        if resolution.value is None:
            return WorkoutTemplate(id=template_id, source=resolution.source)

        exercises: list[WorkoutExercise] = []
        invalid: list[InvalidExercise] = []
        for position, row in enumerate(resolution.value):
            parsed = parse_exercise_row(row, position)
            if isinstance(parsed, InvalidExercise):
                _logger.warning(
                    "Invalid exercise payload: template_id=%s order_index=%s: %s",
                    template_id,
                    parsed.order_index,
                    parsed.error,
                )
                invalid.append(parsed)
            else:
                exercises.append(parsed)
        exercises.sort(key=lambda exercise: exercise.order_index)
        return WorkoutTemplate(
            id=template_id,
            source=resolution.source,
            exercises=exercises,
            invalid_exercises=invalid,
        )
