"""Client-facing API endpoints with token auth."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status

from fitcoach.domain.completions import (
    AdherenceReport,
    CompletionRecord,
    PhotoUpload,
    StreakState,
)
from fitcoach.domain.nutrition import DayNutrition
from fitcoach.domain.views import DayViewState
from fitcoach.domain.workouts import WorkoutTemplate
from fitcoach.services.completions import DuplicateCompletion, InvalidPhoto
from fitcoach.services.macros import calorie_split, round_for_display

if TYPE_CHECKING:
    from fitcoach.containers import AppContainer

router = APIRouter(prefix="/clients", tags=["clients"])


def _get_api_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.api_token


async def require_token(
    x_api_token: str | None = Header(default=None),
    api_token: str = Depends(_get_api_token),
) -> None:
    """Ensure requests include a valid API token."""
    if not x_api_token or x_api_token != api_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/{client_id}/nutrition/{day}", dependencies=[Depends(require_token)])
async def day_nutrition(
    client_id: UUID, day: date, request: Request, completed_only: bool = True
) -> dict[str, object]:
    """Return meal totals and progress for a day."""
    container: AppContainer = request.app.state.container
    nutrition = container.progress_service.get_day(
        client_id, day, completed_only=completed_only
    )
    return serialize_day(nutrition)


@router.get("/{client_id}/streak", dependencies=[Depends(require_token)])
async def streak(client_id: UUID, request: Request) -> dict[str, object]:
    """Return the client's completion streak."""
    container: AppContainer = request.app.state.container
    return serialize_streak(container.streak_service.get_streak(client_id))


@router.get("/{client_id}/dashboard", dependencies=[Depends(require_token)])
async def dashboard(
    client_id: UUID, request: Request, day: date | None = None
) -> dict[str, object]:
    """Switch the day screen to a day, or return its current state."""
    container: AppContainer = request.app.state.container
    if day is None:
        state = container.dashboard_service.current(client_id)
    else:
        state = await container.dashboard_service.select_day(client_id, day)
    return serialize_view(state)


@router.post(
    "/{client_id}/meals/{meal_id}/completion",
    dependencies=[Depends(require_token)],
    status_code=status.HTTP_201_CREATED,
)
async def complete_meal(  # noqa: PLR0913
    client_id: UUID,
    meal_id: UUID,
    request: Request,
    log_date: date | None = None,
    meal_option_id: UUID | None = None,
    notes: str | None = None,
    filename: str = "photo.jpg",
) -> dict[str, object]:
    """Mark a meal done; the request body, if any, is the photo."""
    container: AppContainer = request.app.state.container
    body = await request.body()
    photo = None
    if body:
        content_type = request.headers.get("content-type", "").split(";")[0].strip()
        photo = PhotoUpload(filename=filename, content_type=content_type, content=body)
    resolved_date = log_date or _today(container)
    try:
        record = container.completion_service.record_meal_completion(
            client_id=client_id,
            meal_id=meal_id,
            log_date=resolved_date,
            meal_option_id=meal_option_id,
            photo=photo,
            notes=notes,
        )
    except DuplicateCompletion as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail=str(exc)
        ) from exc
    except InvalidPhoto as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    return serialize_completion(record)


@router.delete(
    "/{client_id}/completions/{completion_id}",
    dependencies=[Depends(require_token)],
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_completion(
    client_id: UUID, completion_id: UUID, request: Request
) -> Response:
    """Delete a completion and its photo."""
    container: AppContainer = request.app.state.container
    if not container.completion_service.delete_completion(client_id, completion_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{client_id}/adherence", dependencies=[Depends(require_token)])
async def adherence(
    client_id: UUID,
    start: date,
    end: date,
    request: Request,
    expected_per_day: int = 3,
) -> dict[str, object]:
    """Return meal adherence over a date range."""
    container: AppContainer = request.app.state.container
    report = container.completion_service.adherence(
        client_id, start, end, expected_per_day
    )
    return serialize_adherence(report)


@router.get(
    "/{client_id}/workouts/{template_id}", dependencies=[Depends(require_token)]
)
async def workout_template(
    client_id: UUID, template_id: UUID, request: Request
) -> dict[str, object]:
    """Return a resolved workout template."""
    container: AppContainer = request.app.state.container
    template = container.workout_service.get_template(template_id)
    return serialize_template(template)


def _today(container: AppContainer) -> date:
    return datetime.now(tz=ZoneInfo(container.settings.timezone)).date()


def _display(macro: str, value: float) -> float:
    return round(value) if macro == "calories" else round(value, 1)


def serialize_day(nutrition: DayNutrition) -> dict[str, object]:
    """Convert a day view-model to display values."""
    progress = nutrition.progress
    return {
        "day": nutrition.day.isoformat(),
        "target_source": nutrition.target_source,
        "completed_meal_ids": sorted(
            str(meal_id) for meal_id in nutrition.completed_meal_ids
        ),
        "completed_slots": sorted(slot.value for slot in nutrition.completed_slots),
        "meals": {
            slot.value: round_for_display(totals)
            for slot, totals in nutrition.meals.totals.items()
        },
        "consumed": round_for_display(progress.consumed),
        "progress": {
            macro: {
                "current": _display(macro, item.current),
                "target": _display(macro, item.target),
                "percentage": round(item.percentage, 1),
                "ratio": round(item.ratio, 1),
                "is_over": item.is_over,
            }
            for macro, item in progress.by_macro.items()
        },
        "calorie_split": {
            macro: round(share, 1)
            for macro, share in calorie_split(progress.consumed).items()
        },
        "invalid_items": [
            {
                "food_id": str(item.food.id),
                "name": item.food.name,
                "meal_slot": item.meal_slot.value,
            }
            for item in nutrition.meals.invalid_items
        ],
    }


def serialize_streak(state: StreakState) -> dict[str, object]:
    return {
        "current_streak": state.current_streak,
        "complete_days": state.complete_days,
        "longest_streak": state.longest_streak,
        "last_completed_on": state.last_completed_on.isoformat()
        if state.last_completed_on
        else None,
    }


def serialize_view(state: DayViewState) -> dict[str, object]:
    return {
        "client_id": str(state.client_id),
        "day": state.day.isoformat() if state.day else None,
        "request_id": state.request_id,
        "loading": state.loading,
        "error": state.error,
        "nutrition": serialize_day(state.nutrition) if state.nutrition else None,
        "streak": serialize_streak(state.streak) if state.streak else None,
    }


def serialize_completion(record: CompletionRecord) -> dict[str, object]:
    return {
        "id": str(record.id),
        "client_id": str(record.client_id),
        "meal_id": str(record.meal_id) if record.meal_id else None,
        "log_date": record.log_date.isoformat(),
        "completed_at": record.completed_at.isoformat()
        if record.completed_at
        else None,
        "photo_url": record.photo_url,
        "notes": record.notes,
    }


def serialize_adherence(report: AdherenceReport) -> dict[str, object]:
    return {
        "total_expected": report.total_expected,
        "total_logged": report.total_logged,
        "adherence_rate": report.adherence_rate,
        "days": [
            {
                "date": day.day.isoformat(),
                "logged": day.logged,
                "expected": day.expected,
            }
            for day in report.days
        ],
    }


def serialize_template(template: WorkoutTemplate) -> dict[str, object]:
    return {
        "id": str(template.id),
        "source": template.source,
        "exercises": [
            {
                "exercise_id": str(exercise.exercise_id),
                "order_index": exercise.order_index,
                "composition": exercise.composition.model_dump(mode="json"),
            }
            for exercise in template.exercises
        ],
        "invalid_exercises": [
            {
                "exercise_id": str(item.exercise_id) if item.exercise_id else None,
                "order_index": item.order_index,
                "error": item.error,
            }
            for item in template.invalid_exercises
        ],
    }
