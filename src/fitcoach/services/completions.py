"""Meal completion logging with optional photos."""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from fitcoach.domain.completions import (
    AdherenceDay,
    AdherenceReport,
    CompletionRecord,
    PhotoUpload,
)
ALLOWED_MIME_TYPES = frozenset({"image/jpeg", "image/jpg", "image/png", "image/webp"})
MAX_FILENAME_LENGTH = 100

_UNSAFE_FILENAME_CHARS = re.compile(r"[^a-zA-Z0-9._-]")

_logger = logging.getLogger(__name__)


class CompletionError(ValueError):
    """Base error for rejected completions."""


class DuplicateCompletion(CompletionError):
    """A completion already exists for the meal on that day."""

    def __init__(
        self,
        message: str = (
            "Photo already uploaded for this meal today. "
            "You cannot upload another one."
        ),
    ) -> None:
        super().__init__(message)


class InvalidPhoto(CompletionError):
    """The uploaded photo failed validation."""


class CompletionRepository(Protocol):
    """Persistence interface for completion records."""

    def list_completions(
        self,
        client_id: UUID,
        start: date | None = None,
        end: date | None = None,
    ) -> list[CompletionRecord]:
        """Return completions newest first, optionally within a date range."""

    def get_completion(
        self, client_id: UUID, meal_id: UUID, log_date: date
    ) -> CompletionRecord | None:
        """Return the completion for a meal on a day, if present."""

    def get_completion_by_id(self, completion_id: UUID) -> CompletionRecord | None:
        """Return a completion by id."""

    def create_completion(  # noqa: PLR0913
        self,
        client_id: UUID,
        meal_id: UUID,
        log_date: date,
        meal_option_id: UUID | None,
        photo_path: str | None,
        photo_url: str | None,
        notes: str | None,
    ) -> CompletionRecord:
        """Persist a completion and return it."""

    def delete_completion(self, completion_id: UUID) -> None:
        """Delete a completion record."""


class PhotoStorage(Protocol):
    """Object storage for meal photos."""

    def upload(self, path: str, content: bytes, content_type: str) -> str:
        """Store the object and return its public URL."""

    def remove(self, path: str) -> None:
        """Remove a stored object."""


def sanitize_filename(filename: str) -> str:
    """Replace unsafe characters and cap the length."""
    return _UNSAFE_FILENAME_CHARS.sub("_", filename)[:MAX_FILENAME_LENGTH]


def validate_photo(photo: PhotoUpload, max_bytes: int) -> None:
    """Raise InvalidPhoto when the upload is not an acceptable image."""
    if not photo.content:
        raise InvalidPhoto("No file provided")
    if photo.content_type not in ALLOWED_MIME_TYPES:
        allowed = ", ".join(sorted(ALLOWED_MIME_TYPES))
        raise InvalidPhoto(f"Invalid file type. Allowed: {allowed}")
    if len(photo.content) > max_bytes:
        raise InvalidPhoto(f"File too large. Maximum: {max_bytes // (1024 * 1024)}MB")


def build_adherence(
    records: list[CompletionRecord], start: date, end: date, expected_per_day: int
) -> AdherenceReport:
    """Compare logged completions with the expected meals per day."""
    if end < start:
        return AdherenceReport(
            total_expected=0, total_logged=0, adherence_rate=0.0, days=[]
        )
    by_day: dict[date, int] = {}
    for record in records:
        if start <= record.log_date <= end:
            by_day[record.log_date] = by_day.get(record.log_date, 0) + 1
    day_count = (end - start).days + 1
    days = [
        AdherenceDay(
            day=start + timedelta(days=offset),
            logged=by_day.get(start + timedelta(days=offset), 0),
            expected=expected_per_day,
        )
        for offset in range(day_count)
    ]
    total_expected = day_count * expected_per_day
    total_logged = sum(by_day.values())
    rate = total_logged / total_expected * 100 if total_expected > 0 else 0.0
    return AdherenceReport(
        total_expected=total_expected,
        total_logged=total_logged,
        adherence_rate=round(rate, 1),
        days=days,
    )


@dataclass
class CompletionService:
    """Records meal completions and reports adherence."""

    repository: CompletionRepository
    storage: PhotoStorage
    max_photo_bytes: int = 5 * 1024 * 1024
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(tz=UTC))

    def record_meal_completion(  # noqa: PLR0913
        self,
        client_id: UUID,
        meal_id: UUID,
        log_date: date,
        meal_option_id: UUID | None = None,
        photo: PhotoUpload | None = None,
        notes: str | None = None,
    ) -> CompletionRecord:
        """Mark a meal done for a day, uploading the photo first if given.

        Only one completion per meal per day is accepted; the chosen meal
        option is informational and does not affect that rule.
        """
        if photo is not None:
            validate_photo(photo, self.max_photo_bytes)
        if self.repository.get_completion(client_id, meal_id, log_date) is not None:
            raise DuplicateCompletion()

        photo_path = None
        photo_url = None
        if photo is not None:
            timestamp_ms = int(self.clock().timestamp() * 1000)
            photo_path = (
                f"{client_id}/{meal_id}/{timestamp_ms}_"
                f"{sanitize_filename(photo.filename)}"
            )
            photo_url = self.storage.upload(
                photo_path, photo.content, photo.content_type
            )

        try:
            return self.repository.create_completion(
                client_id=client_id,
                meal_id=meal_id,
                log_date=log_date,
                meal_option_id=meal_option_id,
                photo_path=photo_path,
                photo_url=photo_url,
                notes=notes,
            )
        except Exception:
            if photo_path is not None:
                self.storage.remove(photo_path)
            raise

    def delete_completion(self, client_id: UUID, completion_id: UUID) -> bool:
        """Delete a client's completion and its photo.

        Returns False when the completion doesn't exist or belongs to another
        client.
        """
        record = self.repository.get_completion_by_id(completion_id)
        if record is None or record.client_id != client_id:
            return False
        if record.photo_path:
            try:
                self.storage.remove(record.photo_path)
            except Exception:
                _logger.warning(
                    "Could not delete photo from storage: path=%s",
                    record.photo_path,
                    exc_info=True,
                )
        self.repository.delete_completion(completion_id)
        return True

    def adherence(
        self, client_id: UUID, start: date, end: date, expected_per_day: int
    ) -> AdherenceReport:
        """Return adherence for a date range."""
        records = self.repository.list_completions(client_id, start=start, end=end)
        return build_adherence(records, start, end, expected_per_day)

    def today_adherence(
        self, client_id: UUID, today: date, expected_today: int
    ) -> dict[str, int]:
        """Return today's logged meals and whole-number percentage."""
        records = self.repository.list_completions(client_id, start=today, end=today)
        logged = len(records)
        percentage = round(logged / expected_today * 100) if expected_today > 0 else 0
        return {"logged": logged, "expected": expected_today, "percentage": percentage}
