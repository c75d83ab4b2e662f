"""Habit form definitions."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ...models.habit import Frequency, LogStatus


def _split_weekdays(value: str | Iterable[int] | None) -> list[str] | Iterable[int] | None:
    """Accept ``"1,3,5"`` as well as ``[1, 3, 5]``."""

    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class HabitForm(BaseModel):
    """Form model for creating a habit."""

    model_config = ConfigDict(validate_default=False, str_strip_whitespace=True, extra="forbid")

    name: str = Field(..., description="Short label for the habit", max_length=80)
    frequency: Frequency = Field(default=Frequency.DAILY, description="Habit frequency")
    weekdays: list[int] | None = Field(
        default=None, description="Sunday-based weekday numbers for custom weekday habits"
    )
    start_date: date = Field(default_factory=date.today, description="First scheduled day")
    end_date: date | None = Field(default=None, description="Last scheduled day (inclusive)")
    category_id: int | None = Field(default=None, description="Optional category")

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        """Ensure the habit name is present when validating submissions."""

        if not value or not value.strip():
            raise ValueError("Please provide a habit name.")
        return value

    @field_validator("weekdays", mode="before")
    @classmethod
    def split_weekdays(cls, value):
        return _split_weekdays(value)

    @model_validator(mode="after")
    def ensure_date_range(self) -> "HabitForm":
        """Reject an end date before the start date."""

        if self.end_date is not None and self.end_date < self.start_date:
            raise ValueError("End date cannot be before the start date.")
        return self


class HabitUpdateForm(BaseModel):
    """Partial update; only fields present in the payload are applied."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str | None = Field(default=None, max_length=80)
    frequency: Frequency | None = None
    weekdays: list[int] | None = None
    start_date: date | None = None
    end_date: date | None = None
    category_id: int | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Please provide a habit name.")
        return value

    @field_validator("weekdays", mode="before")
    @classmethod
    def split_weekdays(cls, value):
        return _split_weekdays(value)

    @field_validator("frequency", "start_date")
    @classmethod
    def reject_null(cls, value):
        if value is None:
            raise ValueError("This field cannot be cleared.")
        return value

    def changes(self) -> dict:
        """Return only the fields the caller actually sent."""

        return self.model_dump(exclude_unset=True)


class LogForm(BaseModel):
    """Payload for recording today's status."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    status: LogStatus = Field(default=LogStatus.DONE, description="done, skipped or missed")

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


__all__ = ["HabitForm", "HabitUpdateForm", "LogForm"]
