"""Domain Value Objects"""
from pydantic import BaseModel, Field, validator
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Convert an offset-aware datetime to UTC and drop its tzinfo.

    Naive values are taken to already be UTC and pass through unchanged.
    """
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def utc_now() -> datetime:
    """Default clock: current UTC time as a naive datetime"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def has_time_overlap(start: datetime, end: datetime, other_start: datetime, other_end: datetime) -> bool:
    """Return True when two half-open intervals [start, end) share an instant.

    Touching boundaries (one ends exactly when the other starts) do not overlap.
    """
    start, end = to_naive_utc(start), to_naive_utc(end)
    other_start, other_end = to_naive_utc(other_start), to_naive_utc(other_end)
    return start < other_end and end > other_start


class StayPeriod(BaseModel):
    """Value Object for a half-open [check_in, check_out) interval"""
    check_in: datetime
    check_out: datetime

    @validator('check_in')
    def normalize_check_in(cls, v):
        return to_naive_utc(v)

    @validator('check_out')
    def check_out_after_check_in(cls, v, values):
        v = to_naive_utc(v)
        if 'check_in' in values and v <= values['check_in']:
            raise ValueError('Check-out must be after check-in')
        return v

    def duration(self) -> timedelta:
        return self.check_out - self.check_in

    def overlaps(self, other: "StayPeriod") -> bool:
        return has_time_overlap(self.check_in, self.check_out, other.check_in, other.check_out)

    class Config:
        frozen = True


class ReservationRequest(BaseModel):
    """Unvalidated reservation data as submitted by a caller.

    Every field is optional so that a missing value surfaces as a
    validation failure with a stable reason rather than a parse error.
    """
    resource_id: Optional[int] = None
    requester_id: Optional[int] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_price: Optional[Decimal] = None
    special_requests: Optional[str] = None

    @validator('check_in', 'check_out')
    def normalize_timestamps(cls, v):
        return to_naive_utc(v)

    class Config:
        frozen = True


class ReservationSettings(BaseModel):
    """Tunable limits consumed by validation, check-in and write retries"""
    max_reservation_days: int = Field(default=30, gt=0)
    check_in_grace_period_hours: int = Field(default=1, ge=0)
    check_in_early_window_hours: int = Field(default=2, ge=0)
    max_write_retries: int = Field(default=3, ge=0)

    @property
    def max_duration(self) -> timedelta:
        return timedelta(days=self.max_reservation_days)

    @property
    def grace_period(self) -> timedelta:
        return timedelta(hours=self.check_in_grace_period_hours)

    @property
    def early_window(self) -> timedelta:
        return timedelta(hours=self.check_in_early_window_hours)

    class Config:
        frozen = True
