"""Reservation validation pipeline.

Checks run in a fixed order and stop at the first failure.
"""
from datetime import datetime
from typing import Callable, Optional

from domain.enums import ReservationStatus, ValidationReason
from domain.exceptions import ValidationError
from domain.value_objects import ReservationRequest, ReservationSettings, to_naive_utc, utc_now


class ReservationValidator:
    """Stateless validator for reservation requests"""

    def __init__(self, settings: Optional[ReservationSettings] = None,
                 clock: Callable[[], datetime] = utc_now):
        self.settings = settings or ReservationSettings()
        self.clock = clock

    def validate(self, request: ReservationRequest, status: Optional[ReservationStatus] = None) -> None:
        """Validate ``request``; ``status`` is the reservation's current status, None when new"""
        self._validate_required(request)
        self._validate_date_order(request.check_in, request.check_out)
        self._validate_check_in_not_in_past(request.check_in, status)
        self._validate_total_price(request)
        self._validate_duration(request.check_in, request.check_out)

    @staticmethod
    def _validate_required(request: ReservationRequest) -> None:
        if request.resource_id is None:
            raise ValidationError("resource_id", ValidationReason.RESOURCE_ID_REQUIRED)
        if request.requester_id is None:
            raise ValidationError("requester_id", ValidationReason.REQUESTER_ID_REQUIRED)
        if request.check_in is None:
            raise ValidationError("check_in", ValidationReason.CHECK_IN_REQUIRED)
        if request.check_out is None:
            raise ValidationError("check_out", ValidationReason.CHECK_OUT_REQUIRED)

    @staticmethod
    def _validate_date_order(check_in: datetime, check_out: datetime) -> None:
        if not check_in < check_out:
            raise ValidationError("check_in", ValidationReason.CHECK_IN_NOT_BEFORE_CHECK_OUT)

    def _validate_check_in_not_in_past(self, check_in: datetime,
                                       status: Optional[ReservationStatus]) -> None:
        # Records that already left PENDING keep their historical dates.
        if status not in (None, ReservationStatus.PENDING):
            return
        earliest = to_naive_utc(self.clock()) - self.settings.grace_period
        if check_in < earliest:
            raise ValidationError("check_in", ValidationReason.CHECK_IN_IN_PAST)

    @staticmethod
    def _validate_total_price(request: ReservationRequest) -> None:
        if request.total_price is None or request.total_price <= 0:
            raise ValidationError("total_price", ValidationReason.TOTAL_PRICE_NOT_POSITIVE)

    def _validate_duration(self, check_in: datetime, check_out: datetime) -> None:
        if check_out - check_in > self.settings.max_duration:
            raise ValidationError(
                "check_out",
                ValidationReason.MAX_DURATION_EXCEEDED,
                f"Maximum stay is {self.settings.max_reservation_days} days",
            )
