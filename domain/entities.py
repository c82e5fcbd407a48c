"""Domain Entities - Aggregates"""
from pydantic import BaseModel, validator
from uuid import UUID
from datetime import datetime, timedelta
from typing import Optional
from decimal import Decimal

from domain.enums import ReservationOperation, ReservationStatus
from domain import state_machine
from domain.value_objects import ReservationRequest, StayPeriod, to_naive_utc


class Reservation(BaseModel):
    """Reservation Aggregate Root Entity"""

    # Identity, assigned by storage on first save
    id: Optional[UUID] = None

    # References to other contexts
    resource_id: int
    requester_id: int

    check_in: datetime
    check_out: datetime
    total_price: Decimal

    status: ReservationStatus = ReservationStatus.PENDING

    special_requests: Optional[str] = None
    cancellation_reason: Optional[str] = None

    # Metadata
    created_at: datetime
    updated_at: datetime
    version: int = 1

    @validator('check_in', 'check_out', 'created_at', 'updated_at')
    def normalize_timestamps(cls, v):
        return to_naive_utc(v)

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(request: ReservationRequest, now: datetime) -> "Reservation":
        """Build a new PENDING reservation from an already validated request"""
        return Reservation(
            resource_id=request.resource_id,
            requester_id=request.requester_id,
            check_in=request.check_in,
            check_out=request.check_out,
            total_price=request.total_price,
            special_requests=request.special_requests,
            status=state_machine.INITIAL_STATUS,
            created_at=now,
            updated_at=now,
        )

    # ==================== STATE TRANSITION METHODS ====================
    def confirm(self, now: datetime) -> None:
        self._transition(ReservationOperation.CONFIRM, now)

    def start_stay(self, now: datetime, early_window: timedelta) -> None:
        """Mark guest as checked in; not earlier than ``early_window`` before check-in"""
        state_machine.ensure_check_in_window(self.status, self.check_in, to_naive_utc(now), early_window)
        self._transition(ReservationOperation.CHECK_IN, now)

    def end_stay(self, now: datetime) -> None:
        self._transition(ReservationOperation.CHECK_OUT, now)

    def cancel(self, now: datetime, reason: Optional[str] = None) -> None:
        self._transition(ReservationOperation.CANCEL, now)
        self.cancellation_reason = reason

    def reschedule(self, request: ReservationRequest, now: datetime) -> None:
        """Apply new dates, price and notes while the reservation is still cancellable"""
        state_machine.ensure_transition(ReservationOperation.UPDATE, self.status)
        self.check_in = request.check_in
        self.check_out = request.check_out
        self.total_price = request.total_price
        self.special_requests = request.special_requests
        self._touch(now)

    # ==================== QUERY METHODS ====================
    @property
    def period(self) -> StayPeriod:
        return StayPeriod(check_in=self.check_in, check_out=self.check_out)

    def is_active(self) -> bool:
        """Check if reservation blocks its resource"""
        return state_machine.is_active(self.status)

    def is_cancellable(self) -> bool:
        return state_machine.is_cancellable(self.status)

    def overlaps(self, check_in: datetime, check_out: datetime) -> bool:
        return self.period.overlaps(StayPeriod(check_in=check_in, check_out=check_out))

    def to_request(self) -> ReservationRequest:
        return ReservationRequest(
            resource_id=self.resource_id,
            requester_id=self.requester_id,
            check_in=self.check_in,
            check_out=self.check_out,
            total_price=self.total_price,
            special_requests=self.special_requests,
        )

    # ==================== PRIVATE METHODS ====================
    def _transition(self, operation: ReservationOperation, now: datetime) -> None:
        self.status = state_machine.target_status(operation, self.status)
        self._touch(now)

    def _touch(self, now: datetime) -> None:
        self.updated_at = to_naive_utc(now)
        self.version += 1
