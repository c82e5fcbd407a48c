"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from typing import List, Optional

from domain.enums import ReservationStatus


# ============================================================================
# RESERVATION SCHEMAS
# ============================================================================

class CreateReservationRequest(BaseModel):
    """Create reservation request DTO.

    Fields are optional here; presence and ranges are checked by the
    domain validator so every failure carries a stable reason code.
    """
    resource_id: Optional[int] = None
    requester_id: Optional[int] = None
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_price: Optional[Decimal] = None
    special_requests: Optional[str] = Field(None, max_length=1000)


class UpdateReservationRequest(BaseModel):
    """Update reservation request DTO"""
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    total_price: Optional[Decimal] = None
    special_requests: Optional[str] = Field(None, max_length=1000)


class CancelReservationRequest(BaseModel):
    """Cancel reservation request DTO"""
    reason: Optional[str] = None


class ReservationResponse(BaseModel):
    """Reservation response DTO"""
    id: UUID
    resource_id: int
    requester_id: int
    check_in: datetime
    check_out: datetime
    total_price: Decimal
    status: str
    special_requests: Optional[str] = None
    cancellation_reason: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    version: int


class AvailabilityResponse(BaseModel):
    """Availability response DTO"""
    resource_id: int
    check_in: datetime
    check_out: datetime
    available: bool


class StatusListResponse(BaseModel):
    values: List[ReservationStatus]
    active: List[ReservationStatus]
