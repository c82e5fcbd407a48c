from fastapi import FastAPI, Depends, Request, status
from fastapi.responses import JSONResponse
from uuid import UUID
from datetime import datetime
from typing import List, Optional

import structlog

from api.schemas import (
    CreateReservationRequest, UpdateReservationRequest, CancelReservationRequest,
    ReservationResponse, AvailabilityResponse, StatusListResponse
)
from api.dependencies import get_reservation_service
from application.services import ReservationService
from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.exceptions import (
    ReservationError, ValidationError, NotFoundError, ConflictError,
    InvalidTransitionError, ConcurrencyError
)
from domain.state_machine import ACTIVE_STATUSES
from domain.value_objects import ReservationRequest
from infrastructure.config import SEED_RESOURCE_IDS
from infrastructure.logging_config import setup_logging

setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Room Reservation API",
    description=(
        "Reservation lifecycle and availability engine. "
        "Bookable room IDs are read from SEED_RESOURCE_IDS (comma-separated); "
        "with none registered every create returns 404."
    ),
    version="1.0.0"
)

_ERROR_STATUS_CODES = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (ConcurrencyError, status.HTTP_409_CONFLICT),
)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError) -> JSONResponse:
    status_code = next(
        (code for error_type, code in _ERROR_STATUS_CODES if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    logger.info("request_rejected", path=request.url.path, status_code=status_code, error=type(exc).__name__)
    return JSONResponse(status_code=status_code, content=exc.to_dict())

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/enums/reservation-status", response_model=StatusListResponse, tags=["Enum Reference"])
async def get_reservation_statuses():
    """Get all ReservationStatus values and the ones that block a room"""
    return StatusListResponse(
        values=list(ReservationStatus),
        active=[s for s in ReservationStatus if s in ACTIVE_STATUSES],
    )

# ============================================================================
# RESERVATION ENDPOINTS
# ============================================================================

@app.post("/api/reservations", response_model=ReservationResponse, status_code=201, tags=["Reservations"])
async def create_reservation(
    request: CreateReservationRequest,
    service: ReservationService = Depends(get_reservation_service)
):
    """Create new reservation"""
    reservation = await service.create_reservation(ReservationRequest(**request.model_dump()))
    return _reservation_to_response(reservation)

@app.get("/api/reservations", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_all_reservations(
    service: ReservationService = Depends(get_reservation_service)
):
    """Get all reservations"""
    reservations = await service.list_all()
    return [_reservation_to_response(r) for r in reservations]

@app.get("/api/reservations/{reservation_id}", response_model=ReservationResponse, tags=["Reservations"])
async def get_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service)
):
    """Get reservation by ID"""
    reservation = await service.get_reservation(reservation_id)
    return _reservation_to_response(reservation)

@app.get("/api/reservations/resource/{resource_id}", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_resource_reservations(
    resource_id: int,
    service: ReservationService = Depends(get_reservation_service)
):
    """Get all reservations for a room"""
    reservations = await service.list_by_resource(resource_id)
    return [_reservation_to_response(r) for r in reservations]

@app.get("/api/reservations/resource/{resource_id}/active", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_active_resource_reservations(
    resource_id: int,
    service: ReservationService = Depends(get_reservation_service)
):
    """Get reservations currently blocking a room"""
    reservations = await service.list_active_by_resource(resource_id)
    return [_reservation_to_response(r) for r in reservations]

@app.get("/api/reservations/resource/{resource_id}/available", response_model=AvailabilityResponse, tags=["Reservations"])
async def check_resource_availability(
    resource_id: int,
    check_in: datetime,
    check_out: datetime,
    exclude_reservation_id: Optional[UUID] = None,
    service: ReservationService = Depends(get_reservation_service)
):
    """Check whether a room is free for [check_in, check_out)"""
    available = await service.check_availability(resource_id, check_in, check_out, exclude_reservation_id)
    return AvailabilityResponse(
        resource_id=resource_id,
        check_in=check_in,
        check_out=check_out,
        available=available
    )

@app.get("/api/reservations/requester/{requester_id}", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_requester_reservations(
    requester_id: int,
    service: ReservationService = Depends(get_reservation_service)
):
    """Get all reservations made by a user"""
    reservations = await service.list_by_requester(requester_id)
    return [_reservation_to_response(r) for r in reservations]

@app.get("/api/reservations/status/{reservation_status}", response_model=List[ReservationResponse], tags=["Reservations"])
async def get_reservations_by_status(
    reservation_status: ReservationStatus,
    service: ReservationService = Depends(get_reservation_service)
):
    """Get all reservations in a status"""
    reservations = await service.list_by_status(reservation_status)
    return [_reservation_to_response(r) for r in reservations]

@app.put("/api/reservations/{reservation_id}", response_model=ReservationResponse, tags=["Reservations"])
async def update_reservation(
    reservation_id: UUID,
    request: UpdateReservationRequest,
    service: ReservationService = Depends(get_reservation_service)
):
    """Change dates, price or special requests"""
    reservation = await service.update_reservation(
        reservation_id=reservation_id,
        check_in=request.check_in,
        check_out=request.check_out,
        total_price=request.total_price,
        special_requests=request.special_requests
    )
    return _reservation_to_response(reservation)

@app.patch("/api/reservations/{reservation_id}/confirm", response_model=ReservationResponse, tags=["Reservations"])
async def confirm_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service)
):
    """Confirm a pending reservation"""
    reservation = await service.confirm_reservation(reservation_id)
    return _reservation_to_response(reservation)

@app.patch("/api/reservations/{reservation_id}/cancel", response_model=ReservationResponse, tags=["Reservations"])
async def cancel_reservation(
    reservation_id: UUID,
    request: Optional[CancelReservationRequest] = None,
    service: ReservationService = Depends(get_reservation_service)
):
    """Cancel a pending or confirmed reservation"""
    reason = request.reason if request else None
    reservation = await service.cancel_reservation(reservation_id, reason)
    return _reservation_to_response(reservation)

@app.patch("/api/reservations/{reservation_id}/check-in", response_model=ReservationResponse, tags=["Reservations"])
async def check_in_guest(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service)
):
    """Check in guest"""
    reservation = await service.check_in(reservation_id)
    return _reservation_to_response(reservation)

@app.patch("/api/reservations/{reservation_id}/check-out", response_model=ReservationResponse, tags=["Reservations"])
async def check_out_guest(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service)
):
    """Check out guest"""
    reservation = await service.check_out(reservation_id)
    return _reservation_to_response(reservation)

@app.delete("/api/reservations/{reservation_id}", status_code=204, tags=["Reservations"])
async def delete_reservation(
    reservation_id: UUID,
    service: ReservationService = Depends(get_reservation_service)
):
    """Delete a cancelled reservation"""
    await service.delete_reservation(reservation_id)

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _reservation_to_response(reservation: Reservation) -> ReservationResponse:
    """Convert Reservation entity to ReservationResponse"""
    return ReservationResponse(
        id=reservation.id,
        resource_id=reservation.resource_id,
        requester_id=reservation.requester_id,
        check_in=reservation.check_in,
        check_out=reservation.check_out,
        total_price=reservation.total_price,
        status=reservation.status.value,
        special_requests=reservation.special_requests,
        cancellation_reason=reservation.cancellation_reason,
        created_at=reservation.created_at,
        updated_at=reservation.updated_at,
        version=reservation.version
    )

if __name__ == "__main__":
    import uvicorn

    if not SEED_RESOURCE_IDS:
        logger.warning("no_resources_registered", hint="set SEED_RESOURCE_IDS=1,2,3 before starting")
    uvicorn.run(app, host="0.0.0.0", port=8000)
