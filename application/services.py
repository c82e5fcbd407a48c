"""Application Services - Business use cases"""
from uuid import UUID
from datetime import datetime
from decimal import Decimal
from typing import Awaitable, Callable, List, Optional

import structlog

from application.availability import AvailabilityChecker
from application.locking import ResourceLocks
from domain.repositories import ReservationRepository, ResourceDirectory
from domain.entities import Reservation
from domain.enums import ReservationOperation, ReservationStatus
from domain.exceptions import ConcurrencyError, NotFoundError
from domain import state_machine
from domain.validation import ReservationValidator
from domain.value_objects import ReservationRequest, ReservationSettings, to_naive_utc, utc_now

logger = structlog.get_logger(__name__)

Mutation = Callable[[Reservation], Awaitable[None]]


class ReservationService:
    """Service for Reservation business use cases.

    Every write goes through here so that validation, the availability
    check and the state machine guards cannot be bypassed.
    """

    def __init__(self,
                 repository: ReservationRepository,
                 resource_directory: ResourceDirectory,
                 settings: Optional[ReservationSettings] = None,
                 clock: Callable[[], datetime] = utc_now,
                 locks: Optional[ResourceLocks] = None):
        self.repository = repository
        self.resource_directory = resource_directory
        self.settings = settings or ReservationSettings()
        self.clock = clock
        self.validator = ReservationValidator(self.settings, clock)
        self.availability = AvailabilityChecker(repository)
        self.locks = locks or ResourceLocks()

    # ==================== COMMANDS ====================
    async def create_reservation(self, request: ReservationRequest) -> Reservation:
        """Validate, check the resource and its availability, then persist as PENDING"""
        self.validator.validate(request)

        if not await self.resource_directory.exists_by_id(request.resource_id):
            raise NotFoundError("resource", request.resource_id)

        async with self.locks.hold(request.resource_id):
            await self.availability.ensure_available(
                request.resource_id, request.check_in, request.check_out
            )
            reservation = Reservation.create(request, self._now())
            saved = await self.repository.save(reservation)

        logger.info(
            "reservation_created",
            reservation_id=str(saved.id),
            resource_id=saved.resource_id,
            requester_id=saved.requester_id,
        )
        return saved

    async def confirm_reservation(self, reservation_id: UUID) -> Reservation:
        async def confirm(reservation: Reservation) -> None:
            reservation.confirm(self._now())

        return await self._apply(reservation_id, ReservationOperation.CONFIRM, confirm)

    async def check_in(self, reservation_id: UUID) -> Reservation:
        """Check in guest, no earlier than the configured window before check-in"""
        async def start_stay(reservation: Reservation) -> None:
            reservation.start_stay(self._now(), self.settings.early_window)

        return await self._apply(reservation_id, ReservationOperation.CHECK_IN, start_stay)

    async def check_out(self, reservation_id: UUID) -> Reservation:
        async def end_stay(reservation: Reservation) -> None:
            reservation.end_stay(self._now())

        return await self._apply(reservation_id, ReservationOperation.CHECK_OUT, end_stay)

    async def cancel_reservation(self, reservation_id: UUID, reason: Optional[str] = None) -> Reservation:
        async def cancel(reservation: Reservation) -> None:
            reservation.cancel(self._now(), reason)

        return await self._apply(reservation_id, ReservationOperation.CANCEL, cancel)

    async def update_reservation(
        self,
        reservation_id: UUID,
        check_in: Optional[datetime] = None,
        check_out: Optional[datetime] = None,
        total_price: Optional[Decimal] = None,
        special_requests: Optional[str] = None
    ) -> Reservation:
        """Change dates, price or notes of a PENDING or CONFIRMED reservation.

        Fields left as None keep their current value. When the dates move,
        availability is re-checked with the reservation itself excluded.
        """
        current = await self._find_reservation(reservation_id)

        async def reschedule(reservation: Reservation) -> None:
            state_machine.ensure_transition(ReservationOperation.UPDATE, reservation.status)
            existing = reservation.to_request()
            candidate = ReservationRequest(**{
                **existing.model_dump(),
                "check_in": check_in if check_in is not None else existing.check_in,
                "check_out": check_out if check_out is not None else existing.check_out,
                "total_price": total_price if total_price is not None else existing.total_price,
                "special_requests": special_requests if special_requests is not None else existing.special_requests,
            })
            self.validator.validate(candidate, status=reservation.status)

            dates_changed = (
                candidate.check_in != reservation.check_in
                or candidate.check_out != reservation.check_out
            )
            if dates_changed:
                await self.availability.ensure_available(
                    reservation.resource_id,
                    candidate.check_in,
                    candidate.check_out,
                    exclude_reservation_id=reservation.id,
                )
            reservation.reschedule(candidate, self._now())

        async with self.locks.hold(current.resource_id):
            return await self._apply(reservation_id, ReservationOperation.UPDATE, reschedule)

    async def delete_reservation(self, reservation_id: UUID) -> None:
        """Remove a reservation; only CANCELLED ones may be deleted"""
        reservation = await self._find_reservation(reservation_id)
        state_machine.ensure_transition(ReservationOperation.DELETE, reservation.status)

        if not await self.repository.delete_by_id(reservation_id):
            raise NotFoundError("reservation", reservation_id)
        logger.info("reservation_deleted", reservation_id=str(reservation_id))

    # ==================== QUERIES ====================
    async def get_reservation(self, reservation_id: UUID) -> Reservation:
        """Get reservation by ID"""
        return await self._find_reservation(reservation_id)

    async def list_all(self) -> List[Reservation]:
        return await self.repository.find_all()

    async def list_by_resource(self, resource_id: int) -> List[Reservation]:
        return await self.repository.find_by_resource(resource_id)

    async def list_active_by_resource(self, resource_id: int) -> List[Reservation]:
        """Reservations currently blocking the resource"""
        reservations = await self.repository.find_by_resource(resource_id)
        return [r for r in reservations if r.is_active()]

    async def list_by_requester(self, requester_id: int) -> List[Reservation]:
        return await self.repository.find_by_requester(requester_id)

    async def list_by_status(self, status: ReservationStatus) -> List[Reservation]:
        return await self.repository.find_by_status(status)

    async def check_availability(
        self,
        resource_id: int,
        check_in: datetime,
        check_out: datetime,
        exclude_reservation_id: Optional[UUID] = None
    ) -> bool:
        return await self.availability.is_available(
            resource_id, check_in, check_out, exclude_reservation_id
        )

    # ==================== HELPERS ====================
    def _now(self) -> datetime:
        return to_naive_utc(self.clock())

    async def _find_reservation(self, reservation_id: UUID) -> Reservation:
        reservation = await self.repository.find_by_id(reservation_id)
        if reservation is None:
            raise NotFoundError("reservation", reservation_id)
        return reservation

    async def _apply(self, reservation_id: UUID, operation: ReservationOperation,
                     mutate: Mutation) -> Reservation:
        """Fetch, mutate and conditionally write; re-run from the fetch if the write loses a race"""
        attempts = self.settings.max_write_retries + 1
        for attempt in range(1, attempts + 1):
            reservation = await self._find_reservation(reservation_id)
            expected_version = reservation.version
            await mutate(reservation)
            try:
                updated = await self.repository.update(reservation, expected_version)
            except ConcurrencyError:
                if attempt == attempts:
                    logger.warning(
                        "concurrent_write_retries_exhausted",
                        reservation_id=str(reservation_id),
                        operation=operation.value,
                        attempts=attempts,
                    )
                    raise
                logger.info(
                    "concurrent_write_retry",
                    reservation_id=str(reservation_id),
                    operation=operation.value,
                    attempt=attempt,
                )
                continue

            logger.info(
                "reservation_updated",
                reservation_id=str(reservation_id),
                operation=operation.value,
                status=updated.status.value,
                version=updated.version,
            )
            return updated

        # Unreachable: the last attempt either returns or re-raises.
        raise ConcurrencyError(reservation_id)
