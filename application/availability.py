"""Availability checking against existing reservations of a resource"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

import structlog

from domain.entities import Reservation
from domain.enums import ValidationReason
from domain.exceptions import ConflictError, ValidationError
from domain.repositories import ReservationRepository
from domain.value_objects import to_naive_utc

logger = structlog.get_logger(__name__)


class AvailabilityChecker:
    """Decides whether a resource is free for a half-open interval.

    PENDING, CONFIRMED and CHECKED_IN reservations block the resource;
    CANCELLED and CHECKED_OUT never do.
    """

    def __init__(self, repository: ReservationRepository):
        self.repository = repository

    async def conflicts(
        self,
        resource_id: int,
        check_in: datetime,
        check_out: datetime,
        exclude_reservation_id: Optional[UUID] = None
    ) -> List[Reservation]:
        """Return active reservations that overlap the requested interval"""
        check_in, check_out = to_naive_utc(check_in), to_naive_utc(check_out)
        if not check_in < check_out:
            raise ValidationError("check_in", ValidationReason.CHECK_IN_NOT_BEFORE_CHECK_OUT)

        candidates = await self.repository.find_overlapping(resource_id, check_in, check_out)
        return [
            r for r in candidates
            if r.is_active()
            and r.id != exclude_reservation_id
            and r.overlaps(check_in, check_out)
        ]

    async def is_available(
        self,
        resource_id: int,
        check_in: datetime,
        check_out: datetime,
        exclude_reservation_id: Optional[UUID] = None
    ) -> bool:
        blocking = await self.conflicts(resource_id, check_in, check_out, exclude_reservation_id)
        return not blocking

    async def ensure_available(
        self,
        resource_id: int,
        check_in: datetime,
        check_out: datetime,
        exclude_reservation_id: Optional[UUID] = None
    ) -> None:
        """Raise ConflictError if any active reservation overlaps the interval"""
        check_in, check_out = to_naive_utc(check_in), to_naive_utc(check_out)
        blocking = await self.conflicts(resource_id, check_in, check_out, exclude_reservation_id)
        if blocking:
            logger.info(
                "reservation_conflict",
                resource_id=resource_id,
                check_in=check_in.isoformat(),
                check_out=check_out.isoformat(),
                blocking_ids=[str(r.id) for r in blocking],
            )
            raise ConflictError(resource_id, check_in, check_out)
