"""In-Memory Repository Implementations"""
from typing import Optional, List, Dict, Iterable, Set
from uuid import UUID, uuid4
from datetime import datetime

from domain.repositories import ReservationRepository, ResourceDirectory
from domain.entities import Reservation
from domain.enums import ReservationStatus
from domain.exceptions import ConcurrencyError, NotFoundError


class InMemoryReservationRepository(ReservationRepository):
    """In-memory implementation of ReservationRepository.

    Stores and hands out copies so that callers mutating an entity never
    change stored state behind the repository's back.
    """

    def __init__(self):
        self._storage: Dict[UUID, Reservation] = {}

    async def save(self, reservation: Reservation) -> Reservation:
        """Save reservation to memory, assigning an ID if it has none"""
        stored = reservation.model_copy(deep=True)
        if stored.id is None:
            stored.id = uuid4()
        self._storage[stored.id] = stored
        return stored.model_copy(deep=True)

    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        reservation = self._storage.get(reservation_id)
        return reservation.model_copy(deep=True) if reservation else None

    async def find_all(self) -> List[Reservation]:
        """Find all reservations"""
        return self._copies(self._storage.values())

    async def find_by_resource(self, resource_id: int) -> List[Reservation]:
        return self._copies(r for r in self._storage.values() if r.resource_id == resource_id)

    async def find_by_requester(self, requester_id: int) -> List[Reservation]:
        return self._copies(r for r in self._storage.values() if r.requester_id == requester_id)

    async def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        return self._copies(r for r in self._storage.values() if r.status == status)

    async def find_overlapping(self, resource_id: int, check_in: datetime, check_out: datetime) -> List[Reservation]:
        """Find reservations on the resource intersecting [check_in, check_out)"""
        return self._copies(
            r for r in self._storage.values()
            if r.resource_id == resource_id and r.overlaps(check_in, check_out)
        )

    async def update(self, reservation: Reservation, expected_version: int) -> Reservation:
        """Update reservation if nobody else wrote it since ``expected_version``"""
        current = self._storage.get(reservation.id)
        if current is None:
            raise NotFoundError("reservation", reservation.id)
        if current.version != expected_version:
            raise ConcurrencyError(reservation.id)
        self._storage[reservation.id] = reservation.model_copy(deep=True)
        return reservation.model_copy(deep=True)

    async def delete_by_id(self, reservation_id: UUID) -> bool:
        """Delete reservation"""
        if reservation_id in self._storage:
            del self._storage[reservation_id]
            return True
        return False

    @staticmethod
    def _copies(reservations: Iterable[Reservation]) -> List[Reservation]:
        ordered = sorted(reservations, key=lambda r: (r.check_in, r.created_at))
        return [r.model_copy(deep=True) for r in ordered]


class InMemoryResourceDirectory(ResourceDirectory):
    """In-memory set of known resource IDs"""

    def __init__(self, resource_ids: Optional[Iterable[int]] = None):
        self._resource_ids: Set[int] = set(resource_ids or [])

    def register(self, resource_id: int) -> None:
        self._resource_ids.add(resource_id)

    def unregister(self, resource_id: int) -> None:
        self._resource_ids.discard(resource_id)

    async def exists_by_id(self, resource_id: int) -> bool:
        return resource_id in self._resource_ids
