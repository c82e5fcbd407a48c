"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import Optional, List
from uuid import UUID
from datetime import datetime

from domain.entities import Reservation
from domain.enums import ReservationStatus


class ReservationRepository(ABC):
    """Repository interface for Reservation Aggregate"""

    @abstractmethod
    async def save(self, reservation: Reservation) -> Reservation:
        """Persist a new reservation and return it with its assigned ID"""
        pass

    @abstractmethod
    async def find_by_id(self, reservation_id: UUID) -> Optional[Reservation]:
        """Find reservation by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Reservation]:
        """Find all reservations"""
        pass

    @abstractmethod
    async def find_by_resource(self, resource_id: int) -> List[Reservation]:
        """Find reservations for a resource"""
        pass

    @abstractmethod
    async def find_by_requester(self, requester_id: int) -> List[Reservation]:
        """Find reservations made by a requester"""
        pass

    @abstractmethod
    async def find_by_status(self, status: ReservationStatus) -> List[Reservation]:
        """Find reservations in a given status"""
        pass

    @abstractmethod
    async def find_overlapping(self, resource_id: int, check_in: datetime, check_out: datetime) -> List[Reservation]:
        """Find reservations on a resource whose interval intersects [check_in, check_out)"""
        pass

    @abstractmethod
    async def update(self, reservation: Reservation, expected_version: int) -> Reservation:
        """Store ``reservation`` only if the stored copy is still at ``expected_version``.

        Raises ConcurrencyError when another writer got there first.
        """
        pass

    @abstractmethod
    async def delete_by_id(self, reservation_id: UUID) -> bool:
        """Delete reservation"""
        pass


class ResourceDirectory(ABC):
    """Lookup of bookable resources owned by another context"""

    @abstractmethod
    async def exists_by_id(self, resource_id: int) -> bool:
        """Check whether a resource exists"""
        pass
