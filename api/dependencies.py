"""API Dependencies - Service wiring"""
from functools import lru_cache

from application.services import ReservationService
from infrastructure.config import SEED_RESOURCE_IDS, load_reservation_settings
from infrastructure.repositories.in_memory_repositories import (
    InMemoryReservationRepository, InMemoryResourceDirectory
)

# Process-wide stores; a database-backed adapter would replace these
reservation_repo = InMemoryReservationRepository()
resource_directory = InMemoryResourceDirectory(SEED_RESOURCE_IDS)


@lru_cache
def get_reservation_service() -> ReservationService:
    # One instance so every request shares the same per-resource locks
    return ReservationService(
        reservation_repo,
        resource_directory,
        settings=load_reservation_settings(),
    )
