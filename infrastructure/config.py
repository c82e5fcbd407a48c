import os
from typing import List

from dotenv import load_dotenv

from domain.value_objects import ReservationSettings

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

SEED_RESOURCE_IDS_RAW = os.getenv("SEED_RESOURCE_IDS", "")

SEED_RESOURCE_IDS: List[int] = [
    int(resource_id.strip()) for resource_id in SEED_RESOURCE_IDS_RAW.split(",") if resource_id.strip()
]


def load_reservation_settings() -> ReservationSettings:
    """Build ReservationSettings from the environment, falling back to model defaults."""
    overrides = {
        field: int(os.environ[env_name])
        for field, env_name in (
            ("max_reservation_days", "MAX_RESERVATION_DAYS"),
            ("check_in_grace_period_hours", "CHECK_IN_GRACE_PERIOD_HOURS"),
            ("check_in_early_window_hours", "CHECK_IN_EARLY_WINDOW_HOURS"),
            ("max_write_retries", "MAX_WRITE_RETRIES"),
        )
        if os.getenv(env_name)
    }
    return ReservationSettings(**overrides)
