"""Domain Enums"""
from enum import Enum


class ReservationStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CHECKED_IN = "CHECKED_IN"
    CHECKED_OUT = "CHECKED_OUT"
    CANCELLED = "CANCELLED"


class ReservationOperation(str, Enum):
    CREATE = "create"
    CONFIRM = "confirm"
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"
    CANCEL = "cancel"
    UPDATE = "update"
    DELETE = "delete"


class ValidationReason(str, Enum):
    """Stable reason codes for validation failures"""
    RESOURCE_ID_REQUIRED = "RESOURCE_ID_REQUIRED"
    REQUESTER_ID_REQUIRED = "REQUESTER_ID_REQUIRED"
    CHECK_IN_REQUIRED = "CHECK_IN_REQUIRED"
    CHECK_OUT_REQUIRED = "CHECK_OUT_REQUIRED"
    CHECK_IN_NOT_BEFORE_CHECK_OUT = "CHECK_IN_NOT_BEFORE_CHECK_OUT"
    CHECK_IN_IN_PAST = "CHECK_IN_IN_PAST"
    TOTAL_PRICE_NOT_POSITIVE = "TOTAL_PRICE_NOT_POSITIVE"
    MAX_DURATION_EXCEEDED = "MAX_DURATION_EXCEEDED"
