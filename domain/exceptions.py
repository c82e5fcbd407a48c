"""Domain Exceptions"""
from datetime import datetime
from typing import Any, Dict, Optional

from domain.enums import ReservationOperation, ReservationStatus, ValidationReason


class ReservationError(Exception):
    """Base class for every error raised by the reservation core"""

    def to_dict(self) -> Dict[str, Any]:
        return {"error": type(self).__name__, "detail": str(self)}


class ValidationError(ReservationError, ValueError):
    """Malformed or out-of-range reservation request"""

    def __init__(self, field: str, reason: ValidationReason, message: Optional[str] = None):
        self.field = field
        self.reason = reason
        super().__init__(message or f"{field}: {reason.value}")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({"field": self.field, "reason": self.reason.value})
        return payload


class NotFoundError(ReservationError):
    """Referenced reservation or resource does not exist"""

    def __init__(self, entity_kind: str, entity_id: Any):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(f"{entity_kind} {entity_id} not found")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({"entity_kind": self.entity_kind, "id": str(self.entity_id)})
        return payload


class ConflictError(ReservationError):
    """Requested interval is already taken on the resource"""

    def __init__(self, resource_id: int, check_in: datetime, check_out: datetime):
        self.resource_id = resource_id
        self.check_in = check_in
        self.check_out = check_out
        super().__init__(
            f"Resource {resource_id} is not available from "
            f"{check_in.isoformat()} to {check_out.isoformat()}"
        )

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({
            "resource_id": self.resource_id,
            "check_in": self.check_in.isoformat(),
            "check_out": self.check_out.isoformat(),
        })
        return payload


class InvalidTransitionError(ReservationError):
    """State machine guard rejected the operation"""

    def __init__(self, operation: ReservationOperation, current_status: ReservationStatus,
                 reason: Optional[str] = None):
        self.operation = operation
        self.current_status = current_status
        self.reason = reason
        message = f"Cannot {operation.value} reservation with status {current_status.value}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload.update({
            "operation": self.operation.value,
            "current_status": self.current_status.value,
        })
        if self.reason:
            payload["reason"] = self.reason
        return payload


class ConcurrencyError(ReservationError):
    """A conditional write lost a race against another writer"""

    def __init__(self, reservation_id: Any):
        self.reservation_id = reservation_id
        super().__init__(f"Reservation {reservation_id} was modified concurrently")

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["id"] = str(self.reservation_id)
        return payload
