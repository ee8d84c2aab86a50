"""Service layer modules."""

from slotswapper.services import auth_service, slot_service, swap_service

__all__ = [
    "auth_service",
    "slot_service",
    "swap_service",
]
