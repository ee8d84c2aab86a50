"""Pydantic schemas for API request/response models."""

from slotswapper.schemas.auth import (
    AuthResponse,
    LoginRequest,
    SignupRequest,
    TokenPayload,
    UserRead,
    UserSession,
)
from slotswapper.schemas.slot import (
    MessageResponse,
    SlotCreate,
    SlotListResponse,
    SlotRead,
    SlotResponse,
    SlotUpdate,
    SwappableSlotListResponse,
    SwappableSlotRead,
)
from slotswapper.schemas.swap import (
    SwapProposal,
    SwapRequestCreatedResponse,
    SwapRequestListResponse,
    SwapRequestRead,
    SwapResponseBody,
)

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "SignupRequest",
    "TokenPayload",
    "UserRead",
    "UserSession",
    "MessageResponse",
    "SlotCreate",
    "SlotListResponse",
    "SlotRead",
    "SlotResponse",
    "SlotUpdate",
    "SwappableSlotListResponse",
    "SwappableSlotRead",
    "SwapProposal",
    "SwapRequestCreatedResponse",
    "SwapRequestListResponse",
    "SwapRequestRead",
    "SwapResponseBody",
]
