"""Pydantic schemas for swap requests."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SwapProposal(BaseModel):
    """Request to swap one of my slots for someone else's."""
    model_config = ConfigDict(populate_by_name=True)

    my_slot_id: UUID | None = Field(None, alias="mySlotId")
    their_slot_id: UUID | None = Field(None, alias="theirSlotId")


class SwapResponseBody(BaseModel):
    """Owner's decision on a pending request."""
    accept: bool


class SwapRequestRead(BaseModel):
    """Swap request with both parties and both slots denormalized."""
    id: UUID
    requester_id: UUID
    requester_slot_id: UUID | None
    owner_id: UUID
    owner_slot_id: UUID | None
    status: str
    created_at: datetime
    updated_at: datetime

    requester_name: str | None = None
    requester_email: str | None = None
    owner_name: str | None = None
    owner_email: str | None = None

    requester_slot_title: str | None = None
    requester_start: datetime | None = None
    requester_end: datetime | None = None
    owner_slot_title: str | None = None
    owner_start: datetime | None = None
    owner_end: datetime | None = None


class SwapRequestCreatedResponse(BaseModel):
    message: str
    swap_request: SwapRequestRead = Field(..., serialization_alias="swapRequest")


class SwapRequestListResponse(BaseModel):
    requests: list[SwapRequestRead]
