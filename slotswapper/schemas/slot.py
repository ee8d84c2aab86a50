"""Pydantic schemas for calendar slots.

Request bodies use the camelCase names clients send (``startTime``);
responses use the stored column names. Presence and enum checks are left
to the slot service so they surface as 400 validation errors.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class SlotCreate(BaseModel):
    """Request to create a slot."""
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(None, max_length=255)
    start_time: datetime | None = Field(None, alias="startTime")
    end_time: datetime | None = Field(None, alias="endTime")
    status: str | None = None


class SlotUpdate(BaseModel):
    """Request to update a slot (partial)."""
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = Field(None, max_length=255)
    start_time: datetime | None = Field(None, alias="startTime")
    end_time: datetime | None = Field(None, alias="endTime")
    status: str | None = None


class SlotRead(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    start_time: datetime
    end_time: datetime
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class SwappableSlotRead(SlotRead):
    """Another user's SWAPPABLE slot with its owner's identity."""
    owner_name: str
    owner_email: str


class SlotListResponse(BaseModel):
    events: list[SlotRead]


class SlotResponse(BaseModel):
    message: str
    event: SlotRead


class SwappableSlotListResponse(BaseModel):
    slots: list[SwappableSlotRead]


class MessageResponse(BaseModel):
    message: str
