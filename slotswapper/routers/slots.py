"""Slots router - the caller's own calendar events."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from slotswapper.core.deps import get_current_session, get_store
from slotswapper.db.repository import RecordStore
from slotswapper.schemas.auth import UserSession
from slotswapper.schemas.slot import (
    MessageResponse,
    SlotCreate,
    SlotListResponse,
    SlotRead,
    SlotResponse,
    SlotUpdate,
)
from slotswapper.services import slot_service

router = APIRouter()


@router.get("", response_model=SlotListResponse)
def list_events(
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """List the caller's slots, earliest first."""
    slots = slot_service.list_slots(store, session.user_id)
    return SlotListResponse(events=[SlotRead.model_validate(s) for s in slots])


@router.post("", response_model=SlotResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    data: SlotCreate,
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Create a slot (status defaults to BUSY)."""
    slot = slot_service.create_slot(store, session.user_id, data)
    return SlotResponse(
        message="Event created successfully", event=SlotRead.model_validate(slot)
    )


@router.put("/{event_id}", response_model=SlotResponse)
def update_event(
    event_id: UUID,
    data: SlotUpdate,
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Partially update a slot that is not locked by a pending swap."""
    slot = slot_service.update_slot(store, session.user_id, event_id, data)
    return SlotResponse(
        message="Event updated successfully", event=SlotRead.model_validate(slot)
    )


@router.delete("/{event_id}", response_model=MessageResponse)
def delete_event(
    event_id: UUID,
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Delete a slot that is not locked by a pending swap."""
    slot_service.delete_slot(store, session.user_id, event_id)
    return MessageResponse(message="Event deleted successfully")
