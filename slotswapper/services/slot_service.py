"""Slot registry - lifecycle of a user's own calendar slots.

Owners may create, edit and delete their slots freely, except while a
slot is SWAP_PENDING: that lock belongs to the swap coordinator.
"""

import logging
from uuid import UUID

from slotswapper.core.errors import ConflictError, NotFoundError, ValidationError
from slotswapper.core.structured_logging import build_log_context
from slotswapper.db.enums import DEFAULT_SLOT_STATUS, SlotStatus
from slotswapper.db.models import Slot
from slotswapper.db.repository import RecordStore, SwappableSlotView
from slotswapper.schemas.slot import SlotCreate, SlotUpdate

logger = logging.getLogger(__name__)


def list_slots(store: RecordStore, user_id: UUID) -> list[Slot]:
    """List a user's slots, earliest start first."""
    return store.list_slots_by_owner(user_id)


def list_swappable_slots(store: RecordStore, user_id: UUID) -> list[SwappableSlotView]:
    """List other users' SWAPPABLE slots with their owners' identity."""
    return store.list_swappable_slots(exclude_user_id=user_id)


def create_slot(store: RecordStore, user_id: UUID, data: SlotCreate) -> Slot:
    """
    Create a slot owned by user_id.

    title, start_time and end_time are required; status defaults to BUSY.
    SWAP_PENDING is accepted on create as the public API always has; such a
    slot stays locked until the owner account is removed.

    Raises:
        ValidationError: missing field or unknown status
    """
    title = (data.title or "").strip()
    if not title or data.start_time is None or data.end_time is None:
        raise ValidationError("Title, startTime, and endTime are required")

    status = data.status or DEFAULT_SLOT_STATUS.value
    if not SlotStatus.has_value(status):
        raise ValidationError("Invalid status")

    with store.transaction():
        slot = store.add_slot(
            Slot(
                user_id=user_id,
                title=title,
                start_time=data.start_time,
                end_time=data.end_time,
                status=status,
            )
        )

    logger.info(
        "Slot created",
        extra=build_log_context(user_id=str(user_id), slot_id=str(slot.id)),
    )
    return slot


def _get_editable_slot(store: RecordStore, user_id: UUID, slot_id: UUID) -> Slot:
    """
    Load a slot the caller owns and is allowed to change.

    Not-owned and nonexistent slots look the same to the caller.
    """
    slot = store.get_slot_for_owner(slot_id, user_id, for_update=True)
    if not slot:
        raise NotFoundError("Event not found")
    if slot.status == SlotStatus.SWAP_PENDING.value:
        raise ConflictError("Cannot modify event with pending swap")
    return slot


def update_slot(
    store: RecordStore,
    user_id: UUID,
    slot_id: UUID,
    data: SlotUpdate,
) -> Slot:
    """
    Apply a partial update to a slot.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    Owners may only move a slot between BUSY and SWAPPABLE.

    Raises:
        NotFoundError: slot missing or not owned by user_id
        ConflictError: slot is locked by a pending swap
        ValidationError: invalid status, empty field or nothing to update
    """
    with store.transaction():
        slot = _get_editable_slot(store, user_id, slot_id)

        update_data = data.model_dump(exclude_unset=True)
        if "status" in update_data and update_data["status"] not in SlotStatus.owner_settable():
            raise ValidationError("Invalid status")
        if not update_data:
            raise ValidationError("No fields to update")

        if "title" in update_data:
            update_data["title"] = (update_data["title"] or "").strip()
        for field, value in update_data.items():
            if value is None or value == "":
                raise ValidationError(f"{field} cannot be empty")
            setattr(slot, field, value)

    logger.info(
        "Slot updated",
        extra=build_log_context(user_id=str(user_id), slot_id=str(slot_id)),
    )
    return slot


def delete_slot(store: RecordStore, user_id: UUID, slot_id: UUID) -> None:
    """
    Delete a slot.

    Raises:
        NotFoundError: slot missing or not owned by user_id
        ConflictError: slot is locked by a pending swap
    """
    with store.transaction():
        slot = _get_editable_slot(store, user_id, slot_id)
        store.delete_slot(slot)

    logger.info(
        "Slot deleted",
        extra=build_log_context(user_id=str(user_id), slot_id=str(slot_id)),
    )
