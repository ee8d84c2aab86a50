"""Swap coordinator - propose, accept and reject slot exchanges.

Each operation moves exactly three records (two slots and one request)
together. The next state is computed by ``apply_transition`` from a
snapshot read under row locks, and written back inside one store
transaction, so no caller ever observes half a swap:

    propose:  (SWAPPABLE, SWAPPABLE, -)        -> (SWAP_PENDING, SWAP_PENDING, PENDING)
    accept:   (SWAP_PENDING, SWAP_PENDING, PENDING) -> (BUSY, BUSY, ACCEPTED), owners exchanged
    reject:   (SWAP_PENDING, SWAP_PENDING, PENDING) -> (SWAPPABLE, SWAPPABLE, REJECTED)
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from uuid import UUID

from slotswapper.core.errors import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ValidationError,
)
from slotswapper.core.structured_logging import build_log_context
from slotswapper.db.enums import SlotStatus, SwapRequestStatus
from slotswapper.db.models import Slot, SwapRequest
from slotswapper.db.repository import RecordStore, SwapRequestView

logger = logging.getLogger(__name__)


# =============================================================================
# State machine
# =============================================================================

class SwapAction(str, Enum):
    PROPOSE = "propose"
    ACCEPT = "accept"
    REJECT = "reject"


@dataclass(frozen=True)
class SlotState:
    owner_id: UUID
    status: SlotStatus


@dataclass(frozen=True)
class SwapSnapshot:
    """The two slots of a swap and its request status (None before proposal)."""

    requester_slot: SlotState
    owner_slot: SlotState
    request_status: SwapRequestStatus | None = None


def apply_transition(snapshot: SwapSnapshot, action: SwapAction) -> SwapSnapshot:
    """
    Return the snapshot that follows ``action``.

    Pure function: nothing is written here.

    Raises:
        ConflictError: the snapshot does not admit the action
    """
    if action is SwapAction.PROPOSE:
        if snapshot.request_status is not None:
            raise ConflictError("Swap request already exists")
        if snapshot.requester_slot.status is not SlotStatus.SWAPPABLE:
            raise ConflictError("Your slot must be SWAPPABLE")
        if snapshot.owner_slot.status is not SlotStatus.SWAPPABLE:
            raise ConflictError("Requested slot must be SWAPPABLE")
        return SwapSnapshot(
            requester_slot=replace(snapshot.requester_slot, status=SlotStatus.SWAP_PENDING),
            owner_slot=replace(snapshot.owner_slot, status=SlotStatus.SWAP_PENDING),
            request_status=SwapRequestStatus.PENDING,
        )

    if snapshot.request_status is not SwapRequestStatus.PENDING:
        raise ConflictError("Swap request already processed")
    if (
        snapshot.requester_slot.status is not SlotStatus.SWAP_PENDING
        or snapshot.owner_slot.status is not SlotStatus.SWAP_PENDING
    ):
        raise ConflictError("Swap slots are no longer locked by this request")

    if action is SwapAction.ACCEPT:
        return SwapSnapshot(
            requester_slot=SlotState(
                owner_id=snapshot.owner_slot.owner_id, status=SlotStatus.BUSY
            ),
            owner_slot=SlotState(
                owner_id=snapshot.requester_slot.owner_id, status=SlotStatus.BUSY
            ),
            request_status=SwapRequestStatus.ACCEPTED,
        )

    return SwapSnapshot(
        requester_slot=replace(snapshot.requester_slot, status=SlotStatus.SWAPPABLE),
        owner_slot=replace(snapshot.owner_slot, status=SlotStatus.SWAPPABLE),
        request_status=SwapRequestStatus.REJECTED,
    )


def _slot_state(slot: Slot) -> SlotState:
    return SlotState(owner_id=slot.user_id, status=SlotStatus(slot.status))


def _write_slots(
    store: RecordStore,
    requester_slot: Slot,
    owner_slot: Slot,
    snapshot: SwapSnapshot,
) -> None:
    for slot, state in (
        (requester_slot, snapshot.requester_slot),
        (owner_slot, snapshot.owner_slot),
    ):
        if slot.user_id != state.owner_id:
            store.reassign_slot(slot, state.owner_id, state.status)
        else:
            store.set_slot_status(slot, state.status)


# =============================================================================
# Operations
# =============================================================================

def propose_swap(
    store: RecordStore,
    requester_id: UUID,
    my_slot_id: UUID | None,
    their_slot_id: UUID | None,
) -> SwapRequestView:
    """
    Offer my_slot_id in exchange for their_slot_id.

    Locks both slots (SWAP_PENDING) and creates a PENDING request in one
    transaction. The target slot's current owner becomes the request owner.

    Raises:
        ValidationError: missing ids, same slot twice, or target already mine
        NotFoundError: my slot missing/not mine, or target missing
        ConflictError: either slot not SWAPPABLE
    """
    if not my_slot_id or not their_slot_id:
        raise ValidationError("Both mySlotId and theirSlotId are required")
    if my_slot_id == their_slot_id:
        raise ValidationError("Cannot swap a slot with itself")

    with store.transaction():
        my_slot, their_slot = store.lock_slots(my_slot_id, their_slot_id)

        if not my_slot or my_slot.user_id != requester_id:
            raise NotFoundError("Your slot not found")
        if not their_slot:
            raise NotFoundError("Requested slot not found")
        if their_slot.user_id == requester_id:
            raise ValidationError("Cannot swap with your own slot")

        snapshot = apply_transition(
            SwapSnapshot(
                requester_slot=_slot_state(my_slot),
                owner_slot=_slot_state(their_slot),
            ),
            SwapAction.PROPOSE,
        )

        request = store.add_swap_request(
            SwapRequest(
                requester_id=requester_id,
                requester_slot_id=my_slot.id,
                owner_id=their_slot.user_id,
                owner_slot_id=their_slot.id,
                status=snapshot.request_status.value,
            )
        )
        _write_slots(store, my_slot, their_slot, snapshot)
        request_id = request.id

    logger.info(
        "Swap proposed",
        extra=build_log_context(
            user_id=str(requester_id), swap_request_id=str(request_id)
        ),
    )
    return store.get_swap_request_detail(request_id)


def respond_to_swap(
    store: RecordStore,
    responder_id: UUID,
    request_id: UUID,
    accept: bool,
) -> SwapRequest:
    """
    Accept or reject a pending request addressed to responder_id.

    Accept exchanges the two slots' owners and sets both BUSY; reject
    returns both slots to SWAPPABLE. Either way the request becomes
    terminal.

    Raises:
        NotFoundError: request does not exist
        ForbiddenError: responder is not the request's owner
        ConflictError: request already ACCEPTED or REJECTED
    """
    with store.transaction():
        request = store.lock_swap_request(request_id)
        if not request:
            raise NotFoundError("Swap request not found")
        if request.owner_id != responder_id:
            raise ForbiddenError("Not authorized to respond to this request")
        if SwapRequestStatus(request.status).is_terminal:
            raise ConflictError("Swap request already processed")

        requester_slot, owner_slot = store.lock_slots(
            request.requester_slot_id, request.owner_slot_id
        )
        if not requester_slot or not owner_slot:
            raise ConflictError("Swap slots are no longer available")

        action = SwapAction.ACCEPT if accept else SwapAction.REJECT
        snapshot = apply_transition(
            SwapSnapshot(
                requester_slot=_slot_state(requester_slot),
                owner_slot=_slot_state(owner_slot),
                request_status=SwapRequestStatus(request.status),
            ),
            action,
        )
        _write_slots(store, requester_slot, owner_slot, snapshot)
        store.set_swap_request_status(request, snapshot.request_status)

    logger.info(
        "Swap %s",
        "accepted" if accept else "rejected",
        extra=build_log_context(
            user_id=str(responder_id), swap_request_id=str(request_id)
        ),
    )
    return request


def list_incoming_requests(store: RecordStore, user_id: UUID) -> list[SwapRequestView]:
    """Requests where user_id owns the target slot, newest first."""
    return store.list_incoming_requests(user_id)


def list_outgoing_requests(store: RecordStore, user_id: UUID) -> list[SwapRequestView]:
    """Requests user_id made, newest first."""
    return store.list_outgoing_requests(user_id)
