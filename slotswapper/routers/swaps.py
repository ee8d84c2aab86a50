"""Swap router - marketplace of swappable slots and the request workflow."""

from uuid import UUID

from fastapi import APIRouter, Depends, status

from slotswapper.core.deps import get_current_session, get_store
from slotswapper.db.repository import RecordStore, SwapRequestView
from slotswapper.schemas.auth import UserSession
from slotswapper.schemas.slot import (
    MessageResponse,
    SlotRead,
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
from slotswapper.services import slot_service, swap_service

router = APIRouter()


def _to_swap_request_read(view: SwapRequestView) -> SwapRequestRead:
    request = view.request
    return SwapRequestRead(
        id=request.id,
        requester_id=request.requester_id,
        requester_slot_id=request.requester_slot_id,
        owner_id=request.owner_id,
        owner_slot_id=request.owner_slot_id,
        status=request.status,
        created_at=request.created_at,
        updated_at=request.updated_at,
        requester_name=view.requester_name,
        requester_email=view.requester_email,
        owner_name=view.owner_name,
        owner_email=view.owner_email,
        requester_slot_title=view.requester_slot_title,
        requester_start=view.requester_start,
        requester_end=view.requester_end,
        owner_slot_title=view.owner_slot_title,
        owner_start=view.owner_start,
        owner_end=view.owner_end,
    )


@router.get("/swappable-slots", response_model=SwappableSlotListResponse)
def list_swappable_slots(
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """List other users' SWAPPABLE slots with owner name and email."""
    views = slot_service.list_swappable_slots(store, session.user_id)
    return SwappableSlotListResponse(
        slots=[
            SwappableSlotRead(
                **SlotRead.model_validate(view.slot).model_dump(),
                owner_name=view.owner_name,
                owner_email=view.owner_email,
            )
            for view in views
        ]
    )


@router.post(
    "/swap-request",
    response_model=SwapRequestCreatedResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_swap_request(
    data: SwapProposal,
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Propose exchanging one of my SWAPPABLE slots for another user's."""
    view = swap_service.propose_swap(
        store, session.user_id, data.my_slot_id, data.their_slot_id
    )
    return SwapRequestCreatedResponse(
        message="Swap request created successfully",
        swap_request=_to_swap_request_read(view),
    )


@router.post("/swap-response/{request_id}", response_model=MessageResponse)
def respond_to_swap_request(
    request_id: UUID,
    data: SwapResponseBody,
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Accept or reject a pending request addressed to me."""
    swap_service.respond_to_swap(store, session.user_id, request_id, data.accept)
    outcome = "accepted" if data.accept else "rejected"
    return MessageResponse(message=f"Swap {outcome} successfully")


@router.get("/swap-requests/incoming", response_model=SwapRequestListResponse)
def list_incoming_requests(
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Requests for my slots, newest first."""
    views = swap_service.list_incoming_requests(store, session.user_id)
    return SwapRequestListResponse(requests=[_to_swap_request_read(v) for v in views])


@router.get("/swap-requests/outgoing", response_model=SwapRequestListResponse)
def list_outgoing_requests(
    session: UserSession = Depends(get_current_session),
    store: RecordStore = Depends(get_store),
):
    """Requests I made, newest first."""
    views = swap_service.list_outgoing_requests(store, session.user_id)
    return SwapRequestListResponse(requests=[_to_swap_request_read(v) for v in views])
