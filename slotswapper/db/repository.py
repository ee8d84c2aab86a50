"""Record store - the typed repository every service reads and writes through.

One RecordStore wraps one SQLAlchemy session. Methods are named after the
lookup or write they perform; compound writes are grouped with
``transaction()`` so they commit together or not at all.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.orm import Session, aliased

from slotswapper.db.enums import SlotStatus, SwapRequestStatus
from slotswapper.db.models import Slot, SwapRequest, User, utcnow


@dataclass(frozen=True)
class SwappableSlotView:
    """A SWAPPABLE slot joined with its owner's identity."""

    slot: Slot
    owner_name: str
    owner_email: str


@dataclass(frozen=True)
class SwapRequestView:
    """A swap request joined with both parties and both slots."""

    request: SwapRequest
    requester_name: str | None
    requester_email: str | None
    owner_name: str | None
    owner_email: str | None
    requester_slot_title: str | None
    requester_start: datetime | None
    requester_end: datetime | None
    owner_slot_title: str | None
    owner_start: datetime | None
    owner_end: datetime | None


RequesterUser = aliased(User, name="requester_user")
OwnerUser = aliased(User, name="owner_user")
RequesterSlot = aliased(Slot, name="requester_slot")
OwnerSlot = aliased(Slot, name="owner_slot")


class RecordStore:
    """Durable storage for users, slots and swap requests."""

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator["RecordStore"]:
        """Commit everything done inside the block, or roll all of it back."""
        try:
            yield self
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    # =========================================================================
    # Users
    # =========================================================================

    def get_user(self, user_id: UUID) -> User | None:
        return self.db.get(User, user_id)

    def get_user_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(User.email == email)
        ).scalar_one_or_none()

    def add_user(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    # =========================================================================
    # Slots
    # =========================================================================

    def get_slot(self, slot_id: UUID) -> Slot | None:
        return self.db.get(Slot, slot_id)

    def get_slot_for_owner(
        self, slot_id: UUID, user_id: UUID, *, for_update: bool = False
    ) -> Slot | None:
        """Get a slot only if user_id currently owns it."""
        query = select(Slot).where(Slot.id == slot_id, Slot.user_id == user_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        return self.db.execute(query).scalar_one_or_none()

    def lock_slot(self, slot_id: UUID) -> Slot | None:
        """Read a slot with a row lock held until the transaction ends."""
        return self.db.execute(
            select(Slot)
            .where(Slot.id == slot_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def lock_slots(self, *slot_ids: UUID | None) -> list[Slot | None]:
        """
        Lock several slots, returned in argument order.

        Locks are taken in id order so two transactions locking the same
        pair cannot deadlock.
        """
        locked = {
            slot_id: self.lock_slot(slot_id)
            for slot_id in sorted({s for s in slot_ids if s is not None}, key=str)
        }
        return [locked.get(slot_id) if slot_id else None for slot_id in slot_ids]

    def list_slots_by_owner(self, user_id: UUID) -> list[Slot]:
        return list(
            self.db.execute(
                select(Slot)
                .where(Slot.user_id == user_id)
                .order_by(Slot.start_time.asc(), Slot.created_at.asc())
            ).scalars()
        )

    def list_swappable_slots(self, exclude_user_id: UUID) -> list[SwappableSlotView]:
        """SWAPPABLE slots owned by anyone but exclude_user_id, soonest first."""
        rows = self.db.execute(
            select(Slot, User.name, User.email)
            .join(User, Slot.user_id == User.id)
            .where(
                Slot.status == SlotStatus.SWAPPABLE.value,
                Slot.user_id != exclude_user_id,
            )
            .order_by(Slot.start_time.asc())
        ).all()
        return [
            SwappableSlotView(slot=slot, owner_name=name, owner_email=email)
            for slot, name, email in rows
        ]

    def add_slot(self, slot: Slot) -> Slot:
        self.db.add(slot)
        self.db.flush()
        return slot

    def delete_slot(self, slot: Slot) -> None:
        self.db.delete(slot)
        self.db.flush()

    def set_slot_status(self, slot: Slot, status: SlotStatus) -> Slot:
        slot.status = status.value
        self.db.flush()
        return slot

    def reassign_slot(self, slot: Slot, user_id: UUID, status: SlotStatus) -> Slot:
        """Move a slot to a new owner and set its status in one write."""
        slot.user_id = user_id
        slot.status = status.value
        self.db.flush()
        return slot

    # =========================================================================
    # Swap Requests
    # =========================================================================

    def get_swap_request(self, request_id: UUID) -> SwapRequest | None:
        return self.db.get(SwapRequest, request_id)

    def lock_swap_request(self, request_id: UUID) -> SwapRequest | None:
        return self.db.execute(
            select(SwapRequest)
            .where(SwapRequest.id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def add_swap_request(self, request: SwapRequest) -> SwapRequest:
        self.db.add(request)
        self.db.flush()
        return request

    def set_swap_request_status(
        self, request: SwapRequest, status: SwapRequestStatus
    ) -> SwapRequest:
        request.status = status.value
        request.updated_at = utcnow()
        self.db.flush()
        return request

    def get_swap_request_detail(self, request_id: UUID) -> SwapRequestView | None:
        row = self.db.execute(
            self._swap_request_detail_query().where(SwapRequest.id == request_id)
        ).first()
        return _to_view(row) if row else None

    def list_incoming_requests(self, user_id: UUID) -> list[SwapRequestView]:
        """Requests addressed to user_id, newest first."""
        rows = self.db.execute(
            self._swap_request_detail_query()
            .where(SwapRequest.owner_id == user_id)
            .order_by(SwapRequest.created_at.desc())
        ).all()
        return [_to_view(row) for row in rows]

    def list_outgoing_requests(self, user_id: UUID) -> list[SwapRequestView]:
        """Requests made by user_id, newest first."""
        rows = self.db.execute(
            self._swap_request_detail_query()
            .where(SwapRequest.requester_id == user_id)
            .order_by(SwapRequest.created_at.desc())
        ).all()
        return [_to_view(row) for row in rows]

    @staticmethod
    def _swap_request_detail_query() -> Select:
        # Slots are outer-joined: a slot freed after the swap may be deleted
        return (
            select(
                SwapRequest,
                RequesterUser.name,
                RequesterUser.email,
                OwnerUser.name,
                OwnerUser.email,
                RequesterSlot.title,
                RequesterSlot.start_time,
                RequesterSlot.end_time,
                OwnerSlot.title,
                OwnerSlot.start_time,
                OwnerSlot.end_time,
            )
            .join(RequesterUser, SwapRequest.requester_id == RequesterUser.id)
            .join(OwnerUser, SwapRequest.owner_id == OwnerUser.id)
            .outerjoin(RequesterSlot, SwapRequest.requester_slot_id == RequesterSlot.id)
            .outerjoin(OwnerSlot, SwapRequest.owner_slot_id == OwnerSlot.id)
        )


def _to_view(row) -> SwapRequestView:
    (
        request,
        requester_name,
        requester_email,
        owner_name,
        owner_email,
        requester_slot_title,
        requester_start,
        requester_end,
        owner_slot_title,
        owner_start,
        owner_end,
    ) = row
    return SwapRequestView(
        request=request,
        requester_name=requester_name,
        requester_email=requester_email,
        owner_name=owner_name,
        owner_email=owner_email,
        requester_slot_title=requester_slot_title,
        requester_start=requester_start,
        requester_end=requester_end,
        owner_slot_title=owner_slot_title,
        owner_start=owner_start,
        owner_end=owner_end,
    )
