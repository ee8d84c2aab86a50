"""SQLAlchemy ORM models for users, calendar slots and swap requests."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import ForeignKey, Index, String, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from slotswapper.db.base import Base
from slotswapper.db.enums import DEFAULT_SLOT_STATUS, SwapRequestStatus


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Identity
# =============================================================================

class User(Base):
    """
    Application user.

    Immutable for the swap workflow; slots and requests only reference the id.
    """
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    slots: Mapped[list["Slot"]] = relationship(
        back_populates="owner", cascade="all, delete", passive_deletes=True
    )


# =============================================================================
# Calendar Slots
# =============================================================================

class Slot(Base):
    """
    A user's calendar time block.

    Ownership (user_id) moves between users when a swap is accepted.
    status is SWAP_PENDING iff exactly one PENDING swap request references
    the slot; only the swap coordinator sets or clears that state.
    """
    __tablename__ = "events"
    __table_args__ = (
        Index("idx_events_user_start", "user_id", "start_time"),
        Index("idx_events_status", "status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    start_time: Mapped[datetime] = mapped_column(nullable=False)
    end_time: Mapped[datetime] = mapped_column(nullable=False)
    status: Mapped[str] = mapped_column(
        String(20),
        default=DEFAULT_SLOT_STATUS.value,
        server_default=DEFAULT_SLOT_STATUS.value,
        nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="slots")


# =============================================================================
# Swap Requests
# =============================================================================

class SwapRequest(Base):
    """
    Proposal to exchange ownership of two slots.

    owner_id is the target slot's owner at creation time. Never deleted:
    once ACCEPTED or REJECTED the row is the permanent record of the swap.
    Slot references are nulled if the owner later deletes a (free) slot.
    """
    __tablename__ = "swap_requests"
    __table_args__ = (
        Index("idx_swap_requests_owner", "owner_id", "created_at"),
        Index("idx_swap_requests_requester", "requester_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    requester_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    requester_slot_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("events.id", ondelete="SET NULL"),
        nullable=True
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False
    )
    owner_slot_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid,
        ForeignKey("events.id", ondelete="SET NULL"),
        nullable=True
    )
    status: Mapped[str] = mapped_column(
        String(20),
        default=SwapRequestStatus.PENDING.value,
        server_default=SwapRequestStatus.PENDING.value,
        nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        default=utcnow,
        server_default=func.now(),
        nullable=False
    )
