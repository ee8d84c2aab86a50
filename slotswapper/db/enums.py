"""Enum definitions for slot and swap request states."""

from enum import Enum


class SlotStatus(str, Enum):
    """
    Lifecycle state of a calendar slot.

    - BUSY: owned and not offered for exchange
    - SWAPPABLE: offered for exchange
    - SWAP_PENDING: locked by exactly one pending swap request
    """
    BUSY = "BUSY"
    SWAPPABLE = "SWAPPABLE"
    SWAP_PENDING = "SWAP_PENDING"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid slot status."""
        return value in cls._value2member_map_

    @classmethod
    def owner_settable(cls) -> list[str]:
        """Statuses an owner may set directly when editing a slot."""
        return [cls.BUSY.value, cls.SWAPPABLE.value]


class SwapRequestStatus(str, Enum):
    """
    Swap request lifecycle.

        PENDING → ACCEPTED
        PENDING → REJECTED

    ACCEPTED and REJECTED are terminal.
    """
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"

    @property
    def is_terminal(self) -> bool:
        return self is not SwapRequestStatus.PENDING


DEFAULT_SLOT_STATUS = SlotStatus.BUSY
