"""API routers."""

from slotswapper.routers.auth import router as auth_router
from slotswapper.routers.slots import router as slots_router
from slotswapper.routers.swaps import router as swaps_router

__all__ = [
    "auth_router",
    "slots_router",
    "swaps_router",
]
