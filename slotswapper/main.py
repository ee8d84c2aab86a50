"""FastAPI application entry point."""
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session

from slotswapper.core.config import settings
from slotswapper.core.deps import get_db
from slotswapper.core.errors import SlotSwapperError
from slotswapper.core.structured_logging import RequestIDMiddleware, build_log_context

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


# ============================================================================
# FastAPI App
# ============================================================================

app = FastAPI(
    title="SlotSwapper API",
    description="Calendar slots and peer-to-peer slot swaps",
    version=settings.VERSION,
    docs_url="/docs" if settings.ENV == "dev" else None,
    redoc_url="/redoc" if settings.ENV == "dev" else None,
)

# CORS middleware - must be added before routers
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(RequestIDMiddleware)


# ============================================================================
# Error Handling
# ============================================================================

async def handle_slotswapper_error(request: Request, exc: SlotSwapperError):
    """Render expected service errors with their mapped status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_unexpected_error(request: Request, exc: Exception):
    """Log full detail, answer with an opaque 500."""
    logger.exception(
        "Unhandled error",
        extra=build_log_context(route=request.url.path, method=request.method),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


app.add_exception_handler(SlotSwapperError, handle_slotswapper_error)
app.add_exception_handler(Exception, handle_unexpected_error)


# ============================================================================
# Routers
# ============================================================================

from slotswapper.routers import auth_router, slots_router, swaps_router

app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(slots_router, prefix="/events", tags=["events"])
app.include_router(swaps_router, tags=["swaps"])


# ============================================================================
# Health Check
# ============================================================================

@app.get("/health")
def health(db: Session = Depends(get_db)):
    """
    Health check endpoint.

    Verifies database connectivity and returns environment info.
    """
    db.execute(text("SELECT 1"))
    return {"status": "ok", "env": settings.ENV, "version": settings.VERSION}
