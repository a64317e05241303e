"""
HTTP API for sessionjournal.

Agents post events to ``/api/events``; dashboards poll the read endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sessionjournal import __version__
from sessionjournal.core.analytics import build_task_analytics
from sessionjournal.core.errors import IngestionError
from sessionjournal.core.journal import JournalService
from sessionjournal.models.config import JournalConfig
from sessionjournal.utils.logger import get_logger
from sessionjournal.utils.validators import ValidationError, parse_event_body

logger = get_logger(__name__)
router = APIRouter()


def _service(request: Request) -> JournalService:
    return request.app.state.journal


def _failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=exc)
    return _failure(f"Internal server error: {exc}", 500)


# ---------------------------------------------------------------------------
# Ingestion
# ---------------------------------------------------------------------------

@router.post("/api/events")
async def post_event(request: Request):
    """Record one event and acknowledge with the live buffer length."""
    body = await request.body()
    try:
        event = parse_event_body(body)
    except ValidationError as e:
        logger.warning(f"Rejected event: {e.message}")
        return _failure(e.message, 400)

    try:
        # The service lock is a threading lock; keep it off the event loop
        ack = await run_in_threadpool(_service(request).ingest, event)
    except ValidationError as e:
        return _failure(e.message, 400)
    except IngestionError as e:
        return _failure(e.message, 500)

    return ack.to_response()


# ---------------------------------------------------------------------------
# Read path
# ---------------------------------------------------------------------------

@router.get("/api/events")
def get_live_events(request: Request):
    """Get the live buffer."""
    return _service(request).live_events()


@router.get("/api/events/saved")
def get_saved_events(request: Request, session_id: str | None = None):
    """Get the archive, optionally filtered to one session."""
    return _service(request).archived_events(session_id)


@router.get("/api/analytics")
def get_analytics(request: Request):
    """Per-task analytics over the archive."""
    tasks = build_task_analytics(_service(request).archived_events())
    if not tasks:
        return {"tasks": [], "message": "No analytics data available yet"}
    return {"tasks": [t.model_dump(mode="json") for t in tasks]}


@router.get("/health")
def health(request: Request):
    """Health check."""
    return {
        "status": "ok",
        "version": __version__,
        "state": _service(request).state().value,
    }


def create_app(
    config: JournalConfig | None = None,
    service: JournalService | None = None,
) -> FastAPI:
    """
    Create the HTTP application.

    Args:
        config: Configuration (loaded from file/environment if omitted)
        service: Journal service to serve (built from config if omitted)

    Returns:
        FastAPI application
    """
    config = config or JournalConfig.load()
    service = service or JournalService.from_config(config)

    app = FastAPI(title="sessionjournal", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    app.add_exception_handler(Exception, _unhandled_error)
    app.state.journal = service
    app.state.config = config
    app.include_router(router)

    return app
