"""
nftgate.api.main — FastAPI application entry point
=====================================================

Run with::

    uvicorn nftgate.api.main:app --port 3001
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from nftgate.api.deps import get_chain, get_config, get_store  # noqa: E402
from nftgate.api.routes.dashboard import router as dashboard_router  # noqa: E402
from nftgate.api.routes.dashboard import uptime_ms  # noqa: E402
from nftgate.api.routes.relay import router as relay_router  # noqa: E402
from nftgate.api.routes.sessions import router as sessions_router  # noqa: E402
from nftgate.core.sessions import SessionStore  # noqa: E402
from nftgate.core.sweeper import ExpirySweeper  # noqa: E402
from nftgate.errors import InternalError, NftGateError  # noqa: E402

logger = logging.getLogger(__name__)


def _cors_origins() -> list[str]:
    """Resolve allowed CORS origins from env.

    Priority:
      1) CORS_ALLOW_ORIGINS (comma-separated)
      2) FRONTEND_URL (single origin)
    """
    raw = os.getenv("CORS_ALLOW_ORIGINS", "").strip()
    if raw:
        return [origin.strip().rstrip("/") for origin in raw.split(",") if origin.strip()]

    frontend_url = os.getenv("FRONTEND_URL", "").strip()
    if frontend_url:
        return [frontend_url.rstrip("/")]

    return []


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle: start the expiry sweeper, probe the RPC."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    cfg = get_config()
    sweeper = ExpirySweeper(
        get_store(),
        timeout_ms=cfg.session_timeout_ms,
        interval_seconds=cfg.sweep_interval_seconds,
    )
    sweeper.start()
    app.state.sweeper = sweeper

    chain = get_chain()
    if not await chain.is_connected():
        logger.warning("Blockchain RPC is not reachable; wallet checks will fail until it is")

    logger.info(
        "NftGate API started, session timeout %gh, sweep every %gm",
        cfg.session_timeout_hours, cfg.sweep_interval_minutes,
    )
    yield
    sweeper.stop()
    logger.info("NftGate API shutting down")


app = FastAPI(
    title="NftGate Verification API",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "x-api-key"],
)


# ---------------------------------------------------------------------------
# Error mapping: every failure renders as {"error": ...}
# ---------------------------------------------------------------------------
@app.exception_handler(NftGateError)
async def nftgate_error_handler(request: Request, exc: NftGateError):
    if exc.status_code >= 500:
        logger.error(
            "%s %s failed: %s", request.method, request.url.path, exc.message,
            exc_info=exc.__cause__,
        )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = sorted({str(err["loc"][-1]) for err in exc.errors() if err.get("loc")})
    return JSONResponse(
        status_code=400,
        content={"error": "Missing required fields", "fields": fields},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(
        "Unhandled error on %s %s", request.method, request.url.path,
        extra={"path": request.url.path, "method": request.method},
    )
    return JSONResponse(status_code=500, content=InternalError().to_dict())


# Mount routers
app.include_router(sessions_router, prefix="/api")
app.include_router(relay_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")


@app.get("/api/health")
@app.get("/health")
def health(store: SessionStore = Depends(get_store)):
    return {
        "status": "ok",
        "timestamp": datetime.now(UTC).isoformat(),
        "uptime": uptime_ms(),
        "sessions": {
            "total": len(store),
            "discord": store.discord_count,
        },
    }
