"""qrguard: FastAPI gateway application.

Issues encrypted member QR tokens and resolves scanned QR text back
to member records.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from qrguard.auth import make_api_key_checker
from qrguard.codec import Codec
from qrguard.config import QrGuardConfig, load_config
from qrguard.errors import CryptoError, NotFoundError
from qrguard.resolver import Resolver
from qrguard.routes import members, meta, scan
from qrguard.store import InMemoryMemberStore, MemberStore, load_members

logger = logging.getLogger("qrguard")
audit_logger = logging.getLogger("qrguard.audit")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: seed the member store. Shutdown: log."""
    config: QrGuardConfig = app.state.config
    if config.members_file:
        load_members(app.state.store, Path(config.members_file))
    if not config.passphrase:
        logger.warning("No passphrase configured: QR tokens are issued unencrypted")
    logger.info("qrguard gateway ready")
    yield
    logger.info("qrguard gateway shut down")


def create_app(
    config: QrGuardConfig | None = None,
    store: MemberStore | None = None,
) -> FastAPI:
    """Application factory."""
    if config is None:
        config = load_config()

    app = FastAPI(
        title="qrguard",
        description="Encrypted member QR tokens and scan resolution",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.store = store if store is not None else InMemoryMemberStore()
    app.state.codec = Codec(config.passphrase)
    app.state.resolver = Resolver(config.passphrase)

    check_key = make_api_key_checker(config.api_key)

    # ── Exception handlers ────────────────────────────────────

    @app.exception_handler(NotFoundError)
    async def not_found_handler(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content={"detail": "Member not found"})

    @app.exception_handler(CryptoError)
    async def crypto_handler(request: Request, exc: CryptoError):
        logger.error("Token codec failure on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Token generation failed"})

    # ── Audit middleware ──────────────────────────────────────

    @app.middleware("http")
    async def audit_log(request: Request, call_next):
        start = time.monotonic()
        response = await call_next(request)
        elapsed = time.monotonic() - start
        audit_logger.info(
            "%s %s %d %.3fs",
            request.method,
            request.url.path,
            response.status_code,
            elapsed,
        )
        return response

    # ── Routers ───────────────────────────────────────────────

    app.include_router(meta.router, dependencies=[Depends(check_key)])
    app.include_router(members.router, dependencies=[Depends(check_key)])
    app.include_router(scan.router, dependencies=[Depends(check_key)])

    return app
