# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import traceback
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from cellswap.core.errors import CellSwapError
from cellswap.core.logger import configure_logging
from cellswap.core.settings import Settings, get_settings

from .routes.replace import REPORT_HEADER
from .routes.replace import router as replace_router

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    # no-op when the CLI has already configured logging
    configure_logging(settings=settings)

    app = FastAPI(title="CellSwap")
    app.state.settings = settings

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[REPORT_HEADER, "Content-Disposition"],
    )

    # ── exception handlers ───────────────────────────────────────────────
    @app.exception_handler(CellSwapError)
    async def _cellswap_ex(request: Request, exc: CellSwapError):
        log.error("%s %s %s -> %s", exc.kind, request.method, request.url.path, exc)
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc), "kind": exc.kind},
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_ex(request: Request, exc: RequestValidationError):
        log.error("VALIDATION ERROR %s %s -> %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=422, content={"error": "Invalid request", "detail": exc.errors()})

    @app.exception_handler(Exception)
    async def _unhandled_ex(request: Request, exc: Exception):
        log.error("UNHANDLED %s %s", request.method, request.url.path)
        log.error("TRACEBACK:\n%s", "".join(traceback.format_exception(exc)))
        return JSONResponse(status_code=500, content={"error": str(exc), "path": request.url.path})

    app.include_router(replace_router)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    # front-end assets; mounted last so the API routes win
    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")
        log.info("Serving static assets from %s", settings.static_dir)

    return app
