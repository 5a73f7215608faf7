from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from fourlife import state
from fourlife.config import BACKEND_VERSION, CORS_ORIGINS, LOG_LEVEL, validate_config
from fourlife.routes import register_routes

logging.getLogger("fourlife").setLevel(LOG_LEVEL)
_log = logging.getLogger(__name__)

validate_config()

app = FastAPI(title="4-Life Lab API", version=BACKEND_VERSION)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
    expose_headers=["x-web4-lab-kind", "x-web4-lab-source"],
)
state.install(app)
register_routes(app)


@app.middleware("http")
async def access_log_middleware(request: Request, call_next):
    """One line per request: method, path, query, status, duration."""
    started = time.time()
    resp = await call_next(request)
    dur_ms = (time.time() - started) * 1000.0
    _log.info(
        "%s %s%s -> %s (%.0fms)",
        request.method,
        request.url.path,
        f"?{request.url.query}" if request.url.query else "",
        getattr(resp, "status_code", 0),
        dur_ms,
    )
    return resp


@app.get("/health")
def health():
    return {"ok": True, "version": BACKEND_VERSION}
