"""
Process-wide service wiring.

The LabService (interpreter locator, artifact cache, in-flight runs) is
created once per application and stored on `app.state`; routes fetch it from
the request instead of importing module globals, so tests can swap it.
"""
from __future__ import annotations

from fastapi import FastAPI, Request

from fourlife.artifacts import ArtifactCache, LabService
from fourlife.config import (
    GAME_DIR, PROBE_TIMEOUT_SECONDS, PUBLIC_DIR, PYTHON_CANDIDATES, STDERR_EXCERPT_CHARS,
)
from fourlife.runner import InterpreterLocator


def build_lab_service() -> LabService:
    return LabService(
        game_dir=GAME_DIR,
        cache=ArtifactCache(PUBLIC_DIR),
        locator=InterpreterLocator(PYTHON_CANDIDATES, probe_timeout=PROBE_TIMEOUT_SECONDS),
        stderr_limit=STDERR_EXCERPT_CHARS,
    )


def install(app: FastAPI) -> LabService:
    lab = build_lab_service()
    app.state.lab = lab
    return lab


def lab_service(request: Request) -> LabService:
    return request.app.state.lab
