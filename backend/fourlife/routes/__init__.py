"""
Register all route modules with the FastAPI app.
"""
from __future__ import annotations

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    from fourlife.routes import lab_run, patterns, playground
    app.include_router(lab_run.router)
    app.include_router(patterns.router)
    app.include_router(playground.router)
