"""Routes: interactive parameter playground."""
from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from fourlife.config import PLAYGROUND_TIMEOUT_SECONDS
from fourlife.models import PlaygroundConfig
from fourlife.state import lab_service

_log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/api/playground")
async def playground_run(req: PlaygroundConfig, request: Request):
    """
    Run one agent simulation with the posted parameters. The config goes to
    playground_api.py on stdin; its stdout (life histories, metrics, insights)
    is returned as-is.
    """
    try:
        config = req.model_dump(exclude_none=True)
        return await lab_service(request).run_playground(config, PLAYGROUND_TIMEOUT_SECONDS)
    except Exception as e:
        _log.exception("Playground simulation failed")
        return JSONResponse({"error": "Simulation failed", "details": str(e)}, status_code=500)
