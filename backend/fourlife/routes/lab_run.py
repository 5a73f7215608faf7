"""Routes: lab-run orchestration and the public artifact cache."""
from __future__ import annotations

import logging
from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from fourlife.artifacts import all_descriptors, descriptor_for
from fourlife.config import NUM_LIVES_RANGE, TICKS_RANGE, TIMEOUT_MS_RANGE
from fourlife.errors import ArtifactNotFoundError
from fourlife.models import ALL_KINDS, RunRequest
from fourlife.state import lab_service
from fourlife.utils import is_kind, parse_action, parse_int_param, parse_pattern_source

_log = logging.getLogger(__name__)

router = APIRouter()

SOURCE_CACHE = "public-cache"
SOURCE_FRESH = "ran-python"


def _headers(kind: str, source: str) -> dict:
    return {"x-web4-lab-kind": kind, "x-web4-lab-source": source}


def build_run_request(
    kind: str,
    action: Optional[str],
    timeout_ms: Optional[str],
    num_lives: Optional[str],
    ticks: Optional[str],
    pattern_source: Optional[str],
) -> RunRequest:
    return RunRequest(
        kind=kind,  # type: ignore[arg-type]
        action=parse_action(action),  # type: ignore[arg-type]
        timeout_ms=parse_int_param(timeout_ms, TIMEOUT_MS_RANGE),
        num_lives=parse_int_param(num_lives, NUM_LIVES_RANGE),
        ticks=parse_int_param(ticks, TICKS_RANGE),
        pattern_source=parse_pattern_source(pattern_source),  # type: ignore[arg-type]
    )


@router.get("/api/lab-run")
async def lab_run(
    request: Request,
    kind: Optional[str] = None,
    action: Optional[str] = None,
    timeout_ms: Optional[str] = None,
    num_lives: Optional[str] = None,
    ticks: Optional[str] = None,
    pattern_source: Optional[str] = None,
):
    # Numeric params arrive as raw strings: bad values fall back to defaults, never 422.
    try:
        if not is_kind(kind):
            return JSONResponse({"error": "Invalid kind", "allowed": list(ALL_KINDS)}, status_code=400)

        req = build_run_request(kind, action, timeout_ms, num_lives, ticks, pattern_source)
        descriptor = descriptor_for(req)
        lab = lab_service(request)

        if req.action == "read":
            try:
                data = await lab.read(descriptor)
            except ArtifactNotFoundError:
                return JSONResponse(
                    {
                        "error": "Artifact not found. Run with action=run to generate it.",
                        "kind": req.kind,
                        "expected_public_path": descriptor.public_name,
                    },
                    status_code=404,
                )
            return JSONResponse(data, headers=_headers(req.kind, SOURCE_CACHE))

        data = await lab.regenerate(descriptor, req.timeout_seconds)
        return JSONResponse(data, headers=_headers(req.kind, SOURCE_FRESH))
    except Exception as e:
        _log.exception("lab-run failed for kind=%s action=%s", kind, action)
        return JSONResponse(
            {"error": "Failed to run lab script", "details": str(e)},
            status_code=500,
        )


@router.get("/api/lab-run/artifacts")
def lab_run_artifacts(request: Request):
    lab = lab_service(request)
    items = [asdict(s) for s in lab.cache.status(all_descriptors())]
    return {"items": items, "count": len(items)}
