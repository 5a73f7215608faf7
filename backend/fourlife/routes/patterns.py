"""Routes: EP pattern corpus files for the pattern browser."""
from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from fourlife.config import CORPUS_FILES, PATTERN_CORPUS_DIR
from fourlife.utils import read_json

_log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/api/patterns/{corpus}")
def patterns_get(corpus: str):
    name = CORPUS_FILES.get(corpus)
    if not name:
        return JSONResponse({"error": "Unknown corpus type"}, status_code=404)
    try:
        return JSONResponse(read_json(PATTERN_CORPUS_DIR / name))
    except Exception as e:
        _log.error("Error loading pattern corpus %s: %s", corpus, e)
        return JSONResponse(
            {"error": "Failed to load pattern corpus", "details": str(e)},
            status_code=500,
        )
