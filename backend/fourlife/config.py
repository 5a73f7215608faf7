"""
Centralized configuration: all environment variables, paths, and constants.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

_log = logging.getLogger(__name__)

PROJECT_ROOT = Path(os.getenv("FOURLIFE_PROJECT_ROOT", os.getcwd())).resolve()
# Simulation scripts live in lib/game (4-life owns the game simulations)
GAME_DIR = Path(os.getenv("FOURLIFE_GAME_DIR", str(PROJECT_ROOT / "lib" / "game"))).resolve()
PUBLIC_DIR = Path(os.getenv("FOURLIFE_PUBLIC_DIR", str(PROJECT_ROOT / "public"))).resolve()
PUBLIC_DIR.mkdir(parents=True, exist_ok=True)
# Pattern corpora sit in the sibling web4 checkout
PATTERN_CORPUS_DIR = Path(
    os.getenv("FOURLIFE_PATTERN_CORPUS_DIR", str(PROJECT_ROOT.parent / "web4" / "game"))
).resolve()

PYTHON_CANDIDATES = [
    c.strip() for c in os.getenv("FOURLIFE_PYTHON_CANDIDATES", "python3,python").split(",") if c.strip()
]
PROBE_TIMEOUT_SECONDS = float(os.getenv("FOURLIFE_PROBE_TIMEOUT_SECONDS", "10"))
STDERR_EXCERPT_CHARS = int(float(os.getenv("FOURLIFE_STDERR_EXCERPT_CHARS", "2000")))
PLAYGROUND_TIMEOUT_SECONDS = float(os.getenv("FOURLIFE_PLAYGROUND_TIMEOUT_SECONDS", "60"))

CORS_ORIGINS = [o.strip() for o in os.getenv("FOURLIFE_CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = (os.getenv("LOG_LEVEL", "INFO") or "INFO").strip().upper()

BACKEND_VERSION = "1.0.0"

# (min, max, default) for the numeric lab-run query parameters
TIMEOUT_MS_RANGE = (5_000, 5 * 60_000, 60_000)
NUM_LIVES_RANGE = (1, 50, 3)
TICKS_RANGE = (1, 500, 20)

CORPUS_FILES = {
    "web4_native": "ep_pattern_corpus_web4_native.json",
    "integrated_federation": "ep_pattern_corpus_integrated_federation.json",
    "phase3_contextual": "ep_pattern_corpus_phase3_contextual.json",
}


def validate_config() -> None:
    """Log warnings for missing/odd configuration. Called once at startup."""
    if not GAME_DIR.is_dir():
        _log.warning(
            "FOURLIFE_GAME_DIR '%s' does not exist. "
            "action=run and /api/playground will fail until it is created.",
            GAME_DIR,
        )
    if not PATTERN_CORPUS_DIR.is_dir():
        _log.warning(
            "FOURLIFE_PATTERN_CORPUS_DIR '%s' does not exist. "
            "/api/patterns will return errors.",
            PATTERN_CORPUS_DIR,
        )
    if not PYTHON_CANDIDATES:
        _log.warning("FOURLIFE_PYTHON_CANDIDATES is empty. No simulation can be run.")
    _log.info("Serving lab artifacts from %s", PUBLIC_DIR)
