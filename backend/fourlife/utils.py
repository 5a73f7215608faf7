"""
Shared utility functions: JSON file I/O, query parameter parsing.
"""
from __future__ import annotations

import json
import os
import re
import uuid
from pathlib import Path
from typing import Any, Optional, Tuple

from fourlife.models import ALL_KINDS, DEFAULT_PATTERN_SOURCE, PATTERN_SOURCES

_INT_PREFIX = re.compile(r"^\s*([+-]?[0-9]+)")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def loads_json(text: str) -> Any:
    """Strict json.loads: NaN, Infinity and -Infinity are errors."""
    return json.loads(text, parse_constant=_reject_constant)


def read_json(path: Path) -> Any:
    return loads_json(path.read_text(encoding="utf-8"))


def dump_json(obj: Any) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, allow_nan=False)


def write_json_atomic(path: Path, obj: Any) -> None:
    """Publish `obj` at `path` so readers only ever see a complete document."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = dump_json(obj)
    # unique per writer so concurrent publishers never share a temp file
    tmp = path.with_name(f".{path.name}.{uuid.uuid4().hex[:12]}.tmp")
    try:
        with tmp.open("w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


def parse_int_param(value: Optional[str], bounds: Tuple[int, int, int]) -> int:
    """
    Parse a leading integer like parseInt ("12abc" -> 12) and clamp it to
    bounds = (min, max, default). Missing or non-numeric input gives the default.
    """
    lo, hi, default = bounds
    m = _INT_PREFIX.match(value or "")
    if not m:
        return default
    return clamp(int(m.group(1)), lo, hi)


def parse_action(value: Optional[str]) -> str:
    return "run" if value == "run" else "read"


def parse_pattern_source(value: Optional[str]) -> str:
    v = (value or DEFAULT_PATTERN_SOURCE).lower()
    return v if v in PATTERN_SOURCES else DEFAULT_PATTERN_SOURCE


def is_kind(value: Optional[str]) -> bool:
    return value in ALL_KINDS
