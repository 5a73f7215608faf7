"""
Shared fixtures for backend tests.
Points every directory at a temp tree so tests never touch real artifacts,
and fills the game dir with small stand-in simulation scripts.
"""
from __future__ import annotations

import json
import os
import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Set before any fourlife import: config is read once at import time.
_ROOT = Path(tempfile.mkdtemp(prefix="fourlife_test_"))
GAME_DIR = _ROOT / "lib" / "game"
PUBLIC_DIR = _ROOT / "public"
CORPUS_DIR = _ROOT / "web4" / "game"
os.environ["FOURLIFE_PROJECT_ROOT"] = str(_ROOT)
os.environ["FOURLIFE_GAME_DIR"] = str(GAME_DIR)
os.environ["FOURLIFE_PUBLIC_DIR"] = str(PUBLIC_DIR)
os.environ["FOURLIFE_PATTERN_CORPUS_DIR"] = str(CORPUS_DIR)
os.environ["FOURLIFE_PYTHON_CANDIDATES"] = sys.executable
os.environ.pop("FOURLIFE_FAKE_FAIL", None)

_FAIL_GUARD = """\
import os, sys
if os.environ.get("FOURLIFE_FAKE_FAIL"):
    sys.stderr.write("simulated failure\\n" + "x" * 5000)
    sys.exit(3)
"""

SCRIPTS = {
    "run_ep_driven_closed_loop.py": _FAIL_GUARD + """\
import json
with open("ep_driven_closed_loop_results.json", "w") as f:
    json.dump({"kind": "ep_driven_closed_loop", "lives": [1, 2, 3]}, f)
""",
    "run_maturation_demo.py": _FAIL_GUARD + """\
import json
src = sys.argv[1]
with open(f"maturation_demo_results_{src}.json", "w") as f:
    json.dump({"kind": "maturation_demo", "pattern_source": src}, f)
""",
    "ep_five_domain_multi_life.py": _FAIL_GUARD + """\
import argparse, json
p = argparse.ArgumentParser()
p.add_argument("--lives", type=int)
p.add_argument("--ticks", type=int)
p.add_argument("--output")
a = p.parse_args()
with open(a.output, "w") as f:
    json.dump({"kind": "ep_five_domain", "lives": a.lives, "ticks": a.ticks, "argv": sys.argv[1:]}, f)
""",
    "run_multi_life_with_policy.py": _FAIL_GUARD + """\
import json
print(json.dumps({"kind": "multi_life_with_policy", "lives": [{"life_id": "a"}, {"life_id": "b"}]}))
""",
    "run_one_life_with_policy.py": _FAIL_GUARD + """\
import json
if os.environ.get("FOURLIFE_FAKE_GARBAGE"):
    print("not json at all")
    sys.exit(0)
if os.environ.get("FOURLIFE_FAKE_NAN"):
    print(json.dumps({"kind": "one_life_with_policy", "ratio": float("nan")}))
    sys.exit(0)
print('{"kind": "one_life_with_policy", "ticks": 7}')
""",
    "playground_api.py": """\
import json, sys
cfg = json.loads(sys.stdin.read() or "{}")
print(json.dumps({"config": cfg, "lives": [], "total_ticks": 0, "insights": ["ok"]}))
""",
}

CORPORA = {
    "ep_pattern_corpus_web4_native.json": {"patterns": [{"id": "p1"}]},
    "ep_pattern_corpus_integrated_federation.json": {"patterns": []},
}

GAME_DIR.mkdir(parents=True, exist_ok=True)
CORPUS_DIR.mkdir(parents=True, exist_ok=True)
for _name, _body in SCRIPTS.items():
    (GAME_DIR / _name).write_text(_body, encoding="utf-8")
for _name, _obj in CORPORA.items():
    (CORPUS_DIR / _name).write_text(json.dumps(_obj), encoding="utf-8")
# deliberately broken corpus
(CORPUS_DIR / "ep_pattern_corpus_phase3_contextual.json").write_text("{broken", encoding="utf-8")


@pytest.fixture(scope="session")
def dirs() -> dict:
    return {"root": _ROOT, "game": GAME_DIR, "public": PUBLIC_DIR, "corpus": CORPUS_DIR}


@pytest.fixture(scope="session")
def client() -> TestClient:
    from fourlife.main import app
    return TestClient(app)


@pytest.fixture
def empty_cache(dirs):
    """Start the test with no cached artifacts (and no leftover script outputs)."""
    for p in list(dirs["public"].glob("*.json")) + list(dirs["game"].glob("*.json")):
        p.unlink()
    yield dirs["public"]
