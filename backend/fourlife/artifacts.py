"""
Lab artifacts: the per-kind descriptor table, the on-disk JSON cache, and the
service that regenerates artifacts by running the simulation scripts.

Artifacts are passed through unchanged; their shape belongs to the scripts.
"""
from __future__ import annotations

import asyncio
import json
import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fourlife.errors import ArtifactNotFoundError, MalformedArtifactError
from fourlife.models import (
    ALL_KINDS, PATTERN_SOURCES, ArtifactDescriptor, ArtifactStatus, ProcessResult, RunRequest,
)
from fourlife.runner import InterpreterLocator, run_process
from fourlife.utils import loads_json, read_json, write_json_atomic

_log = logging.getLogger(__name__)

PLAYGROUND_SCRIPT = "playground_api.py"


def descriptor_for(req: RunRequest) -> ArtifactDescriptor:
    kind = req.kind
    if kind == "ep_driven_closed_loop":
        name = "ep_driven_closed_loop_results.json"
        return ArtifactDescriptor(kind, name, "run_ep_driven_closed_loop.py", output_file=name)
    if kind == "maturation_demo":
        name = f"maturation_demo_results_{req.pattern_source}.json"
        return ArtifactDescriptor(
            kind, name, "run_maturation_demo.py", args=(req.pattern_source,), output_file=name,
        )
    if kind == "ep_five_domain":
        name = "ep_five_domain_multi_life_results.json"
        return ArtifactDescriptor(
            kind,
            name,
            "ep_five_domain_multi_life.py",
            args=("--lives", str(req.num_lives), "--ticks", str(req.ticks), "--output", name),
            output_file=name,
        )
    if kind == "multi_life_with_policy":
        return ArtifactDescriptor(
            kind, "multi_life_with_policy.json", "run_multi_life_with_policy.py", output_mode="stdout",
        )
    if kind == "one_life_with_policy":
        return ArtifactDescriptor(
            kind, "one_life_with_policy.json", "run_one_life_with_policy.py", output_mode="stdout",
        )
    raise ValueError(f"unknown simulation kind: {kind!r}")


def all_descriptors() -> List[ArtifactDescriptor]:
    """One descriptor per cache file: every kind at defaults, every maturation variant."""
    out: List[ArtifactDescriptor] = []
    for kind in ALL_KINDS:
        if kind == "maturation_demo":
            out.extend(descriptor_for(RunRequest(kind=kind, pattern_source=src)) for src in PATTERN_SOURCES)
        else:
            out.append(descriptor_for(RunRequest(kind=kind)))
    return out


def parse_json_output(text: str, source: str) -> Any:
    try:
        return loads_json(text)
    except ValueError as e:
        raise MalformedArtifactError(source, e) from e


class ArtifactCache:
    def __init__(self, public_dir: Path) -> None:
        self.public_dir = Path(public_dir)

    def path_for(self, descriptor: ArtifactDescriptor) -> Path:
        return self.public_dir / descriptor.public_name

    def read(self, descriptor: ArtifactDescriptor) -> Any:
        p = self.path_for(descriptor)
        try:
            return read_json(p)
        except (OSError, ValueError) as e:
            _log.debug("cache miss for %s: %s", p.name, e)
            raise ArtifactNotFoundError(descriptor.kind, descriptor.public_name) from e

    def write(self, descriptor: ArtifactDescriptor, data: Any) -> Path:
        p = self.path_for(descriptor)
        write_json_atomic(p, data)
        _log.info("cached %s artifact at %s", descriptor.kind, p)
        return p

    def status(self, descriptors: Iterable[ArtifactDescriptor]) -> List[ArtifactStatus]:
        items: List[ArtifactStatus] = []
        for d in descriptors:
            p = self.path_for(d)
            try:
                st = p.stat()
                items.append(ArtifactStatus(d.kind, d.public_name, True, int(st.st_size), float(st.st_mtime)))
            except FileNotFoundError:
                items.append(ArtifactStatus(d.kind, d.public_name, False))
        return items


class LabService:
    """
    Owns everything a lab run needs: where the scripts live, the artifact
    cache, and the interpreter locator. Concurrent regenerations with the same
    flight key share a single process and a single cache write.
    """

    def __init__(
        self,
        game_dir: Path,
        cache: ArtifactCache,
        locator: InterpreterLocator,
        stderr_limit: int = 2000,
    ) -> None:
        self.game_dir = Path(game_dir)
        self.cache = cache
        self.locator = locator
        self.stderr_limit = stderr_limit
        self._inflight: Dict[Tuple[str, ...], asyncio.Future] = {}

    async def read(self, descriptor: ArtifactDescriptor) -> Any:
        return await asyncio.to_thread(self.cache.read, descriptor)

    def _forget(self, key: Tuple[str, ...], fut: asyncio.Future) -> None:
        if self._inflight.get(key) is fut:
            del self._inflight[key]

    def inflight_count(self) -> int:
        return len(self._inflight)

    async def regenerate(self, descriptor: ArtifactDescriptor, timeout: float) -> Any:
        key = descriptor.flight_key
        fut = self._inflight.get(key)
        if fut is None:
            fut = asyncio.ensure_future(self._run_descriptor(descriptor, timeout))
            self._inflight[key] = fut
            fut.add_done_callback(lambda f, k=key: self._forget(k, f))
        else:
            _log.info("joining in-flight %s run for %s", descriptor.kind, descriptor.public_name)
        # a disconnecting caller must not cancel the run other callers joined
        return await asyncio.shield(fut)

    async def _run_script(
        self, script: str, args: Iterable[str], timeout: float, stdin_data: Optional[str] = None,
    ) -> ProcessResult:
        cmd = await self.locator.resolve()
        return await run_process(
            cmd,
            [str(self.game_dir / script), *args],
            cwd=self.game_dir,
            timeout=timeout,
            stdin_data=stdin_data,
            stderr_limit=self.stderr_limit,
        )

    async def _run_descriptor(self, descriptor: ArtifactDescriptor, timeout: float) -> Any:
        started = time.time()
        _log.info("running %s: %s %s", descriptor.kind, descriptor.script, " ".join(descriptor.args))
        result = await self._run_script(descriptor.script, descriptor.args, timeout)
        if descriptor.output_mode == "stdout":
            data = parse_json_output(result.stdout, f"{descriptor.script} stdout")
        else:
            out = self.game_dir / (descriptor.output_file or descriptor.public_name)
            text = await asyncio.to_thread(out.read_text, encoding="utf-8")
            data = parse_json_output(text, out.name)
        await asyncio.to_thread(self.cache.write, descriptor, data)
        _log.info("%s finished in %.0fms", descriptor.kind, (time.time() - started) * 1000.0)
        return data

    async def run_playground(self, config: Dict[str, Any], timeout: float) -> Any:
        result = await self._run_script(PLAYGROUND_SCRIPT, [], timeout, stdin_data=json.dumps(config))
        return parse_json_output(result.stdout, f"{PLAYGROUND_SCRIPT} stdout")
