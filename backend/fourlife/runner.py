"""
External process execution: interpreter discovery and a timed process runner.
"""
from __future__ import annotations

import asyncio
import logging
import os
import time
from typing import List, Optional, Sequence

from fourlife.errors import (
    InterpreterNotFoundError, ProcessExitError, ProcessSpawnError, ProcessTimeoutError,
)
from fourlife.models import ProcessResult

_log = logging.getLogger(__name__)


def _decode(b: Optional[bytes]) -> str:
    return (b or b"").decode("utf-8", errors="replace")


async def _kill_and_reap(proc: asyncio.subprocess.Process) -> None:
    try:
        proc.kill()
    except ProcessLookupError:
        # exited between the timeout firing and the kill
        pass
    await proc.wait()


async def run_process(
    executable: str,
    args: Sequence[str],
    cwd: Optional[os.PathLike | str] = None,
    timeout: float = 60.0,
    stdin_data: Optional[str] = None,
    stderr_limit: int = 2000,
) -> ProcessResult:
    """
    Run `executable args...` and wait for it to exit.

    - exit code 0: returns ProcessResult with the full stdout/stderr text.
    - non-zero exit: ProcessExitError with at most `stderr_limit` chars of stderr.
    - could not start: ProcessSpawnError.
    - still running after `timeout` seconds: the child is killed and
      ProcessTimeoutError is raised.
    The child inherits this process's environment unchanged.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            executable,
            *[str(a) for a in args],
            cwd=str(cwd) if cwd is not None else None,
            stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise ProcessSpawnError(executable, e) from e

    payload = stdin_data.encode("utf-8") if stdin_data is not None else None
    try:
        out, err = await asyncio.wait_for(proc.communicate(payload), timeout=timeout)
    except asyncio.TimeoutError:
        _log.warning("killing %s after %.1fs timeout", executable, timeout)
        await _kill_and_reap(proc)
        raise ProcessTimeoutError(timeout)
    except asyncio.CancelledError:
        await _kill_and_reap(proc)
        raise

    stdout, stderr = _decode(out), _decode(err)
    code = proc.returncode if proc.returncode is not None else -1
    if code != 0:
        raise ProcessExitError(code, stderr[:stderr_limit])
    return ProcessResult(stdout=stdout, stderr=stderr, exit_code=code)


class InterpreterLocator:
    """
    Finds the first working interpreter among `candidates` (python3 first for
    Linux/WSL, then python for Windows) and remembers it for its lifetime.
    """

    def __init__(self, candidates: Sequence[str], probe_timeout: float = 10.0) -> None:
        self.candidates: List[str] = list(candidates)
        self.probe_timeout = probe_timeout
        self._resolved: Optional[str] = None
        self._lock = asyncio.Lock()

    @property
    def resolved(self) -> Optional[str]:
        return self._resolved

    async def probe(self, candidate: str) -> bool:
        try:
            await run_process(candidate, ["--version"], timeout=self.probe_timeout, stderr_limit=200)
            return True
        except (ProcessSpawnError, ProcessExitError, ProcessTimeoutError) as e:
            _log.debug("interpreter candidate %s rejected: %s", candidate, e)
            return False

    async def resolve(self) -> str:
        if self._resolved is not None:
            return self._resolved
        async with self._lock:
            if self._resolved is not None:
                return self._resolved
            started = time.time()
            for cmd in self.candidates:
                if await self.probe(cmd):
                    self._resolved = cmd
                    _log.info("using interpreter %s (probed in %.0fms)", cmd, (time.time() - started) * 1000.0)
                    return cmd
            raise InterpreterNotFoundError(self.candidates)
