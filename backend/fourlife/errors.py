"""
Exceptions raised by the lab-run pipeline.

Route handlers map ArtifactNotFoundError to 404; every other LabRunError
surfaces as a 500 with its message in `details`.
"""
from __future__ import annotations

from typing import Sequence


class LabRunError(Exception):
    pass


class InterpreterNotFoundError(LabRunError):
    def __init__(self, candidates: Sequence[str]) -> None:
        self.candidates = list(candidates)
        tried = ", ".join(self.candidates) or "(none)"
        super().__init__(
            f"Python not found. Tried: {tried}. Please ensure Python is installed and in PATH."
        )


class ProcessSpawnError(LabRunError):
    def __init__(self, executable: str, error: OSError) -> None:
        self.executable = executable
        self.error = error
        super().__init__(f"failed to spawn {executable}: {error}")


class ProcessExitError(LabRunError):
    def __init__(self, exit_code: int, stderr_excerpt: str) -> None:
        self.exit_code = exit_code
        self.stderr_excerpt = stderr_excerpt
        super().__init__(f"python exited with code {exit_code}. stderr: {stderr_excerpt}")


class ProcessTimeoutError(LabRunError):
    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"python did not exit within {timeout:g}s and was killed")


class MalformedArtifactError(LabRunError):
    def __init__(self, source: str, error: Exception) -> None:
        self.source = source
        super().__init__(f"invalid JSON from {source}: {error}")


class ArtifactNotFoundError(LabRunError):
    """Expected read miss: no usable cached file for this descriptor."""

    def __init__(self, kind: str, public_name: str) -> None:
        self.kind = kind
        self.public_name = public_name
        super().__init__(f"no cached artifact {public_name} for {kind}")
