"""
All data models: dataclasses for internal values, Pydantic models for API requests.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict

# --- Type aliases ---
SimulationKind = Literal[
    "ep_driven_closed_loop",
    "maturation_demo",
    "ep_five_domain",
    "multi_life_with_policy",
    "one_life_with_policy",
]
LabAction = Literal["read", "run"]
PatternSource = Literal["web4", "none", "thor"]
OutputMode = Literal["file", "stdout"]

ALL_KINDS: Tuple[str, ...] = (
    "ep_driven_closed_loop",
    "maturation_demo",
    "ep_five_domain",
    "multi_life_with_policy",
    "one_life_with_policy",
)
PATTERN_SOURCES: Tuple[str, ...] = ("web4", "none", "thor")
DEFAULT_PATTERN_SOURCE: PatternSource = "web4"


# --- Internal value dataclasses ---

@dataclass(frozen=True)
class RunRequest:
    kind: SimulationKind
    action: LabAction = "read"
    timeout_ms: int = 60_000
    num_lives: int = 3
    ticks: int = 20
    pattern_source: PatternSource = DEFAULT_PATTERN_SOURCE

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0


@dataclass(frozen=True)
class ArtifactDescriptor:
    """How one artifact is cached and how it is regenerated."""
    kind: SimulationKind
    public_name: str
    script: str
    args: Tuple[str, ...] = ()
    output_mode: OutputMode = "file"
    # only meaningful for output_mode == "file"
    output_file: Optional[str] = None

    @property
    def flight_key(self) -> Tuple[str, ...]:
        return (self.public_name, self.script) + tuple(self.args)


@dataclass
class ProcessResult:
    stdout: str
    stderr: str
    exit_code: int


@dataclass
class ArtifactStatus:
    kind: str
    public_name: str
    present: bool
    bytes: int = 0
    mtime: float = 0.0


# --- API request models ---

class PlaygroundConfig(BaseModel):
    """Parameters for one playground simulation. Unknown fields are passed through."""
    model_config = ConfigDict(extra="allow")

    # Agent initial conditions
    initial_atp: Optional[float] = None
    initial_trust: Optional[float] = None

    # Action costs/rewards
    action_cost_low: Optional[float] = None
    action_cost_medium: Optional[float] = None
    action_cost_high: Optional[float] = None
    action_reward_low: Optional[float] = None
    action_reward_medium: Optional[float] = None
    action_reward_high: Optional[float] = None

    # Trust dynamics
    trust_gain_good: Optional[float] = None
    trust_loss_bad: Optional[float] = None
    trust_threshold_death: Optional[float] = None

    # Rebirth karma
    karma_atp_bonus: Optional[float] = None
    karma_trust_boost: Optional[float] = None

    # Simulation parameters
    num_lives: Optional[int] = None
    ticks_per_life: Optional[int] = None
    risk_appetite: Optional[float] = None
