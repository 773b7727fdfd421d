"""Useful types."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence


@dataclass(frozen=True)
class NodeAddr:
    layer: int
    node: int


@dataclass(frozen=True)
class LinkAddr:
    layer: int
    node: int
    link: int

    @property
    def node_addr(self) -> NodeAddr:
        return NodeAddr(self.layer, self.node)


class ConProperty(Enum):
    """Tunable field of a connection."""

    K = "k"  # forward coefficient
    W = "w"  # weight
    C = "c"  # conductivity impact


@dataclass
class TuneSample:
    """One input vector together with the output it should produce."""

    input: Sequence[float]
    output: Sequence[float]


@dataclass
class TuneResult:
    fails: int = 0
    total: int = 0

    def __add__(self, other: "TuneResult") -> "TuneResult":
        return TuneResult(self.fails + other.fails, self.total + other.total)

    def __sub__(self, other: "TuneResult") -> "TuneResult":
        return TuneResult(self.fails - other.fails, self.total - other.total)


@dataclass
class NetworkConfig:
    """Topology and initial connection parameters."""

    layer_sizes: list[int]
    branching: int | list[int] | None = None
    k: float = 0.25
    w: float = 0.5
    c: float = 0.0


@dataclass
class TrainingConfig:
    """Training hyperparameters."""

    strategy: str = "deep"
    learn_rate: float = 0.1
    num_epochs: int = 100
    properties: list[ConProperty] = field(default_factory=lambda: [ConProperty.W])
    tolerance: float = 1e-4
    show_progress: bool = False
