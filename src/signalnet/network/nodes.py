from dataclasses import dataclass, field

from signalnet.type_defs import ConProperty, NodeAddr


@dataclass
class Connection:
    """A directed link to a node in a later layer.

    Attributes:
        k: Forward coefficient. 1 passes the source signal through, 0 inverts it.
        w: Weight, how strongly the link attenuates the target signal.
        c: Conductivity impact, how strongly the link attenuates the target conductivity.
        addr: Address of the target node.
    """

    k: float
    w: float
    c: float
    addr: NodeAddr

    def get(self, prop: ConProperty) -> float:
        return getattr(self, prop.value)

    def set(self, prop: ConProperty, value: float) -> None:
        setattr(self, prop.value, value)

    def attenuation(self, signal: float, conductivity: float) -> float:
        """Attenuation this link applies for a source node in the given state."""
        return conductivity * (self.k + signal - 2.0 * signal * self.k)


@dataclass
class Node:
    """A node of the network.

    Attributes:
        signal: Current signal, recomputed on every run.
        conductivity: Current conductivity, recomputed on every run.
        links: Outgoing connections. The order is the order they are applied in.
    """

    signal: float = 1.0
    conductivity: float = 1.0
    links: list[Connection] = field(default_factory=list)

    def reset(self) -> None:
        self.signal = 1.0
        self.conductivity = 1.0
