"""Layered signal propagation network.

Every node holds a signal and a conductivity. Propagation does not sum
weighted inputs: each connection multiplies the state of its target node by
a factor derived from the state of its source node, so the order in which
layers and links are visited is part of the result.
"""
from typing import Sequence

import networkx as nx
import numpy as np
from graphviz import Digraph
from IPython.display import SVG, display

from signalnet.network.nodes import Connection, Node
from signalnet.type_defs import LinkAddr, NodeAddr
from signalnet.utils.graph_utils import are_all_reachable


def normalize(value: float) -> float:
    """Clamp a parameter into [0, 1].

    Values above 1, including infinity, become 1. Negative values and NaN
    become 0.
    """
    if 0.0 <= value <= 1.0:
        return float(value)
    if value > 1.0:
        return 1.0
    return 0.0


class Network:
    """Layers of nodes with connections pointing to strictly later layers.

    Attributes:
        mat: The layers. ``mat[layer][node]`` is a node, the last layer is the output.
    """

    mat: list[list[Node]]

    def __init__(self, mat: list[list[Node]] | None = None) -> None:
        self.mat = mat if mat is not None else []

    def __getitem__(self, index: int | NodeAddr) -> list[Node] | Node:
        if isinstance(index, NodeAddr):
            return self.mat[index.layer][index.node]
        return self.mat[index]

    def node(self, addr: NodeAddr) -> Node:
        return self.mat[addr.layer][addr.node]

    def connection(self, addr: LinkAddr) -> Connection:
        return self.mat[addr.layer][addr.node].links[addr.link]

    def num_layers(self) -> int:
        return len(self.mat)

    def num_nodes(self) -> int:
        return sum(len(layer) for layer in self.mat)

    def num_links(self) -> int:
        return sum(len(node.links) for layer in self.mat for node in layer)

    def node_addrs(self, layer: int) -> list[NodeAddr]:
        return [NodeAddr(layer, n) for n in range(len(self.mat[layer]))]

    def add_node(self, layer: int) -> NodeAddr:
        """Append an unconnected node to a layer."""
        self.mat[layer].append(Node())
        return NodeAddr(layer, len(self.mat[layer]) - 1)

    def connect(
        self,
        source: NodeAddr,
        target: NodeAddr,
        k: float,
        w: float,
        c: float,
    ) -> LinkAddr:
        """Append a connection to the links of ``source``."""
        assert source.layer < target.layer, f"Connection {source} -> {target} does not point forward."
        assert 0 <= target.node < len(self.mat[target.layer]), f"Target {target} does not exist."

        node = self.node(source)
        node.links.append(Connection(k, w, c, target))
        return LinkAddr(source.layer, source.node, len(node.links) - 1)

    def reset_layer(self, layer: int) -> None:
        for node in self.mat[layer]:
            node.reset()

    def reset(self) -> None:
        """Set every signal and conductivity to 1."""
        for layer in range(len(self.mat)):
            self.reset_layer(layer)

    def load_input(self, values: Sequence[float]) -> None:
        assert len(values) == len(self.mat[0]), (
            f"Input has {len(values)} values, input layer has {len(self.mat[0])} nodes."
        )
        for node, value in zip(self.mat[0], values):
            node.signal = float(value)

    def flow(self, layer: int) -> None:
        """Propagate the nodes of one layer through their links."""
        for node in self.mat[layer]:
            for lnk in node.links:
                att = lnk.attenuation(node.signal, node.conductivity)
                target = self.mat[lnk.addr.layer][lnk.addr.node]
                target.signal *= 1.0 - lnk.w * att
                target.conductivity *= 1.0 - lnk.c * att

    def flow_all(self) -> None:
        for layer in range(len(self.mat) - 1):
            self.flow(layer)

    def run(self, values: Sequence[float]) -> np.ndarray:
        """Reset the network, load ``values`` and propagate.

        Returns:
            The signals of the output layer.
        """
        self.reset()
        self.load_input(values)
        self.flow_all()
        return self.output()

    def signals(self, layer: int) -> np.ndarray:
        return np.array([node.signal for node in self.mat[layer]], dtype=np.float64)

    def output(self) -> np.ndarray:
        return self.signals(len(self.mat) - 1)

    def edge_list(self) -> list[tuple[NodeAddr, NodeAddr]]:
        return [
            (NodeAddr(layer_idx, node_idx), lnk.addr)
            for layer_idx, layer in enumerate(self.mat)
            for node_idx, node in enumerate(layer)
            for lnk in node.links
        ]

    def get_nx(self) -> nx.MultiDiGraph:
        g = nx.MultiDiGraph()
        for layer_idx, layer in enumerate(self.mat):
            for node_idx in range(len(layer)):
                g.add_node(NodeAddr(layer_idx, node_idx), layer=layer_idx)

        for source, target in self.edge_list():
            g.add_edge(source, target)

        return g


def is_valid(network: Network, require_reachable: bool = False) -> tuple[bool, str]:
    """Check the structural invariants of a network.

    Args:
        network: The network to check.
        require_reachable: Also require every output node to be reachable from the input layer.

    Returns:
        Whether the network is valid, and the reason if it is not.
    """
    if network.num_layers() == 0:
        return False, "Network has no layers"

    for source, target in network.edge_list():
        if target.layer <= source.layer:
            return False, f"Connection {source} -> {target} does not point forward"
        if target.layer >= network.num_layers() or target.node >= len(network[target.layer]):
            return False, f"Connection {source} -> {target} points to a missing node"

    g = network.get_nx()
    if not nx.is_directed_acyclic_graph(g):
        return False, "Network has a cycle"

    output_layer = network.num_layers() - 1
    if (
        require_reachable
        and output_layer > 0
        and not are_all_reachable(g, network.node_addrs(0), network.node_addrs(output_layer))
    ):
        return False, "Not all output nodes are reachable from the input layer"

    return True, "Network is valid"


def get_network_svg(network: Network) -> SVG:
    dot = Digraph()
    dot.attr(rankdir="LR")

    for layer_idx, layer in enumerate(network.mat):
        with dot.subgraph(name=f"cluster_{layer_idx}") as sub:
            sub.attr(label=f"layer {layer_idx}")
            for node_idx in range(len(layer)):
                sub.node(f"{layer_idx}_{node_idx}", label=str(node_idx))

    for layer_idx, layer in enumerate(network.mat):
        for node_idx, node in enumerate(layer):
            for lnk in node.links:
                dot.edge(
                    f"{layer_idx}_{node_idx}",
                    f"{lnk.addr.layer}_{lnk.addr.node}",
                    label=f"k={lnk.k:.2f} w={lnk.w:.2f} c={lnk.c:.2f}",
                )

    return SVG(dot.pipe(format="svg").decode("utf-8"))


def show_network(network: Network) -> None:
    """Show the network using Graphviz."""
    display(get_network_svg(network))
