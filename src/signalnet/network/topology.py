"""Building and growing networks.

All functions keep the invariant that connections point to strictly later
layers. Nothing is ever removed: layers only grow and new layers are only
inserted.
"""
import logging
from typing import Sequence

from signalnet.network.network import Network
from signalnet.network.nodes import Connection, Node
from signalnet.type_defs import NetworkConfig, NodeAddr

logger = logging.getLogger(__name__)


def build_uniform(
    layer_sizes: Sequence[int],
    k: float = 0.25,
    w: float = 0.5,
    c: float = 0.0,
) -> Network:
    """Build a network where every node links to every node of the next layer.

    Args:
        layer_sizes: Number of nodes of each layer, input layer first.
        k: Forward coefficient of the new connections.
        w: Weight of the new connections.
        c: Conductivity impact of the new connections.

    Returns:
        The network.
    """
    assert all(size >= 0 for size in layer_sizes), "Layer sizes must be non-negative."

    mat = [[Node() for _ in range(size)] for size in layer_sizes]

    for layer_idx in range(len(mat) - 1):
        for node in mat[layer_idx]:
            for i in range(layer_sizes[layer_idx + 1]):
                node.links.append(Connection(k, w, c, NodeAddr(layer_idx + 1, i)))

    return Network(mat)


def build_branching(
    layer_sizes: Sequence[int],
    branching: int | Sequence[int],
    k: float = 0.25,
    w: float = 0.5,
    c: float = 0.0,
) -> Network:
    """Build a network with banded connectivity.

    Node ``n`` links to the nodes ``n - r`` through ``n + r`` of the next layer,
    clamped to the bounds of that layer.

    Args:
        layer_sizes: Number of nodes of each layer, input layer first.
        branching: The radius ``r``, either for all layers or one per layer.
        k: Forward coefficient of the new connections.
        w: Weight of the new connections.
        c: Conductivity impact of the new connections.

    Returns:
        The network.
    """
    if isinstance(branching, int):
        branching = [branching] * len(layer_sizes)

    assert all(size >= 0 for size in layer_sizes), "Layer sizes must be non-negative."
    assert len(branching) >= len(layer_sizes) - 1, "Need a branching radius for every non-output layer."
    assert all(radius >= 0 for radius in branching), "Branching radii must be non-negative."

    mat = [[Node() for _ in range(size)] for size in layer_sizes]

    for layer_idx in range(len(mat) - 1):
        radius = branching[layer_idx]
        next_size = layer_sizes[layer_idx + 1]

        for n, node in enumerate(mat[layer_idx]):
            begin = max(n - radius, 0)
            end = min(n + radius + 1, next_size)
            for i in range(begin, end):
                node.links.append(Connection(k, w, c, NodeAddr(layer_idx + 1, i)))

    return Network(mat)


def build_from_config(config: NetworkConfig) -> Network:
    if config.branching is None:
        return build_uniform(config.layer_sizes, config.k, config.w, config.c)
    return build_branching(config.layer_sizes, config.branching, config.k, config.w, config.c)


def expand_layer(
    network: Network,
    layer: int,
    num_nodes: int,
    k: float = 0.25,
    w: float = 0.0,
    c: float = 0.0,
) -> None:
    """Grow a layer to ``num_nodes`` nodes.

    The new nodes are linked from every node of the previous layer and to
    every node of the next layer. Existing nodes and links are left alone.
    """
    assert 0 <= layer < network.num_layers(), f"Layer {layer} does not exist."

    mat = network.mat
    prev_nodes = len(mat[layer])
    if num_nodes == prev_nodes:
        return
    assert num_nodes > prev_nodes, f"Cannot shrink layer {layer} from {prev_nodes} to {num_nodes} nodes."

    mat[layer].extend(Node() for _ in range(num_nodes - prev_nodes))

    if layer > 0:
        for i in range(prev_nodes, num_nodes):
            for node in mat[layer - 1]:
                node.links.append(Connection(k, w, c, NodeAddr(layer, i)))

    if layer + 1 < len(mat):
        for i in range(prev_nodes, num_nodes):
            for n in range(len(mat[layer + 1])):
                mat[layer][i].links.append(Connection(k, w, c, NodeAddr(layer + 1, n)))

    logger.debug(f"Expanded layer {layer} from {prev_nodes} to {num_nodes} nodes")


def insert_layer(
    network: Network,
    layer: int,
    num_nodes: int,
    k: float = 0.25,
    w: float = 0.0,
    c: float = 0.0,
) -> None:
    """Insert a new layer at index ``layer``, shifting the later layers up.

    Links of earlier layers keep their stored indices, so the ones that pointed
    at the displaced layer now point at the new layer. The previous layer is
    also linked to the new nodes beyond the size of the displaced layer. Node
    ``n`` of the new layer is linked to node ``n`` of the following layer with
    a pass-through connection (k=1, w=1, c=0) and to the other nodes with the
    given parameters.

    A pass-through link reproduces the signal of its source but not its
    conductivity. The output is preserved when no link into the displaced
    layer had a conductivity impact and ``w`` and ``c`` are 0.
    """
    assert 0 <= layer < network.num_layers(), f"Layer {layer} does not exist."

    mat = network.mat
    prev_nodes = len(mat[layer])
    assert num_nodes >= prev_nodes, (
        f"Inserted layer needs at least {prev_nodes} nodes, got {num_nodes}."
    )

    # Rewrite the addresses of the shifted layers before the structure changes.
    for layer_nodes in mat[layer:]:
        for node in layer_nodes:
            for lnk in node.links:
                lnk.addr = NodeAddr(lnk.addr.layer + 1, lnk.addr.node)

    new_layer = [Node() for _ in range(num_nodes)]
    mat.insert(layer, new_layer)

    following = mat[layer + 1]
    for i in range(len(following)):
        for n, node in enumerate(new_layer):
            if i == n:
                node.links.append(Connection(1.0, 1.0, 0.0, NodeAddr(layer + 1, i)))
            else:
                node.links.append(Connection(k, w, c, NodeAddr(layer + 1, i)))

    if layer > 0:
        for i in range(prev_nodes, num_nodes):
            for node in mat[layer - 1]:
                node.links.append(Connection(k, w, c, NodeAddr(layer, i)))

    logger.debug(f"Inserted layer {layer} with {num_nodes} nodes")
