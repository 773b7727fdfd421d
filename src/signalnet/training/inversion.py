"""Solve the propagation rule for a single unknown.

A link from a node with signal ``s`` and conductivity ``cn`` multiplies the
signal of its target by ``1 - w * cn * (k + s - 2 * s * k)``. If the target
received nothing else, its signal is that factor, which can be solved for
``k``, ``w`` or ``s`` when the others are held fixed.
"""
from typing import Sequence

import numpy as np

from signalnet.network.network import Network, normalize
from signalnet.type_defs import ConProperty, NodeAddr


def _div(numerator: float, denominator: float) -> float:
    # division by zero gives inf or nan instead of raising, normalize clamps both
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(numerator) / np.float64(denominator))


def solve_parameter(
    network: Network,
    addr: NodeAddr,
    link: int,
    expected_signal: float,
    prop: ConProperty,
) -> float:
    """Value of a link property that makes its target signal ``expected_signal``.

    The signal and conductivity of the source node and the other properties of
    the link are held fixed. The conductivity impact has no inversion of its
    own and is solved with the weight formula.

    Args:
        network: A network that has been run with the input of interest.
        addr: The source node.
        link: Index of the link in the links of the source node.
        expected_signal: The desired target signal.
        prop: The property to solve for.

    Returns:
        The normalized property value.
    """
    node = network.node(addr)
    lnk = node.links[link]
    s = node.signal

    if prop == ConProperty.K:
        # (1 - expected) / (w * cn) == k + s - 2 * s * k
        comp_exp = _div(1.0 - expected_signal, lnk.w * node.conductivity)
        return normalize(_div(comp_exp - s, 1.0 - 2.0 * s))

    return normalize(_div(1.0 - expected_signal, lnk.attenuation(s, node.conductivity)))


def predict_signal(network: Network, addr: NodeAddr, expected_output: Sequence[float]) -> float:
    """Signal the node should have for the network to produce ``expected_output``.

    Everything else is considered unchanged. The network must have been run
    with the matching input. The prediction is exact for output nodes and is
    solved through the first link of nodes right before the output of a single
    output network. Any other node is predicted to keep its current signal.
    """
    output_layer = network.num_layers() - 1
    assert len(expected_output) == len(network[output_layer]), (
        f"Expected output has {len(expected_output)} values, output layer has {len(network[output_layer])} nodes."
    )

    if addr.layer == output_layer:
        return float(expected_output[addr.node])

    node = network.node(addr)
    # TODO: solve for networks with several outputs and for deeper nodes
    if len(expected_output) != 1 or addr.layer + 1 != output_layer or not node.links:
        return node.signal

    lnk = node.links[0]
    cur_signal = 1.0 - lnk.w * lnk.attenuation(node.signal, node.conductivity)
    # the output as if this node did not affect it
    clear_output = _div(network[output_layer][0].signal, cur_signal)
    exp_signal = _div(expected_output[0], clear_output)

    comp_exp = _div(1.0 - exp_signal, lnk.w * node.conductivity)

    # comp_exp == k + s - 2 * s * k, solved for s
    return _div(comp_exp - lnk.k, 1.0 - 2.0 * lnk.k)
