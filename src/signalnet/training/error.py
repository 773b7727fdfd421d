from typing import Sequence

import numpy as np

from signalnet.network.network import Network
from signalnet.type_defs import TuneSample


def squared_error(output: np.ndarray, expected: Sequence[float]) -> float:
    assert len(expected) == len(output), (
        f"Expected output has {len(expected)} values, output layer has {len(output)} nodes."
    )
    diff = output - np.asarray(expected, dtype=np.float64)
    return float(np.sum(diff * diff))


def total_squared_error(network: Network, samples: Sequence[TuneSample]) -> float:
    """Sum of squared differences between outputs and expected outputs over all samples."""
    err = 0.0
    for sample in samples:
        err += squared_error(network.run(sample.input), sample.output)
    return err


def recalculate_error(network: Network, layer: int, expected_output: Sequence[float]) -> float:
    """Re-propagate from ``layer`` onward and return the squared error of one sample.

    The signals of ``layer`` and of the layers before it must be current,
    e.g. after a ``run`` followed by a change to the links of ``layer``.
    """
    assert 0 <= layer < network.num_layers(), f"Layer {layer} does not exist."

    for later in range(layer + 1, network.num_layers()):
        network.reset_layer(later)
    for n in range(layer, network.num_layers() - 1):
        network.flow(n)

    return squared_error(network.output(), expected_output)
