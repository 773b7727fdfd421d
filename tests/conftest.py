import pytest

from signalnet.network.topology import build_uniform
from signalnet.type_defs import TuneSample


@pytest.fixture
def single_link_net():
    """One input node linked to one output node with k=0, w=1, c=0."""
    return build_uniform([1, 1], k=0.0, w=1.0, c=0.0)


@pytest.fixture
def half_sample():
    return [TuneSample(input=[1.0], output=[0.5])]


@pytest.fixture
def small_net():
    return build_uniform([3, 4, 2], k=0.3, w=0.6, c=0.2)


@pytest.fixture
def small_inputs():
    return [
        [0.0, 0.0, 0.0],
        [1.0, 0.0, 0.5],
        [0.2, 0.9, 0.4],
        [1.0, 1.0, 1.0],
    ]
