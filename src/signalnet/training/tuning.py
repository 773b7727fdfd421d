"""Training strategies.

Both strategies change one property of the links of one node at a time and
are meant to be called repeatedly by a training loop.

* ``tune_shallow`` tries each link one step up and one step down and keeps
  the change if the error over the batch does not get worse.
* ``tune_deep`` solves for the property value each sample asks for and moves
  towards their average, slowed down when the samples disagree.
"""
import logging
from typing import Sequence

import numpy as np

from signalnet.network.network import Network, normalize
from signalnet.training.error import total_squared_error
from signalnet.training.inversion import predict_signal, solve_parameter
from signalnet.type_defs import ConProperty, LinkAddr, NodeAddr, TuneResult, TuneSample

logger = logging.getLogger(__name__)


def tune_shallow(
    network: Network,
    addr: NodeAddr,
    prop: ConProperty,
    samples: Sequence[TuneSample],
    learn_rate: float,
) -> TuneResult:
    """Greedy search over the links of one node.

    Every link is tried at ``value + learn_rate`` and, if that does not
    improve the error, at ``value - learn_rate``. A trial value with lower
    error is kept. One with equal error is kept and counted as a fail. If
    neither helps, the link is restored and counted as a fail.

    Returns:
        Number of failed links and number of links.
    """
    current_err = total_squared_error(network, samples)
    result = TuneResult()

    for lnk in network.node(addr).links:
        result.total += 1
        prev_value = lnk.get(prop)

        if lnk.get(prop) < 1.0:
            lnk.set(prop, normalize(prev_value + learn_rate))
            err = total_squared_error(network, samples)
            if err < current_err:
                continue
            if err == current_err:
                result.fails += 1
                continue

        if lnk.get(prop) > 0.0:
            lnk.set(prop, normalize(prev_value - learn_rate))
            err = total_squared_error(network, samples)
            if err < current_err:
                continue
            if err == current_err:
                result.fails += 1
                continue

        result.fails += 1
        lnk.set(prop, prev_value)

    return result


def collect_tuning_summary(
    network: Network,
    addr: LinkAddr,
    prop: ConProperty,
    samples: Sequence[TuneSample],
) -> np.ndarray:
    """Property value proposed by each sample for one link."""
    source = addr.node_addr
    target = network.connection(addr).addr

    proposals = np.empty(len(samples), dtype=np.float64)
    for i, sample in enumerate(samples):
        network.run(sample.input)
        signal = predict_signal(network, target, sample.output)
        proposals[i] = solve_parameter(network, source, addr.link, signal, prop)

    return proposals


def collect_node_tuning_summary(
    network: Network,
    addr: NodeAddr,
    prop: ConProperty,
    samples: Sequence[TuneSample],
) -> list[np.ndarray]:
    """Property values proposed by each sample for every link of a node.

    All links are evaluated on the same run of each sample.
    """
    links = network.node(addr).links
    proposals = [np.empty(len(samples), dtype=np.float64) for _ in links]

    for i, sample in enumerate(samples):
        network.run(sample.input)
        for link_idx, lnk in enumerate(links):
            signal = predict_signal(network, lnk.addr, sample.output)
            proposals[link_idx][i] = solve_parameter(network, addr, link_idx, signal, prop)

    return proposals


def tune_deep(
    network: Network,
    addr: LinkAddr,
    prop: ConProperty,
    samples: Sequence[TuneSample],
    learn_rate: float,
) -> float:
    """Move one link property towards the value the samples agree on.

    The step is ``(1 + min - max) * (avg - value) * learn_rate`` where avg, min
    and max are taken over the per-sample proposals.

    Returns:
        Magnitude of the step.
    """
    assert len(samples) > 0, "Need at least one sample to tune."

    proposals = collect_tuning_summary(network, addr, prop, samples)
    avg = float(np.mean(proposals))
    spread = 1.0 + float(np.min(proposals)) - float(np.max(proposals))

    lnk = network.connection(addr)
    value = lnk.get(prop)
    diff = spread * (avg - value) * learn_rate
    lnk.set(prop, normalize(value + diff))

    return abs(diff)


def tune_deep_node(
    network: Network,
    addr: NodeAddr,
    prop: ConProperty,
    samples: Sequence[TuneSample],
    learn_rate: float,
) -> float:
    """``tune_deep`` every link of a node.

    Returns:
        Mean step magnitude over the links, 0 for a node without links.
    """
    num_links = len(network.node(addr).links)
    if num_links == 0:
        return 0.0

    res = 0.0
    for link in range(num_links):
        res += tune_deep(network, LinkAddr(addr.layer, addr.node, link), prop, samples, learn_rate)

    res /= num_links
    logger.debug(f"Deep tuned {prop.name} of {addr}, mean step {res:.6f}")
    return res
