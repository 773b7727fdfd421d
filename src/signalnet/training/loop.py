import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
from tqdm import tqdm

from signalnet.network.network import Network
from signalnet.training.error import total_squared_error
from signalnet.training.tuning import tune_deep_node, tune_shallow
from signalnet.type_defs import TrainingConfig, TuneResult, TuneSample
from signalnet.utils.paths import make_run_dir

logger = logging.getLogger(__name__)


@dataclass
class TrainingHistory:
    """Per epoch records of a training run.

    Attributes:
        errors: Total squared error before the first epoch and after every epoch.
        tune_results: Fails and totals of every epoch, for shallow tuning.
        deltas: Mean step magnitude of every epoch, for deep tuning.
        converged: Whether training stopped before running out of epochs.
    """

    errors: list[float] = field(default_factory=list)
    tune_results: list[TuneResult] = field(default_factory=list)
    deltas: list[float] = field(default_factory=list)
    converged: bool = False


def train(network: Network, samples: Sequence[TuneSample], config: TrainingConfig) -> TrainingHistory:
    """Tune every non-output node of the network for up to ``config.num_epochs`` epochs.

    Nodes are visited from the last hidden layer back to the input layer.
    Shallow training stops once an epoch fails on every link; deep training
    stops once the mean step of an epoch is below ``config.tolerance``.

    Args:
        network: The network, tuned in place.
        samples: The batch to tune on.
        config: Training configuration.

    Returns:
        The training history.
    """
    if config.strategy not in ("shallow", "deep"):
        raise ValueError(f"Unknown training strategy: {config.strategy}")
    assert len(samples) > 0, "Need at least one sample to train."

    history = TrainingHistory()
    history.errors.append(total_squared_error(network, samples))

    node_addrs = [
        addr
        for layer in reversed(range(network.num_layers() - 1))
        for addr in network.node_addrs(layer)
    ]

    epochs = range(config.num_epochs)
    if config.show_progress:
        epochs = tqdm(epochs)

    for epoch in epochs:
        if config.strategy == "shallow":
            result = TuneResult()
            for addr in node_addrs:
                for prop in config.properties:
                    result += tune_shallow(network, addr, prop, samples, config.learn_rate)
            history.tune_results.append(result)
            done = result.fails == result.total
        else:
            deltas = [
                tune_deep_node(network, addr, prop, samples, config.learn_rate)
                for addr in node_addrs
                for prop in config.properties
            ]
            delta = sum(deltas) / len(deltas) if deltas else 0.0
            history.deltas.append(delta)
            done = delta < config.tolerance

        err = total_squared_error(network, samples)
        history.errors.append(err)
        logger.info(f"Epoch {epoch}, error: {err:.6f}")

        if config.show_progress:
            epochs.set_description(f"Error: {err:.4f}")

        if done:
            history.converged = True
            logger.info(f"Converged after {epoch + 1} epochs")
            break

    return history


def plot_history(history: TrainingHistory, path: Path | None = None) -> Path:
    """Plot the error curve of a training run and save it as a png."""
    if path is None:
        path = make_run_dir("training") / "training_error.png"
    path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots()
    ax.plot(range(len(history.errors)), history.errors)
    ax.set_xlabel("epoch")
    ax.set_ylabel("total squared error")
    plt.savefig(path)
    plt.close(fig)

    return path
