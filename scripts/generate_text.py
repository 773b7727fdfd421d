#!/usr/bin/env python3

"""Command line entry points for the word pattern generator and a small training demo."""

import logging
import time

import numpy as np
from fire import Fire

from signalnet.network.topology import build_uniform
from signalnet.tasks.word_patterns import INPUT_WORDS, Text, WordPatternNetwork
from signalnet.training.loop import plot_history, train
from signalnet.type_defs import ConProperty, TrainingConfig, TuneSample


def generate(
    text_file: str = "input.txt",
    input_words: int = INPUT_WORDS,
    num_words: int = 100,
    delay: float = 0.3,
    seed: int | None = None,
) -> None:
    """Learn the word patterns of a text and print generated text."""
    text = Text.from_file(text_file)
    net = WordPatternNetwork(text, input_words=input_words)
    net.learn_text()

    for word in net.generate(num_words, np.random.default_rng(seed)):
        print(word, end=" ", flush=True)
        if delay > 0:
            time.sleep(delay)
    print()


def train_demo(
    strategy: str = "deep",
    learn_rate: float = 0.5,
    num_epochs: int = 200,
    plot: bool = False,
) -> None:
    """Tune a small network towards a target output and report the error."""
    network = build_uniform([2, 2, 1], k=0.25, w=0.5, c=0.0)
    samples = [
        TuneSample(input=[0.0, 0.0], output=[0.9]),
        TuneSample(input=[1.0, 0.0], output=[0.6]),
        TuneSample(input=[0.0, 1.0], output=[0.6]),
        TuneSample(input=[1.0, 1.0], output=[0.3]),
    ]
    config = TrainingConfig(
        strategy=strategy,
        learn_rate=learn_rate,
        num_epochs=num_epochs,
        properties=[ConProperty.W, ConProperty.K],
        show_progress=True,
    )

    history = train(network, samples, config)
    print(f"Error: {history.errors[0]:.6f} -> {history.errors[-1]:.6f}")

    if plot:
        print(plot_history(history))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    Fire({
        "generate": generate,
        "train_demo": train_demo,
    })
