"""Generate text by chaining "word follows word" patterns.

The network has one block of input nodes per context word, with one node per
vocabulary entry in each block. Every pattern of the text becomes an AND node
in layer 1 that fires when all of its context words are present. Layer 2
holds one node per vocabulary entry and collects the AND nodes that predict
it, and the output layer turns that into an OR over the patterns.
"""
import logging
from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Sequence

import numpy as np

from signalnet.network.network import Network
from signalnet.network.topology import build_uniform
from signalnet.type_defs import NodeAddr
from signalnet.utils.rand_utils import weighted_top_k

logger = logging.getLogger(__name__)

INPUT_WORDS = 3


def _is_letter(ch: str) -> bool:
    return ("a" <= ch <= "z") or ("A" <= ch <= "Z") or ord(ch) > 127


@dataclass
class Text:
    """A tokenized text.

    Attributes:
        voc: The vocabulary, in order of first appearance.
        seq: Vocabulary index of every word of the text.
        points: Whether each word of the text ended with a period.
    """

    voc: list[str] = field(default_factory=list)
    seq: list[int] = field(default_factory=list)
    points: list[bool] = field(default_factory=list)

    def add_word(self, word: str) -> None:
        has_point = word.endswith(".")
        if has_point:
            word = word[:-1]
        if not word:
            return

        try:
            num = self.voc.index(word)
        except ValueError:
            num = len(self.voc)
            self.voc.append(word)

        self.seq.append(num)
        self.points.append(has_point)

    @classmethod
    def from_string(cls, content: str) -> "Text":
        cleaned = "".join(
            ch.lower() if _is_letter(ch) or ch == "." else " "
            for ch in content
        )
        text = cls()
        for word in cleaned.split():
            text.add_word(word)
        return text

    @classmethod
    def from_file(cls, path: str | Path) -> "Text":
        content = Path(path).read_text(encoding="utf-8", errors="replace")
        if not content:
            raise ValueError(f"Text file {path} is empty")
        return cls.from_string(content)


class WordPatternNetwork:
    """A network predicting the next word of a text from the previous words.

    Attributes:
        text: The text the patterns come from.
        input_words: Number of context words.
        network: The underlying network.
    """

    text: Text
    input_words: int
    network: Network

    def __init__(self, text: Text, input_words: int = INPUT_WORDS) -> None:
        if not text.voc:
            raise ValueError("Text has no words")
        assert input_words > 0, "Need at least one context word."

        self.text = text
        self.input_words = input_words

        # one extra entry per block for syntax (currently periods)
        word_size = self.word_size
        self.network = build_uniform([word_size * input_words, 0, 0, word_size], k=0.0, w=1.0, c=0.0)

        for i in range(word_size):
            addr = self.network.add_node(2)
            self.network.connect(addr, NodeAddr(3, i), k=0.0, w=1.0, c=0.0)

    @property
    def word_size(self) -> int:
        return len(self.text.voc) + 1

    def add_logic_pattern(self, input_nodes: Sequence[int], output_node: int) -> NodeAddr:
        """Make ``output_node`` fire when all of ``input_nodes`` fire.

        Returns:
            Address of the AND node.
        """
        and_node = self.network.add_node(1)
        self.network.connect(and_node, NodeAddr(2, output_node), k=0.0, w=1.0, c=0.0)

        for i in input_nodes:
            self.network.connect(NodeAddr(0, i), and_node, k=1.0, w=1.0, c=0.0)

        return and_node

    def add_word_pattern(self, start: int) -> NodeAddr:
        """Add the pattern of the words at ``start`` predicting the word after them."""
        predict_word = self.text.seq[start + self.input_words]
        inputs = [
            i * self.word_size + self.text.seq[start + i]
            for i in range(self.input_words)
        ]
        return self.add_logic_pattern(inputs, predict_word)

    def learn_text(self) -> int:
        """Add a pattern for every window of the text.

        Returns:
            Number of patterns added.
        """
        num_patterns = len(self.text.seq) - self.input_words - 1
        if num_patterns <= 0:
            raise ValueError(
                f"Text of {len(self.text.seq)} words is too short for {self.input_words} context words"
            )

        for start in range(num_patterns):
            self.add_word_pattern(start)

        logger.info(f"Added {num_patterns} patterns over a vocabulary of {len(self.text.voc)} words")
        return num_patterns

    def context_input(self, context: Sequence[int]) -> np.ndarray:
        """One-hot input for up to ``input_words`` words, aligned to the last block."""
        assert 0 < len(context) <= self.input_words, (
            f"Context must have between 1 and {self.input_words} words, got {len(context)}."
        )
        values = np.zeros(self.word_size * self.input_words, dtype=np.float64)

        offset = self.input_words - len(context)
        for i, word in enumerate(context):
            values[(offset + i) * self.word_size + word] = 1.0

        return values

    def run(self, context: Sequence[int]) -> np.ndarray:
        return self.network.run(self.context_input(context))

    def read_output(self, rng: np.random.Generator) -> int:
        """Pick one of the three most probable words, or a random word if there are not three."""
        scores = self.network.output()[: len(self.text.voc)]
        word = weighted_top_k(scores, 3, rng)
        if word is None:
            return int(rng.integers(len(self.text.voc)))
        return word

    def generate(self, num_words: int, rng: np.random.Generator | None = None) -> Iterator[str]:
        """Generate words, starting with the first words of the text."""
        if rng is None:
            rng = np.random.default_rng()
        assert len(self.text.seq) >= self.input_words, "Text is shorter than the context."

        context: deque[int] = deque(self.text.seq[: self.input_words], maxlen=self.input_words)

        for _ in range(num_words):
            yield self.text.voc[context[-1]]

            self.run(list(context))
            word = self.read_output(rng)
            if word == context[-1]:
                word = int(rng.integers(len(self.text.voc)))
                logger.debug("Repeated word, picked a random one")
            context.append(word)
