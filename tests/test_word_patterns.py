import numpy as np
import pytest

from signalnet.network.network import is_valid
from signalnet.tasks.word_patterns import Text, WordPatternNetwork
from signalnet.type_defs import NodeAddr
from signalnet.utils.rand_utils import weighted_top_k


class TestText:
    def test_tokenize(self) -> None:
        text = Text.from_string("The cat sat. The cat ran!")

        assert text.voc == ["the", "cat", "sat", "ran"]
        assert text.seq == [0, 1, 2, 0, 1, 3]
        assert text.points == [False, False, True, False, False, False]

    def test_non_letters_split_words(self) -> None:
        text = Text.from_string("abc123def , . x")
        assert text.voc == ["abc", "def", "x"]

    def test_from_file(self, tmp_path) -> None:
        path = tmp_path / "input.txt"
        path.write_text("one two. three", encoding="utf-8")

        text = Text.from_file(path)
        assert text.voc == ["one", "two", "three"]

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.txt"
        path.write_text("", encoding="utf-8")
        with pytest.raises(ValueError):
            Text.from_file(path)


class TestWordPatternNetwork:
    def test_layout(self) -> None:
        net = WordPatternNetwork(Text.from_string("a b c d"), input_words=2)

        assert [len(layer) for layer in net.network.mat] == [10, 0, 5, 5]
        for i, node in enumerate(net.network[2]):
            assert [lnk.addr for lnk in node.links] == [NodeAddr(3, i)]
        assert is_valid(net.network)[0]

    def test_and_pattern(self) -> None:
        net = WordPatternNetwork(Text.from_string("a b c d"), input_words=2)
        net.add_logic_pattern([0, 6], 3)

        values = np.zeros(10)
        values[[0, 6]] = 1.0
        assert net.network.run(values)[3] == pytest.approx(1.0)

        values[6] = 0.0
        assert net.network.run(values)[3] == pytest.approx(0.0)

    def test_or_over_patterns(self) -> None:
        net = WordPatternNetwork(Text.from_string("a b c d"), input_words=2)
        net.add_logic_pattern([0, 6], 3)
        net.add_logic_pattern([1, 7], 3)

        values = np.zeros(10)
        values[[1, 7]] = 1.0
        out = net.network.run(values)
        assert out[3] == pytest.approx(1.0)
        np.testing.assert_allclose(out[[0, 1, 2, 4]], 0.0, atol=1e-12)

    def test_learn_text(self) -> None:
        net = WordPatternNetwork(Text.from_string("a b c a b d"), input_words=2)

        assert net.learn_text() == 3
        assert len(net.network[1]) == 3
        assert is_valid(net.network)[0]

        # a b -> c
        out = net.run([0, 1])
        assert out[2] == pytest.approx(1.0)
        np.testing.assert_allclose(out[[0, 1, 3]], 0.0, atol=1e-12)

    def test_text_too_short(self) -> None:
        net = WordPatternNetwork(Text.from_string("a b c"), input_words=2)
        with pytest.raises(ValueError):
            net.learn_text()

    def test_empty_text(self) -> None:
        with pytest.raises(ValueError):
            WordPatternNetwork(Text())

    def test_context_is_right_aligned(self) -> None:
        net = WordPatternNetwork(Text.from_string("a b c d"), input_words=2)

        values = net.context_input([2])
        assert np.flatnonzero(values).tolist() == [5 + 2]

        with pytest.raises(AssertionError):
            net.context_input([0, 1, 2])

    def test_generate(self) -> None:
        text = Text.from_string("the cat sat on the mat and the cat ran on the road")
        net = WordPatternNetwork(text, input_words=2)
        net.learn_text()

        words = list(net.generate(20, np.random.default_rng(0)))
        assert len(words) == 20
        assert words[0] == "cat"
        assert all(word in text.voc for word in words)

        again = list(net.generate(20, np.random.default_rng(0)))
        assert again == words


class TestWeightedTopK:
    def test_picks_among_top(self) -> None:
        rng = np.random.default_rng(0)
        values = np.array([0.1, 0.5, 0.0, 0.3, 0.05])
        picks = {weighted_top_k(values, 3, rng) for _ in range(50)}
        assert picks <= {0, 1, 3}

    def test_not_enough_positive(self) -> None:
        rng = np.random.default_rng(0)
        assert weighted_top_k(np.array([0.5, 0.0, 0.0]), 3, rng) is None
        assert weighted_top_k(np.array([0.5, 0.2]), 3, rng) is None
