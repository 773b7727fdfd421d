import numpy as np
import pytest

from signalnet.network.topology import build_uniform
from signalnet.training.error import total_squared_error
from signalnet.training.tuning import (
    collect_node_tuning_summary,
    collect_tuning_summary,
    tune_deep,
    tune_deep_node,
    tune_shallow,
)
from signalnet.type_defs import ConProperty, LinkAddr, NodeAddr, TuneResult, TuneSample


@pytest.fixture
def xor_like_samples():
    return [
        TuneSample(input=[0.0, 0.0], output=[0.9]),
        TuneSample(input=[1.0, 0.0], output=[0.4]),
        TuneSample(input=[0.0, 1.0], output=[0.4]),
        TuneSample(input=[1.0, 1.0], output=[0.8]),
    ]


def test_tune_result_arithmetic() -> None:
    total = TuneResult(1, 3) + TuneResult(2, 4)
    assert total == TuneResult(3, 7)
    assert total - TuneResult(3, 7) == TuneResult(0, 0)


class TestTuneShallow:
    def test_counts_and_bounds(self, xor_like_samples) -> None:
        net = build_uniform([2, 3, 1], k=0.25, w=0.5, c=0.0)

        for _ in range(5):
            for layer in (1, 0):
                for addr in net.node_addrs(layer):
                    for prop in ConProperty:
                        result = tune_shallow(net, addr, prop, xor_like_samples, 0.3)
                        assert result.total == len(net.node(addr).links)
                        assert 0 <= result.fails <= result.total

        for layer in net.mat:
            for node in layer:
                for lnk in node.links:
                    assert 0.0 <= lnk.k <= 1.0
                    assert 0.0 <= lnk.w <= 1.0
                    assert 0.0 <= lnk.c <= 1.0

    def test_error_never_increases(self, xor_like_samples) -> None:
        net = build_uniform([2, 2, 1], k=0.25, w=0.5, c=0.0)
        err = total_squared_error(net, xor_like_samples)

        for _ in range(10):
            for addr in net.node_addrs(1) + net.node_addrs(0):
                tune_shallow(net, addr, ConProperty.W, xor_like_samples, 0.1)
                new_err = total_squared_error(net, xor_like_samples)
                assert new_err <= err
                err = new_err

    def test_improves_single_link(self, single_link_net, half_sample) -> None:
        result = tune_shallow(single_link_net, NodeAddr(0, 0), ConProperty.W, half_sample, 0.25)

        assert result == TuneResult(0, 1)
        assert single_link_net[0][0].links[0].w == pytest.approx(0.75)

    def test_no_improvement_restores(self, single_link_net) -> None:
        samples = [TuneSample(input=[1.0], output=[0.0])]
        result = tune_shallow(single_link_net, NodeAddr(0, 0), ConProperty.W, samples, 0.25)

        assert result == TuneResult(1, 1)
        assert single_link_net[0][0].links[0].w == 1.0

    def test_flat_error_keeps_step(self, single_link_net) -> None:
        # c has no effect on a network without hidden layers
        result = tune_shallow(single_link_net, NodeAddr(0, 0), ConProperty.C, [TuneSample([1.0], [0.5])], 0.25)

        assert result == TuneResult(1, 1)
        assert single_link_net[0][0].links[0].c == 0.25

    def test_node_without_links(self, single_link_net, half_sample) -> None:
        assert tune_shallow(single_link_net, NodeAddr(1, 0), ConProperty.W, half_sample, 0.1) == TuneResult(0, 0)


class TestTuneDeep:
    def test_single_step_reaches_solution(self, single_link_net, half_sample) -> None:
        diff = tune_deep(single_link_net, LinkAddr(0, 0, 0), ConProperty.W, half_sample, 1.0)

        assert diff == pytest.approx(0.5)
        assert single_link_net[0][0].links[0].w == pytest.approx(0.5)
        assert single_link_net.run([1.0])[0] == pytest.approx(0.5)

    def test_converges_with_small_rate(self, single_link_net, half_sample) -> None:
        for _ in range(30):
            tune_deep(single_link_net, LinkAddr(0, 0, 0), ConProperty.W, half_sample, 0.5)

        assert single_link_net[0][0].links[0].w == pytest.approx(0.5, abs=1e-6)

    def test_disagreement_slows_step(self, single_link_net) -> None:
        samples = [
            TuneSample(input=[1.0], output=[0.8]),
            TuneSample(input=[1.0], output=[0.2]),
        ]
        proposals = collect_tuning_summary(single_link_net, LinkAddr(0, 0, 0), ConProperty.W, samples)
        np.testing.assert_allclose(proposals, [0.2, 0.8])

        diff = tune_deep(single_link_net, LinkAddr(0, 0, 0), ConProperty.W, samples, 1.0)

        # (1 + 0.2 - 0.8) * (0.5 - 1.0)
        assert diff == pytest.approx(0.2)
        assert single_link_net[0][0].links[0].w == pytest.approx(0.8)

    def test_needs_samples(self, single_link_net) -> None:
        with pytest.raises(AssertionError):
            tune_deep(single_link_net, LinkAddr(0, 0, 0), ConProperty.W, [], 1.0)

    def test_node_averages_links(self) -> None:
        net = build_uniform([1, 2], k=0.0, w=1.0, c=0.0)
        samples = [TuneSample(input=[1.0], output=[0.5, 0.25])]

        summary = collect_node_tuning_summary(net, NodeAddr(0, 0), ConProperty.W, samples)
        assert len(summary) == 2
        np.testing.assert_allclose(summary[0], [0.5])
        np.testing.assert_allclose(summary[1], [0.75])

        res = tune_deep_node(net, NodeAddr(0, 0), ConProperty.W, samples, 1.0)

        assert res == pytest.approx((0.5 + 0.25) / 2)
        np.testing.assert_allclose([lnk.w for lnk in net[0][0].links], [0.5, 0.75])

    def test_node_without_links(self, single_link_net, half_sample) -> None:
        assert tune_deep_node(single_link_net, NodeAddr(1, 0), ConProperty.W, half_sample, 1.0) == 0.0
