from __future__ import annotations

from random import Random

import pytest
from evolab.comparer import DistanceComparer, DistanceConfig
from evolab.substrate import Conn, Node, NeuronType, Position, Substrate


def build_substrate(conn_defs: list[tuple[float, float, float]]) -> Substrate:
    layers = {0.0, 0.2, 0.5, 1.0}
    nodes = [Node(Position(layer), NeuronType.HIDDEN) for layer in sorted(layers)]
    conns = [
        Conn(Position(source), Position(target), weight=weight)
        for source, target, weight in conn_defs
    ]
    return Substrate(nodes=nodes, conns=conns)


def test_weight_term_is_mean_difference_of_matching_conns() -> None:
    left = build_substrate(
        [
            (0.0, 0.2, 1.1),
            (0.0, 1.0, 2.1),
            (0.2, 0.5, 3.1),
            (0.5, 1.0, 4.1),
        ]
    )
    right = build_substrate([(0.0, 1.0, 3.3), (0.5, 1.0, 4.4)])
    comparer = DistanceComparer(
        DistanceConfig(
            conns_coefficient=0.0,
            nodes_coefficient=0.0,
            weight_coefficient=2.0,
        )
    )

    assert comparer.compare(left, right) == pytest.approx(1.5)


def test_distance_counts_unmatched_nodes_and_conns() -> None:
    left = Substrate(
        nodes=[
            Node(Position(0.0), NeuronType.INPUT),
            Node(Position(1.0), NeuronType.OUTPUT),
        ],
        conns=[Conn(Position(0.0), Position(1.0), weight=1.0)],
    )
    right = Substrate(nodes=[Node(Position(0.0), NeuronType.INPUT)])
    comparer = DistanceComparer(
        DistanceConfig(
            conns_coefficient=2.0,
            nodes_coefficient=3.0,
            weight_coefficient=1.0,
        )
    )

    # One unmatched node, one unmatched conn, no matched weights.
    assert comparer.compare(left, right) == pytest.approx(5.0)


def test_distance_is_symmetric_and_zero_on_identity() -> None:
    rng = Random(11)
    layers = [0.0, 0.25, 0.5, 0.75, 1.0]
    nodes = [Node(Position(layer), NeuronType.HIDDEN) for layer in layers]
    pairs = [(a, b) for a in layers for b in layers if a < b]
    comparer = DistanceComparer()

    for _ in range(50):
        left = Substrate(
            nodes=nodes,
            conns=[
                Conn(Position(a), Position(b), weight=rng.uniform(-3.0, 3.0))
                for a, b in rng.sample(pairs, 6)
            ],
        )
        right = Substrate(
            nodes=nodes,
            conns=[
                Conn(Position(a), Position(b), weight=rng.uniform(-3.0, 3.0))
                for a, b in rng.sample(pairs, 4)
            ],
        )
        assert comparer.compare(left, right) == comparer.compare(right, left)
        assert comparer.compare(left, left) == 0.0


def test_negative_coefficients_are_rejected() -> None:
    with pytest.raises(ValueError):
        DistanceConfig(weight_coefficient=-0.1)
