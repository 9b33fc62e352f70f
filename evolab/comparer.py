"""Structural distance between substrates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol

from .substrate import Substrate


class Comparer(Protocol):
    """Anything able to measure how far apart two substrates are."""

    def compare(self, left: Substrate, right: Substrate) -> float: ...


@dataclass(frozen=True, slots=True)
class DistanceConfig:
    """Coefficients weighting the terms of the distance measure."""

    conns_coefficient: float = 1.0
    nodes_coefficient: float = 1.0
    weight_coefficient: float = 0.4

    def __post_init__(self) -> None:
        if (
            self.conns_coefficient < 0
            or self.nodes_coefficient < 0
            or self.weight_coefficient < 0
        ):
            msg = "Distance coefficients must be non-negative."
            raise ValueError(msg)


def substrate_distance(
    left: Substrate,
    right: Substrate,
    *,
    nodes_coefficient: float,
    conns_coefficient: float,
    weight_coefficient: float,
) -> float:
    """Compute the structural distance between two substrates.

    Nodes are matched by position and connections by ``(source, target)``.
    Every unmatched node or connection counts once; matched connections
    contribute the mean absolute difference of their weights.
    """
    right_positions = {node.position for node in right.nodes}
    matched_nodes = sum(1 for node in left.nodes if node.position in right_positions)
    different_nodes = len(left.nodes) + len(right.nodes) - 2 * matched_nodes

    right_weights = {conn.key: conn.weight for conn in right.conns}
    weight_diffs = [
        abs(conn.weight - right_weights[conn.key])
        for conn in left.conns
        if conn.key in right_weights
    ]
    matches = len(weight_diffs)
    different_conns = len(left.conns) + len(right.conns) - 2 * matches
    # fsum keeps the mean independent of connection order.
    average_weight_diff = math.fsum(weight_diffs) / matches if matches else 0.0

    return (
        nodes_coefficient * different_nodes
        + conns_coefficient * different_conns
        + weight_coefficient * average_weight_diff
    )


class DistanceComparer:
    """Comparer applying ``substrate_distance`` with configured coefficients."""

    def __init__(self, config: DistanceConfig | None = None) -> None:
        self.config = config or DistanceConfig()

    def compare(self, left: Substrate, right: Substrate) -> float:
        return substrate_distance(
            left,
            right,
            nodes_coefficient=self.config.nodes_coefficient,
            conns_coefficient=self.config.conns_coefficient,
            weight_coefficient=self.config.weight_coefficient,
        )

    def __repr__(self) -> str:
        return f"DistanceComparer({self.config!r})"


__all__ = [
    "Comparer",
    "DistanceComparer",
    "DistanceConfig",
    "substrate_distance",
]
