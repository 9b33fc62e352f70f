"""Substrate primitives: positioned nodes and the connections between them."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum


class NeuronType(str, Enum):
    """Enumeration of supported neuron categories."""

    BIAS = "bias"
    INPUT = "input"
    HIDDEN = "hidden"
    OUTPUT = "output"

    @classmethod
    def coerce(cls, value: NeuronType | str) -> NeuronType:
        """Coerce a string or NeuronType into a NeuronType instance."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            msg = f"Unsupported neuron type value: {value!r}"
            raise TypeError(msg)
        try:
            return cls(value.strip().lower())
        except ValueError as error:
            valid = ", ".join(member.value for member in cls)
            msg = f"Invalid neuron type {value!r}. Expected one of: {valid}"
            raise ValueError(msg) from error


class ActivationType(str, Enum):
    """Enumeration of the transfer functions a neuron may use."""

    DIRECT = "direct"
    SIGMOID = "sigmoid"
    STEEPENED_SIGMOID = "steepened-sigmoid"
    TANH = "tanh"
    INVERSE_ABS = "inverse-abs"

    @classmethod
    def coerce(cls, value: ActivationType | str) -> ActivationType:
        """Coerce a string or ActivationType into an ActivationType instance."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            msg = f"Unsupported activation type value: {value!r}"
            raise TypeError(msg)
        try:
            return cls(value.strip().lower().replace("_", "-"))
        except ValueError as error:
            valid = ", ".join(member.value for member in cls)
            msg = f"Invalid activation type {value!r}. Expected one of: {valid}"
            raise ValueError(msg) from error


@dataclass(frozen=True, slots=True, order=True)
class Position:
    """Location of a node on the layered substrate.

    Positions are ordered lexicographically by ``(layer, x, y, z)``.
    """

    layer: float
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    def compare(self, other: Position) -> int:
        """Return -1, 0 or 1 as this position sorts before, with or after ``other``."""
        left = (self.layer, self.x, self.y, self.z)
        right = (other.layer, other.x, other.y, other.z)
        if left < right:
            return -1
        if left > right:
            return 1
        return 0

    def midpoint(self, other: Position) -> Position:
        """Return the position halfway between this position and ``other``."""
        return Position(
            layer=(self.layer + other.layer) / 2.0,
            x=(self.x + other.x) / 2.0,
            y=(self.y + other.y) / 2.0,
            z=(self.z + other.z) / 2.0,
        )

    def __str__(self) -> str:
        return f"[{self.layer:.4f}:{self.x:.4f},{self.y:.4f},{self.z:.4f}]"


@dataclass(frozen=True, slots=True)
class Node:
    """A neuron located at a unique position on the substrate."""

    position: Position
    neuron_type: NeuronType
    activation_type: ActivationType = ActivationType.DIRECT
    bias: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "neuron_type", NeuronType.coerce(self.neuron_type))
        object.__setattr__(
            self,
            "activation_type",
            ActivationType.coerce(self.activation_type),
        )

    def copy(
        self,
        *,
        activation_type: ActivationType | None = None,
        bias: float | None = None,
    ) -> Node:
        """Return a copy of the node with optional overrides."""
        return Node(
            position=self.position,
            neuron_type=self.neuron_type,
            activation_type=(
                self.activation_type if activation_type is None else activation_type
            ),
            bias=self.bias if bias is None else float(bias),
        )


@dataclass(frozen=True, slots=True)
class Conn:
    """A weighted connection between the nodes at two positions."""

    source: Position
    target: Position
    weight: float = 0.0
    enabled: bool = True

    def __post_init__(self) -> None:
        try:
            weight = float(self.weight)
        except (TypeError, ValueError) as error:
            msg = f"weight must be convertible to float, got {self.weight!r}"
            raise ValueError(msg) from error
        if not math.isfinite(weight):
            msg = "weight must be a finite number."
            raise ValueError(msg)
        object.__setattr__(self, "weight", weight)

    @property
    def key(self) -> tuple[Position, Position]:
        """Identity of the connection: its ``(source, target)`` pair."""
        return (self.source, self.target)

    def compare(self, other: Conn) -> int:
        """Order connections by source position, then target position."""
        result = self.source.compare(other.source)
        if result == 0:
            return self.target.compare(other.target)
        return result

    def copy(
        self,
        *,
        weight: float | None = None,
        enabled: bool | None = None,
    ) -> Conn:
        """Return a copy with optional field overrides."""
        return Conn(
            source=self.source,
            target=self.target,
            weight=self.weight if weight is None else float(weight),
            enabled=self.enabled if enabled is None else enabled,
        )


def node_sort_key(node: Node) -> Position:
    return node.position


def conn_sort_key(conn: Conn) -> tuple[Position, Position]:
    return conn.key


@dataclass(slots=True)
class Substrate:
    """Structural description of a network: nodes plus connections."""

    nodes: list[Node] = field(default_factory=list)
    conns: list[Conn] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.nodes = list(self.nodes)
        self.conns = list(self.conns)
        positions: set[Position] = set()
        for node in self.nodes:
            if node.position in positions:
                msg = f"Duplicate node at position {node.position}."
                raise ValueError(msg)
            positions.add(node.position)
        keys: set[tuple[Position, Position]] = set()
        for conn in self.conns:
            if conn.source not in positions or conn.target not in positions:
                msg = f"Connection {conn.source}->{conn.target} has no endpoint node."
                raise ValueError(msg)
            if conn.key in keys:
                msg = f"Duplicate connection {conn.source}->{conn.target}."
                raise ValueError(msg)
            keys.add(conn.key)

    def complexity(self) -> int:
        """Return the number of enabled connections."""
        return sum(1 for conn in self.conns if conn.enabled)

    def copy(self) -> Substrate:
        """Return a copy whose node and connection lists can be changed freely."""
        return Substrate(nodes=list(self.nodes), conns=list(self.conns))

    def sorted(self) -> Substrate:
        """Return a copy with nodes and connections in canonical order."""
        return Substrate(
            nodes=sorted(self.nodes, key=node_sort_key),
            conns=sorted(self.conns, key=conn_sort_key),
        )

    def find_node(self, position: Position) -> int:
        """Return the index of the node at ``position`` or -1."""
        for index, node in enumerate(self.nodes):
            if node.position == position:
                return index
        return -1

    def find_conn(self, source: Position, target: Position) -> int:
        """Return the index of the connection ``source -> target`` or -1."""
        for index, conn in enumerate(self.conns):
            if conn.source == source and conn.target == target:
                return index
        return -1

    def add_node(self, node: Node) -> None:
        """Register a new node; its position must be free."""
        if self.find_node(node.position) != -1:
            msg = f"Node at {node.position} already exists."
            raise ValueError(msg)
        self.nodes.append(node)

    def add_conn(self, conn: Conn) -> None:
        """Register a new connection between existing nodes."""
        if self.find_node(conn.source) == -1 or self.find_node(conn.target) == -1:
            msg = f"Connection {conn.source}->{conn.target} references unknown node."
            raise ValueError(msg)
        if self.find_conn(conn.source, conn.target) != -1:
            msg = f"Connection {conn.source}->{conn.target} already exists."
            raise ValueError(msg)
        self.conns.append(conn)

    def replace_conn(self, index: int, conn: Conn) -> None:
        """Swap the connection at ``index`` for an updated copy of it."""
        if self.conns[index].key != conn.key:
            msg = "Replacement connection must keep the same source and target."
            raise ValueError(msg)
        self.conns[index] = conn


def positions_of(nodes: Iterable[Node]) -> dict[Position, Node]:
    """Map node positions to nodes."""
    return {node.position: node for node in nodes}


__all__ = [
    "ActivationType",
    "Conn",
    "Node",
    "NeuronType",
    "Position",
    "Substrate",
    "conn_sort_key",
    "node_sort_key",
    "positions_of",
]
