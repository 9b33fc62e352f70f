from __future__ import annotations

import pytest
from evolab.substrate import (
    ActivationType,
    Conn,
    Node,
    NeuronType,
    Position,
    Substrate,
    positions_of,
)


def test_positions_sort_by_layer_then_coordinates() -> None:
    positions = [
        Position(layer=1.0, x=0.5),
        Position(layer=0.0, x=1.0),
        Position(layer=0.5, x=0.5),
        Position(layer=0.0, x=0.0),
        Position(layer=0.0, x=0.0, y=0.5),
    ]
    assert sorted(positions) == [
        Position(layer=0.0, x=0.0),
        Position(layer=0.0, x=0.0, y=0.5),
        Position(layer=0.0, x=1.0),
        Position(layer=0.5, x=0.5),
        Position(layer=1.0, x=0.5),
    ]
    assert Position(0.0).compare(Position(1.0)) == -1
    assert Position(1.0).compare(Position(0.0)) == 1
    assert Position(0.5, 0.5).compare(Position(0.5, 0.5)) == 0


def test_midpoint_is_halfway_on_every_axis() -> None:
    mid = Position(layer=0.0, x=0.0).midpoint(Position(layer=1.0, x=0.5, y=1.0))
    assert mid == Position(layer=0.5, x=0.25, y=0.5, z=0.0)


def test_node_coerces_string_types() -> None:
    node = Node(Position(0.5), "hidden", "steepened_sigmoid")
    assert node.neuron_type is NeuronType.HIDDEN
    assert node.activation_type is ActivationType.STEEPENED_SIGMOID

    with pytest.raises(ValueError):
        Node(Position(0.5), "neuron")
    with pytest.raises(ValueError):
        Node(Position(0.5), NeuronType.HIDDEN, "relu")


def test_conn_rejects_non_finite_weights() -> None:
    with pytest.raises(ValueError):
        Conn(Position(0.0), Position(1.0), weight=float("nan"))
    with pytest.raises(ValueError):
        Conn(Position(0.0), Position(1.0), weight=float("inf"))


def test_conn_compare_orders_by_source_then_target() -> None:
    a = Conn(Position(0.0), Position(1.0))
    b = Conn(Position(0.0), Position(0.5))
    c = Conn(Position(0.5), Position(1.0))
    assert b.compare(a) == -1
    assert a.compare(c) == -1
    assert a.compare(a.copy(weight=3.0)) == 0


def _substrate() -> Substrate:
    source = Position(0.0)
    target = Position(1.0)
    return Substrate(
        nodes=[Node(source, NeuronType.INPUT), Node(target, NeuronType.OUTPUT)],
        conns=[Conn(source, target, weight=0.5)],
    )


def test_substrate_validates_structure() -> None:
    source = Position(0.0)
    with pytest.raises(ValueError):
        Substrate(nodes=[Node(source, NeuronType.INPUT), Node(source, NeuronType.BIAS)])
    with pytest.raises(ValueError):
        Substrate(
            nodes=[Node(source, NeuronType.INPUT)],
            conns=[Conn(source, Position(1.0))],
        )

    substrate = _substrate()
    with pytest.raises(ValueError):
        substrate.add_conn(Conn(Position(0.0), Position(1.0)))
    with pytest.raises(ValueError):
        substrate.add_node(Node(Position(1.0), NeuronType.HIDDEN))
    with pytest.raises(ValueError):
        substrate.replace_conn(0, Conn(Position(1.0), Position(0.0)))


def test_complexity_counts_enabled_conns_only() -> None:
    substrate = _substrate()
    hidden = Position(0.5)
    substrate.add_node(Node(hidden, NeuronType.HIDDEN))
    substrate.add_conn(Conn(Position(0.0), hidden, enabled=False))
    substrate.add_conn(Conn(hidden, Position(1.0)))
    assert substrate.complexity() == 2
    assert substrate.find_conn(Position(0.0), hidden) == 1
    assert substrate.find_conn(hidden, Position(0.0)) == -1


def test_copy_does_not_share_lists() -> None:
    substrate = _substrate()
    clone = substrate.copy()
    clone.replace_conn(0, clone.conns[0].copy(weight=2.0))
    clone.add_node(Node(Position(0.5), NeuronType.HIDDEN))

    assert substrate.conns[0].weight == 0.5
    assert len(substrate.nodes) == 2
    assert set(positions_of(clone.nodes)) == {
        Position(0.0),
        Position(0.5),
        Position(1.0),
    }
