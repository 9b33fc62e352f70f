from __future__ import annotations

from random import Random

from evolab.substrate import (
    ActivationType,
    Conn,
    Node,
    NeuronType,
    Position,
    Substrate,
)
from evolab.transcriber import NEATTranscriber


def build_nodes() -> list[Node]:
    return [
        Node(Position(0.0, x=0.0), NeuronType.BIAS),
        Node(Position(0.0, x=0.5), NeuronType.INPUT),
        Node(Position(0.0, x=1.0), NeuronType.INPUT),
        Node(Position(0.5, x=0.5), NeuronType.HIDDEN, ActivationType.STEEPENED_SIGMOID),
        Node(Position(1.0, x=0.5), NeuronType.OUTPUT, ActivationType.SIGMOID),
    ]


def build_conns() -> list[Conn]:
    return [
        Conn(Position(0.0, x=0.0), Position(1.0, x=0.5), weight=0.1),
        Conn(Position(0.0, x=0.5), Position(0.5, x=0.5), weight=0.2),
        Conn(Position(0.0, x=0.5), Position(1.0, x=0.5), weight=0.3, enabled=False),
        Conn(Position(0.0, x=1.0), Position(0.5, x=0.5), weight=0.4),
        Conn(Position(0.5, x=0.5), Position(1.0, x=0.5), weight=0.5),
    ]


def test_transcriber_keeps_all_nodes_and_enabled_conns_in_order() -> None:
    rng = Random(5)
    nodes = build_nodes()
    conns = build_conns()
    rng.shuffle(nodes)
    rng.shuffle(conns)

    decoded = NEATTranscriber().transcribe(Substrate(nodes=nodes, conns=conns))

    assert decoded.nodes == build_nodes()
    assert [conn.weight for conn in decoded.conns] == [0.1, 0.2, 0.4, 0.5]
    assert all(conn.enabled for conn in decoded.conns)


def test_transcriber_leaves_encoded_substrate_untouched() -> None:
    encoded = Substrate(nodes=build_nodes(), conns=build_conns())
    decoded = NEATTranscriber().transcribe(encoded)

    assert len(encoded.conns) == 5
    assert decoded.nodes is not encoded.nodes
    assert decoded.complexity() == encoded.complexity()
