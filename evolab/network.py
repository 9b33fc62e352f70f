"""Feed-forward network construction and evaluation from decoded substrates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .activations import ActivationFunction, activation_function
from .substrate import (
    ActivationType,
    NeuronType,
    Position,
    Substrate,
    conn_sort_key,
    node_sort_key,
)


class Phenotype(Protocol):
    """Black box turning an input vector into an output vector."""

    def activate(self, inputs: Sequence[float]) -> list[float]: ...


@dataclass(frozen=True, slots=True)
class Neuron:
    neuron_type: NeuronType
    activation_type: ActivationType


@dataclass(frozen=True, slots=True)
class Synapse:
    source: int
    target: int
    weight: float


@dataclass(slots=True)
class Network:
    """Executable network laid out as bias, input, hidden then output neurons.

    Synapses are stored sorted by source then target position, so a single
    pass over them propagates signals through a feed-forward substrate.
    Recurrent synapses read whatever value their source holds at the time,
    which may be stale.
    """

    biases: int
    inputs: int
    hiddens: int
    outputs: int
    neurons: tuple[Neuron, ...]
    synapses: tuple[Synapse, ...]
    _functions: tuple[ActivationFunction, ...] = field(
        init=False,
        repr=False,
        compare=False,
    )

    def __post_init__(self) -> None:
        self._functions = tuple(
            activation_function(neuron.activation_type) for neuron in self.neurons
        )

    @classmethod
    def from_substrate(cls, substrate: Substrate) -> Network:
        """Construct a network from a (decoded) substrate."""
        nodes = sorted(substrate.nodes, key=node_sort_key)
        counts = dict.fromkeys(NeuronType, 0)
        index_of: dict[Position, int] = {}
        neurons: list[Neuron] = []
        for index, node in enumerate(nodes):
            counts[node.neuron_type] += 1
            index_of[node.position] = index
            neurons.append(Neuron(node.neuron_type, node.activation_type))

        synapses: list[Synapse] = []
        for conn in sorted(substrate.conns, key=conn_sort_key):
            if not conn.enabled:
                continue
            try:
                source = index_of[conn.source]
                target = index_of[conn.target]
            except KeyError as error:
                msg = f"Connection endpoint {error.args[0]} has no node."
                raise ValueError(msg) from error
            synapses.append(Synapse(source, target, conn.weight))

        return cls(
            biases=counts[NeuronType.BIAS],
            inputs=counts[NeuronType.INPUT],
            hiddens=counts[NeuronType.HIDDEN],
            outputs=counts[NeuronType.OUTPUT],
            neurons=tuple(neurons),
            synapses=tuple(synapses),
        )

    def activate(self, inputs: Sequence[float]) -> list[float]:
        """Run a forward pass and return outputs in position order."""
        if len(inputs) != self.inputs:
            msg = f"Expected {self.inputs} inputs but received {len(inputs)}."
            raise ValueError(msg)

        values = [0.0] * len(self.neurons)
        for index in range(self.biases):
            values[index] = 1.0
        for offset, value in enumerate(inputs):
            values[self.biases + offset] = float(value)

        functions = self._functions
        for synapse in self.synapses:
            signal = functions[synapse.source](values[synapse.source])
            values[synapse.target] += signal * synapse.weight

        start = self.biases + self.inputs + self.hiddens
        return [
            functions[index](values[index])
            for index in range(start, start + self.outputs)
        ]


class Translator(Protocol):
    def translate(self, substrate: Substrate) -> Phenotype: ...


class NetworkTranslator:
    """Translates decoded substrates into ``Network`` instances."""

    def translate(self, substrate: Substrate) -> Network:
        return Network.from_substrate(substrate)

    def __repr__(self) -> str:
        return "NetworkTranslator()"


__all__ = [
    "Network",
    "NetworkTranslator",
    "Neuron",
    "Phenotype",
    "Synapse",
    "Translator",
]
