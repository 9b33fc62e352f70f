"""Seeding, crossover and mutation operators for substrate genomes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from random import Random
from typing import Protocol

from .genome import Genome, Population, ranking_key
from .substrate import (
    ActivationType,
    Conn,
    Node,
    NeuronType,
    Position,
    Substrate,
    conn_sort_key,
    node_sort_key,
    positions_of,
)


class Seeder(Protocol):
    def seed(
        self,
        population_size: int,
        num_inputs: int,
        num_outputs: int,
    ) -> Population: ...


class Crosser(Protocol):
    def cross(self, parents: Sequence[Genome]) -> Genome: ...


class Mutator(Protocol):
    def mutate(self, genome: Genome) -> None: ...


def _spread(index: int, count: int) -> float:
    if count <= 1:
        return 0.5
    return index / (count - 1)


@dataclass(frozen=True, slots=True)
class SeederConfig:
    """Configuration for the initial population."""

    output_activation: ActivationType = ActivationType.SIGMOID
    weight_power: float = 1.0

    def __post_init__(self) -> None:
        object.__setattr__(
            self,
            "output_activation",
            ActivationType.coerce(self.output_activation),
        )
        if self.weight_power < 0.0:
            msg = "weight_power must be >= 0."
            raise ValueError(msg)


class NEATSeeder:
    """Builds a population of fully connected, hidden-free genomes.

    The bias sits at the origin of layer 0, inputs follow it along the
    x axis and outputs are spread over layer 1, so canonical position order
    is bias, inputs, hiddens, outputs.
    """

    def __init__(
        self,
        config: SeederConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        self.config = config or SeederConfig()
        self.rng = rng or Random()

    def seed(
        self,
        population_size: int,
        num_inputs: int,
        num_outputs: int,
    ) -> Population:
        if population_size <= 0:
            msg = "population_size must be positive."
            raise ValueError(msg)
        if num_inputs <= 0:
            msg = "num_inputs must be positive."
            raise ValueError(msg)
        if num_outputs <= 0:
            msg = "num_outputs must be positive."
            raise ValueError(msg)

        sensors = [Node(Position(layer=0.0, x=0.0), NeuronType.BIAS)]
        sensors.extend(
            Node(Position(layer=0.0, x=(index + 1) / num_inputs), NeuronType.INPUT)
            for index in range(num_inputs)
        )
        outputs = [
            Node(
                Position(layer=1.0, x=_spread(index, num_outputs)),
                NeuronType.OUTPUT,
                self.config.output_activation,
            )
            for index in range(num_outputs)
        ]
        nodes = sensors + outputs

        genomes: list[Genome] = []
        for genome_id in range(1, population_size + 1):
            conns = [
                Conn(
                    source=source.position,
                    target=target.position,
                    weight=self.rng.gauss(0.0, 1.0) * self.config.weight_power,
                )
                for source in sensors
                for target in outputs
            ]
            genomes.append(
                Genome(id=genome_id, encoded=Substrate(nodes=list(nodes), conns=conns))
            )
        return Population(generation=0, species=[], genomes=genomes)

    def __repr__(self) -> str:
        return f"NEATSeeder({self.config!r})"


@dataclass(frozen=True, slots=True)
class CrosserConfig:
    """Configuration controlling crossover behaviour."""

    enable_probability: float = 0.0

    def __post_init__(self) -> None:
        if not 0.0 <= self.enable_probability <= 1.0:
            msg = "enable_probability must be in [0, 1]."
            raise ValueError(msg)


class NEATCrosser:
    """Creates a child from one parent (clone) or two parents (crossover)."""

    def __init__(
        self,
        config: CrosserConfig | None = None,
        rng: Random | None = None,
    ) -> None:
        self.config = config or CrosserConfig()
        self.rng = rng or Random()

    def cross(self, parents: Sequence[Genome]) -> Genome:
        """Create a child genome.

        With two parents the better one (by ranking order) leads. Genes
        present in both parents are picked from either at random; a shared
        connection stays enabled only if both parents enable it. Genes only
        the follower carries are inherited only when both parents are
        equally fit. Disabled connections may then be re-enabled.
        """
        if not parents:
            msg = "Crossover requires at least one parent."
            raise ValueError(msg)
        if len(parents) > 2:
            msg = "Crossover supports at most two parents."
            raise ValueError(msg)

        if len(parents) == 1:
            nodes = list(parents[0].encoded.nodes)
            conns = list(parents[0].encoded.conns)
        else:
            leader, follower = sorted(parents, key=ranking_key)
            same = leader.fitness == follower.fitness
            nodes = self._cross_nodes(leader.encoded, follower.encoded, same)
            conns = self._cross_conns(leader.encoded, follower.encoded, same)

        rng = self.rng
        conns = [
            conn.copy(enabled=True)
            if not conn.enabled and rng.random() < self.config.enable_probability
            else conn
            for conn in conns
        ]
        return Genome(
            id=0,
            encoded=Substrate(
                nodes=sorted(nodes, key=node_sort_key),
                conns=sorted(conns, key=conn_sort_key),
            ),
        )

    def _cross_nodes(
        self,
        leader: Substrate,
        follower: Substrate,
        same: bool,
    ) -> list[Node]:
        theirs = positions_of(follower.nodes)
        nodes: list[Node] = []
        for node in leader.nodes:
            other = theirs.pop(node.position, None)
            if other is not None and self.rng.random() < 0.5:
                node = other
            nodes.append(node)
        if same:
            nodes.extend(theirs.values())
        return nodes

    def _cross_conns(
        self,
        leader: Substrate,
        follower: Substrate,
        same: bool,
    ) -> list[Conn]:
        theirs = {conn.key: conn for conn in follower.conns}
        conns: list[Conn] = []
        for conn in leader.conns:
            other = theirs.pop(conn.key, None)
            if other is not None:
                weight = other.weight if self.rng.random() < 0.5 else conn.weight
                conn = conn.copy(weight=weight, enabled=conn.enabled and other.enabled)
            conns.append(conn)
        if same:
            conns.extend(theirs.values())
        return conns

    def __repr__(self) -> str:
        return f"NEATCrosser({self.config!r})"


@dataclass(frozen=True, slots=True)
class WeightMutationConfig:
    """Configuration for weight mutation behaviour."""

    mutate_weight_probability: float
    replace_weight_probability: float

    def __post_init__(self) -> None:
        for label, value in (
            ("mutate_weight_probability", self.mutate_weight_probability),
            ("replace_weight_probability", self.replace_weight_probability),
        ):
            if not 0.0 <= value <= 1.0:
                msg = f"{label} must be in [0, 1]."
                raise ValueError(msg)


class WeightMutator:
    """Perturbs, or occasionally replaces, connection weights with N(0, 1) draws."""

    def __init__(self, config: WeightMutationConfig, rng: Random | None = None) -> None:
        self.config = config
        self.rng = rng or Random()

    def mutate(self, genome: Genome) -> None:
        substrate = genome.encoded
        for index, conn in enumerate(substrate.conns):
            if self.rng.random() >= self.config.mutate_weight_probability:
                continue
            delta = self.rng.gauss(0.0, 1.0)
            if self.rng.random() < self.config.replace_weight_probability:
                updated = conn.copy(weight=delta)
            else:
                updated = conn.copy(weight=conn.weight + delta)
            substrate.replace_conn(index, updated)

    def __repr__(self) -> str:
        return f"WeightMutator({self.config!r})"


@dataclass(frozen=True, slots=True)
class ComplexifyConfig:
    """Configuration for structural (add node / add connection) mutation."""

    add_node_probability: float
    add_conn_probability: float
    allow_recurrent: bool = False
    hidden_activation: ActivationType = ActivationType.STEEPENED_SIGMOID

    def __post_init__(self) -> None:
        for label, value in (
            ("add_node_probability", self.add_node_probability),
            ("add_conn_probability", self.add_conn_probability),
        ):
            if not 0.0 <= value <= 1.0:
                msg = f"{label} must be in [0, 1]."
                raise ValueError(msg)
        object.__setattr__(
            self,
            "hidden_activation",
            ActivationType.coerce(self.hidden_activation),
        )


class ComplexifyMutator:
    """Grows a genome by splitting a connection or joining two nodes.

    At most one structural change is made per call: a node is added with
    ``add_node_probability``, otherwise a connection with
    ``add_conn_probability``.
    """

    def __init__(self, config: ComplexifyConfig, rng: Random | None = None) -> None:
        self.config = config
        self.rng = rng or Random()

    def mutate(self, genome: Genome) -> None:
        if self.rng.random() < self.config.add_node_probability:
            self.add_node(genome.encoded)
        elif self.rng.random() < self.config.add_conn_probability:
            self.add_conn(genome.encoded)

    def add_node(self, substrate: Substrate) -> bool:
        """Split a random connection whose midpoint is still free.

        Connections whose midpoint would fall on the sensor or output layer
        are never split.
        """
        indices = list(range(len(substrate.conns)))
        self.rng.shuffle(indices)
        for index in indices:
            split = substrate.conns[index]
            position = split.source.midpoint(split.target)
            # Hidden nodes must sit strictly between the sensor and output layers.
            if not 0.0 < position.layer < 1.0:
                continue
            if substrate.find_node(position) != -1:
                continue
            substrate.replace_conn(index, split.copy(enabled=False))
            substrate.add_node(
                Node(position, NeuronType.HIDDEN, self.config.hidden_activation)
            )
            substrate.add_conn(Conn(split.source, position, weight=1.0))
            substrate.add_conn(Conn(position, split.target, weight=split.weight))
            return True
        return False

    def add_conn(self, substrate: Substrate) -> bool:
        """Join the first random pair of unconnected nodes that is allowed.

        Unless ``allow_recurrent`` is set, the source must lie on an earlier
        layer than the target.
        """
        sources = list(substrate.nodes)
        targets = [
            node
            for node in substrate.nodes
            if node.neuron_type not in (NeuronType.BIAS, NeuronType.INPUT)
        ]
        self.rng.shuffle(sources)
        self.rng.shuffle(targets)
        for source in sources:
            for target in targets:
                if source.position == target.position:
                    continue
                if (
                    not self.config.allow_recurrent
                    and source.position.layer >= target.position.layer
                ):
                    continue
                if substrate.find_conn(source.position, target.position) != -1:
                    continue
                substrate.add_conn(
                    Conn(
                        source.position,
                        target.position,
                        weight=self.rng.gauss(0.0, 1.0),
                    )
                )
                return True
        return False

    def __repr__(self) -> str:
        return f"ComplexifyMutator({self.config!r})"


class CompositeMutator:
    """Applies several mutators in sequence."""

    def __init__(self, mutators: Sequence[Mutator]) -> None:
        self.mutators = tuple(mutators)

    def mutate(self, genome: Genome) -> None:
        for mutator in self.mutators:
            mutator.mutate(genome)

    def __repr__(self) -> str:
        return f"CompositeMutator({list(self.mutators)!r})"


__all__ = [
    "ComplexifyConfig",
    "ComplexifyMutator",
    "CompositeMutator",
    "Crosser",
    "CrosserConfig",
    "Mutator",
    "NEATCrosser",
    "NEATSeeder",
    "Seeder",
    "SeederConfig",
    "WeightMutationConfig",
    "WeightMutator",
]
