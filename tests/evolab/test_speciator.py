from __future__ import annotations

import pytest
from evolab.comparer import DistanceComparer, DistanceConfig
from evolab.genome import Genome, Population, Species
from evolab.speciator import DynamicSpeciator, StaticSpeciator
from evolab.substrate import Node, NeuronType, Position, Substrate


def substrate_with_nodes(count: int) -> Substrate:
    return Substrate(
        nodes=[Node(Position(0.5, x=index), NeuronType.HIDDEN) for index in range(count)]
    )


def node_comparer() -> DistanceComparer:
    # Distance equals the number of unmatched nodes.
    return DistanceComparer(
        DistanceConfig(
            conns_coefficient=0.0,
            nodes_coefficient=1.0,
            weight_coefficient=0.0,
        )
    )


def build_population(*node_counts: int) -> Population:
    return Population(
        genomes=[
            Genome(id=index + 1, encoded=substrate_with_nodes(count))
            for index, count in enumerate(node_counts)
        ]
    )


def test_static_speciator_groups_by_threshold() -> None:
    population = build_population(0, 1, 5, 6, 20)
    speciator = StaticSpeciator(node_comparer(), compatibility_threshold=3.0)

    speciator.speciate(population)

    species_of = {genome.id: genome.species_id for genome in population.genomes}
    assert species_of[1] == species_of[2]
    assert species_of[3] == species_of[4]
    assert len({species_of[1], species_of[3], species_of[5]}) == 3
    assert [species.id for species in population.species] == [1, 2, 3]


def test_every_genome_belongs_to_a_non_empty_species() -> None:
    population = build_population(0, 2, 4, 6, 8, 10, 12)
    speciator = StaticSpeciator(node_comparer(), compatibility_threshold=2.5)

    for _ in range(3):
        speciator.speciate(population)
        ids = {species.id for species in population.species}
        members = {genome.species_id for genome in population.genomes}
        assert members == ids


def test_empty_species_are_removed_and_ids_never_reused() -> None:
    population = build_population(0, 0)
    population.species = [Species(id=5, example=substrate_with_nodes(30))]
    speciator = StaticSpeciator(node_comparer(), compatibility_threshold=1.0)

    speciator.speciate(population)
    assert [species.id for species in population.species] == [6]

    population.genomes = [Genome(id=9, encoded=substrate_with_nodes(15))]
    speciator.speciate(population)
    assert [species.id for species in population.species] == [7]
    assert population.genomes[0].species_id == 7


def test_new_species_example_is_a_snapshot() -> None:
    population = build_population(1)
    speciator = StaticSpeciator(node_comparer(), compatibility_threshold=1.0)
    speciator.speciate(population)

    population.genomes[0].encoded.add_node(Node(Position(0.7), NeuronType.HIDDEN))
    assert len(population.species[0].example.nodes) == 1


def test_comparer_errors_propagate() -> None:
    class FailingComparer:
        def compare(self, left: Substrate, right: Substrate) -> float:
            raise RuntimeError("comparison failed")

    speciator = StaticSpeciator(FailingComparer(), compatibility_threshold=1.0)
    with pytest.raises(RuntimeError, match="comparison failed"):
        speciator.speciate(build_population(0, 0))


def test_static_speciator_requires_positive_threshold() -> None:
    with pytest.raises(ValueError):
        StaticSpeciator(node_comparer(), compatibility_threshold=0.0)


def test_dynamic_speciator_lowers_threshold_below_target() -> None:
    speciator = DynamicSpeciator(
        StaticSpeciator(node_comparer(), compatibility_threshold=3.0),
        target_species=3,
        compatibility_modifier=1.0,
    )
    population = build_population(0, 1, 10)

    speciator.speciate(population)

    assert len(population.species) == 2
    assert speciator.compatibility_threshold == pytest.approx(2.0)


def test_dynamic_speciator_threshold_floors_at_modifier() -> None:
    speciator = DynamicSpeciator(
        StaticSpeciator(node_comparer(), compatibility_threshold=1.4),
        target_species=3,
        compatibility_modifier=1.0,
    )
    speciator.adjust_threshold(2)
    assert speciator.compatibility_threshold == pytest.approx(1.0)
    speciator.adjust_threshold(2)
    assert speciator.compatibility_threshold == pytest.approx(1.0)


def test_dynamic_speciator_raises_threshold_above_target() -> None:
    speciator = DynamicSpeciator(
        StaticSpeciator(node_comparer(), compatibility_threshold=0.5),
        target_species=1,
        compatibility_modifier=0.25,
    )
    population = build_population(0, 3, 6)

    speciator.speciate(population)

    assert len(population.species) == 3
    assert speciator.compatibility_threshold == pytest.approx(0.75)

    speciator.adjust_threshold(1)
    assert speciator.compatibility_threshold == pytest.approx(0.75)


def test_dynamic_threshold_stays_positive() -> None:
    speciator = DynamicSpeciator(
        StaticSpeciator(node_comparer(), compatibility_threshold=0.3),
        target_species=50,
        compatibility_modifier=0.2,
    )
    for _ in range(20):
        speciator.speciate(build_population(0, 0, 0))
        assert speciator.compatibility_threshold > 0.0
