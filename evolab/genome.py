"""Genomes, species and populations plus the orderings used to rank them."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from .substrate import Substrate


@dataclass(slots=True)
class Genome:
    """A single candidate solution and its evolutionary bookkeeping."""

    id: int
    encoded: Substrate
    species_id: int = 0
    age: int = 0
    fitness: float = 0.0
    novelty: float = 0.0
    solved: bool = False
    decoded: Substrate = field(default_factory=Substrate)

    def complexity(self) -> int:
        """Return the number of enabled connections in the encoded substrate."""
        return self.encoded.complexity()

    def copy(self) -> Genome:
        """Return a copy that shares no mutable substrate lists with this genome."""
        return Genome(
            id=self.id,
            encoded=self.encoded.copy(),
            species_id=self.species_id,
            age=self.age,
            fitness=self.fitness,
            novelty=self.novelty,
            solved=self.solved,
            decoded=self.decoded.copy(),
        )


@dataclass(slots=True)
class Species:
    """A group of genomes within compatibility distance of ``example``."""

    id: int
    example: Substrate
    fitness: float = 0.0
    decay: float = 0.0
    stagnation: int = 0


@dataclass(slots=True)
class Population:
    """The genomes and species of one generation."""

    generation: int = 0
    species: list[Species] = field(default_factory=list)
    genomes: list[Genome] = field(default_factory=list)


def ranking_key(genome: Genome) -> tuple[bool, float, int, int]:
    """Sort key placing better genomes first.

    Better means solved, then higher fitness, then lower complexity, then
    younger.
    """
    return (not genome.solved, -genome.fitness, genome.complexity(), genome.age)


def rank_genomes(genomes: Iterable[Genome]) -> list[Genome]:
    """Return the genomes sorted best first."""
    return sorted(genomes, key=ranking_key)


def best_genome(genomes: Iterable[Genome]) -> Genome:
    """Return the best genome; the sequence must not be empty."""
    try:
        return min(genomes, key=ranking_key)
    except ValueError as error:
        msg = "Cannot pick the best genome of an empty collection."
        raise ValueError(msg) from error


def average_fitness(genomes: Sequence[Genome]) -> float:
    if not genomes:
        return 0.0
    return sum(genome.fitness for genome in genomes) / len(genomes)


def max_fitness(genomes: Iterable[Genome]) -> float:
    """Return the highest fitness, never less than zero."""
    return max([0.0, *(genome.fitness for genome in genomes)])


def group_by_species(genomes: Iterable[Genome]) -> dict[int, list[Genome]]:
    """Map species ids to their member genomes, preserving input order."""
    groups: dict[int, list[Genome]] = {}
    for genome in genomes:
        groups.setdefault(genome.species_id, []).append(genome)
    return groups


def update_species_stagnation(population: Population) -> None:
    """Record each species' best fitness and count generations without improvement."""
    members = group_by_species(population.genomes)
    for species in population.species:
        best = max_fitness(members.get(species.id, ()))
        if best > species.fitness:
            species.fitness = best
            species.stagnation = 0
        else:
            species.stagnation += 1


__all__ = [
    "Genome",
    "Population",
    "Species",
    "average_fitness",
    "best_genome",
    "group_by_species",
    "max_fitness",
    "rank_genomes",
    "ranking_key",
    "update_species_stagnation",
]
