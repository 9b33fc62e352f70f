"""Generational selection of elites and parent groups."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from random import Random
from typing import Protocol

from .genome import (
    Genome,
    Population,
    average_fitness,
    best_genome,
    rank_genomes,
)
from .substrate import Substrate

Selection = tuple[list[Genome], list[list[Genome]]]


class Selector(Protocol):
    """Chooses which genomes continue and which become parents."""

    def watch(self, population: Population) -> None: ...

    def select(self, population: Population) -> Selection: ...


@dataclass(frozen=True, slots=True)
class SelectorConfig:
    """Configuration values governing generational selection."""

    survival_rate: float
    max_stagnation: int
    mutate_only_probability: float
    interspecies_mate_probability: float
    reenable_probability: float = 1.0

    def __post_init__(self) -> None:
        if not 0.0 < self.survival_rate <= 1.0:
            msg = "survival_rate must be in (0, 1]."
            raise ValueError(msg)
        if self.max_stagnation < 1:
            msg = "max_stagnation must be >= 1."
            raise ValueError(msg)
        for label, value in (
            ("mutate_only_probability", self.mutate_only_probability),
            ("interspecies_mate_probability", self.interspecies_mate_probability),
            ("reenable_probability", self.reenable_probability),
        ):
            if not 0.0 <= value <= 1.0:
                msg = f"{label} must be in [0, 1]."
                raise ValueError(msg)


class GenerationalSelector:
    """Replaces the whole population every generation.

    The top genome of every healthy species (and of the best genome's
    species) is kept unchanged. The remaining slots are filled with parent
    groups drawn from the surviving members of non-stagnant species, with
    species picked by fitness-proportional roulette.

    When the population as a whole has not improved for twice
    ``max_stagnation`` generations, the selector abandons the current
    population and reseeds it from perturbed clones of its least complex
    genome.
    """

    def __init__(self, config: SelectorConfig, rng: Random | None = None) -> None:
        self.config = config
        self.rng = rng or Random()
        self.max_fitness_seen = 0.0
        self.stagnation = 0
        self.super_stagnated = False

    def watch(self, population: Population) -> None:
        """Track overall stagnation; call once per generation after evaluation."""
        if not population.genomes:
            msg = "Cannot watch a population without genomes."
            raise ValueError(msg)
        top = best_genome(population.genomes).fitness
        if top > self.max_fitness_seen:
            self.max_fitness_seen = top
            self.stagnation = 0
        else:
            self.stagnation += 1

    def select(self, population: Population) -> Selection:
        """Return the genomes to keep and the parent groups for the offspring."""
        self.super_stagnated = False
        if not population.genomes:
            return [], []

        ranked = rank_genomes(population.genomes)
        if self.stagnation >= 2 * self.config.max_stagnation:
            self.super_stagnated = True
            return self._restart(ranked)

        best = ranked[0]
        stagnation_of = {
            species.id: species.stagnation for species in population.species
        }

        # Species in population order, members best first.
        pools: dict[int, list[Genome]] = {
            species.id: [] for species in population.species
        }
        for genome in ranked:
            pools.setdefault(genome.species_id, []).append(genome)
        pools = {
            species_id: members for species_id, members in pools.items() if members
        }

        keep: list[Genome] = []
        for species_id, members in pools.items():
            if (
                species_id == best.species_id
                or stagnation_of.get(species_id, 0) < self.config.max_stagnation
            ):
                keep.append(members[0])

        survivors: dict[int, list[Genome]] = {}
        for species_id, members in pools.items():
            if species_id == best.species_id:
                survivors[species_id] = [best]
            elif stagnation_of.get(species_id, 0) >= self.config.max_stagnation:
                continue
            else:
                count = max(1, math.ceil(len(members) * self.config.survival_rate))
                survivors[species_id] = members[:count]

        weights = {
            species_id: average_fitness(members)
            for species_id, members in survivors.items()
        }
        total = sum(weights.values())

        parents: list[list[Genome]] = []
        while len(keep) + len(parents) < len(population.genomes):
            parents.append(self._parent_group(survivors, weights, total))
        return keep, parents

    def _parent_group(
        self,
        survivors: dict[int, list[Genome]],
        weights: dict[int, float],
        total: float,
    ) -> list[Genome]:
        species_id = self._roulette(weights, total)
        first = self.rng.choice(survivors[species_id])
        if self.rng.random() < self.config.mutate_only_probability:
            return [first]

        if (
            len(survivors) > 1
            and self.rng.random() < self.config.interspecies_mate_probability
        ):
            others = [other for other in survivors if other != species_id]
            species_id = self.rng.choice(others)
        second = self.rng.choice(survivors[species_id])
        return [first, second]

    def _roulette(self, weights: dict[int, float], total: float) -> int:
        """Pick a species id with probability proportional to its weight."""
        species_ids = list(weights)
        if total <= 0.0:
            return self.rng.choice(species_ids)
        threshold = self.rng.random() * total
        cumulative = 0.0
        for species_id in species_ids:
            cumulative += weights[species_id]
            if cumulative >= threshold:
                return species_id
        return species_ids[-1]

    def _restart(self, ranked: Sequence[Genome]) -> Selection:
        # Least complex genome, ties broken by rank.
        simplest = min(ranked, key=lambda genome: genome.complexity())
        parents = [[self._perturbed_clone(simplest)] for _ in ranked]
        self.stagnation = 0
        self.max_fitness_seen = 0.0
        return [], parents

    def _perturbed_clone(self, genome: Genome) -> Genome:
        conns = [
            conn.copy(
                weight=conn.weight + self.rng.gauss(0.0, 1.0),
                enabled=self.rng.random() < self.config.reenable_probability,
            )
            for conn in genome.encoded.conns
        ]
        return Genome(
            id=genome.id,
            encoded=Substrate(nodes=list(genome.encoded.nodes), conns=conns),
            species_id=genome.species_id,
        )

    def __repr__(self) -> str:
        return f"GenerationalSelector({self.config!r})"


__all__ = ["GenerationalSelector", "Selection", "Selector", "SelectorConfig"]
