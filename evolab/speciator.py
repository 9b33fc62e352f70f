"""Speciation of a population by structural compatibility."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from .comparer import Comparer
from .genome import Population, Species
from .substrate import Substrate


class Speciator(Protocol):
    """Assigns every genome of a population to a species, in place."""

    def speciate(self, population: Population) -> None: ...


class StaticSpeciator:
    """Speciates with a fixed compatibility threshold.

    Each genome joins the first species, in list order, whose example lies
    strictly closer than the threshold. Genomes matching no species found a
    new one, which later genomes of the same pass may join. Species left
    without members are removed.
    """

    def __init__(self, comparer: Comparer, compatibility_threshold: float) -> None:
        if compatibility_threshold <= 0:
            msg = "compatibility_threshold must be positive."
            raise ValueError(msg)
        self.comparer = comparer
        self.compatibility_threshold = float(compatibility_threshold)
        self._last_species_id: int | None = None

    def speciate(self, population: Population) -> None:
        if self._last_species_id is None:
            self._last_species_id = max(
                (species.id for species in population.species),
                default=0,
            )

        counts = {species.id: 0 for species in population.species}
        for genome in population.genomes:
            matched = self._find_species(population.species, genome.encoded)
            if matched is None:
                matched = self._create_species(genome.encoded)
                population.species.append(matched)
                counts[matched.id] = 0
            genome.species_id = matched.id
            counts[matched.id] += 1

        population.species = [
            species for species in population.species if counts[species.id] > 0
        ]

    def _find_species(
        self,
        species_list: Sequence[Species],
        encoded: Substrate,
    ) -> Species | None:
        for species in species_list:
            distance = self.comparer.compare(encoded, species.example)
            if distance < self.compatibility_threshold:
                return species
        return None

    def _create_species(self, encoded: Substrate) -> Species:
        self._last_species_id += 1
        return Species(id=self._last_species_id, example=encoded.copy())

    def __repr__(self) -> str:
        return (
            "StaticSpeciator("
            f"compatibility_threshold={self.compatibility_threshold}, "
            f"comparer={self.comparer!r})"
        )


class DynamicSpeciator:
    """Steers an inner static speciator towards a target species count.

    After every pass the threshold moves by ``compatibility_modifier``: down
    when there are too few species (never below the modifier itself), up
    when there are too many.
    """

    def __init__(
        self,
        static: StaticSpeciator,
        *,
        target_species: int,
        compatibility_modifier: float,
    ) -> None:
        if target_species <= 0:
            msg = "target_species must be positive."
            raise ValueError(msg)
        if compatibility_modifier <= 0:
            msg = "compatibility_modifier must be positive."
            raise ValueError(msg)
        self.static = static
        self.target_species = target_species
        self.compatibility_modifier = float(compatibility_modifier)

    @property
    def compatibility_threshold(self) -> float:
        return self.static.compatibility_threshold

    def speciate(self, population: Population) -> None:
        self.static.speciate(population)
        self.adjust_threshold(len(population.species))

    def adjust_threshold(self, species_count: int) -> None:
        """Move the threshold towards the target species count."""
        if species_count < self.target_species:
            self.static.compatibility_threshold = max(
                self.compatibility_modifier,
                self.static.compatibility_threshold - self.compatibility_modifier,
            )
        elif species_count > self.target_species:
            self.static.compatibility_threshold += self.compatibility_modifier

    def __repr__(self) -> str:
        return (
            "DynamicSpeciator("
            f"target_species={self.target_species}, "
            f"compatibility_modifier={self.compatibility_modifier}, "
            f"static={self.static!r})"
        )


__all__ = ["DynamicSpeciator", "Speciator", "StaticSpeciator"]
