"""Generational experiment loop tying the evolutionary helpers together."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum

from .genome import Genome, Population, update_species_stagnation
from .network import NetworkTranslator, Translator
from .operators import Crosser, Mutator, Seeder
from .searcher import Phenome, Result, Searcher
from .selector import Selector
from .speciator import Speciator
from .transcriber import NEATTranscriber, Transcriber


class Event(str, Enum):
    """Points in the experiment loop at which listeners are notified."""

    STARTED = "started"
    DECODED = "decoded"
    EVALUATED = "evaluated"
    ADVANCED = "advanced"
    COMPLETED = "completed"


Listener = Callable[[Population], None]


@dataclass(slots=True)
class Experiment:
    """A single evolutionary run assembled from pluggable helpers."""

    seeder: Seeder
    speciator: Speciator
    selector: Selector
    crosser: Crosser
    mutator: Mutator
    searcher: Searcher
    population_size: int
    num_inputs: int
    num_outputs: int
    transcriber: Transcriber = field(default_factory=NEATTranscriber)
    translator: Translator = field(default_factory=NetworkTranslator)
    listeners: dict[Event, list[Listener]] = field(default_factory=dict)
    population: Population | None = field(init=False, default=None)
    _last_genome_id: int = field(init=False, default=0)

    def __post_init__(self) -> None:
        if self.population_size <= 0:
            msg = "population_size must be positive."
            raise ValueError(msg)

    def subscribe(self, event: Event, listener: Listener) -> None:
        """Register ``listener`` to be called with the population on ``event``."""
        self.listeners.setdefault(Event(event), []).append(listener)

    def run(self, iterations: int) -> Population:
        """Evolve for up to ``iterations`` evaluations, stopping early once solved."""
        if iterations <= 0:
            msg = "iterations must be positive."
            raise ValueError(msg)

        population = self.seeder.seed(
            self.population_size,
            self.num_inputs,
            self.num_outputs,
        )
        if len(population.genomes) != self.population_size:
            msg = (
                f"Seeder produced {len(population.genomes)} genomes "
                f"(wanted {self.population_size})."
            )
            raise RuntimeError(msg)
        self._last_genome_id = max(genome.id for genome in population.genomes)
        self.speciator.speciate(population)
        self.population = population
        self._publish(Event.STARTED, population)

        for iteration in range(iterations):
            if iteration > 0:
                self.advance(population)
                self._publish(Event.ADVANCED, population)

            phenomes = self.decode(population.genomes)
            self._publish(Event.DECODED, population)

            results = self.searcher.search(phenomes)
            solved = apply_results(population.genomes, results)
            update_species_stagnation(population)
            self.selector.watch(population)
            self._publish(Event.EVALUATED, population)

            if solved:
                break

        self._publish(Event.COMPLETED, population)
        return population

    def decode(self, genomes: Sequence[Genome]) -> list[Phenome]:
        """Transcribe each genome and translate it into a phenome."""
        phenomes: list[Phenome] = []
        for genome in genomes:
            genome.decoded = self.transcriber.transcribe(genome.encoded)
            network = self.translator.translate(genome.decoded)
            phenomes.append(Phenome(id=genome.id, network=network))
        return phenomes

    def advance(self, population: Population) -> None:
        """Replace the population's genomes with the next generation."""
        size = len(population.genomes)
        keep, parent_groups = self.selector.select(population)
        for genome in keep:
            genome.age += 1

        offspring = [self._procreate(parents) for parents in parent_groups]
        if len(keep) + len(offspring) != size:
            msg = (
                f"Selection produced {len(keep) + len(offspring)} genomes "
                f"(wanted {size})."
            )
            raise RuntimeError(msg)

        population.genomes = list(keep) + offspring
        self.speciator.speciate(population)
        population.generation += 1

    def _procreate(self, parents: Sequence[Genome]) -> Genome:
        child = self.crosser.cross(parents)
        self._last_genome_id += 1
        child.id = self._last_genome_id
        child.age = 0
        self.mutator.mutate(child)
        return child

    def _publish(self, event: Event, population: Population) -> None:
        for listener in self.listeners.get(event, ()):
            listener(population)


def apply_results(genomes: Sequence[Genome], results: Sequence[Result]) -> bool:
    """Copy results onto their genomes and report whether any genome solved the task."""
    by_id = {genome.id: genome for genome in genomes}
    solved = False
    for result in results:
        try:
            genome = by_id[result.id]
        except KeyError as error:
            msg = f"Result refers to unknown genome id {result.id}."
            raise ValueError(msg) from error
        genome.fitness = result.fitness
        genome.novelty = result.novelty
        genome.solved = result.solved
        solved = solved or result.solved
    return solved


__all__ = ["Event", "Experiment", "Listener", "apply_results"]
