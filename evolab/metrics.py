"""Utilities for recording per-generation metrics to disk."""

from __future__ import annotations

import csv
from dataclasses import asdict, dataclass
from pathlib import Path
from statistics import mean, median
from typing import IO, Any

from .genome import Population, best_genome


@dataclass(frozen=True, slots=True)
class MetricsRow:
    """Aggregate statistics for one evaluated generation."""

    generation: int
    population_size: int
    species_count: int
    best_fitness: float
    mean_fitness: float
    median_fitness: float
    best_complexity: int
    eval_time_s: float

    @classmethod
    def from_population(cls, population: Population, eval_time_s: float) -> MetricsRow:
        if not population.genomes:
            msg = "Cannot summarise a population without genomes."
            raise ValueError(msg)
        fitnesses = [genome.fitness for genome in population.genomes]
        best = best_genome(population.genomes)
        return cls(
            generation=population.generation,
            population_size=len(population.genomes),
            species_count=len(population.species),
            best_fitness=best.fitness,
            mean_fitness=mean(fitnesses),
            median_fitness=median(fitnesses),
            best_complexity=best.complexity(),
            eval_time_s=eval_time_s,
        )


class MetricsWriter:
    """CSV-backed writer that appends metrics rows incrementally."""

    _fieldnames = [
        "generation",
        "population_size",
        "species_count",
        "best_fitness",
        "mean_fitness",
        "median_fitness",
        "best_complexity",
        "eval_time_s",
    ]

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        exists = self._path.exists()
        self._handle: IO[str] = self._path.open(
            "a" if exists else "w",
            encoding="utf-8",
            newline="",
        )
        self._writer = csv.DictWriter(self._handle, fieldnames=self._fieldnames)
        if not exists:
            self._writer.writeheader()
            self._handle.flush()

    def __enter__(self) -> MetricsWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        exc_tb: Any,
    ) -> None:
        self.close()

    def append(self, row: MetricsRow) -> None:
        """Append a metrics row and flush to disk."""
        self._writer.writerow(asdict(row))
        self._handle.flush()

    def close(self) -> None:
        """Release the underlying file handle if still open."""
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


__all__ = ["MetricsRow", "MetricsWriter"]
