"""Simple logging/reporting helpers for long-running experiments."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from .experiment import Event, Experiment
from .genome import Population, average_fitness, best_genome


class EventLogger:
    """Append-only text logger with ISO timestamps."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self._path.open("a", encoding="utf-8")

    def __enter__(self) -> EventLogger:
        return self

    def __exit__(self, exc_type, exc, exc_tb) -> None:
        self.close()

    def log(self, message: str) -> None:
        """Append a timestamped message to the log."""
        timestamp = datetime.now(timezone.utc).isoformat()
        self._handle.write(f"{timestamp} {message}\n")
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @property
    def path(self) -> Path:
        return self._path


def describe_population(population: Population) -> str:
    """One-line summary of an evaluated population."""
    if not population.genomes:
        return f"generation={population.generation} genomes=0"
    best = best_genome(population.genomes)
    return (
        f"generation={population.generation} "
        f"genomes={len(population.genomes)} "
        f"species={len(population.species)} "
        f"best={best.id} fitness={best.fitness:.4f} "
        f"complexity={best.complexity()} solved={best.solved} "
        f"mean={average_fitness(population.genomes):.4f}"
    )


def subscribe_event_logger(experiment: Experiment, logger: EventLogger) -> None:
    """Log one line per experiment event to ``logger``."""

    def _threshold() -> str:
        threshold = getattr(experiment.speciator, "compatibility_threshold", None)
        return "n/a" if threshold is None else f"{threshold:.3f}"

    def on_started(population: Population) -> None:
        logger.log(
            f"Experiment started: genomes={len(population.genomes)} "
            f"species={len(population.species)} threshold={_threshold()}"
        )

    def on_evaluated(population: Population) -> None:
        logger.log(f"Evaluated {describe_population(population)}")

    def on_advanced(population: Population) -> None:
        if getattr(experiment.selector, "super_stagnated", False):
            logger.log(
                f"Population stagnated; restarted from simplest genome at "
                f"generation {population.generation}."
            )
        logger.log(
            f"Advanced to generation {population.generation}: "
            f"species={len(population.species)} threshold={_threshold()}"
        )

    def on_completed(population: Population) -> None:
        logger.log(f"Experiment completed: {describe_population(population)}")

    experiment.subscribe(Event.STARTED, on_started)
    experiment.subscribe(Event.EVALUATED, on_evaluated)
    experiment.subscribe(Event.ADVANCED, on_advanced)
    experiment.subscribe(Event.COMPLETED, on_completed)


__all__ = ["EventLogger", "describe_population", "subscribe_event_logger"]
