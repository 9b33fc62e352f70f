"""Training orchestration utilities for the evolab CLI."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from random import Random
from time import perf_counter

import yaml

from tasks.xor import XOREvaluator

from .comparer import DistanceComparer
from .config import NEATConfig
from .experiment import Event, Experiment
from .genome import Population, best_genome
from .metrics import MetricsRow, MetricsWriter
from .operators import (
    ComplexifyMutator,
    CompositeMutator,
    NEATCrosser,
    NEATSeeder,
    WeightMutator,
)
from .reporters import EventLogger, subscribe_event_logger
from .searcher import ConcurrentSearcher, Evaluator, Searcher, SerialSearcher
from .selector import GenerationalSelector
from .speciator import DynamicSpeciator, Speciator, StaticSpeciator


@dataclass(frozen=True, slots=True)
class RunArtifacts:
    """Resolved file locations used for a training run."""

    root: Path
    metrics: Path
    events: Path
    config: Path


def _allocate_run_dir(output_root: Path) -> Path:
    output_root.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    candidate = output_root / timestamp
    suffix = 1
    while candidate.exists():
        candidate = output_root / f"{timestamp}_{suffix:02d}"
        suffix += 1
    candidate.mkdir(parents=True, exist_ok=False)
    return candidate


def _build_artifacts(run_dir: Path) -> RunArtifacts:
    return RunArtifacts(
        root=run_dir,
        metrics=run_dir / "metrics.csv",
        events=run_dir / "events.log",
        config=run_dir / "config.yml",
    )


def _write_config_snapshot(artifacts: RunArtifacts, neat_config: NEATConfig) -> None:
    with artifacts.config.open("w", encoding="utf-8") as handle:
        yaml.safe_dump({"neat": asdict(neat_config)}, handle, sort_keys=True)


def _build_speciator(neat_config: NEATConfig) -> Speciator:
    static = StaticSpeciator(
        DistanceComparer(neat_config.distance_config()),
        neat_config.compatibility_threshold,
    )
    if neat_config.target_species is None:
        return static
    return DynamicSpeciator(
        static,
        target_species=neat_config.target_species,
        compatibility_modifier=neat_config.compatibility_modifier,
    )


def _build_searcher(evaluator: Evaluator, workers: int) -> Searcher:
    if workers > 1:
        return ConcurrentSearcher(evaluator, max_workers=workers)
    return SerialSearcher(evaluator)


def build_experiment(
    neat_config: NEATConfig,
    evaluator: Evaluator,
    *,
    workers: int | None = None,
) -> Experiment:
    """Assemble an ``Experiment`` from configuration and a task evaluator."""
    seed_rng = Random(neat_config.seed)

    def child_rng() -> Random:
        return Random(seed_rng.getrandbits(32))

    mutator = CompositeMutator(
        [
            ComplexifyMutator(neat_config.complexify_config(), child_rng()),
            WeightMutator(neat_config.weight_mutation_config(), child_rng()),
        ]
    )
    return Experiment(
        seeder=NEATSeeder(neat_config.seeder_config(), child_rng()),
        speciator=_build_speciator(neat_config),
        selector=GenerationalSelector(neat_config.selector_config(), child_rng()),
        crosser=NEATCrosser(neat_config.crosser_config(), child_rng()),
        mutator=mutator,
        searcher=_build_searcher(
            evaluator,
            neat_config.workers if workers is None else workers,
        ),
        population_size=neat_config.population_size,
        num_inputs=neat_config.num_inputs,
        num_outputs=neat_config.num_outputs,
    )


def _subscribe_metrics(experiment: Experiment, writer: MetricsWriter) -> None:
    started = [perf_counter()]

    def on_decoded(_population: Population) -> None:
        started[0] = perf_counter()

    def on_evaluated(population: Population) -> None:
        eval_time = perf_counter() - started[0]
        writer.append(MetricsRow.from_population(population, eval_time))
        best = best_genome(population.genomes)
        print(
            f"Generation {population.generation}: best fitness {best.fitness:.3f} "
            f"species {len(population.species)}"
        )

    experiment.subscribe(Event.DECODED, on_decoded)
    experiment.subscribe(Event.EVALUATED, on_evaluated)


def run_training(
    neat_config: NEATConfig,
    *,
    output_dir: Path,
    iterations: int | None = None,
    workers: int | None = None,
) -> Population:
    """Run the XOR task, writing events, metrics and a config snapshot."""
    evaluator = XOREvaluator()
    if (neat_config.num_inputs, neat_config.num_outputs) != (
        evaluator.num_inputs,
        evaluator.num_outputs,
    ):
        msg = (
            f"XOR requires {evaluator.num_inputs} inputs and "
            f"{evaluator.num_outputs} output."
        )
        raise ValueError(msg)
    if workers is not None and workers <= 0:
        msg = "workers must be positive."
        raise ValueError(msg)

    artifacts = _build_artifacts(_allocate_run_dir(Path(output_dir)))
    _write_config_snapshot(artifacts, neat_config)
    experiment = build_experiment(neat_config, evaluator, workers=workers)
    print(f"[train] run directory: {artifacts.root}")

    with MetricsWriter(artifacts.metrics) as metrics_writer, EventLogger(
        artifacts.events
    ) as logger:
        logger.log(f"Training started at {artifacts.root}")
        subscribe_event_logger(experiment, logger)
        _subscribe_metrics(experiment, metrics_writer)
        population = experiment.run(iterations or neat_config.iterations)

        best = best_genome(population.genomes)
        if best.solved:
            logger.log(f"Genome {best.id} solved the task.")
            print(f"Solved by genome {best.id} at generation {population.generation}.")
        else:
            print("No solution found within the iteration limit.")
    return population


__all__ = ["RunArtifacts", "build_experiment", "run_training"]
