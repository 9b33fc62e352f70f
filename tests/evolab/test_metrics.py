from __future__ import annotations

import csv
from pathlib import Path

import pytest
from evolab.genome import Genome, Population, Species
from evolab.metrics import MetricsRow, MetricsWriter
from evolab.substrate import Substrate


def test_metrics_row_summarises_population() -> None:
    population = Population(
        generation=3,
        species=[Species(id=1, example=Substrate()), Species(id=2, example=Substrate())],
        genomes=[
            Genome(id=1, encoded=Substrate(), fitness=1.0),
            Genome(id=2, encoded=Substrate(), fitness=4.0),
            Genome(id=3, encoded=Substrate(), fitness=2.0),
        ],
    )

    row = MetricsRow.from_population(population, eval_time_s=0.25)

    assert row.generation == 3
    assert row.population_size == 3
    assert row.species_count == 2
    assert row.best_fitness == 4.0
    assert row.mean_fitness == pytest.approx(7.0 / 3.0)
    assert row.median_fitness == 2.0
    assert row.best_complexity == 0


def test_metrics_writer_appends_rows(tmp_path: Path) -> None:
    path = tmp_path / "metrics.csv"
    row = MetricsRow(
        generation=0,
        population_size=10,
        species_count=2,
        best_fitness=3.0,
        mean_fitness=1.5,
        median_fitness=1.0,
        best_complexity=4,
        eval_time_s=0.1,
    )
    with MetricsWriter(path) as writer:
        writer.append(row)
    with MetricsWriter(path) as writer:
        writer.append(row)

    with path.open("r", encoding="utf-8", newline="") as handle:
        rows = list(csv.DictReader(handle))
    assert len(rows) == 2
    assert rows[0]["best_complexity"] == "4"
    assert rows[1]["species_count"] == "2"
