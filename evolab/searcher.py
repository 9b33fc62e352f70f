"""Searchers that run phenomes through an evaluator."""

from __future__ import annotations

import os
from collections.abc import Sequence
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Protocol

from .network import Phenotype


@dataclass(frozen=True, slots=True)
class Phenome:
    """Executable form of a genome, tagged with the genome's id."""

    id: int
    network: Phenotype

    def activate(self, inputs: Sequence[float]) -> list[float]:
        return self.network.activate(inputs)


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of evaluating one phenome."""

    id: int
    fitness: float
    novelty: float = 0.0
    solved: bool = False


class Evaluator(Protocol):
    """Scores a phenome against a task; raises when evaluation fails."""

    def evaluate(self, phenome: Phenome) -> Result: ...


class Searcher(Protocol):
    def search(self, phenomes: Sequence[Phenome]) -> list[Result]: ...


class SearchError(Exception):
    """One or more evaluations failed during a concurrent search."""

    def __init__(
        self,
        errors: Sequence[BaseException],
        results: Sequence[Result] = (),
    ) -> None:
        self.errors = tuple(errors)
        self.results = tuple(results)
        details = "; ".join(repr(error) for error in self.errors)
        super().__init__(f"{len(self.errors)} evaluation(s) failed: {details}")


class SerialSearcher:
    """Evaluates phenomes one at a time, in order.

    The first evaluation error propagates and any results gathered so far
    are discarded.
    """

    def __init__(self, evaluator: Evaluator) -> None:
        self.evaluator = evaluator

    def search(self, phenomes: Sequence[Phenome]) -> list[Result]:
        return [self.evaluator.evaluate(phenome) for phenome in phenomes]

    def __repr__(self) -> str:
        return f"SerialSearcher({self.evaluator!r})"


def default_max_workers() -> int:
    return max(4, (os.cpu_count() or 4) * 2)


class ConcurrentSearcher:
    """Evaluates every phenome as its own task on a thread pool.

    All tasks run to completion. Results come back in completion order.
    Failures are collected and raised together as a ``SearchError`` once
    every task has finished. The evaluator must tolerate concurrent calls.

    Without ``max_workers`` the pool holds twice the CPU count (at least
    four) threads, never more than there are phenomes.
    """

    def __init__(self, evaluator: Evaluator, *, max_workers: int | None = None) -> None:
        if max_workers is not None and max_workers <= 0:
            msg = "max_workers must be positive when provided."
            raise ValueError(msg)
        self.evaluator = evaluator
        self.max_workers = max_workers

    def search(self, phenomes: Sequence[Phenome]) -> list[Result]:
        if not phenomes:
            return []

        workers = min(self.max_workers or default_max_workers(), len(phenomes))
        results: list[Result] = []
        errors: list[BaseException] = []
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures: list[Future[Result]] = [
                executor.submit(self.evaluator.evaluate, phenome)
                for phenome in phenomes
            ]
            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    errors.append(error)
                else:
                    results.append(future.result())

        if errors:
            raise SearchError(errors, results)
        return results

    def __repr__(self) -> str:
        return f"ConcurrentSearcher({self.evaluator!r}, max_workers={self.max_workers})"


__all__ = [
    "ConcurrentSearcher",
    "Evaluator",
    "Phenome",
    "Result",
    "SearchError",
    "Searcher",
    "SerialSearcher",
    "default_max_workers",
]
