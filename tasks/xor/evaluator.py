"""Fitness evaluation for the two-input XOR problem."""

from __future__ import annotations

from evolab.searcher import Phenome, Result

XOR_CASES: tuple[tuple[tuple[float, float], float], ...] = (
    ((0.0, 0.0), 0.0),
    ((0.0, 1.0), 1.0),
    ((1.0, 0.0), 1.0),
    ((1.0, 1.0), 0.0),
)


class XOREvaluator:
    """Scores a phenome on the four XOR cases.

    Fitness is ``(4 - total_error) ** 2`` where the error is the summed
    absolute difference between output and expectation. A phenome solves the
    task once every output falls on the correct side of 0.5.
    """

    num_inputs = 2
    num_outputs = 1

    def evaluate(self, phenome: Phenome) -> Result:
        error = 0.0
        solved = True
        for inputs, expected in XOR_CASES:
            outputs = phenome.activate(inputs)
            if len(outputs) != self.num_outputs:
                msg = (
                    f"Phenome {phenome.id} produced {len(outputs)} outputs "
                    f"(wanted {self.num_outputs})."
                )
                raise ValueError(msg)
            output = outputs[0]
            error += abs(output - expected)
            if expected > 0.5:
                solved = solved and output > 0.5
            else:
                solved = solved and output < 0.5
        fitness = (len(XOR_CASES) - error) ** 2
        return Result(id=phenome.id, fitness=fitness, solved=solved)

    def __repr__(self) -> str:
        return "XOREvaluator()"
