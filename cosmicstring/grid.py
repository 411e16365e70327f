"""
Fault-isolated sweep over the (Ω, r) grid.

The sweep is a restartable, lazily evaluated sequence of ``GridSample``
records in Ω-major / r-minor order. A singular cell becomes an error row; it
never aborts the sweep.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Union

from cosmicstring.combiner import CellOutcome, evaluate_cell
from cosmicstring.errors import SingularityError
from cosmicstring.params import SweepParameters


@dataclass(frozen=True)
class CellError:
    """Error sentinel stored in place of a probability."""

    message: str

    def __str__(self) -> str:
        return f"Error: {self.message}"


Metric = Union[float, CellError]


@dataclass(frozen=True)
class GridSample:
    omega: float
    r: float
    p_q: Metric
    p_c: Metric

    @property
    def ok(self) -> bool:
        return not isinstance(self.p_q, CellError)

    def as_tuple(self) -> tuple[float, float, Metric, Metric]:
        return (self.omega, self.r, self.p_q, self.p_c)


def sample_from_outcome(outcome: CellOutcome) -> GridSample:
    if outcome.ok:
        probs = outcome.probabilities
        return GridSample(omega=outcome.omega, r=outcome.r, p_q=probs.p_q, p_c=probs.p_c)
    sentinel = CellError(str(outcome.error))
    return GridSample(omega=outcome.omega, r=outcome.r, p_q=sentinel, p_c=sentinel)


class GridSweep:
    """
    Ordered producer of one ``GridSample`` per grid cell.

    Parameters
    ----------
    params:
        Validated sweep parameters.
    evaluate:
        Cell evaluator returning a ``CellOutcome``; defaults to the
        combiner. Swappable so a failure can be forced in a chosen cell.
    """

    def __init__(
        self,
        params: SweepParameters,
        evaluate: Callable[[SweepParameters, float, float], CellOutcome] = evaluate_cell,
    ) -> None:
        self.params = params
        self.evaluate = evaluate

    def __len__(self) -> int:
        return self.params.n_cells

    def __iter__(self) -> Iterator[GridSample]:
        r_values = list(self.params.r_axis)
        for omega in self.params.omega_axis:
            for r in r_values:
                try:
                    outcome = self.evaluate(self.params, omega, r)
                except SingularityError as exc:
                    outcome = CellOutcome(omega=omega, r=r, error=exc)
                yield sample_from_outcome(outcome)


def run_sweep(params: SweepParameters) -> GridSweep:
    return GridSweep(params)
