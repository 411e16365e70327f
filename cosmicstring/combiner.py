"""
Classical and quantum transition probabilities for a superposition of two
cosmic-string spacetimes.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from cosmicstring.errors import SingularityError
from cosmicstring.params import SweepParameters, check_finite
from cosmicstring.summation import compute_l, compute_p


@dataclass(frozen=True)
class Probabilities:
    p_a: float
    p_b: float
    l_ab: float
    p_c: float
    p_q: float


def combine(N: int, M: int, omega: float, r: float, T: float, lambda4: float = 1.0) -> Probabilities:
    """
    Fold the two single-string responses and their cross term.

    P_C = λ⁴/2 (P_A + P_B) has no interference; P_Q adds 2 L_AB. Raises
    ``SingularityError`` if any of the three kernel evaluations does or if
    an estimate overflows.
    """
    lambda4 = check_finite(lambda4, "lambda4")
    p_a = compute_p(N, omega, r, T)
    p_b = compute_p(M, omega, r, T)
    l_ab = compute_l(N, M, omega, r, T)
    p_c = 0.5 * lambda4 * (p_a + p_b)
    p_q = 0.5 * lambda4 * (p_a + p_b + 2.0 * l_ab)
    if not (math.isfinite(p_c) and math.isfinite(p_q)):
        raise SingularityError("result", (), r, T, detail=f"non-finite estimate P_C={p_c}, P_Q={p_q}")
    return Probabilities(p_a=p_a, p_b=p_b, l_ab=l_ab, p_c=p_c, p_q=p_q)


@dataclass(frozen=True)
class CellOutcome:
    """Either the probabilities of one grid cell or the singularity that stopped it."""

    omega: float
    r: float
    probabilities: Optional[Probabilities] = None
    error: Optional[SingularityError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def evaluate_cell(params: SweepParameters, omega: float, r: float) -> CellOutcome:
    """Evaluate one (Ω, r) cell, capturing kernel singularities instead of raising."""
    try:
        probabilities = combine(params.N, params.M, omega, r, params.T, params.lambda4)
    except SingularityError as exc:
        return CellOutcome(omega=omega, r=r, error=exc)
    return CellOutcome(omega=omega, r=r, probabilities=probabilities)
