"""
Closed-form image sums for a detector near a cosmic string.

``compute_p`` evaluates the single-string response P_D and ``compute_l`` the
cross-correlation L_{N,M} between two strings. Both contain a removable 0/0
whenever sin(angle) vanishes; those terms are replaced by their analytic limit.
Divisors that are genuinely close to zero raise ``SingularityError``.
"""

from __future__ import annotations

import math

import numpy as np

from cosmicstring.errors import SingularityError
from cosmicstring.params import check_charge, check_finite, check_radius, check_switching_time

DENOM_TOL = 1e-8
SIN_TOL = 1e-8


def _first_index(mask: np.ndarray) -> tuple[int, ...]:
    return tuple(int(i) for i in np.argwhere(mask)[0])


def _image_terms(
    s: np.ndarray,
    phase: np.ndarray,
    limit_divisor: float,
    omega: float,
    r: float,
    T: float,
) -> float:
    """
    Shared two-term sum over the image angles.

    Parameters
    ----------
    s:
        sin(angle) for every image term (1D for P_D, 2D for L_{N,M}).
    phase:
        Argument of the oscillating numerator of the second sum.
    limit_divisor:
        Divisor of the second-sum term in the limit |s| -> 0; the numerator
        there is Ω.
    """
    denom = 4.0 * r**2 * s**2 + T**2
    bad = np.abs(denom) < DENOM_TOL
    if np.any(bad):
        raise SingularityError("first", _first_index(bad), r, T, detail="4r²sin² + T² vanishes")
    term1 = (T**2 / 16.0) * math.exp(-abs(omega) * T) * float(np.sum(1.0 / denom))

    term2 = 0.0
    if omega > 0:
        limit = np.abs(s) <= SIN_TOL
        divisor = np.where(limit, limit_divisor, 2.0 * r * s * denom)
        bad = np.abs(divisor) < DENOM_TOL
        if np.any(bad):
            raise SingularityError("second", _first_index(bad), r, T, detail="oscillating term divisor vanishes")
        numerator = np.where(limit, omega, np.sin(phase))
        term2 = (T**3 / 8.0) * float(np.sum(numerator / divisor))

    return term1 + term2


def _image_sum(
    s: np.ndarray,
    phase: np.ndarray,
    limit_divisor: float,
    omega: float,
    r: float,
    T: float,
) -> float:
    try:
        result = _image_terms(s, phase, limit_divisor, omega, r, T)
    except OverflowError as exc:
        raise SingularityError("result", (), r, T, detail=f"overflow: {exc}") from exc
    if not math.isfinite(result):
        raise SingularityError("result", (), r, T, detail=f"non-finite value {result}")
    return result


def compute_p(D: int, omega: float, r: float, T: float) -> float:
    """
    Transition probability P_D(Ω, r) for a string of topological charge D.

    Terms with sin(πd/D) = 0 (always d = 0) use the limit Ω / (r T).
    """
    D = check_charge(D, "D")
    omega = check_finite(omega, "Omega")
    r = check_radius(r)
    T = check_switching_time(T)

    s = np.sin(np.pi * np.arange(D, dtype=float) / D)
    return _image_sum(s, 2.0 * omega * T * s, r * T, omega, r, T)


def compute_l(N: int, M: int, omega: float, r: float, T: float) -> float:
    """
    Cross term L_{N,M}(Ω, r) between strings of charge N and M.

    The double sum runs over angle = π(n/N - m/M); coinciding images
    (n/N = m/M) use the limit Ω / T². Symmetric under N <-> M.
    """
    N = check_charge(N, "N")
    M = check_charge(M, "M")
    omega = check_finite(omega, "Omega")
    r = check_radius(r)
    T = check_switching_time(T)

    n = np.arange(N, dtype=float)[:, None] / N
    m = np.arange(M, dtype=float)[None, :] / M
    s = np.sin(np.pi * (n - m))
    return _image_sum(s, 2.0 * r * omega * s, T * T, omega, r, T)
