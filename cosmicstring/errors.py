"""
Exception types shared by the kernel, the parameter model and the sweep.
"""

from __future__ import annotations


class CosmicStringError(Exception):
    """Base class for every error raised by the cosmic-string model."""


class InvalidParameterError(CosmicStringError, ValueError):
    """A charge, switching time, coordinate or grid bound is out of range."""


class SingularityError(CosmicStringError, ArithmeticError):
    """
    A summation divisor is indistinguishable from zero within tolerance.

    Parameters
    ----------
    summation:
        Which sum failed: ``"first"``, ``"second"`` or ``"result"`` when the
        assembled value overflowed.
    indices:
        Summation index tuple of the first failing term (``(d,)`` for P_D,
        ``(n, m)`` for L_{N,M}); empty for ``"result"``.
    r, T:
        Radial separation and switching time of the failing evaluation.
    """

    def __init__(self, summation: str, indices: tuple[int, ...], r: float, T: float, detail: str = "") -> None:
        self.summation = summation
        self.indices = tuple(int(i) for i in indices)
        self.r = float(r)
        self.T = float(T)
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        where = f" at index {self.indices}" if self.indices else ""
        text = f"singular {self.summation} sum{where} (r={self.r:.6g}, T={self.T:.6g})"
        if self.detail:
            text = f"{text}: {self.detail}"
        return text
