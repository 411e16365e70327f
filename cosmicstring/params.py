"""
Validated scalar inputs and grid definition for a transition-probability sweep.

Everything here is checked once, at construction, so that a sweep never starts
with a charge, switching time or radial axis that would fail in every cell.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any, Iterator

import numpy as np

from cosmicstring.errors import InvalidParameterError

GRID_TOL = 1e-9
DEFAULT_AXIS = (0.1, 5.0, 0.1)
DEFAULT_LAMBDA4 = 1.0


def check_charge(value: Any, name: str = "charge") -> int:
    """Return ``value`` as an int, rejecting booleans, fractions and values < 1."""
    if isinstance(value, bool) or not isinstance(value, numbers.Integral):
        raise InvalidParameterError(f"{name} must be an integer, got {value!r}.")
    if value < 1:
        raise InvalidParameterError(f"{name} must be >= 1, got {value}.")
    return int(value)


def check_finite(value: Any, name: str) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(f"{name} must be a real number, got {value!r}.") from exc
    if not math.isfinite(result):
        raise InvalidParameterError(f"{name} must be finite, got {result}.")
    return result


def check_switching_time(value: Any) -> float:
    T = check_finite(value, "T")
    if T <= 0:
        raise InvalidParameterError(f"T must be positive, got {T}.")
    return T


def check_radius(value: Any) -> float:
    r = check_finite(value, "r")
    if r == 0:
        raise InvalidParameterError("r must be non-zero.")
    return r


@dataclass(frozen=True)
class GridAxis:
    """
    Inclusive, evenly spaced axis ``start, start + step, ..., end``.

    Samples are computed as ``start + i * step`` so the last value does not
    drift with the number of steps; ``end`` counts as reached when it lies
    within ``GRID_TOL`` steps of a sample.
    """

    start: float
    end: float
    step: float

    def __post_init__(self) -> None:
        start = check_finite(self.start, "axis start")
        end = check_finite(self.end, "axis end")
        step = check_finite(self.step, "axis step")
        if step <= 0:
            raise InvalidParameterError(f"axis step must be positive, got {step}.")
        if end < start:
            raise InvalidParameterError(f"axis end ({end}) must not be below start ({start}).")
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)
        object.__setattr__(self, "step", step)

    def __len__(self) -> int:
        return int(math.floor((self.end - self.start) / self.step + GRID_TOL)) + 1

    def values(self) -> np.ndarray:
        return self.start + self.step * np.arange(len(self), dtype=float)

    def __iter__(self) -> Iterator[float]:
        for value in self.values():
            yield float(value)

    def as_dict(self) -> dict[str, float]:
        return {"start": self.start, "end": self.end, "step": self.step}


def _default_axis() -> GridAxis:
    return GridAxis(*DEFAULT_AXIS)


@dataclass(frozen=True)
class SweepParameters:
    """
    Immutable parameter model for one sweep.

    Parameters
    ----------
    N, M:
        Topological charges of the two superposed cosmic strings (>= 1).
    T:
        Switching time of the detector, strictly positive.
    lambda4:
        Coupling constant λ⁴ scaling both estimators.
    omega_axis, r_axis:
        Grid over the energy gap Ω (outer loop) and the radial separation r
        (inner loop). No r sample may be exactly zero.
    """

    N: int
    M: int
    T: float
    lambda4: float = DEFAULT_LAMBDA4
    omega_axis: GridAxis = field(default_factory=_default_axis)
    r_axis: GridAxis = field(default_factory=_default_axis)

    def __post_init__(self) -> None:
        object.__setattr__(self, "N", check_charge(self.N, "N"))
        object.__setattr__(self, "M", check_charge(self.M, "M"))
        object.__setattr__(self, "T", check_switching_time(self.T))
        object.__setattr__(self, "lambda4", check_finite(self.lambda4, "lambda4"))
        for name in ("omega_axis", "r_axis"):
            if not isinstance(getattr(self, name), GridAxis):
                raise InvalidParameterError(f"{name} must be a GridAxis.")
        if np.any(self.r_axis.values() == 0.0):
            raise InvalidParameterError(
                f"r axis [{self.r_axis.start}, {self.r_axis.end}] step {self.r_axis.step} samples r=0, which is a divisor."
            )

    @property
    def n_cells(self) -> int:
        return len(self.omega_axis) * len(self.r_axis)

    def as_dict(self) -> dict[str, Any]:
        return {
            "N": self.N,
            "M": self.M,
            "T": self.T,
            "lambda4": self.lambda4,
            "omega": self.omega_axis.as_dict(),
            "r": self.r_axis.as_dict(),
        }

    @classmethod
    def from_config(cls, config: dict[str, Any], **overrides: Any) -> "SweepParameters":
        """
        Build parameters from the ``sweep`` section of the YAML configuration.

        Keyword overrides that are ``None`` are ignored, so argparse namespaces
        can be passed through unchanged.
        """
        section = dict(config.get("sweep", {}))
        section.update({key: value for key, value in overrides.items() if value is not None})
        missing = [key for key in ("N", "M", "T") if key not in section]
        if missing:
            raise InvalidParameterError(f"Missing sweep parameters: {', '.join(missing)}.")

        def axis(prefix: str) -> GridAxis:
            default = section.get(prefix, {}) or {}
            return GridAxis(
                start=section.get(f"{prefix}_start", default.get("start", DEFAULT_AXIS[0])),
                end=section.get(f"{prefix}_end", default.get("end", DEFAULT_AXIS[1])),
                step=section.get(f"{prefix}_step", default.get("step", DEFAULT_AXIS[2])),
            )

        return cls(
            N=section["N"],
            M=section["M"],
            T=section["T"],
            lambda4=section.get("lambda4", DEFAULT_LAMBDA4),
            omega_axis=axis("omega"),
            r_axis=axis("r"),
        )
