from __future__ import annotations

import dataclasses
import math

import numpy as np
import pytest

from cosmicstring.errors import InvalidParameterError
from cosmicstring.params import GridAxis, SweepParameters


def test_axis_includes_end_despite_rounding() -> None:
    axis = GridAxis(0.1, 5.0, 0.1)
    values = axis.values()
    assert len(axis) == 50
    assert values.shape == (50,)
    assert math.isclose(values[-1], 5.0)
    assert np.all(np.diff(values) > 0)


def test_axis_single_point() -> None:
    axis = GridAxis(0.5, 0.5, 0.1)
    assert list(axis) == [0.5]


def test_axis_end_not_on_step_is_truncated() -> None:
    axis = GridAxis(0.0, 1.05, 0.5)
    assert list(axis) == [0.0, 0.5, 1.0]


@pytest.mark.parametrize("start, end, step", [(0.1, 5.0, 0.0), (0.1, 5.0, -0.1), (1.0, 0.5, 0.1), (0.1, float("nan"), 0.1)])
def test_axis_rejects_bad_bounds(start: float, end: float, step: float) -> None:
    with pytest.raises(InvalidParameterError):
        GridAxis(start, end, step)


def test_defaults() -> None:
    params = SweepParameters(N=1, M=3, T=2.0)
    assert params.lambda4 == 1.0
    assert params.n_cells == 2500
    assert params.as_dict()["omega"] == {"start": 0.1, "end": 5.0, "step": 0.1}


@pytest.mark.parametrize(
    "kwargs",
    [
        dict(N=0, M=1, T=1.0),
        dict(N=1, M=-1, T=1.0),
        dict(N=1.0, M=1, T=1.0),
        dict(N=1, M=1, T=0.0),
        dict(N=1, M=1, T=-2.0),
        dict(N=1, M=1, T=float("inf")),
        dict(N=1, M=1, T=1.0, lambda4=float("nan")),
        dict(N=1, M=1, T=1.0, r_axis=GridAxis(-1.0, 1.0, 0.5)),
        dict(N=1, M=1, T=1.0, r_axis=GridAxis(0.0, 1.0, 0.5)),
    ],
)
def test_invalid_parameters_fail_fast(kwargs: dict) -> None:
    with pytest.raises(InvalidParameterError):
        SweepParameters(**kwargs)


def test_negative_r_axis_is_allowed() -> None:
    params = SweepParameters(N=1, M=1, T=1.0, r_axis=GridAxis(-2.0, -1.0, 0.5))
    assert list(params.r_axis) == [-2.0, -1.5, -1.0]


def test_parameters_are_immutable() -> None:
    params = SweepParameters(N=1, M=2, T=1.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        params.T = 2.0  # type: ignore[misc]


def test_from_config_with_overrides() -> None:
    config = {
        "sweep": {
            "N": 1,
            "M": 2,
            "T": 1.0,
            "omega": {"start": 0.1, "end": 1.0, "step": 0.3},
            "r": {"start": 0.2, "end": 0.4, "step": 0.1},
        }
    }
    params = SweepParameters.from_config(config, M=3, T=None, r_end=0.6)
    assert (params.N, params.M, params.T) == (1, 3, 1.0)
    assert len(params.omega_axis) == 4
    assert params.r_axis.end == 0.6
    assert len(params.r_axis) == 5


def test_from_config_requires_charges() -> None:
    with pytest.raises(InvalidParameterError):
        SweepParameters.from_config({"sweep": {"T": 1.0}})


def test_r_axis_spanning_zero_without_sampling_it_is_allowed() -> None:
    params = SweepParameters(N=1, M=1, T=1.0, r_axis=GridAxis(-0.05, 0.05, 0.1))
    values = params.r_axis.values()
    assert len(values) == 2
    assert np.all(values != 0.0)
