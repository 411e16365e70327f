from __future__ import annotations

import math
from itertools import islice

from cosmicstring.combiner import evaluate_cell
from cosmicstring.errors import SingularityError
from cosmicstring.grid import CellError, GridSample, GridSweep, run_sweep
from cosmicstring.params import GridAxis, SweepParameters


def _small_params(**kwargs) -> SweepParameters:
    defaults = dict(N=2, M=3, T=1.0, omega_axis=GridAxis(-0.5, 1.0, 0.5), r_axis=GridAxis(0.5, 1.5, 0.5))
    defaults.update(kwargs)
    return SweepParameters(**defaults)


def test_default_grid_shape_and_order() -> None:
    sweep = run_sweep(SweepParameters(N=1, M=2, T=1.0))
    samples = list(sweep)

    assert len(sweep) == 2500
    assert len(samples) == 2500
    omegas = sorted({round(s.omega, 9) for s in samples})
    radii = sorted({round(s.r, 9) for s in samples})
    assert len(omegas) == 50 and len(radii) == 50
    assert math.isclose(omegas[0], 0.1) and math.isclose(omegas[-1], 5.0)

    for idx, sample in enumerate(samples):
        i, j = divmod(idx, 50)
        assert math.isclose(sample.omega, omegas[i], abs_tol=1e-9)
        assert math.isclose(sample.r, radii[j], abs_tol=1e-9)
        assert sample.ok


def test_single_singular_cell_is_isolated() -> None:
    # r = 1e-9 makes the oscillating-term divisor vanish, but only for Ω > 0
    params = SweepParameters(
        N=2,
        M=2,
        T=1.0,
        omega_axis=GridAxis(-0.5, 0.5, 0.5),
        r_axis=GridAxis(1e-9, 1.5, 1.0),
    )
    samples = list(GridSweep(params))

    assert len(samples) == params.n_cells == 6
    failed = [s for s in samples if not s.ok]
    assert len(failed) == 1
    bad = failed[0]
    assert math.isclose(bad.omega, 0.5) and bad.r == 1e-9
    assert isinstance(bad.p_q, CellError) and bad.p_q == bad.p_c
    assert str(bad.p_q).startswith("Error: singular second sum")
    for sample in samples:
        if sample is not bad:
            assert isinstance(sample.p_q, float) and isinstance(sample.p_c, float)


def test_injected_failure_in_chosen_cell() -> None:
    params = _small_params()
    target = (0.5, 1.0)

    def evaluate(p: SweepParameters, omega: float, r: float):
        if math.isclose(omega, target[0]) and math.isclose(r, target[1]):
            raise SingularityError("second", (1, 2), r, p.T)
        return evaluate_cell(p, omega, r)

    samples = list(GridSweep(params, evaluate=evaluate))
    assert len(samples) == len(params.omega_axis) * len(params.r_axis) == 12
    errors = [idx for idx, s in enumerate(samples) if not s.ok]
    assert errors == [2 * 3 + 1]
    assert "(1, 2)" in samples[errors[0]].p_c.message


def test_all_cells_singular_still_yields_full_grid() -> None:
    params = _small_params(T=1e-5)
    samples = list(run_sweep(params))
    assert len(samples) == params.n_cells
    assert all(not s.ok for s in samples)


def test_sweep_is_deterministic_and_restartable() -> None:
    params = _small_params()
    sweep = GridSweep(params)
    first = list(sweep)
    second = list(sweep)
    third = list(GridSweep(_small_params()))
    assert first == second == third
    assert all(isinstance(s, GridSample) for s in first)


def test_sweep_is_lazy() -> None:
    calls: list[tuple[float, float]] = []

    def evaluate(p: SweepParameters, omega: float, r: float):
        calls.append((omega, r))
        return evaluate_cell(p, omega, r)

    head = list(islice(GridSweep(_small_params(), evaluate=evaluate), 4))
    assert len(head) == 4
    assert len(calls) == 4
    assert [round(o, 6) for o, _ in calls] == [-0.5, -0.5, -0.5, 0.0]


def test_successful_cells_satisfy_combiner_identity() -> None:
    params = _small_params(lambda4=0.5)
    for sample in run_sweep(params):
        outcome = evaluate_cell(params, sample.omega, sample.r)
        assert math.isclose(
            sample.p_q - sample.p_c,
            params.lambda4 * outcome.probabilities.l_ab,
            rel_tol=1e-9,
            abs_tol=1e-14,
        )


def test_overflowing_cell_is_isolated() -> None:
    params = SweepParameters(
        N=1,
        M=2,
        T=1.0,
        omega_axis=GridAxis(0.5, 0.5, 0.1),
        r_axis=GridAxis(1.0, 1e200, 1e200 - 1.0),
    )
    samples = list(GridSweep(params))
    assert [s.r for s in samples] == [1.0, 1e200]
    assert samples[0].ok
    assert not samples[1].ok
    assert str(samples[1].p_c).startswith("Error: singular result sum")
