from __future__ import annotations

import importlib.util
from pathlib import Path

from cosmicstring.grid import CellError, GridSample
from cosmicstring.records import write_records

SCRIPT = Path(__file__).resolve().parents[1] / "figures" / "make_fig_transition_3d.py"


def _load_script():
    spec = importlib.util.spec_from_file_location("make_fig_transition_3d", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_error_rows_are_dropped(tmp_path: Path) -> None:
    sentinel = CellError("singular second sum at index (0,) (r=1e-09, T=1)")
    path = tmp_path / "results.csv"
    write_records(
        [
            GridSample(omega=0.1, r=0.1, p_q=0.2, p_c=0.1),
            GridSample(omega=0.1, r=0.2, p_q=sentinel, p_c=sentinel),
            GridSample(omega=0.2, r=0.1, p_q=0.3, p_c=0.15),
        ],
        path,
    )
    df = _load_script().load_points(path)
    assert len(df) == 2
    assert list(df["PQ"]) == [0.2, 0.3]
