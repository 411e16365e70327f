#!/usr/bin/env python3
"""
Lightweight QA gate for an emitted transition-probability CSV.

Fails with a non-zero exit code if the grid is malformed or cells errored.
"""

from __future__ import annotations

import argparse
import csv
import math
import sys
from pathlib import Path

from cosmicstring.records import ERROR_PREFIX, FIELDNAMES

COORD_TOL = 1e-9


def _parse_float(value: str | None) -> float:
    if value is None or value == "":
        return math.nan
    try:
        return float(value)
    except ValueError:
        return math.nan


def check_csv(csv_path: Path, allow_errors: bool = False, expect_cells: int | None = None) -> list[tuple[int, str, str]]:
    """Return ``(line, rule, message)`` violations found in ``csv_path``."""
    violations: list[tuple[int, str, str]] = []
    n_rows = 0
    prev: tuple[float, float] | None = None

    with csv_path.open("r", encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh)
        if reader.fieldnames != FIELDNAMES:
            return [(1, "header", f"header={reader.fieldnames} expected {FIELDNAMES}")]
        for idx, row in enumerate(reader, start=2):  # account for header on line 1
            n_rows += 1
            omega = _parse_float(row.get("Omega"))
            r = _parse_float(row.get("r"))
            if math.isnan(omega) or math.isnan(r):
                violations.append((idx, "coordinates", f"Omega={row.get('Omega')} r={row.get('r')}"))
                continue

            if prev is not None:
                prev_omega, prev_r = prev
                same_block = abs(omega - prev_omega) <= COORD_TOL
                if omega < prev_omega - COORD_TOL or (same_block and r <= prev_r + COORD_TOL):
                    violations.append(
                        (idx, "order", f"({omega:.4f}, {r:.4f}) after ({prev_omega:.4f}, {prev_r:.4f})")
                    )
            prev = (omega, r)

            for field in ("PQ", "PC"):
                text = (row.get(field) or "").strip()
                if text.startswith(ERROR_PREFIX):
                    if not allow_errors:
                        violations.append((idx, field, text))
                    continue
                value = _parse_float(text)
                if not math.isfinite(value):
                    violations.append((idx, field, f"{field}={text!r} is not a finite number"))

    if expect_cells is not None and n_rows != expect_cells:
        violations.append((n_rows + 1, "cells", f"rows={n_rows} expected {expect_cells}"))
    return violations


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Run QA gates on a transition-probability CSV.")
    parser.add_argument(
        "csv_path",
        nargs="?",
        default="results/results.csv",
        help="Path to the sweep CSV file.",
    )
    parser.add_argument("--allow-errors", action="store_true", help="Do not fail on singular (error) cells.")
    parser.add_argument("--expect-cells", type=int, help="Required number of data rows.")
    args = parser.parse_args(argv)

    csv_path = Path(args.csv_path)
    if not csv_path.exists():
        print(f"[QA] CSV not found: {csv_path}", file=sys.stderr)
        sys.exit(2)

    violations = check_csv(csv_path, allow_errors=args.allow_errors, expect_cells=args.expect_cells)
    if violations:
        print("[QA] Violations detected:", file=sys.stderr)
        for idx, rule, message in violations:
            print(f"  line {idx}: {rule} -> {message}", file=sys.stderr)
        sys.exit(1)

    print("[QA] All gates passed.")


if __name__ == "__main__":
    main()
