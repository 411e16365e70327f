#!/usr/bin/env python3
"""
Sweep the (Ω, r) grid for a superposition of two cosmic strings and export
classical vs. quantum transition probabilities to CSV.
"""

from __future__ import annotations

import argparse
import sys
import uuid
from pathlib import Path
from typing import Callable

from tqdm import tqdm

from cosmicstring.config_loader import load_config_with_hash
from cosmicstring.errors import InvalidParameterError
from cosmicstring.grid import run_sweep
from cosmicstring.params import SweepParameters
from cosmicstring.records import unique_output_path, write_manifest, write_records


def prompt_charge(name: str, read: Callable[[str], str] = input) -> int:
    """Ask for a topological charge on the console; an empty answer means 1."""
    text = read(f"Enter {name} (integer <= 3): ").strip() or "1"
    try:
        return int(text)
    except ValueError as exc:
        raise InvalidParameterError(f"{name} must be an integer, got {text!r}.") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Cosmic-string superposition transition-probability sweep")
    parser.add_argument("--config", type=Path, help="YAML config (default: cosmicstring/config.yaml)")
    parser.add_argument("--N", type=int, help="Topological charge of the first string")
    parser.add_argument("--M", type=int, help="Topological charge of the second string")
    parser.add_argument("--T", type=float, help="Detector switching time (> 0)")
    parser.add_argument("--lambda4", type=float, help="Coupling constant λ⁴")
    parser.add_argument("--omega-start", type=float)
    parser.add_argument("--omega-end", type=float)
    parser.add_argument("--omega-step", type=float)
    parser.add_argument("--r-start", type=float)
    parser.add_argument("--r-end", type=float)
    parser.add_argument("--r-step", type=float)
    parser.add_argument("--prompt", action="store_true", help="Ask for N and M interactively")
    parser.add_argument("--output", type=Path, help="CSV path (default: unique name in the output directory)")
    parser.add_argument("--output-dir", type=Path, help="Directory for the generated CSV")
    parser.add_argument("--no-progress", action="store_true", help="Disable the progress bar")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        config, cfg_hash = load_config_with_hash(args.config)
    except ValueError as exc:
        print(f"✗ Invalid configuration: {exc}", file=sys.stderr)
        sys.exit(2)

    try:
        if args.prompt:
            args.N = prompt_charge("N")
            args.M = prompt_charge("M")
        params = SweepParameters.from_config(
            config,
            N=args.N,
            M=args.M,
            T=args.T,
            lambda4=args.lambda4,
            omega_start=args.omega_start,
            omega_end=args.omega_end,
            omega_step=args.omega_step,
            r_start=args.r_start,
            r_end=args.r_end,
            r_step=args.r_step,
        )
    except InvalidParameterError as exc:
        print(f"✗ Invalid parameters: {exc}", file=sys.stderr)
        sys.exit(2)

    output_cfg = config.get("output", {}) or {}
    if args.output is not None:
        csv_path = args.output
    else:
        out_dir = args.output_dir or Path(output_cfg.get("directory", "results"))
        csv_path = unique_output_path(out_dir, output_cfg.get("stem", "results"))

    sweep = run_sweep(params)
    omega_axis, r_axis = params.omega_axis, params.r_axis

    print("\n" + "=" * 70)
    print("COSMIC STRING SUPERPOSITION SWEEP")
    print("=" * 70)
    print(f"Charges: N={params.N}, M={params.M}  T={params.T}  λ⁴={params.lambda4}")
    print(f"Ω range: [{omega_axis.start:.4f}, {omega_axis.end:.4f}] step {omega_axis.step} ({len(omega_axis)} points)")
    print(f"r range: [{r_axis.start:.4f}, {r_axis.end:.4f}] step {r_axis.step} ({len(r_axis)} points)")
    print(f"CSV file will be saved to: {csv_path}")

    run_id = uuid.uuid4().hex
    cells = tqdm(sweep, total=len(sweep), desc="cells", ncols=90, disable=args.no_progress)
    counts = write_records(cells, csv_path)
    write_manifest(csv_path, params, counts, cfg_hash, run_id=run_id)

    if counts.errors:
        print(f"⚠ {counts.errors} of {counts.total} cells hit a singularity (marked as Error rows)", file=sys.stderr)
    print(f"✓ Saved {counts.total} records to {csv_path}")


if __name__ == "__main__":
    main()
