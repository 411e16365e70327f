#!/usr/bin/env python3
from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd


def load_points(csv_path: Path) -> pd.DataFrame:
    """Read the sweep CSV and drop rows whose probabilities are error sentinels."""
    df = pd.read_csv(csv_path)
    for column in ("PQ", "PC"):
        df[column] = pd.to_numeric(df[column], errors="coerce")
    df = df.replace([np.inf, -np.inf], np.nan).dropna(subset=["Omega", "r", "PQ", "PC"])
    return df


def main() -> None:
    parser = argparse.ArgumentParser(description="3D scatter of quantum vs classical transition probabilities")
    parser.add_argument("--csv", type=Path, default=Path("results/results.csv"))
    parser.add_argument("--output", type=Path, default=Path("figures/fig_transition_3d.png"))
    args = parser.parse_args()

    df = load_points(args.csv)
    if df.empty:
        raise ValueError(f"No numeric rows found in {args.csv}")

    fig = plt.figure(figsize=(9.0, 6.5))
    ax = fig.add_subplot(111, projection="3d")
    ax.scatter(df["Omega"], df["r"], df["PQ"], s=4, color="tab:blue", label="Quantum $P^Q_{AB}$")
    ax.scatter(df["Omega"], df["r"], df["PC"], s=4, color="tab:red", label="Classical $P^C_{AB}$")
    ax.set_xlabel(r"Omega ($\Omega$)")
    ax.set_ylabel("r")
    ax.set_zlabel("P")
    ax.set_title("Transition probability (Quantum vs. Classical)")
    ax.view_init(elev=30, azim=-90)
    ax.legend(loc="upper left")

    args.output.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(args.output, dpi=300)
    print(f"✓ Saved figure to {args.output}")


if __name__ == "__main__":
    main()
