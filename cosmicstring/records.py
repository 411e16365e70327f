"""
CSV sink for sweep records, plus the run manifest written next to it.

Rows follow the reference layout ``Omega,r,PQ,PC``: coordinates with four
decimals, probabilities as ``d.dddddd E±xxx`` and error cells as the
``Error: <message>`` sentinel text. Formatting never depends on the locale.
"""

from __future__ import annotations

import csv
import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Iterator

from cosmicstring.grid import CellError, GridSample, Metric
from cosmicstring.params import SweepParameters

FIELDNAMES = ["Omega", "r", "PQ", "PC"]
ERROR_PREFIX = "Error: "


@dataclass(frozen=True)
class RecordCounts:
    total: int
    errors: int

    @property
    def ok(self) -> int:
        return self.total - self.errors


def _utc_now() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="microseconds")
        .replace("+00:00", "Z")
    )


def format_scientific(value: float) -> str:
    """Six-digit mantissa with a signed, at least three-digit exponent (6.912194E-002)."""
    mantissa, exponent = f"{value:.6E}".split("E")
    sign, digits = exponent[0], exponent[1:]
    return f"{mantissa}E{sign}{digits.zfill(3)}"


def format_metric(value: Metric) -> str:
    if isinstance(value, CellError):
        return str(value)
    return format_scientific(value)


def format_row(sample: GridSample) -> list[str]:
    return [
        f"{sample.omega:.4f}",
        f"{sample.r:.4f}",
        format_metric(sample.p_q),
        format_metric(sample.p_c),
    ]


def write_records(samples: Iterable[GridSample], path: Path | str) -> RecordCounts:
    """Stream ``samples`` to ``path`` and return how many rows (and error rows) were written."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    total = errors = 0
    with path.open("w", encoding="utf-8", newline="") as fh:
        writer = csv.writer(fh)
        writer.writerow(FIELDNAMES)
        for sample in samples:
            writer.writerow(format_row(sample))
            total += 1
            if not sample.ok:
                errors += 1
    return RecordCounts(total=total, errors=errors)


def _parse_metric(text: str) -> Metric:
    text = text.strip()
    if text.startswith(ERROR_PREFIX):
        return CellError(text[len(ERROR_PREFIX):])
    return float(text)


def iter_records(path: Path | str) -> Iterator[GridSample]:
    with Path(path).open("r", encoding="utf-8", newline="") as fh:
        reader = csv.DictReader(fh)
        if reader.fieldnames != FIELDNAMES:
            raise ValueError(f"Unexpected header in {path}: {reader.fieldnames}")
        for row in reader:
            yield GridSample(
                omega=float(row["Omega"]),
                r=float(row["r"]),
                p_q=_parse_metric(row["PQ"]),
                p_c=_parse_metric(row["PC"]),
            )


def read_records(path: Path | str) -> list[GridSample]:
    return list(iter_records(path))


def unique_output_path(directory: Path | str, stem: str = "results", suffix: str = ".csv") -> Path:
    """
    First free path among ``stem.csv``, ``stem_1.csv``, ``stem_2.csv``, ...
    """
    directory = Path(directory)
    candidate = directory / f"{stem}{suffix}"
    counter = 1
    while candidate.exists():
        candidate = directory / f"{stem}_{counter}{suffix}"
        counter += 1
    return candidate


def write_manifest(
    csv_path: Path | str,
    params: SweepParameters,
    counts: RecordCounts,
    config_hash: str,
    run_id: str | None = None,
) -> Path:
    """Write ``MANIFEST.json`` beside the CSV, keyed by the CSV file name."""
    csv_path = Path(csv_path)
    manifest_path = csv_path.parent / "MANIFEST.json"
    try:
        manifest: dict[str, Any] = json.loads(manifest_path.read_text()) if manifest_path.exists() else {}
    except json.JSONDecodeError:
        manifest = {}

    runs = manifest.get("runs", {})
    runs[csv_path.name] = {
        "run_id": run_id or uuid.uuid4().hex,
        "parameters": params.as_dict(),
        "config_hash": config_hash,
        "records": counts.total,
        "errors": counts.errors,
        "timestamp": _utc_now(),
    }
    manifest["runs"] = runs
    manifest["updated_at"] = _utc_now()
    manifest_path.write_text(json.dumps(manifest, indent=2))
    return manifest_path
