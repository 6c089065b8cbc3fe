"""
Inspect exported benchmark result files.

Reads the ``benchmark-results-<timestamp>.json`` documents written by the
benchmark CLI and prints them, or compares two exports preset by preset.
"""

from __future__ import annotations

import json
import pathlib
from typing import Dict, List

import typer

from src.common import logging_utils
from src.common.results import BenchmarkResult

app = typer.Typer(help="Inspect exported benchmark results")


def load_results(path: pathlib.Path) -> List[BenchmarkResult]:
    """Load an export file; raises ValueError when it is not a result list."""

    payload = logging_utils.read_json(path)
    if not isinstance(payload, list):
        raise ValueError(f"{path} does not contain a list of results")
    try:
        return [BenchmarkResult.from_dict(entry) for entry in payload]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"{path} contains a malformed result: {exc}") from exc


def _load_or_exit(path: pathlib.Path) -> List[BenchmarkResult]:
    try:
        return load_results(path)
    except (OSError, json.JSONDecodeError, ValueError) as exc:
        typer.secho(f"Failed to read {path}: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc


def fps_deltas(baseline: List[BenchmarkResult], candidate: List[BenchmarkResult]) -> Dict[str, float]:
    """Return candidate minus baseline average fps for presets present in both."""

    base_by_label = {result.preset_label: result for result in baseline}
    return {
        result.preset_label: result.avg_fps - base_by_label[result.preset_label].avg_fps
        for result in candidate
        if result.preset_label in base_by_label
    }


@app.command("show")
def show(path: pathlib.Path = typer.Argument(..., help="Exported results JSON")) -> None:
    """Print every result in an export file."""

    results = _load_or_exit(path)
    if not results:
        typer.echo("No results recorded.")
        return

    for result in results:
        typer.echo(
            f"{result.preset_label.upper():<8} {result.score:<10} "
            f"avg {result.avg_fps:7.1f} fps  {result.avg_frame_time_ms:6.2f} ms  "
            f"min {result.min_fps:6.1f}  p1 {result.p1_fps:6.1f}  p99 {result.p99_fps:6.1f}  "
            f"max {result.max_fps:6.1f}  {result.duration_sec:.1f}s"
        )


@app.command("compare")
def compare(
    baseline: pathlib.Path = typer.Argument(..., help="Reference export"),
    candidate: pathlib.Path = typer.Argument(..., help="Export to compare against the reference"),
) -> None:
    """Show the average fps change per preset between two exports."""

    deltas = fps_deltas(_load_or_exit(baseline), _load_or_exit(candidate))
    if not deltas:
        typer.echo("No presets in common.")
        return

    for label, delta in deltas.items():
        color = typer.colors.GREEN if delta >= 0 else typer.colors.RED
        typer.secho(f"{label.upper():<8} {delta:+.1f} fps", fg=color)


if __name__ == "__main__":
    app()
