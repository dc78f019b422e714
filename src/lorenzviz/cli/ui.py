from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import typer

from lorenzviz.core.chaos.base import Vec3
from lorenzviz.core.chaos.lorenz import LorenzParams


def _timestamp_utc() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _abs_path(path: Path | None) -> str:
    if path is None:
        return "n/a"
    try:
        return str(path.resolve())
    except OSError:
        return str(path)


def format_vec3(values: Vec3, precision: int = 6) -> str:
    return "(" + ", ".join(f"{v:.{precision}f}" for v in values) + ")"


def print_run_header(
    command: str,
    *,
    params: LorenzParams,
    dt: float,
    steps_per_tick: int,
    initial: Vec3,
    ticks: int | None = None,
) -> None:
    typer.echo(f"[run] command={command} ts_utc={_timestamp_utc()}")
    typer.echo(f"[lorenz] sigma={params.sigma} rho={params.rho} beta={params.beta:.6f} dt={dt}")
    ticks_text = ticks if ticks is not None else "unbounded"
    typer.echo(f"[sim] initial={format_vec3(initial)} steps_per_tick={steps_per_tick} ticks={ticks_text}")


def print_step(previous: Vec3, derivative: Vec3, new: Vec3) -> None:
    typer.echo(f"[step] from={format_vec3(previous)}")
    typer.echo(f"[step] dx={derivative[0]:.6f} dy={derivative[1]:.6f} dz={derivative[2]:.6f}")
    typer.echo(f"[step] to={format_vec3(new)}")


def print_io_write(path: Path) -> None:
    typer.echo(f"[io] Writing output: {_abs_path(path)}")


def print_done(summary: str) -> None:
    typer.echo(f"[done] {summary}")
