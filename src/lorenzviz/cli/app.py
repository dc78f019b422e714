from __future__ import annotations

import math
from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from lorenzviz.core import constants
from lorenzviz.core.chaos.base import Position, Vec3
from lorenzviz.core.chaos.lorenz import LorenzParams, derivatives, lorenz_step
from lorenzviz.core.mapping import map_range
from lorenzviz.io.formats import trajectory_fingerprint
from lorenzviz.cli import ui
from lorenzviz.trace.runner import (
    ConfigError,
    FullConfig,
    TraceConfig,
    final_position,
    parse_config,
    run_trace,
    validate_trace,
    write_csv,
    write_json_output,
)
from lorenzviz.utils.logging import get_logger, resolve_log_level, set_command_context, setup_logging

app = typer.Typer(help="Real-time Lorenz attractor viewer")
logger = get_logger(__name__)

_DEFAULT_INITIAL = ",".join(str(v) for v in constants.INITIAL_POSITION)


class TraceFormat(str, Enum):
    csv = "csv"
    json = "json"


def parse_vec3(value: str) -> Vec3:
    try:
        if "," in value:
            parts = value.split(",")
        else:
            parts = value.split()
        if len(parts) != 3:
            raise ValueError
        x, y, z = (float(p.strip()) for p in parts)
        return x, y, z
    except ValueError as exc:
        raise typer.BadParameter("position must be provided as 'x,y,z' or 'x y z'") from exc


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress (INFO)"),
    debug: bool = typer.Option(False, "--debug", help="Log every tick (DEBUG)"),
):
    setup_logging(resolve_log_level(verbose, debug))
    set_command_context(ctx.invoked_subcommand or "cli")


@app.command()
def run(
    dt: float = typer.Option(constants.DT, help="Time step for Euler integration"),
    steps_per_tick: int = typer.Option(constants.STEPS_PER_TICK, help="Integration steps per frame"),
    initial: str = typer.Option(_DEFAULT_INITIAL, "--initial", help="Start position as 'x,y,z'"),
    width: int = typer.Option(constants.WINDOW_SIZE[0], help="Window width"),
    height: int = typer.Option(constants.WINDOW_SIZE[1], help="Window height"),
):
    """Open the interactive viewer (WASD/mouse fly camera)."""
    if steps_per_tick < 1:
        typer.secho("steps-per-tick must be >= 1", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    start = parse_vec3(initial)
    params = LorenzParams()
    ui.print_run_header("run", params=params, dt=dt, steps_per_tick=steps_per_tick, initial=start)

    # GPU stack is only needed for the window
    from lorenzviz.render.viewer import Viewer
    from lorenzviz.sim.simulation import Simulation

    simulation = Simulation(initial=start, dt=dt, steps_per_tick=steps_per_tick, params=params)
    Viewer(simulation, size=(width, height)).run()
    ui.print_done(f"ticks={simulation.ticks}")


@app.command()
def trace(
    ticks: int = typer.Option(1, "--ticks", "-n", help="Number of frames to simulate"),
    dt: float = typer.Option(constants.DT, help="Time step for Euler integration"),
    steps_per_tick: int = typer.Option(constants.STEPS_PER_TICK, help="Integration steps per frame"),
    initial: str = typer.Option(_DEFAULT_INITIAL, "--initial", help="Start position as 'x,y,z'"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", exists=True, readable=True, help="YAML trace config (overrides options)"
    ),
    out: Optional[Path] = typer.Option(None, "--out", "-o", help="Write every segment to this file"),
    fmt: TraceFormat = typer.Option(TraceFormat.csv, "--format", "-f", help="Output file format"),
):
    """
    Integrate headlessly. Prints the trajectory SHA-256 unless --out is given.
    """
    try:
        if config is not None:
            cfg = parse_config(config)
        else:
            cfg = FullConfig(
                trace=TraceConfig(ticks=ticks, steps_per_tick=steps_per_tick, dt=dt, initial=parse_vec3(initial)),
                params=LorenzParams(),
            )
            validate_trace(cfg.trace)
    except ConfigError as exc:
        typer.secho(f"Config error: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    records = run_trace(cfg)

    if out is None:
        positions = [(rec["x1"], rec["y1"], rec["z1"]) for rec in records]
        typer.echo(trajectory_fingerprint(positions))
        return

    ui.print_run_header(
        "trace",
        params=cfg.params,
        dt=cfg.trace.dt,
        steps_per_tick=cfg.trace.steps_per_tick,
        initial=cfg.trace.initial,
        ticks=cfg.trace.ticks,
    )
    ui.print_io_write(out)
    try:
        if fmt is TraceFormat.json:
            write_json_output(out, records)
        else:
            write_csv(out, records)
    except OSError as exc:
        typer.secho(f"Failed to write output: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    last = final_position(records)
    last_text = ui.format_vec3(last) if last else "n/a"
    typer.secho(f"Trace → {out}", fg=typer.colors.GREEN)
    ui.print_done(f"segments={len(records)} final={last_text}")


@app.command()
def step(
    initial: str = typer.Option(_DEFAULT_INITIAL, "--initial", help="Position as 'x,y,z'"),
    dt: float = typer.Option(constants.DT, help="Time step for Euler integration"),
):
    """Show a single Euler step from a position."""
    position = Position.from_tuple(parse_vec3(initial))
    params = LorenzParams()
    derivative = derivatives(*position.as_tuple(), params=params)
    segment = lorenz_step(position, params, dt)
    ui.print_step(segment.start, derivative, segment.end)


@app.command()
def selftest():
    """
    Run the built-in golden vector checks (no window, no filesystem writes).
    """
    failures = []

    position = Position(0.1, 0.0, 0.1)
    lorenz_step(position)
    expected = (0.099, 0.00279, 0.1 - (8.0 / 3.0) * 0.1 * constants.DT)
    if not all(math.isclose(a, b, rel_tol=1e-9, abs_tol=1e-12) for a, b in zip(position.as_tuple(), expected)):
        failures.append(f"euler step gave {ui.format_vec3(position.as_tuple(), 9)}")

    origin = Position(0.0, 0.0, 0.0)
    lorenz_step(origin)
    if origin.as_tuple() != (0.0, 0.0, 0.0):
        failures.append("origin is not a fixed point")

    if map_range((0.0, 1.0), (0.0, 10.0), 0.5) != 5.0 or map_range((-1.0, 1.0), (0.0, 1.0), 0.0) != 0.5:
        failures.append("map_range linearity")
    if math.isfinite(map_range((5.0, 5.0), (0.0, 1.0), 5.0)):
        failures.append("map_range degenerate range produced a finite value")

    for failure in failures:
        logger.error("selftest: %s", failure)
    if failures:
        typer.secho("Selftest FAILED.", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    typer.secho("Selftest passed (Golden Vector).", fg=typer.colors.GREEN)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
