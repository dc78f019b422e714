from __future__ import annotations

import csv
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from lorenzviz.core import constants
from lorenzviz.core.chaos.base import Vec3
from lorenzviz.core.chaos.lorenz import LorenzParams
from lorenzviz.io.formats import TRACE_FIELDS, write_json
from lorenzviz.sim.simulation import RecordingSink, Simulation
from lorenzviz.utils.logging import get_logger

logger = get_logger(__name__)


# -------------------------
# Config structures
# -------------------------


@dataclass(frozen=True)
class TraceConfig:
    ticks: int
    steps_per_tick: int
    dt: float
    initial: Vec3


@dataclass(frozen=True)
class FullConfig:
    trace: TraceConfig
    params: LorenzParams


# -------------------------
# Config parsing/validation
# -------------------------


class ConfigError(Exception):
    """Raised when the trace config is invalid."""


def _require(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...]):
    if key not in mapping:
        raise ConfigError(f"Missing required key '{key}'")
    val = mapping[key]
    if not isinstance(val, expected_type):
        raise ConfigError(f"Key '{key}' must be of type {expected_type}, got {type(val)}")
    return val


def _optional(mapping: Dict[str, Any], key: str, expected_type: Tuple[type, ...], default):
    if key not in mapping:
        return default
    return _require(mapping, key, expected_type)


def validate_trace(trace: TraceConfig) -> None:
    if trace.ticks < 0:
        raise ConfigError("trace.ticks must be >= 0")
    if trace.steps_per_tick < 1:
        raise ConfigError("trace.steps_per_tick must be >= 1")
    if trace.dt <= 0:
        raise ConfigError("trace.dt must be > 0")


def default_config(ticks: int = 1) -> FullConfig:
    return FullConfig(
        trace=TraceConfig(
            ticks=ticks,
            steps_per_tick=constants.STEPS_PER_TICK,
            dt=constants.DT,
            initial=constants.INITIAL_POSITION,
        ),
        params=LorenzParams(),
    )


def parse_config(path: Path) -> FullConfig:
    try:
        data = yaml.safe_load(path.read_text())
    except Exception as exc:  # noqa: BLE001
        raise ConfigError(f"Failed to read YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Top-level YAML must be a mapping.")

    trace = _require(data, "trace", (dict,))
    params = _optional(data, "params", (dict,), {})

    initial = _optional(trace, "initial", (list, tuple), list(constants.INITIAL_POSITION))
    if len(initial) != 3:
        raise ConfigError("trace.initial must have exactly three entries (x,y,z)")

    trace_cfg = TraceConfig(
        ticks=int(_require(trace, "ticks", (int,))),
        steps_per_tick=int(_optional(trace, "steps_per_tick", (int,), constants.STEPS_PER_TICK)),
        dt=float(_optional(trace, "dt", (int, float), constants.DT)),
        initial=(float(initial[0]), float(initial[1]), float(initial[2])),
    )
    validate_trace(trace_cfg)

    params_cfg = LorenzParams(
        sigma=float(_optional(params, "sigma", (int, float), constants.SIGMA)),
        rho=float(_optional(params, "rho", (int, float), constants.RHO)),
        beta=float(_optional(params, "beta", (int, float), constants.BETA)),
    )

    return FullConfig(trace=trace_cfg, params=params_cfg)


# -------------------------
# Trace execution
# -------------------------


def run_trace(config: FullConfig) -> List[Dict[str, Any]]:
    """Integrate headlessly and return one record per step."""
    simulation = Simulation(
        initial=config.trace.initial,
        dt=config.trace.dt,
        steps_per_tick=config.trace.steps_per_tick,
        params=config.params,
    )
    sink = RecordingSink()
    simulation.run(config.trace.ticks, sink)

    records: List[Dict[str, Any]] = []
    for index, (segment, color) in enumerate(sink.records):
        tick, step = divmod(index, config.trace.steps_per_tick)
        x0, y0, z0 = segment.start
        x1, y1, z1 = segment.end
        records.append(
            {
                "tick": tick,
                "step": step,
                "x0": x0,
                "y0": y0,
                "z0": z0,
                "x1": x1,
                "y1": y1,
                "z1": z1,
                "hue": color.hue,
                "saturation": color.saturation,
                "lightness": color.lightness,
                "alpha": color.alpha,
            }
        )
    logger.info("Trace complete ticks=%d segments=%d", config.trace.ticks, len(records))
    return records


def final_position(records: List[Dict[str, Any]]) -> Optional[Vec3]:
    if not records:
        return None
    last = records[-1]
    return last["x1"], last["y1"], last["z1"]


# -------------------------
# Output helpers
# -------------------------


def write_csv(path: Path, records: List[Dict[str, Any]]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=TRACE_FIELDS)
        writer.writeheader()
        for rec in records:
            writer.writerow(rec)


def write_json_output(path: Path, records: List[Dict[str, Any]]) -> None:
    write_json(path, records)
