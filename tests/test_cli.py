import csv
import hashlib
import json
from pathlib import Path

import pytest
import yaml
from typer.testing import CliRunner

from lorenzviz.cli.app import app
from lorenzviz.core.chaos.base import Position
from lorenzviz.core.chaos.lorenz import lorenz_step
from lorenzviz.io.formats import trajectory_fingerprint


def test_trace_hash_is_deterministic():
    runner = CliRunner()
    res1 = runner.invoke(app, ["trace", "--ticks", "2"])
    res2 = runner.invoke(app, ["trace", "--ticks", "2"])

    assert res1.exit_code == 0, res1.output
    assert res2.exit_code == 0, res2.output
    assert res1.output.strip() == res2.output.strip()


def test_trace_hash_matches_manual_integration():
    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--ticks", "1"])
    assert res.exit_code == 0, res.output

    position = Position(0.1, 0.0, 0.1)
    expected = trajectory_fingerprint(lorenz_step(position).end for _ in range(50))
    assert res.output.strip() == expected


def test_trace_zero_ticks_hash():
    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--ticks", "0"])
    assert res.exit_code == 0, res.output
    assert res.output.strip() == hashlib.sha256(b"").hexdigest()


def test_trace_initial_changes_hash():
    runner = CliRunner()
    res_default = runner.invoke(app, ["trace"])
    res_moved = runner.invoke(app, ["trace", "--initial", "1,1,1"])
    assert res_default.exit_code == 0, res_default.output
    assert res_moved.exit_code == 0, res_moved.output
    assert res_default.output.strip() != res_moved.output.strip()


def test_trace_writes_csv(tmp_path):
    out = Path(tmp_path) / "trace.csv"
    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--ticks", "1", "--out", str(out)])
    assert res.exit_code == 0, res.output

    with out.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 50
    assert float(rows[0]["x1"]) == pytest.approx(0.099)
    assert float(rows[0]["saturation"]) == 0.8


def test_trace_writes_json_from_config(tmp_path):
    cfg_path = Path(tmp_path) / "trace.yaml"
    cfg_path.write_text(yaml.safe_dump({"trace": {"ticks": 3, "steps_per_tick": 4}}), encoding="utf-8")
    out = Path(tmp_path) / "nested" / "trace.json"

    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--config", str(cfg_path), "--out", str(out), "--format", "json"])
    assert res.exit_code == 0, res.output

    records = json.loads(out.read_text())
    assert len(records) == 12
    assert records[-1]["tick"] == 2
    assert records[-1]["step"] == 3


def test_trace_bad_config_exits(tmp_path):
    cfg_path = Path(tmp_path) / "trace.yaml"
    cfg_path.write_text("trace: {}\n", encoding="utf-8")
    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--config", str(cfg_path)])
    assert res.exit_code == 1
    assert "Config error" in res.output


def test_trace_rejects_malformed_position():
    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--initial", "1,2"])
    assert res.exit_code != 0


def test_step_prints_reference_values():
    runner = CliRunner()
    res = runner.invoke(app, ["step", "--initial", "0.1,0,0.1"])
    assert res.exit_code == 0, res.output
    assert "dx=-1.000000 dy=2.790000 dz=-0.266667" in res.output
    assert "to=(0.099000, 0.002790, 0.099733)" in res.output


def test_selftest_passes():
    runner = CliRunner()
    res = runner.invoke(app, ["selftest"])
    assert res.exit_code == 0, res.output
    assert "Selftest passed" in res.output


@pytest.mark.parametrize("dt", ["0", "-0.001"])
def test_trace_rejects_non_positive_dt(dt):
    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--dt", dt])
    assert res.exit_code == 1
    assert "trace.dt must be > 0" in res.output


def test_trace_file_output_prints_run_header(tmp_path):
    out = Path(tmp_path) / "trace.csv"
    runner = CliRunner()
    res = runner.invoke(app, ["trace", "--ticks", "3", "--out", str(out)])
    assert res.exit_code == 0, res.output
    assert "[run] command=trace" in res.output
    assert "[lorenz] sigma=10.0 rho=28.0" in res.output
    assert "ticks=3" in res.output
