from __future__ import annotations

from pathlib import Path

import pytest

from gwentengine.cli import _build_parser, main
from gwentengine.paths import Paths, get_paths
from gwentengine.services.telemetry import TelemetryService


def test_simulate_prints_rounds_and_writes_telemetry(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    log_path = tmp_path / "sim.jsonl"
    rc = main(["simulate", "--seed", "1", "--telemetry", str(log_path)])
    assert rc == 0

    out = capsys.readouterr().out
    assert "Round 1:" in out
    assert "Winner:" in out or "Stopped after" in out

    records = TelemetryService(log_path).read_all()
    assert records[0]["type"] == "match_started"
    assert any(r["type"] == "match_event" for r in records)


def test_simulate_is_reproducible(capsys: pytest.CaptureFixture[str]) -> None:
    args = ["simulate", "--seed", "8", "--faction", "northern_realms", "--player-ai", "hard", "--no-telemetry"]
    assert main(args) == 0
    first = capsys.readouterr().out
    assert main(args) == 0
    assert capsys.readouterr().out == first


def test_simulate_respects_max_steps(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["simulate", "--seed", "3", "--max-steps", "1", "--no-telemetry"]) == 0
    assert "Stopped after 1 steps without a winner." in capsys.readouterr().out


def test_unknown_difficulty_is_rejected() -> None:
    with pytest.raises(SystemExit):
        main(["simulate", "--opponent-ai", "impossible"])


def test_telemetry_defaults_to_userdata(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    real = get_paths()
    fake = Paths(data_dir=real.data_dir, schema_dir=real.schema_dir, userdata_dir=tmp_path / "userdata")
    monkeypatch.setattr("gwentengine.cli.get_paths", lambda: fake)

    assert main(["simulate", "--seed", "4", "--max-steps", "5"]) == 0
    records = TelemetryService(fake.telemetry_file).read_all()
    assert records[0]["type"] == "match_started"


def test_log_level_is_validated_and_case_insensitive() -> None:
    assert _build_parser().parse_args(["--log-level", "debug", "simulate"]).log_level == "DEBUG"
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["--log-level", "foo", "simulate"])
