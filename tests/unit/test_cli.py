"""Tests for the ``python -m parksim`` entry point."""

import json
import logging

from parksim.__main__ import _clock_arg, build_parser, main


def test_clock_arg():
    assert _clock_arg("07:30") == 450
    assert _clock_arg("600") == 600


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.method == "system"
    assert args.start == 360
    assert args.end == 1320
    assert args.projected is False


def test_runs_a_short_day(capsys):
    code = main(["--method", "lcg", "--seed", "3", "--end", "08:00"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Parking statistics at 08:00" in out


def test_chi_square_flag(capsys):
    code = main(["--method", "mcg", "--seed", "3", "--end", "06:30", "--chi-square", "--samples", "500", "--bins", "5"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Chi-square statistic" in out


def test_configuration_error_exit_code(capsys):
    assert main(["--start", "22:00", "--end", "06:00"]) == 2
    assert "Configuration error" in capsys.readouterr().out


def test_unknown_method_exit_code(capsys):
    assert main(["--method", "dice"]) == 2


def test_writes_outputs(tmp_path, capsys):
    out = tmp_path / "day"
    code = main(["--method", "lcg", "--seed", "3", "--end", "09:00", "--chi-square", "--output", str(out)])

    assert code == 0
    for name in ("timeline.csv", "durations.csv", "events.csv", "chi_square.csv",
                 "durations.png", "timeline.png", "occupancy.png", "chi_square.png"):
        assert (out / name).exists(), name


def _flush_parksim_handlers():
    for handler in logging.getLogger("parksim").handlers:
        handler.flush()


def test_log_file_flag(tmp_path, capsys):
    log_file = tmp_path / "day.log"
    code = main(["--method", "lcg", "--seed", "3", "--end", "07:00", "-v", "--log-file", str(log_file)])
    _flush_parksim_handlers()

    assert code == 0
    content = log_file.read_text()
    assert "Simulation started at 06:00" in content
    assert "parked in" in content
    assert "Simulation finished at 07:00" in content
    assert "parked in" not in capsys.readouterr().err


def test_log_json_flag(tmp_path):
    log_file = tmp_path / "day.jsonl"
    code = main(["--method", "lcg", "--seed", "3", "--end", "07:00", "--log-json", "--log-file", str(log_file)])
    _flush_parksim_handlers()

    assert code == 0
    records = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert records[0]["logger"] == "parksim.core.engine"
    assert records[-1]["message"] == "Simulation finished at 07:00"
    assert {r["level"] for r in records} == {"INFO"}
