from __future__ import annotations

import pytest

from setpace.cli.main import build_parser, main


def test_parser_defaults() -> None:
    args = build_parser().parse_args([])

    assert args.rest is None
    assert args.tempo is None
    assert args.reps == 8
    assert args.tick_interval == 1.0


def test_no_action_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out


def test_info_prints_time_under_tension(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--info", "3-0-1-0", "--reps", "10"]) == 0

    out = capsys.readouterr().out
    assert "eccentric=3s" in out
    assert "4s per rep" in out
    assert "40s for 10 reps" in out


def test_info_resolves_presets(capsys: pytest.CaptureFixture[str]) -> None:
    main(["--info", "strength", "--reps", "5"])

    out = capsys.readouterr().out
    assert "Tempo 2-1-X-0" in out
    assert "concentric=1s" in out


def test_rest_countdown_runs_to_completion(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--rest", "2", "--tick-interval", "0.01"]) == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "Rest: 00:02 | progress 0%",
        "Rest: 00:01 | progress 50%",
        "Rest: 00:00 | progress 100%",
        "Rest complete",
    ]


def test_tempo_set_runs_to_completion(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--tempo", "1-0-1-0", "--reps", "2", "--tick-interval", "0.01"]) == 0

    out = capsys.readouterr().out
    assert "Rep 1/2 | Lower" in out
    assert "Rep 2/2 | Lift" in out
    assert out.rstrip().endswith("Set complete: 2 reps")


def test_tick_interval_must_be_positive() -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--rest", "3", "--tick-interval", "0"])
    assert exc_info.value.code == 2
