"""Tests for the typer CLI."""

from pathlib import Path

from typer.testing import CliRunner

from contactsheet.cli import app

runner = CliRunner()


def test_info_shows_defaults():
    result = runner.invoke(app, ["info"])
    assert result.exit_code == 0
    assert "frame_count" in result.output
    assert "compose.frames_per_row" in result.output


def test_info_bad_config(tmp_path: Path):
    bad = tmp_path / "bad.yaml"
    bad.write_text("frame_count: 0\n")
    result = runner.invoke(app, ["info", "--config", str(bad)])
    assert result.exit_code == 1


def test_run_builds_sheets(fake_tools, make_video, tmp_path: Path):
    video = make_video("talk.mp4")
    out_dir = tmp_path / "sheets"
    result = runner.invoke(app, [
        "run", str(video),
        "--frames", "4", "--frame-width", "32", "--workers", "1",
        "--output-dir", str(out_dir), "--no-in-place", "--no-write-info", "--walk",
    ])
    assert result.exit_code == 0, result.output
    assert (out_dir / "talk.mp4.png").is_file()
    assert not (out_dir / "talk.mp4.json").exists()
    assert len(fake_tools.extract_calls) == 4


def test_run_failure_keeps_exit_status(fake_tools, make_video, tmp_path: Path):
    fake_tools.probe_returncode = 1
    video = make_video("corrupt.mp4")
    result = runner.invoke(app, [
        "run", str(video), "--output-dir", str(tmp_path / "o"),
        "--no-in-place", "--write-info", "--walk",
    ])
    assert result.exit_code == 0
    assert "failed" in result.output


def test_run_unknown_log_level(make_video):
    result = runner.invoke(app, ["run", str(make_video()), "--log-level", "chatty"])
    assert result.exit_code == 1
    assert "Unknown log level" in result.output
