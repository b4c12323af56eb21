"""Subprocess runner and binary lookup for ffmpeg/ffprobe."""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def run_command(
    cmd: list[str],
    cwd: Path | None = None,
    timeout: float | None = None,
    check: bool = True,
) -> subprocess.CompletedProcess:
    """Run an external command with logging and error handling."""
    cmd_str = " ".join(cmd)
    logger.debug(f"Running: {cmd_str}")

    result = subprocess.run(
        cmd,
        cwd=cwd,
        capture_output=True,
        text=True,
        timeout=timeout,
        check=False,
    )

    if result.stderr:
        logger.debug(f"stderr: {result.stderr[-500:]}")

    if check and result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode, cmd_str, result.stdout, result.stderr
        )
    return result


def resolve_binary(name: str, bin_dir: Path | None = None) -> str:
    """Prefer a bundled binary under ``bin_dir``, else whatever is on PATH.

    Falls back to the bare name so the eventual failure is reported by the
    step that tries to run it.
    """
    if Path(name).parent != Path("."):
        return name
    if bin_dir is not None:
        exe = f"{name}.exe" if sys.platform == "win32" else name
        bundled = Path(bin_dir) / exe
        if bundled.is_file():
            return str(bundled)
    return shutil.which(name) or name
