"""Shared pytest fixtures for contactsheet tests.

ffmpeg/ffprobe are replaced by ``FakeTools``, which stands in for
``run_command`` in the probe and sample steps and records every call.
"""

from __future__ import annotations

import json
import os
import re
import subprocess
import threading
import time
from pathlib import Path

import pytest
from PIL import Image

from contactsheet.core.contracts import ContactSheetConfig, VideoDescriptor
from contactsheet.steps.s02_sample_frames.contracts import FrameStill
from contactsheet.steps.s03_compose_sheet.config import ComposeConfig
from contactsheet.utils.io import build_descriptor

FRAME_NAME = re.compile(r"-(\d+)\.png$")


def probe_payload(
    duration: str = "3661.900000",
    format_name: str = "mov,mp4,m4a,3gp,3g2,mj2",
    width: int = 1280,
    height: int = 720,
) -> dict:
    """ffprobe-shaped report with cover art ahead of the real video stream."""
    return {
        "streams": [
            {"index": 0, "codec_type": "video", "codec_name": "mjpeg",
             "width": 300, "height": 300, "avg_frame_rate": "0/0"},
            {"index": 1, "codec_type": "video", "codec_name": "h264",
             "width": width, "height": height, "avg_frame_rate": "30000/1001"},
            {"index": 2, "codec_type": "audio", "codec_name": "aac", "avg_frame_rate": "0/0"},
        ],
        "format": {"duration": duration, "format_name": format_name,
                   "bit_rate": "1500000", "size": "4096"},
    }


def tile_color(index: int) -> tuple[int, int, int]:
    return ((index * 37) % 256, (index * 91 + 40) % 256, 200)


def write_still(path: Path, size: tuple[int, int], color: tuple[int, int, int]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new("RGB", size, color).save(path, format="PNG")
    return path


class FakeTools:
    """Drop-in for ``run_command`` answering ffprobe and ffmpeg invocations."""

    def __init__(self, payload: dict | None = None, aspect: float = 9 / 16, delay: float = 0.0):
        self.payload = payload if payload is not None else probe_payload()
        self.aspect = aspect
        self.delay = delay
        self.fail_indices: set[int] = set()
        self.skip_output_indices: set[int] = set()
        self.probe_returncode = 0
        self.probe_stdout: str | None = None
        self.calls: list[list[str]] = []
        self.intervals: list[tuple[float, float]] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def __call__(self, cmd, cwd=None, timeout=None, check=True):
        with self._lock:
            self.calls.append(list(cmd))
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        start = time.monotonic()
        try:
            if self.delay:
                time.sleep(self.delay)
            if "-show_streams" in cmd:
                return self._probe(cmd)
            return self._extract(cmd)
        finally:
            with self._lock:
                self.in_flight -= 1
                self.intervals.append((start, time.monotonic()))

    def _probe(self, cmd):
        if self.probe_returncode:
            raise subprocess.CalledProcessError(self.probe_returncode, " ".join(cmd), "", "Invalid data")
        stdout = self.probe_stdout if self.probe_stdout is not None else json.dumps(self.payload)
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    def _extract(self, cmd):
        out_path = Path(cmd[-1])
        index = int(FRAME_NAME.search(out_path.name).group(1))
        if index in self.fail_indices:
            raise subprocess.CalledProcessError(1, " ".join(cmd), "", "seek failed")
        if index not in self.skip_output_indices:
            width = int(cmd[cmd.index("-vf") + 1].split("=")[1].split(":")[0])
            write_still(out_path, (width, max(1, round(width * self.aspect))), tile_color(index))
        return subprocess.CompletedProcess(cmd, 0, stdout="", stderr="")

    @property
    def extract_calls(self) -> list[list[str]]:
        return [c for c in self.calls if "-show_streams" not in c]

    @property
    def probe_calls(self) -> list[list[str]]:
        return [c for c in self.calls if "-show_streams" in c]


@pytest.fixture
def fake_tools(monkeypatch) -> FakeTools:
    tools = FakeTools()
    monkeypatch.setattr("contactsheet.steps.s01_probe_metadata.step.run_command", tools)
    monkeypatch.setattr("contactsheet.steps.s02_sample_frames.step.run_command", tools)
    return tools


@pytest.fixture
def make_video(tmp_path: Path):
    """Factory writing a dummy "video" with unique content."""

    def _make(name: str = "clip.mp4", directory: Path | None = None, size: int = 4096) -> Path:
        directory = directory or tmp_path / "videos"
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / name
        path.write_bytes(name.encode() + os.urandom(size))
        return path

    return _make


@pytest.fixture
def compose_config() -> ComposeConfig:
    return ComposeConfig(
        frames_per_row=3, gutter=4, header_height=60, font_size=12, line_height=15, margin=4
    )


@pytest.fixture
def config(tmp_path: Path, compose_config: ComposeConfig) -> ContactSheetConfig:
    return ContactSheetConfig(
        frame_count=6,
        workers=2,
        in_place=False,
        output_dir=tmp_path / "out",
        temp_dir=tmp_path / "frames",
        sample={"frame_width": 32},
        compose=compose_config,
    )


@pytest.fixture
def descriptor(make_video) -> VideoDescriptor:
    """Probed descriptor for a dummy video."""
    path = make_video()
    return build_descriptor(path).model_copy(
        update={"duration": 120.0, "width": 1280, "height": 720, "codec": "h264",
                "format_name": "mov,mp4,m4a,3gp,3g2,mj2"}
    )


@pytest.fixture
def make_stills(tmp_path: Path):
    """Factory writing uniformly sized stills named like the sampler's output."""

    def _make(descriptor: VideoDescriptor, count: int, size=(32, 18), skip=()) -> list[FrameStill]:
        frames_dir = tmp_path / "frames"
        stills = []
        for i in range(count):
            if i in skip:
                continue
            path = write_still(frames_dir / f"{descriptor.checksum_hex}-{i}.png", size, tile_color(i))
            stills.append(FrameStill(index=i, timestamp=float(i), path=path))
        return stills

    return _make
