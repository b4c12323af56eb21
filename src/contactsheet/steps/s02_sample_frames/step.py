"""Step 02: Extract evenly spaced stills with one ffmpeg call per timestamp."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import ClassVar

from contactsheet.core.contracts import VideoDescriptor
from contactsheet.core.errors import SampleFailure
from contactsheet.core.step_base import BaseStep
from contactsheet.utils.subprocess_utils import run_command
from .config import SampleConfig
from .contracts import FrameStill, SampleInput, SampleOutput

logger = logging.getLogger(__name__)


def sample_timestamps(duration: float, frame_count: int) -> list[float]:
    """``duration * i / frame_count`` for each i: starts at 0, stays below duration."""
    if frame_count < 1:
        raise ValueError("frame_count must be >= 1")
    duration = max(0.0, duration)
    return [duration * i / frame_count for i in range(frame_count)]


def frame_path(frames_dir: Path, descriptor: VideoDescriptor, index: int) -> Path:
    """Temp file for one still, namespaced by content checksum."""
    return frames_dir / f"{descriptor.checksum_hex}-{index}.png"


class SampleFramesStep(BaseStep[SampleInput, SampleOutput, SampleConfig]):
    name: ClassVar[str] = "sample"
    input_type: ClassVar = SampleInput
    output_type: ClassVar = SampleOutput
    config_type: ClassVar = SampleConfig
    error_type: ClassVar = SampleFailure

    def validate_inputs(self, inputs: SampleInput) -> bool:
        descriptor = inputs.descriptor
        if not descriptor.location.is_file():
            logger.error(f"Video not found: {descriptor.location}")
            return False
        if not descriptor.is_populated:
            logger.error(f"{descriptor.filename} has not been probed")
            return False
        return True

    def extract(self, descriptor: VideoDescriptor, index: int, timestamp: float) -> FrameStill:
        """Extract a single still at ``timestamp``; raises SampleFailure."""
        out_path = frame_path(self.work_dir, descriptor, index)
        # A stale still from an earlier run must not pass for a fresh one.
        out_path.unlink(missing_ok=True)

        width = self.config.frame_width or descriptor.width
        cmd = [
            self.config.binary,
            "-y",
            "-v", "error",
            "-ss", f"{timestamp:f}",
            "-i", str(descriptor.location),
            "-vframes", "1",
            "-vf", f"scale={width}:-1",
            str(out_path),
        ]
        try:
            run_command(cmd, timeout=self.config.timeout)
        except subprocess.CalledProcessError as exc:
            raise SampleFailure(
                f"ffmpeg exited with {exc.returncode} at {timestamp:.3f}s: {(exc.stderr or '').strip()}",
                descriptor.filename,
                index,
            ) from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise SampleFailure(
                f"Could not run ffmpeg at {timestamp:.3f}s: {exc}", descriptor.filename, index
            ) from exc

        if not out_path.is_file():
            raise SampleFailure(
                f"ffmpeg produced no frame at {timestamp:.3f}s", descriptor.filename, index
            )
        return FrameStill(index=index, timestamp=timestamp, path=out_path)

    def run(self, inputs: SampleInput) -> SampleOutput:
        descriptor = inputs.descriptor
        self.work_dir.mkdir(parents=True, exist_ok=True)
        timestamps = sample_timestamps(descriptor.duration, inputs.frame_count)

        stills: list[FrameStill] = []
        failed: list[int] = []
        for index, timestamp in enumerate(timestamps):
            try:
                stills.append(self.extract(descriptor, index, timestamp))
            except SampleFailure as exc:
                logger.warning(f"[sample] {descriptor.filename} frame {index}: {exc}")
                failed.append(index)

        logger.info(
            f"{descriptor.filename}: extracted {len(stills)}/{inputs.frame_count} frames"
        )
        return SampleOutput(
            frames_dir=self.work_dir,
            timestamps=timestamps,
            stills=stills,
            failed_indices=failed,
        )

    def cleanup(self, descriptor: VideoDescriptor, frame_count: int) -> int:
        """Remove leftover stills for ``descriptor``. Returns how many were deleted."""
        removed = 0
        for index in range(frame_count):
            path = frame_path(self.work_dir, descriptor, index)
            if path.is_file():
                path.unlink()
                removed += 1
        return removed
