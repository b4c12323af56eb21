"""Step 01: Read container and stream metadata with ffprobe."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import ClassVar

from pydantic import ValidationError

from contactsheet.core.contracts import VideoDescriptor
from contactsheet.core.errors import ProbeError
from contactsheet.core.step_base import BaseStep
from contactsheet.utils.subprocess_utils import run_command
from .config import ProbeConfig
from .contracts import ProbeInput, ProbeOutput, ProbeResult

logger = logging.getLogger(__name__)


def populate(descriptor: VideoDescriptor, result: ProbeResult) -> VideoDescriptor:
    """Copy duration, geometry and codec from ``result`` into a new descriptor."""
    stream = result.select_video_stream()
    if stream is None:
        raise ProbeError(f"No usable video stream in {descriptor.filename}", descriptor.filename)
    if stream.width < 1 or stream.height < 1:
        raise ProbeError(
            f"Video stream of {descriptor.filename} has no dimensions ({stream.width}x{stream.height})",
            descriptor.filename,
        )
    return descriptor.model_copy(
        update={
            "duration": result.duration_seconds(),
            "width": stream.width,
            "height": stream.height,
            "codec": stream.codec_name,
            "format_name": result.format.format_name,
        }
    )


class ProbeMetadataStep(BaseStep[ProbeInput, ProbeOutput, ProbeConfig]):
    name: ClassVar[str] = "probe"
    input_type: ClassVar = ProbeInput
    output_type: ClassVar = ProbeOutput
    config_type: ClassVar = ProbeConfig
    error_type: ClassVar = ProbeError

    def validate_inputs(self, inputs: ProbeInput) -> bool:
        if not inputs.descriptor.location.is_file():
            logger.error(f"Video not found: {inputs.descriptor.location}")
            return False
        return True

    def probe(self, path: Path) -> ProbeResult:
        """Run ffprobe on ``path`` and parse its JSON report."""
        cmd = [
            self.config.binary,
            "-v", "error",
            "-show_streams",
            "-show_format",
            "-print_format", "json",
            str(path),
        ]
        try:
            result = run_command(cmd, timeout=self.config.timeout)
        except subprocess.CalledProcessError as exc:
            raise ProbeError(
                f"ffprobe exited with {exc.returncode} for {path.name}: {(exc.stderr or '').strip()}",
                path.name,
            ) from exc
        except (OSError, subprocess.TimeoutExpired) as exc:
            raise ProbeError(f"Could not run ffprobe on {path.name}: {exc}", path.name) from exc

        try:
            return ProbeResult.model_validate_json(result.stdout)
        except ValidationError as exc:
            raise ProbeError(f"Unreadable ffprobe output for {path.name}: {exc}", path.name) from exc

    def run(self, inputs: ProbeInput) -> ProbeOutput:
        result = self.probe(inputs.descriptor.location)
        descriptor = populate(inputs.descriptor, result)
        logger.info(
            f"{descriptor.filename}: {descriptor.width}x{descriptor.height} {descriptor.codec}, "
            f"{descriptor.duration:.1f}s ({descriptor.format_name})"
        )
        return ProbeOutput(descriptor=descriptor, probe=result)
