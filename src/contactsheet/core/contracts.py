"""Common Pydantic models shared across pipeline steps."""

from __future__ import annotations

import base64
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from contactsheet.steps.s01_probe_metadata.config import ProbeConfig
from contactsheet.steps.s02_sample_frames.config import SampleConfig
from contactsheet.steps.s03_compose_sheet.config import ComposeConfig


def default_worker_count() -> int:
    """Number of available CPUs minus one, never below one."""
    return max(1, (os.cpu_count() or 1) - 1)


class VideoDescriptor(BaseModel):
    """One input video. Probing returns a populated copy instead of mutating."""

    model_config = ConfigDict(frozen=True)

    filename: str
    location: Path
    checksum: bytes = Field(..., description="Raw SHA1 digest of the file contents")
    duration: float = 0.0
    width: int = 0
    height: int = 0
    codec: str = ""
    format_name: str = ""

    @property
    def checksum_hex(self) -> str:
        return self.checksum.hex()

    @property
    def is_populated(self) -> bool:
        return self.width >= 1 and self.height >= 1

    @field_serializer("checksum")
    def _serialize_checksum(self, value: bytes) -> dict[str, str]:
        return {"bytes": base64.b64encode(value).decode("ascii"), "hex": value.hex()}


class ContactSheetConfig(BaseModel):
    """Top-level configuration, built once at startup and passed explicitly."""

    model_config = ConfigDict(frozen=True)

    frame_count: int = Field(12, ge=1, description="Frames sampled per sheet")
    workers: int = Field(default_factory=default_worker_count, ge=1, description="Concurrent sheet workers")
    skip_pipe_formats: bool = Field(True, description="Skip inputs whose container format is a pipe")
    write_info: bool = Field(True, description="Write a JSON sidecar next to each sheet")
    in_place: bool = Field(True, description="Write outputs beside the source video")
    output_dir: Path = Field(Path("."), description="Output directory when in_place is false")
    temp_dir: Path | None = Field(None, description="Directory for sampled stills (None = system temp)")
    bin_dir: Path = Field(Path("bin"), description="Directory checked for bundled ffmpeg/ffprobe")
    walk_directories: bool = Field(True, description="Recurse into directories given as inputs")
    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    sample: SampleConfig = Field(default_factory=SampleConfig)
    compose: ComposeConfig = Field(default_factory=ComposeConfig)

    @property
    def frames_dir(self) -> Path:
        return self.temp_dir if self.temp_dir is not None else Path(tempfile.gettempdir())

    def output_path(self, descriptor: VideoDescriptor, suffix: str = ".png") -> Path:
        """Where an artifact for ``descriptor`` goes: ``{filename}{suffix}``."""
        base = descriptor.location.parent if self.in_place else self.output_dir
        return base / f"{descriptor.filename}{suffix}"
