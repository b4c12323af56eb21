"""I/O contracts for Step 01: ffprobe metadata."""

from __future__ import annotations

from pydantic import BaseModel, Field

from contactsheet.core.contracts import VideoDescriptor

DEGENERATE_FRAME_RATE = "0/0"


class ProbeStream(BaseModel):
    index: int = 0
    codec_type: str = ""
    codec_name: str = ""
    width: int = 0
    height: int = 0
    avg_frame_rate: str = DEGENERATE_FRAME_RATE


class ProbeFormat(BaseModel):
    duration: str = ""
    format_name: str = ""
    bit_rate: str = ""
    size: str = ""


class ProbeResult(BaseModel):
    """Parsed ``ffprobe -show_streams -show_format -print_format json`` output."""

    streams: list[ProbeStream] = Field(default_factory=list)
    format: ProbeFormat = Field(default_factory=ProbeFormat)

    def select_video_stream(self) -> ProbeStream | None:
        """First video stream with a real frame rate (cover art reports 0/0)."""
        for stream in self.streams:
            if stream.codec_type == "video" and stream.avg_frame_rate != DEGENERATE_FRAME_RATE:
                return stream
        return None

    def duration_seconds(self) -> float:
        """Container duration in seconds; unparsable values read as 0."""
        try:
            return float(self.format.duration)
        except ValueError:
            return 0.0


class ProbeInput(BaseModel):
    descriptor: VideoDescriptor = Field(..., description="Video to probe")


class ProbeOutput(BaseModel):
    descriptor: VideoDescriptor = Field(..., description="Descriptor with duration and geometry filled in")
    probe: ProbeResult = Field(..., description="Raw prober report")
