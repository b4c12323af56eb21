"""I/O contracts for Step 02: Frame sampling."""

from pathlib import Path

from pydantic import BaseModel, Field

from contactsheet.core.contracts import VideoDescriptor


class FrameStill(BaseModel):
    index: int = Field(..., ge=0, description="Ordinal position in the grid")
    timestamp: float = Field(..., ge=0, description="Seek offset in seconds")
    path: Path = Field(..., description="Extracted PNG on disk")


class SampleInput(BaseModel):
    descriptor: VideoDescriptor = Field(..., description="Populated video descriptor")
    frame_count: int = Field(..., ge=1, description="Number of frames to sample")


class SampleOutput(BaseModel):
    frames_dir: Path = Field(..., description="Directory holding the extracted stills")
    timestamps: list[float] = Field(default_factory=list, description="All requested sample times")
    stills: list[FrameStill] = Field(default_factory=list, description="Successfully extracted stills, by index")
    failed_indices: list[int] = Field(default_factory=list, description="Indices whose extraction failed")
