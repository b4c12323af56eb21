"""I/O contracts for Step 03: Contact sheet composition."""

from pathlib import Path

from pydantic import BaseModel, Field

from contactsheet.core.contracts import VideoDescriptor
from contactsheet.steps.s02_sample_frames.contracts import FrameStill


class ComposeInput(BaseModel):
    descriptor: VideoDescriptor = Field(..., description="Populated video descriptor")
    frame_count: int = Field(..., ge=1, description="Number of frames that were requested")
    stills: list[FrameStill] = Field(default_factory=list, description="Extracted stills")
    output_path: Path = Field(..., description="Where the PNG sheet is written")


class ComposeOutput(BaseModel):
    output_path: Path = Field(..., description="Written contact sheet")
    width: int = Field(..., description="Sheet width in pixels")
    height: int = Field(..., description="Sheet height in pixels")
    rows: int = Field(..., description="Number of grid rows")
    frame_count: int = Field(..., description="Number of tiles drawn")
