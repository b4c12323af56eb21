"""Configuration for Step 02: Frame sampling."""

from pydantic import BaseModel, ConfigDict, Field


class SampleConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    binary: str = Field("ffmpeg", description="ffmpeg executable name or path")
    frame_width: int = Field(854, ge=0, description="Tile width in pixels (0 = native video width)")
    timeout: float | None = Field(None, description="Per-frame subprocess timeout in seconds")
