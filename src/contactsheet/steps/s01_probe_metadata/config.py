"""Configuration for Step 01: ffprobe metadata."""

from pydantic import BaseModel, ConfigDict, Field


class ProbeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    binary: str = Field("ffprobe", description="ffprobe executable name or path")
    timeout: float | None = Field(None, description="Subprocess timeout in seconds (None = wait forever)")
