"""Configuration for Step 03: Contact sheet composition."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class ComposeConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    frames_per_row: int = Field(3, ge=1, description="Number of tiles per grid row")
    gutter: int = Field(20, ge=0, description="Spacing between tiles and around the grid")
    header_height: int = Field(200, ge=0, description="Height of the text header band")
    font_size: int = Field(40, ge=1, description="Header font size in pixels")
    advance_ratio: float = Field(0.9, gt=0, description="Glyph advance as a multiple of font size")
    secondary_advance_scale: float = Field(0.7, gt=0, description="Advance scale for the checksum and duration lines")
    line_height: int = Field(50, ge=1, description="Baseline distance between header lines")
    margin: int = Field(10, ge=0, description="Left and top inset of the header text")
    background: str = Field("#E0EBF5", description="Canvas fill colour")
    text_color: str = Field("#000000", description="Header text colour")
    font_path: Path | None = Field(None, description="TrueType font file (None = Pillow's embedded font)")
