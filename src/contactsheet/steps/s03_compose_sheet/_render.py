"""Header text rendering: fixed-advance glyph layout and clock formatting."""

from __future__ import annotations

from dataclasses import dataclass

from PIL import ImageColor, ImageDraw, ImageFont

from contactsheet.core.contracts import VideoDescriptor
from .config import ComposeConfig

SECONDS_PER_DAY = 24 * 3600


@dataclass(frozen=True)
class RenderResources:
    """Font and colours, built once and shared read-only by every worker."""

    font: ImageFont.FreeTypeFont | ImageFont.ImageFont
    background: tuple[int, int, int]
    text_color: tuple[int, int, int]

    @classmethod
    def load(cls, config: ComposeConfig) -> RenderResources:
        if config.font_path is not None:
            font = ImageFont.truetype(str(config.font_path), config.font_size)
        else:
            font = ImageFont.load_default(size=config.font_size)
        return cls(
            font=font,
            background=ImageColor.getrgb(config.background)[:3],
            text_color=ImageColor.getrgb(config.text_color)[:3],
        )


def stamp_to_string(stamp: float) -> str:
    """Format seconds as HH:MM:SS, truncating fractions and wrapping at 24h."""
    ts = max(0, int(stamp)) % SECONDS_PER_DAY
    hours, ts = divmod(ts, 3600)
    minutes, seconds = divmod(ts, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def measure_monospace_line(text: str, advance: float) -> float:
    return len(text) * advance


def draw_monospace_line(
    draw: ImageDraw.ImageDraw,
    text: str,
    origin: tuple[float, float],
    font: ImageFont.FreeTypeFont | ImageFont.ImageFont,
    advance: float,
    fill: tuple[int, int, int],
) -> float:
    """Draw ``text`` one glyph per fixed-width cell starting at a left baseline.

    Returns the x coordinate after the last cell.
    """
    x, baseline = origin
    for char in text:
        if not char.isspace():
            draw.text((x, baseline), char, font=font, fill=fill, anchor="ls")
        x += advance
    return x


def header_lines(descriptor: VideoDescriptor) -> list[str]:
    return [
        descriptor.filename,
        f"SHA1: {descriptor.checksum_hex}",
        f"Duration: {stamp_to_string(descriptor.duration)}, "
        f"Dimensions: {descriptor.width}x{descriptor.height}",
    ]
