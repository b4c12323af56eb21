"""Load sampled stills and lay them out with a text header on one canvas."""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageDraw

from contactsheet.core.contracts import VideoDescriptor
from contactsheet.core.errors import ComposeError
from contactsheet.steps.s02_sample_frames.contracts import FrameStill
from ._geometry import SheetGeometry
from ._render import RenderResources, draw_monospace_line, header_lines, measure_monospace_line
from .config import ComposeConfig

logger = logging.getLogger(__name__)


@dataclass
class SampledFrame:
    index: int
    timestamp: float
    image: Image.Image


@dataclass
class ContactSheet:
    image: Image.Image
    geometry: SheetGeometry

    def encode(self) -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format="PNG")
        return buffer.getvalue()

    def save(self, path: Path) -> Path:
        """Write the sheet as PNG. Raises ComposeError on I/O failure."""
        try:
            data = self.encode()
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise ComposeError(f"Could not write {path}: {exc}") from exc
        return path


def load_frames(
    descriptor: VideoDescriptor, stills: list[FrameStill], frame_count: int
) -> list[SampledFrame]:
    """Load every still into memory, deleting each temp file once loaded.

    Refuses to continue when any index is missing or a frame's size differs
    from the first one, since the grid is sized from frame 0.
    """
    by_index = {still.index: still for still in stills}
    missing = [i for i in range(frame_count) if i not in by_index or not by_index[i].path.is_file()]
    if missing:
        raise ComposeError(
            f"missing frame(s) {missing} for {descriptor.filename}", descriptor.filename
        )

    frames: list[SampledFrame] = []
    for index in range(frame_count):
        still = by_index[index]
        try:
            with Image.open(still.path) as img:
                img.load()
                image = img.convert("RGB")
        except OSError as exc:
            raise ComposeError(
                f"Unreadable frame {index} for {descriptor.filename}: {exc}", descriptor.filename
            ) from exc
        still.path.unlink()

        if frames and image.size != frames[0].image.size:
            raise ComposeError(
                f"Frame {index} of {descriptor.filename} is {image.size[0]}x{image.size[1]}, "
                f"expected {frames[0].image.size[0]}x{frames[0].image.size[1]}",
                descriptor.filename,
            )
        frames.append(SampledFrame(index=index, timestamp=still.timestamp, image=image))

    logger.info(f"Loaded {len(frames)} frames for {descriptor.filename}")
    return frames


class SheetComposer:
    def __init__(self, config: ComposeConfig, resources: RenderResources):
        self.config = config
        self.resources = resources

    def geometry_for(self, frames: list[SampledFrame]) -> SheetGeometry:
        tile_width, tile_height = frames[0].image.size
        return SheetGeometry(
            frame_count=len(frames),
            frames_per_row=self.config.frames_per_row,
            tile_width=tile_width,
            tile_height=tile_height,
            gutter=self.config.gutter,
            header_height=self.config.header_height,
        )

    def draw_header(self, canvas: Image.Image, descriptor: VideoDescriptor) -> None:
        cfg = self.config
        draw = ImageDraw.Draw(canvas)
        for line_no, text in enumerate(header_lines(descriptor)):
            scale = 1.0 if line_no == 0 else cfg.secondary_advance_scale
            advance = cfg.font_size * scale * cfg.advance_ratio
            baseline = cfg.margin + cfg.font_size + line_no * cfg.line_height
            if measure_monospace_line(text, advance) + cfg.margin > canvas.width:
                logger.debug(f"Header line {line_no} of {descriptor.filename} is clipped")
            draw_monospace_line(
                draw, text, (cfg.margin, baseline), self.resources.font, advance, self.resources.text_color
            )

    def compose(self, descriptor: VideoDescriptor, frames: list[SampledFrame]) -> ContactSheet:
        if not frames:
            raise ComposeError(f"No frames to compose for {descriptor.filename}", descriptor.filename)
        geometry = self.geometry_for(frames)
        logger.info(f"Sheet dimensions for {descriptor.filename}: {geometry.width}x{geometry.height}")

        canvas = Image.new("RGB", geometry.size, self.resources.background)
        self.draw_header(canvas, descriptor)
        for frame in frames:
            canvas.paste(frame.image, geometry.tile_origin(frame.index))
        return ContactSheet(image=canvas, geometry=geometry)
