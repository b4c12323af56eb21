"""Grid layout of a contact sheet.

The layout is a pure function of frame count, frames per row, tile size,
gutter and header height. Rows are ceiling-divided so a partial last row
still gets its own band of canvas.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SheetGeometry:
    frame_count: int
    frames_per_row: int
    tile_width: int
    tile_height: int
    gutter: int
    header_height: int

    def __post_init__(self) -> None:
        if self.frame_count < 1:
            raise ValueError("frame_count must be >= 1")
        if self.frames_per_row < 1:
            raise ValueError("frames_per_row must be >= 1")
        if self.tile_width < 1 or self.tile_height < 1:
            raise ValueError(f"Invalid tile size {self.tile_width}x{self.tile_height}")

    @property
    def rows(self) -> int:
        return -(-self.frame_count // self.frames_per_row)

    @property
    def width(self) -> int:
        return self.frames_per_row * self.tile_width + (self.frames_per_row + 1) * self.gutter

    @property
    def height(self) -> int:
        return self.header_height + self.rows * self.tile_height + (self.rows + 1) * self.gutter

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def tile_origin(self, index: int) -> tuple[int, int]:
        """Top-left pixel of tile ``index`` (row-major)."""
        if not 0 <= index < self.frame_count:
            raise IndexError(f"Tile {index} outside 0..{self.frame_count - 1}")
        row, col = divmod(index, self.frames_per_row)
        x = self.gutter + col * (self.tile_width + self.gutter)
        y = self.header_height + self.gutter + row * (self.tile_height + self.gutter)
        return x, y
