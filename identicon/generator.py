"""
Core identicon generation.
Maps a byte digest to a small, vertically mirrored, two-color raster.

Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List, Sequence

from PIL import Image

from .color import RGBColor, synthesize_palette


@dataclass(frozen=True)
class IdenticonConfig:
    """Layout and color constants for identicon generation."""

    rows: int = 5
    palette_size: int = 2
    color_segment_len: int = 7
    saturation: float = 0.5
    lightness_base: float = 0.3
    lightness_step: float = 0.5

    def __post_init__(self) -> None:
        # the mirror fold only reflects about a center column
        if self.rows < 1 or self.rows % 2 == 0:
            raise ValueError(f"rows must be a positive odd number, got {self.rows}")
        if self.palette_size < 1:
            raise ValueError(f"palette_size must be at least 1, got {self.palette_size}")
        if self.color_segment_len < 2:
            raise ValueError(
                f"color_segment_len must be at least 2, got {self.color_segment_len}"
            )

    @property
    def active_cols(self) -> int:
        """Distinct columns before mirroring, ceil(rows / 2)."""
        return (self.rows + 1) // 2

    @property
    def min_len(self) -> int:
        """Smallest digest length that keeps grid and color bytes disjoint."""
        return self.active_cols * self.rows + self.palette_size * self.color_segment_len


DEFAULT_CONFIG = IdenticonConfig()


class IdenticonError(ValueError):
    """Base class for rejected identicon inputs."""


class HashTooShort(IdenticonError):
    """The digest has fewer bytes than the configuration requires."""


class InvalidSize(IdenticonError):
    """The size factor is below 1."""


class LogicalGrid:
    """Palette indices for the unmirrored rows x cols cells, addressed as grid[row, col]."""

    def __init__(self, rows: int, cols: int):
        self.rows = rows
        self.cols = cols
        self._cells: List[int] = [0] * (rows * cols)

    def _offset(self, row: int, col: int) -> int:
        assert 0 <= row < self.rows, f"row {row} out of range"
        assert 0 <= col < self.cols, f"col {col} out of range"
        return row * self.cols + col

    def __getitem__(self, cell) -> int:
        row, col = cell
        return self._cells[self._offset(row, col)]

    def __setitem__(self, cell, palette_index: int) -> None:
        row, col = cell
        self._cells[self._offset(row, col)] = palette_index

    def to_rows(self) -> List[List[int]]:
        return [
            [self[row, col] for col in range(self.cols)]
            for row in range(self.rows)
        ]


def assign_grid(digest: Sequence[int], config: IdenticonConfig = DEFAULT_CONFIG) -> LogicalGrid:
    """
    Fill the grid column by column from the head of the digest.

    Byte ``x`` lands at row ``x % rows``, column ``x // rows`` and selects
    palette entry ``digest[x] % palette_size``.
    """
    grid = LogicalGrid(config.rows, config.active_cols)
    for x in range(config.rows * config.active_cols):
        col, row = divmod(x, config.rows)
        grid[row, col] = digest[x] % config.palette_size
    return grid


def mirror_column(col_full: int, rows: int) -> int:
    """
    Fold a raster column onto its logical column.

    Floor division on a signed value before the absolute value, so for five
    rows columns 0..4 map to 2, 1, 0, 1, 2.
    """
    return abs((col_full * 2 - (rows - 1)) // 2)


def rasterize(
    grid: LogicalGrid,
    palette: Sequence[RGBColor],
    size_factor: int,
) -> Image.Image:
    """
    Expand the logical grid into an RGB image of side ``rows * size_factor``.

    Each cell becomes one uniform ``size_factor`` square block.
    """
    side = grid.rows * size_factor
    image = Image.new("RGB", (side, side))
    for row in range(grid.rows):
        top = row * size_factor
        for col_full in range(grid.rows):
            color = palette[grid[row, mirror_column(col_full, grid.rows)]]
            left = col_full * size_factor
            image.paste(color, (left, top, left + size_factor, top + size_factor))
    return image


def generate_identicon(
    digest: Sequence[int],
    size_factor: int,
    config: IdenticonConfig = DEFAULT_CONFIG,
) -> Image.Image:
    """
    Generate an identicon from a digest.

    Args:
        digest: Hash bytes supplied by the caller, at least ``config.min_len`` long
        size_factor: Pixels per logical cell, at least 1
        config: Layout and color constants

    Returns:
        A square PIL image in RGB mode with side ``config.rows * size_factor``

    Raises:
        HashTooShort: If the digest is shorter than ``config.min_len``
        InvalidSize: If ``size_factor`` is below 1
    """
    if len(digest) < config.min_len:
        raise HashTooShort(
            f"Digest must be at least {config.min_len} bytes. Got: {len(digest)}"
        )
    if size_factor < 1:
        raise InvalidSize(f"Size factor must be at least 1. Got: {size_factor}")

    digest = bytes(digest)
    palette = synthesize_palette(
        digest,
        palette_size=config.palette_size,
        segment_len=config.color_segment_len,
        saturation=config.saturation,
        lightness_base=config.lightness_base,
        lightness_step=config.lightness_step,
    )
    grid = assign_grid(digest, config)
    return rasterize(grid, palette, size_factor)
