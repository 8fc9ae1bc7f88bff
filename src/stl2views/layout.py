"""Placement of the six views on a drawing sheet."""

from dataclasses import dataclass
from typing import Tuple
from .projection import BBox, VIEW_NAMES

Cell = Tuple[float, float, float, float]

@dataclass(frozen=True)
class ViewTransform:
    """Uniform scale plus offset from view coordinates to sheet coordinates.

    The sheet y axis points down, so view y is flipped.
    """
    scale: float
    offset_x: float
    offset_y: float

    def apply(self, point: Tuple[float, float]) -> Tuple[float, float]:
        x, y = point
        return (self.offset_x + x * self.scale, self.offset_y - y * self.scale)


class SheetLayout:
    """Grid layout of the views on a sheet."""

    def __init__(self, width: float, height: float, columns: int = 3, rows: int = 2,
                 margin: float = 20.0, caption_height: float = 16.0):
        """Initialize the sheet layout.

        Args:
            width: Sheet width
            height: Sheet height
            columns: Number of cells per row
            rows: Number of rows
            margin: Space kept around every cell
            caption_height: Space reserved above each view for its label
        """
        if columns * rows < len(VIEW_NAMES):
            raise ValueError(f"A {columns}x{rows} grid cannot hold {len(VIEW_NAMES)} views")
        self.width = width
        self.height = height
        self.columns = columns
        self.rows = rows
        self.margin = margin
        self.caption_height = caption_height

    def cell(self, index: int) -> Cell:
        """Drawing area ``(x, y, width, height)`` of the view at ``index``."""
        cell_w = self.width / self.columns
        cell_h = self.height / self.rows
        col = index % self.columns
        row = index // self.columns
        x = col * cell_w + self.margin
        y = row * cell_h + self.margin + self.caption_height
        w = max(cell_w - 2 * self.margin, 0.0)
        h = max(cell_h - 2 * self.margin - self.caption_height, 0.0)
        return (x, y, w, h)

    def caption_position(self, index: int) -> Tuple[float, float]:
        x, y, w, _ = self.cell(index)
        return (x + w / 2, y - self.caption_height / 2)

    @staticmethod
    def fit(bbox: BBox, cell: Cell) -> ViewTransform:
        """Scale ``bbox`` uniformly into ``cell`` and centre it there."""
        xmin, ymin, xmax, ymax = bbox
        x, y, w, h = cell
        scale = min(w / (xmax - xmin), h / (ymax - ymin))
        offset_x = x + w / 2 - (xmin + xmax) / 2 * scale
        offset_y = y + h / 2 + (ymin + ymax) / 2 * scale
        return ViewTransform(scale, offset_x, offset_y)
