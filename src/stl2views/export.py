"""SVG export of the projection views."""

import logging
from typing import List
import svgwrite
from .layout import SheetLayout
from .projection import VIEW_LABELS, ProjectionView

logger = logging.getLogger(__name__)

class SVGExporter:
    """Draw the six views side by side on one SVG sheet."""

    def __init__(self, width_inches: float, height_inches: float, output_file: str, dpi: float = 96.0):
        """Initialize the SVG exporter.

        Args:
            width_inches: SVG canvas width in inches
            height_inches: SVG canvas height in inches
            output_file: Path to output SVG file
            dpi: Dots per inch for conversion (default: 96.0)
        """
        self.width_inches = width_inches
        self.height_inches = height_inches
        self.dpi = dpi
        self.width_px = width_inches * dpi
        self.height_px = height_inches * dpi
        self.output_file = output_file
        self.layout = SheetLayout(self.width_px, self.height_px)
        self.dwg = None

    def new_drawing(self) -> svgwrite.Drawing:
        """Start an empty sheet sized for this exporter."""
        dwg = svgwrite.Drawing(
            self.output_file,
            size=(f"{self.width_inches}in", f"{self.height_inches}in"),
            viewBox=f"0 0 {self.width_px} {self.height_px}"
        )
        dwg.attribs['preserveAspectRatio'] = 'xMidYMid meet'
        return dwg

    def export_views(self, views: List[ProjectionView]) -> None:
        """Draw every view in its sheet cell and save the file."""
        self.dwg = self.new_drawing()
        stroke_width = self.dpi / 96.0

        for index, view in enumerate(views):
            group = self.dwg.g(id=f"view-{view.name}")
            transform = self.layout.fit(view.bbox, self.layout.cell(index))

            for start, end in view.lines:
                group.add(self.dwg.line(
                    start=transform.apply(start),
                    end=transform.apply(end),
                    stroke='black',
                    stroke_width=stroke_width,
                    stroke_linecap='round'
                ))

            group.add(self.dwg.text(
                VIEW_LABELS.get(view.name, view.name),
                insert=self.layout.caption_position(index),
                font_size=12 * (self.dpi / 96.0),
                text_anchor='middle',
                fill='gray'
            ))
            self.dwg.add(group)

        self.dwg.save()
        logger.info("Wrote %d views to %s", len(views), self.output_file)
