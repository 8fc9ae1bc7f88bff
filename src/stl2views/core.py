"""Pipeline entry point and CLI interface."""

import argparse
import json
import logging
import secrets
import sys
from dataclasses import dataclass
from typing import List, Optional, Union
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from .decoder import parse_stl
from .errors import ProcessingError
from .export import SVGExporter
from .projection import ProjectionView, generate_projections

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one conversion, identified by a random model id."""
    model_id: str
    views: List[ProjectionView]
    success: bool = True

    def to_dict(self) -> dict:
        return {
            'success': self.success,
            'modelId': self.model_id,
            'views': [view.to_dict() for view in self.views],
        }


def new_model_id() -> str:
    return secrets.token_urlsafe(15)


def process_stl(buffer: Union[bytes, bytearray, memoryview],
                max_workers: Optional[int] = None) -> ProcessingResult:
    """Decode an STL buffer and compute its six projection views.

    Args:
        buffer: Complete contents of an ASCII or binary STL file
        max_workers: Thread pool size for the per-view work (sequential if None)

    Raises:
        ProcessingError: for any failure, with the cause in the message
    """
    try:
        mesh = parse_stl(buffer)
        logger.info("Decoded mesh with %d vertices and %d faces",
                    len(mesh.vertices), len(mesh.faces))
        views = generate_projections(mesh, max_workers)
    except Exception as exc:
        raise ProcessingError(f"processing failed: {exc}") from exc

    return ProcessingResult(model_id=new_model_id(), views=views)


def convert_stl_file(
    stl_file: str,
    json_file: Optional[str] = None,
    svg_file: Optional[str] = None,
    width_inches: float = 11.0,
    height_inches: float = 8.5,
    dpi: float = 96.0,
    max_workers: Optional[int] = None
) -> ProcessingResult:
    """Convert an STL file to projection views and write the requested outputs.

    Args:
        stl_file: Path to input STL file
        json_file: Path for the JSON result (skipped if None)
        svg_file: Path for the SVG drawing sheet (skipped if None)
        width_inches: SVG canvas width in inches
        height_inches: SVG canvas height in inches
        dpi: Dots per inch for conversion (default: 96.0)
        max_workers: Thread pool size for the per-view work
    """
    with open(stl_file, 'rb') as fh:
        buffer = fh.read()

    result = process_stl(buffer, max_workers)

    if json_file:
        with open(json_file, 'w', encoding='utf-8') as fh:
            json.dump(result.to_dict(), fh, indent=2)
        logger.info("Wrote projection data to %s", json_file)

    if svg_file:
        exporter = SVGExporter(width_inches, height_inches, svg_file, dpi)
        exporter.export_views(result.views)

    return result


def print_summary(result: ProcessingResult, console: Console) -> None:
    table = Table(title=f"Model {result.model_id}")
    table.add_column("View")
    table.add_column("Lines", justify="right")
    table.add_column("Bounding box")
    for view in result.views:
        bbox = ", ".join(f"{v:.3f}" for v in view.bbox)
        table.add_row(view.name, str(len(view.lines)), f"[{bbox}]")
    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    """Command line interface."""
    parser = argparse.ArgumentParser(
        description='Generate six orthographic line drawings from an STL file'
    )
    parser.add_argument('stl_file', help='Input STL file path')
    parser.add_argument('--json', dest='json_file', help='Write the views as JSON to this path')
    parser.add_argument('--svg', dest='svg_file', help='Write an SVG drawing sheet to this path')
    parser.add_argument(
        '--width',
        type=float,
        default=11.0,
        help='SVG canvas width in inches (default: 11.0 inches - US Letter)'
    )
    parser.add_argument(
        '--height',
        type=float,
        default=8.5,
        help='SVG canvas height in inches (default: 8.5 inches - US Letter)'
    )
    parser.add_argument(
        '--dpi',
        type=float,
        default=96.0,
        help='Dots per inch for rendering (default: 96.0)'
    )
    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Compute the views on this many threads (default: sequential)'
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    console = Console(stderr=True)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)]
    )

    try:
        result = convert_stl_file(
            args.stl_file,
            args.json_file,
            args.svg_file,
            args.width,
            args.height,
            args.dpi,
            args.workers
        )
    except (ProcessingError, OSError) as exc:
        logger.error("%s", exc)
        return 1

    print_summary(result, console)
    return 0

if __name__ == '__main__':
    sys.exit(main())
