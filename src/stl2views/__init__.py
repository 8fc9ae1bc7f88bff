"""Six-view orthographic line drawings from STL meshes."""

from stl2views.core import ProcessingResult, convert_stl_file, process_stl
from stl2views.decoder import STLDecoder, is_ascii_stl, load_stl, parse_stl
from stl2views.errors import (
    DegenerateMeshError, FormatError, ParseError, ProcessingError,
    STLViewsError, TruncationError, ZeroSizeError
)
from stl2views.geometry import BoundingBox, Line2D, Point2D, Vector3
from stl2views.mesh import Face, Mesh
from stl2views.projection import (
    VIEW_NAMES, ProjectionEngine, ProjectionView, generate_projections
)
from stl2views.export import SVGExporter

__version__ = "0.1.0"
__all__ = [
    "process_stl",
    "convert_stl_file",
    "ProcessingResult",
    "parse_stl",
    "load_stl",
    "is_ascii_stl",
    "STLDecoder",
    "generate_projections",
    "ProjectionEngine",
    "ProjectionView",
    "VIEW_NAMES",
    "SVGExporter",
    "Mesh",
    "Face",
    "Vector3",
    "Point2D",
    "Line2D",
    "BoundingBox",
    "STLViewsError",
    "ParseError",
    "FormatError",
    "TruncationError",
    "DegenerateMeshError",
    "ZeroSizeError",
    "ProcessingError",
]
