"""Orthographic projections with hidden line removal."""

import logging
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple
from .geometry import (
    Line2D, Point2D, Vector3, point_to_segment_distance, round_half_up
)
from .mesh import Face, Mesh

logger = logging.getLogger(__name__)

VIEW_NAMES: Tuple[str, ...] = ('front', 'back', 'left', 'right', 'top', 'bottom')

VIEW_DIRECTIONS: Dict[str, Vector3] = {
    'front': Vector3(0.0, 0.0, -1.0),
    'back': Vector3(0.0, 0.0, 1.0),
    'left': Vector3(1.0, 0.0, 0.0),
    'right': Vector3(-1.0, 0.0, 0.0),
    'top': Vector3(0.0, -1.0, 0.0),
    'bottom': Vector3(0.0, 1.0, 0.0),
}

VIEW_LABELS: Dict[str, str] = {
    'front': 'Front (−Z)',
    'back': 'Back (+Z)',
    'left': 'Left (+X)',
    'right': 'Right (−X)',
    'top': 'Top (−Y)',
    'bottom': 'Bottom (+Y)',
}

EPSILON = 1e-6
DECIMALS = 6
PADDING = 0.05
EMPTY_BBOX = (0.0, 0.0, 1.0, 1.0)

BBox = Tuple[float, float, float, float]
Segment = Tuple[Tuple[float, float], Tuple[float, float]]

@dataclass
class Edge:
    """Undirected mesh edge with the faces that share it."""
    v0: Vector3
    v1: Vector3
    faces: List[Face] = field(default_factory=list)

@dataclass(frozen=True)
class ProjectionView:
    """One named 2D drawing: visible segments and a padded bounding box."""
    name: str
    lines: Tuple[Segment, ...]
    bbox: BBox

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'lines': [[list(p0), list(p1)] for p0, p1 in self.lines],
            'bbox': list(self.bbox),
        }


def _check_view(view: str) -> None:
    if view not in VIEW_DIRECTIONS:
        raise ValueError(f"Unknown view {view!r}; expected one of {', '.join(VIEW_NAMES)}")


# Drawing x/y per view, looking into the model along the view direction.
_PROJECTIONS: Dict[str, Callable[[Vector3], Point2D]] = {
    'front': lambda p: Point2D(p.x, p.y),
    'back': lambda p: Point2D(-p.x, p.y),
    'left': lambda p: Point2D(-p.z, p.y),
    'right': lambda p: Point2D(p.z, p.y),
    'top': lambda p: Point2D(p.x, -p.z),
    'bottom': lambda p: Point2D(p.x, p.z),
}


def project_point(point: Vector3, view: str) -> Point2D:
    """Map a 3D point to drawing coordinates for ``view``."""
    _check_view(view)
    return _PROJECTIONS[view](point)


def is_front_facing(face: Face, direction: Vector3) -> bool:
    """True when the face normal points along ``direction``; grazing faces are not."""
    return face.normal.dot(direction) > 0


def extract_edges(mesh: Mesh) -> Dict[Tuple[int, int], Edge]:
    """Index every undirected edge of the mesh with its incident faces.

    The key is the smaller of the two ordered endpoint pairs. Each edge keeps
    the endpoint order of the face that introduced it.
    """
    edges: Dict[Tuple[int, int], Edge] = OrderedDict()
    for face in mesh.faces:
        a, b, c = face.vertices
        for va, vb in ((a, b), (b, c), (c, a)):
            key = min((va, vb), (vb, va))
            edge = edges.get(key)
            if edge is None:
                edges[key] = Edge(mesh.vertices[va], mesh.vertices[vb], [face])
            else:
                edge.faces.append(face)
    return edges


def is_edge_visible(edge: Edge, direction: Vector3) -> bool:
    """Boundary edges follow their face; shared edges must be silhouettes.

    Edges with three or more faces (non-manifold input) are never visible.
    """
    if len(edge.faces) == 1:
        return is_front_facing(edge.faces[0], direction)
    if len(edge.faces) == 2:
        front = sum(1 for f in edge.faces if is_front_facing(f, direction))
        return front == 1
    return False


def round_coordinates(lines: List[Line2D], decimals: int = DECIMALS) -> List[Line2D]:
    """Round every endpoint coordinate to ``decimals`` places (ties round up)."""
    factor = 10 ** decimals

    def snap(p: Point2D) -> Point2D:
        return Point2D(round_half_up(p.x, factor) / factor,
                       round_half_up(p.y, factor) / factor)

    return [Line2D(snap(line.p0), snap(line.p1)) for line in lines]


def _direction_key(line: Line2D) -> Tuple[int, int]:
    # unit direction at six decimal places
    length = line.length()
    dx = (line.p1.x - line.p0.x) / length
    dy = (line.p1.y - line.p0.y) / length
    return (round_half_up(dx, 1e6), round_half_up(dy, 1e6))


def merge_collinear_segments(lines: List[Line2D], epsilon: float = EPSILON) -> List[Line2D]:
    """Join collinear runs of segments that share a direction bucket.

    Segments shorter than ``epsilon`` are dropped. This is a heuristic: it
    only merges segments whose rounded unit directions are identical.
    """
    groups: Dict[Tuple[int, int], List[Line2D]] = OrderedDict()
    for line in lines:
        if line.length() < epsilon:
            continue
        groups.setdefault(_direction_key(line), []).append(line)

    merged: List[Line2D] = []
    for group in groups.values():
        ordered = sorted(group, key=lambda l: l.p0.x + l.p0.y)
        start, end = ordered[0].p0, ordered[0].p1

        for line in ordered[1:]:
            # incoming start on the line from the chain end to its far endpoint
            if point_to_segment_distance(line.p0, end, line.p1) < epsilon:
                if end.distance_to(line.p1) > end.distance_to(line.p0):
                    end = line.p1
                else:
                    end = line.p0
            else:
                merged.append(Line2D(start, end))
                start, end = line.p0, line.p1

        merged.append(Line2D(start, end))

    return merged


def calculate_bbox(lines: List[Line2D], padding: float = PADDING) -> BBox:
    """Padded ``(xmin, ymin, xmax, ymax)`` around the segment endpoints."""
    if not lines:
        return EMPTY_BBOX

    xs = [c for line in lines for c in (line.p0.x, line.p1.x)]
    ys = [c for line in lines for c in (line.p0.y, line.p1.y)]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)

    pad_x = (max_x - min_x) * padding or 0.5
    pad_y = (max_y - min_y) * padding or 0.5
    return (min_x - pad_x, min_y - pad_y, max_x + pad_x, max_y + pad_y)


class ProjectionEngine:
    """Compute the six canonical orthographic views of a mesh."""

    def __init__(self, epsilon: float = EPSILON, decimals: int = DECIMALS,
                 padding: float = PADDING):
        """Initialize the engine.

        Args:
            epsilon: Tolerance for segment length and collinearity tests
            decimals: Decimal places kept when rounding projected coordinates
            padding: Fraction of each bounding box span added on both sides
        """
        self.epsilon = epsilon
        self.decimals = decimals
        self.padding = padding

    def visible_edges(self, mesh: Mesh, view: str) -> List[Line2D]:
        """Project the edges of ``mesh`` that are visible from ``view``."""
        _check_view(view)
        direction = VIEW_DIRECTIONS[view]
        project = _PROJECTIONS[view]

        return [
            Line2D(project(edge.v0), project(edge.v1))
            for edge in extract_edges(mesh).values()
            if is_edge_visible(edge, direction)
        ]

    def project_view(self, mesh: Mesh, view: str) -> ProjectionView:
        """Build the finished drawing for a single view."""
        lines = self.visible_edges(mesh, view)
        visible = len(lines)
        lines = round_coordinates(lines, self.decimals)
        lines = merge_collinear_segments(lines, self.epsilon)
        logger.debug("%s view: %d visible edges merged into %d lines",
                     view, visible, len(lines))

        return ProjectionView(
            name=view,
            lines=tuple((line.p0.as_tuple(), line.p1.as_tuple()) for line in lines),
            bbox=calculate_bbox(lines, self.padding),
        )

    def generate_projections(self, mesh: Mesh,
                             max_workers: Optional[int] = None) -> List[ProjectionView]:
        """Compute all six views, always returned in ``VIEW_NAMES`` order.

        Args:
            mesh: Normalised mesh to project
            max_workers: When given, views are computed on a thread pool of
                this size
        """
        if max_workers:
            with ThreadPoolExecutor(max_workers=max_workers) as pool:
                futures = [pool.submit(self.project_view, mesh, view) for view in VIEW_NAMES]
                return [future.result() for future in futures]
        return [self.project_view(mesh, view) for view in VIEW_NAMES]


def generate_projections(mesh: Mesh, max_workers: Optional[int] = None) -> List[ProjectionView]:
    """Compute the six views of ``mesh`` with the default engine settings."""
    return ProjectionEngine().generate_projections(mesh, max_workers)
