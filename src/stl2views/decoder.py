"""STL decoding: ASCII and binary buffers to a normalised :class:`Mesh`."""

import logging
import re
import struct
from typing import Dict, List, Tuple, Union
import numpy as np
from stl import mesh as stl_mesh
from .errors import (
    DegenerateMeshError, FormatError, ParseError, TruncationError, ZeroSizeError
)
from .geometry import BoundingBox, Vector3
from .mesh import Face, Mesh

logger = logging.getLogger(__name__)

Buffer = Union[bytes, bytearray, memoryview]

HEADER_SIZE = 80
COUNT_SIZE = 4
RECORD_SIZE = 50
DEGENERATE_EPSILON = 1e-10

# numpy-stl's facet record (normal, three vertices, attribute), pinned to
# little-endian so big-endian hosts read the file correctly.
RECORD_DTYPE = stl_mesh.Mesh.dtype.newbyteorder('<')

_NUMBER = r'([-+]?[0-9]*\.?[0-9]+(?:[eE][-+]?[0-9]+)?)'
VERTEX_PATTERN = re.compile(r'vertex\s+' + r'\s+'.join([_NUMBER] * 3))
NORMAL_PATTERN = re.compile(r'facet\s+normal\s+' + r'\s+'.join([_NUMBER] * 3))


def is_ascii_stl(buffer: Buffer) -> bool:
    """Guess the STL flavour from the first five bytes.

    A binary file whose 80-byte header happens to begin with ``solid`` is
    reported as ASCII; such files then fail with :class:`FormatError`.
    """
    header = bytes(buffer[:5]).decode('utf-8', errors='replace').lower()
    return 'solid' in header


class _VertexIndex:
    """Maps exact coordinate tuples to indices in first-seen order."""

    def __init__(self):
        self.vertices: List[Vector3] = []
        self._index: Dict[Tuple[float, float, float], int] = {}

    def add(self, x: float, y: float, z: float) -> int:
        key = (x, y, z)
        idx = self._index.get(key)
        if idx is None:
            idx = len(self.vertices)
            self.vertices.append(Vector3(x, y, z))
            self._index[key] = idx
        return idx


def _build_mesh(vertices: List[Vector3], faces: List[Face]) -> Mesh:
    return Mesh(tuple(vertices), tuple(faces), BoundingBox.from_points(vertices))


class STLDecoder:
    """Decode STL buffers into normalised meshes."""

    def __init__(self, degenerate_epsilon: float = DEGENERATE_EPSILON):
        """Initialize the decoder.

        Args:
            degenerate_epsilon: Triangles whose edge cross product has a
                magnitude at or below this value are dropped
        """
        self.degenerate_epsilon = degenerate_epsilon

    def decode(self, buffer: Buffer) -> Mesh:
        """Run every decoding stage on ``buffer``.

        Raises:
            ParseError: a subclass naming the cause, with the message
                prefixed by ``"STL parsing failed: "``
        """
        try:
            if is_ascii_stl(buffer):
                logger.debug("Detected ASCII STL (%d bytes)", len(buffer))
                text = bytes(buffer).decode('utf-8', errors='replace')
                mesh = self.parse_ascii(text)
            else:
                logger.debug("Detected binary STL (%d bytes)", len(buffer))
                mesh = self.parse_binary(buffer)

            mesh = self.remove_degenerate(mesh)
            return self.normalize(mesh)
        except ParseError as exc:
            raise type(exc)(f"STL parsing failed: {exc}") from exc

    def parse_ascii(self, content: str) -> Mesh:
        """Parse ASCII STL text.

        Vertex triples are taken three at a time; the n-th triangle uses the
        n-th ``facet normal``. When normals run out the last one is reused.
        """
        vertex_matches = VERTEX_PATTERN.findall(content)
        if not vertex_matches:
            raise FormatError("No vertices found in ASCII STL")
        normal_matches = NORMAL_PATTERN.findall(content)

        index = _VertexIndex()
        faces: List[Face] = []
        normal = Vector3(0.0, 0.0, 0.0)
        triangle_count = len(vertex_matches) // 3

        for i in range(triangle_count):
            if i < len(normal_matches):
                normal = Vector3(*(float(n) for n in normal_matches[i]))
            corners = vertex_matches[3 * i:3 * i + 3]
            indices = tuple(index.add(*(float(c) for c in corner)) for corner in corners)
            faces.append(Face(indices, normal))

        if len(vertex_matches) % 3:
            logger.warning("Ignoring %d trailing vertices that do not form a triangle",
                           len(vertex_matches) % 3)

        logger.debug("ASCII STL: %d triangles, %d unique vertices",
                     len(faces), len(index.vertices))
        return _build_mesh(index.vertices, faces)

    def parse_binary(self, buffer: Buffer) -> Mesh:
        """Parse a binary STL buffer (80-byte header, count, 50-byte records)."""
        if len(buffer) < HEADER_SIZE + COUNT_SIZE:
            raise FormatError("Binary STL file too small")

        (count,) = struct.unpack_from('<I', buffer, HEADER_SIZE)
        expected = HEADER_SIZE + COUNT_SIZE + count * RECORD_SIZE
        if len(buffer) < expected:
            raise TruncationError(
                f"Binary STL truncated: expected {expected} bytes, got {len(buffer)}"
            )

        records = np.frombuffer(buffer, dtype=RECORD_DTYPE, count=count,
                                offset=HEADER_SIZE + COUNT_SIZE)
        normals = records['normals'].astype(np.float64).tolist()
        vectors = records['vectors'].astype(np.float64).tolist()

        index = _VertexIndex()
        faces: List[Face] = []
        for normal, corners in zip(normals, vectors):
            indices = tuple(index.add(*corner) for corner in corners)
            faces.append(Face(indices, Vector3(*normal)))

        logger.debug("Binary STL: %d triangles, %d unique vertices",
                     len(faces), len(index.vertices))
        return _build_mesh(index.vertices, faces)

    def remove_degenerate(self, mesh: Mesh) -> Mesh:
        """Drop zero-area faces.

        The vertex list and bounds are kept whole, so vertices used only by
        dropped faces still take part in normalisation.
        """
        if not mesh.faces:
            raise DegenerateMeshError("No valid faces in STL")

        points = mesh.vertex_array()
        indices = np.array([f.vertices for f in mesh.faces], dtype=np.int64)
        v0, v1, v2 = (points[indices[:, k]] for k in range(3))
        areas = np.linalg.norm(np.cross(v1 - v0, v2 - v0), axis=1)
        keep = areas > self.degenerate_epsilon

        dropped = int(np.count_nonzero(~keep))
        if dropped:
            logger.info("Removed %d degenerate triangles", dropped)
        if not keep.any():
            raise DegenerateMeshError("No valid faces in STL")

        faces = tuple(face for face, valid in zip(mesh.faces, keep) if valid)
        return Mesh(mesh.vertices, faces, mesh.bounds)

    def normalize(self, mesh: Mesh) -> Mesh:
        """Centre the mesh on the origin and scale its largest extent to 1."""
        size = max(mesh.bounds.size())
        if size == 0:
            raise ZeroSizeError("Mesh has zero size")

        center = np.array(mesh.bounds.center().as_tuple())
        scale = 1 / size
        points = (mesh.vertex_array() - center) * scale
        vertices = [Vector3(*p) for p in points.tolist()]
        return _build_mesh(vertices, list(mesh.faces))


def parse_stl(buffer: Buffer) -> Mesh:
    """Decode an ASCII or binary STL buffer with the default settings."""
    return STLDecoder().decode(buffer)


def load_stl(filename: str) -> Mesh:
    """Read and decode the STL file at ``filename``."""
    with open(filename, 'rb') as fh:
        return parse_stl(fh.read())
