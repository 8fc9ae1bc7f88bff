"""Canonical triangle mesh produced by the decoder."""

from dataclasses import dataclass
from typing import Tuple
import numpy as np
from .geometry import BoundingBox, Vector3

@dataclass(frozen=True)
class Face:
    """A triangle as three vertex indices plus the normal read from the file.

    The index order is the winding from the source file.
    """
    vertices: Tuple[int, int, int]
    normal: Vector3

@dataclass(frozen=True)
class Mesh:
    """Deduplicated vertices, the faces that reference them and their bounds."""
    vertices: Tuple[Vector3, ...]
    faces: Tuple[Face, ...]
    bounds: BoundingBox

    def vertex_array(self) -> np.ndarray:
        """Vertices as an ``(n, 3)`` float array."""
        if not self.vertices:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([v.as_tuple() for v in self.vertices], dtype=np.float64)

    def normal_array(self) -> np.ndarray:
        """Face normals as an ``(m, 3)`` float array, in face order."""
        if not self.faces:
            return np.zeros((0, 3), dtype=np.float64)
        return np.array([f.normal.as_tuple() for f in self.faces], dtype=np.float64)

    def face_vertices(self, face: Face) -> Tuple[Vector3, Vector3, Vector3]:
        a, b, c = face.vertices
        return self.vertices[a], self.vertices[b], self.vertices[c]
