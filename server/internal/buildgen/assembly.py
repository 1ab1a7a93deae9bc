"""
Footprint-to-mesh assembly.

Walks the occupied cells of a footprint, draws a storey count for each and
emits one wall box and one hip roof per cell into a shared two-submesh mesh.
Vertex positions are local to the building origin.
"""

import logging
from typing import Any, Dict, List, Tuple

from . import geometry
from .footprints import Footprint
from .seeds import RandomStream

logger = logging.getLogger(__name__)

# Cell heights are drawn from the integer range [MIN_HEIGHT, MAX_HEIGHT).
MIN_HEIGHT = 1
MAX_HEIGHT = 4

WALL_SUBMESH = 0
ROOF_SUBMESH = 1

Cell = Tuple[int, int]


class Mesh:
    """Vertex/UV buffers with two independent triangle submeshes (walls, roofs)."""

    def __init__(
        self,
        vertices: List[geometry.Vec3],
        uvs: List[geometry.Vec2],
        wall_indices: List[int],
        roof_indices: List[int],
    ):
        if len(uvs) != len(vertices):
            raise ValueError(f"{len(uvs)} UVs for {len(vertices)} vertices")
        self.vertices = vertices
        self.uvs = uvs
        self.submeshes: List[List[int]] = [wall_indices, roof_indices]
        self.normals = geometry.compute_vertex_normals(vertices, self.submeshes)

    @property
    def wall_indices(self) -> List[int]:
        return self.submeshes[WALL_SUBMESH]

    @property
    def roof_indices(self) -> List[int]:
        return self.submeshes[ROOF_SUBMESH]

    @property
    def vertex_count(self) -> int:
        return len(self.vertices)

    @staticmethod
    def _triples(indices: List[int]) -> List[Tuple[int, int, int]]:
        return [tuple(indices[i:i + 3]) for i in range(0, len(indices), 3)]

    def wall_triangles(self) -> List[Tuple[int, int, int]]:
        return self._triples(self.wall_indices)

    def roof_triangles(self) -> List[Tuple[int, int, int]]:
        return self._triples(self.roof_indices)

    def bounds(self) -> Tuple[geometry.Vec3, geometry.Vec3]:
        """Axis-aligned (min, max) corners of all vertices."""
        xs = [v[0] for v in self.vertices]
        ys = [v[1] for v in self.vertices]
        zs = [v[2] for v in self.vertices]
        return (min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vertices": [list(v) for v in self.vertices],
            "uvs": [list(uv) for uv in self.uvs],
            "normals": [list(n) for n in self.normals],
            "walls": [list(t) for t in self.wall_triangles()],
            "roofs": [list(t) for t in self.roof_triangles()],
        }


def assemble_footprint(footprint: Footprint, stream: RandomStream) -> Tuple[Mesh, Dict[Cell, float]]:
    """
    Build the wall and roof mesh for a footprint.

    One height draw per occupied cell, in row-major order.

    Args:
        footprint: Occupancy grid
        stream: Shared random stream

    Returns:
        (mesh, heights) where heights maps (row, col) to the cell's wall height
    """
    vertices: List[geometry.Vec3] = []
    uvs: List[geometry.Vec2] = []
    wall_indices: List[int] = []
    roof_indices: List[int] = []
    heights: Dict[Cell, float] = {}

    for row, col in footprint.occupied_cells():
        height = float(stream.randrange(MIN_HEIGHT, MAX_HEIGHT))
        base = (col, 0, row)

        geometry.build_cube(base, height, vertices, wall_indices, uvs)
        geometry.build_hip_roof(base, height, vertices, roof_indices, uvs)

        heights[(row, col)] = height

    mesh = Mesh(vertices, uvs, wall_indices, roof_indices)
    logger.debug(
        "Assembled %d cells: %d vertices, %d wall / %d roof triangles",
        len(heights),
        mesh.vertex_count,
        len(wall_indices) // 3,
        len(roof_indices) // 3,
    )
    return mesh, heights
