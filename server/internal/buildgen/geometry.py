"""
Per-cell mesh builders: extruded wall box and hip-roof pyramid.

Builders append to caller-supplied vertex/index/UV buffers so many cells can
share one mesh. Index values are absolute, offset by the buffer's vertex count
at the moment the face is emitted.
"""

import math
from typing import List, Optional, Sequence, Tuple

Vec3 = Tuple[float, float, float]
Vec2 = Tuple[float, float]

WALL_VERTICES_PER_CUBE = 16
WALL_INDICES_PER_CUBE = 24
ROOF_VERTICES = 5
ROOF_INDICES = 12

# Roof apex rises this far above the wall top.
ROOF_RISE = 0.5

# Unit-cube corners per wall face, y=1 is scaled by the cell height.
# Order: front (+Z), right (+X), back (-Z), left (-X).
CUBE_FACES: List[Tuple[str, List[Vec3]]] = [
    ("front", [(0, 0, 1), (1, 0, 1), (1, 1, 1), (0, 1, 1)]),
    ("right", [(1, 0, 1), (1, 0, 0), (1, 1, 0), (1, 1, 1)]),
    ("back", [(1, 0, 0), (0, 0, 0), (0, 1, 0), (1, 1, 0)]),
    ("left", [(0, 0, 0), (0, 0, 1), (0, 1, 1), (0, 1, 0)]),
]

# Two triangles per quad, relative to the face's first vertex.
QUAD_TRIANGLES = (0, 1, 2, 0, 2, 3)


def _offset(base: Sequence[float], dx: float, dy: float, dz: float) -> Vec3:
    return (float(base[0] + dx), float(base[1] + dy), float(base[2] + dz))


def build_cube(
    base: Sequence[float],
    height: float,
    vertices: Optional[List[Vec3]] = None,
    wall_indices: Optional[List[int]] = None,
    uvs: Optional[List[Vec2]] = None,
) -> Tuple[List[Vec3], List[int], List[Vec2]]:
    """
    Emit the four vertical wall quads of a unit-footprint box.

    Each face gets its own four vertices (no sharing), so one cube adds
    16 vertices, 24 indices and 16 UVs. V runs 0..height so wall textures
    tile once per storey.

    Args:
        base: Minimum corner of the cell (x, y, z)
        height: Wall height, must be > 0
        vertices: Vertex buffer to append to (new list if None)
        wall_indices: Wall index buffer to append to
        uvs: UV buffer to append to, kept parallel to vertices

    Returns:
        The (vertices, wall_indices, uvs) buffers
    """
    if height <= 0:
        raise ValueError(f"cube height must be positive, got {height}")

    vertices = [] if vertices is None else vertices
    wall_indices = [] if wall_indices is None else wall_indices
    uvs = [] if uvs is None else uvs

    for _name, corners in CUBE_FACES:
        start = len(vertices)
        for cx, cy, cz in corners:
            vertices.append(_offset(base, cx, cy * height, cz))
        wall_indices.extend(start + i for i in QUAD_TRIANGLES)
        uvs.extend([(0.0, 0.0), (1.0, 0.0), (1.0, float(height)), (0.0, float(height))])

    return vertices, wall_indices, uvs


def build_hip_roof(
    base: Sequence[float],
    height: float,
    vertices: Optional[List[Vec3]] = None,
    roof_indices: Optional[List[int]] = None,
    uvs: Optional[List[Vec2]] = None,
) -> Tuple[List[Vec3], List[int], List[Vec2]]:
    """
    Emit a four-sided pyramid capping one cell: apex plus the four top corners.

    Adds 5 vertices, 12 indices and 5 UVs.
    """
    vertices = [] if vertices is None else vertices
    roof_indices = [] if roof_indices is None else roof_indices
    uvs = [] if uvs is None else uvs

    start = len(vertices)
    apex = start
    back_left, back_right, front_right, front_left = start + 1, start + 2, start + 3, start + 4

    vertices.extend([
        _offset(base, 0.5, height + ROOF_RISE, 0.5),
        _offset(base, 0, height, 0),
        _offset(base, 1, height, 0),
        _offset(base, 1, height, 1),
        _offset(base, 0, height, 1),
    ])

    roof_indices.extend([
        apex, back_right, back_left,    # back (-Z)
        apex, front_right, back_right,  # right (+X)
        apex, front_left, front_right,  # front (+Z)
        apex, back_left, front_left,    # left (-X)
    ])

    uvs.extend([
        (0.5, 1.0),
        (0.0, 0.0),
        (1.0, 0.0),
        (1.0, 1.0),
        (0.0, 1.0),
    ])

    return vertices, roof_indices, uvs


def triangle_normal(a: Vec3, b: Vec3, c: Vec3) -> Vec3:
    """Unnormalized normal of triangle abc (length is twice the area)."""
    ux, uy, uz = b[0] - a[0], b[1] - a[1], b[2] - a[2]
    vx, vy, vz = c[0] - a[0], c[1] - a[1], c[2] - a[2]
    return (uy * vz - uz * vy, uz * vx - ux * vz, ux * vy - uy * vx)


def normalize(v: Sequence[float]) -> Vec3:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0:
        return (0.0, 0.0, 0.0)
    return (v[0] / length, v[1] / length, v[2] / length)


def compute_vertex_normals(vertices: Sequence[Vec3], index_lists: Sequence[Sequence[int]]) -> List[Vec3]:
    """
    Area-weighted vertex normals over every triangle in `index_lists`.

    Wall vertices are never shared between faces, so walls come out flat
    shaded. Vertices no triangle references get a zero normal.
    """
    sums = [[0.0, 0.0, 0.0] for _ in vertices]
    for indices in index_lists:
        for i in range(0, len(indices) - 2, 3):
            a, b, c = indices[i], indices[i + 1], indices[i + 2]
            n = triangle_normal(vertices[a], vertices[b], vertices[c])
            for index in (a, b, c):
                acc = sums[index]
                acc[0] += n[0]
                acc[1] += n[1]
                acc[2] += n[2]
    return [normalize(acc) for acc in sums]
