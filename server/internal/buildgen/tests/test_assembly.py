"""
Tests for footprint mesh assembly.
"""

import sys
from pathlib import Path

# Add server directory to path
server_dir = Path(__file__).parent.parent.parent.parent
sys.path.insert(0, str(server_dir))

import pytest
from internal.buildgen import assembly
from internal.buildgen.footprints import Footprint, FootprintCatalog
from internal.buildgen.seeds import RandomStream

L_SHAPE = Footprint([[1, 0, 0], [1, 1, 1]], name="l_shape")


def test_heights_cover_occupied_cells():
    """One height per occupied cell, drawn from {1, 2, 3}"""
    stream = RandomStream(42)
    _, heights = assembly.assemble_footprint(L_SHAPE, stream)
    assert sorted(heights) == L_SHAPE.occupied_cells()
    assert all(h in (1.0, 2.0, 3.0) for h in heights.values())
    assert stream.draws == len(L_SHAPE.occupied_cells())


@pytest.mark.parametrize("seed", range(20))
def test_heights_in_half_open_range(seed):
    """Heights stay in [1, 4) for every seed"""
    footprint = FootprintCatalog.default().get("rect_3x3")
    _, heights = assembly.assemble_footprint(footprint, RandomStream(seed))
    assert all(assembly.MIN_HEIGHT <= h < assembly.MAX_HEIGHT for h in heights.values())


def test_mesh_totals_per_cell():
    """Each cell adds 21 vertices, 8 wall and 4 roof triangles"""
    mesh, heights = assembly.assemble_footprint(L_SHAPE, RandomStream(3))
    cells = len(heights)
    assert mesh.vertex_count == 21 * cells
    assert len(mesh.uvs) == mesh.vertex_count
    assert len(mesh.normals) == mesh.vertex_count
    assert len(mesh.wall_triangles()) == 8 * cells
    assert len(mesh.roof_triangles()) == 4 * cells


def test_indices_valid_and_submeshes_separate():
    """All indices address existing vertices; walls and roofs never share one"""
    mesh, _ = assembly.assemble_footprint(FootprintCatalog.default().get("step"), RandomStream(11))
    assert all(0 <= i < mesh.vertex_count for i in mesh.wall_indices)
    assert all(0 <= i < mesh.vertex_count for i in mesh.roof_indices)
    assert set(mesh.wall_indices).isdisjoint(mesh.roof_indices)
    assert mesh.submeshes[assembly.WALL_SUBMESH] is mesh.wall_indices
    assert mesh.submeshes[assembly.ROOF_SUBMESH] is mesh.roof_indices


def test_cell_geometry_placement():
    """Cell (row, col) occupies x in [col, col+1], z in [row, row+1]"""
    footprint = Footprint([[0, 0], [0, 1]])
    mesh, heights = assembly.assemble_footprint(footprint, RandomStream(5))
    height = heights[(1, 1)]
    (min_x, min_y, min_z), (max_x, max_y, max_z) = mesh.bounds()
    assert (min_x, min_z, max_x, max_z) == (1.0, 1.0, 2.0, 2.0)
    assert min_y == 0.0
    assert max_y == height + 0.5


def test_wall_uvs_follow_cell_height():
    """The top wall UVs carry the cell's height"""
    footprint = Footprint([[1]])
    mesh, heights = assembly.assemble_footprint(footprint, RandomStream(8))
    assert mesh.uvs[2] == (1.0, heights[(0, 0)])


def test_assembly_is_deterministic():
    """Same seed, same footprint: identical buffers"""
    mesh1, heights1 = assembly.assemble_footprint(L_SHAPE, RandomStream(77))
    mesh2, heights2 = assembly.assemble_footprint(L_SHAPE, RandomStream(77))
    assert mesh1.vertices == mesh2.vertices
    assert mesh1.uvs == mesh2.uvs
    assert mesh1.submeshes == mesh2.submeshes
    assert heights1 == heights2


def test_mesh_to_dict():
    """Serialized mesh groups indices into triangles"""
    mesh, _ = assembly.assemble_footprint(Footprint([[1]]), RandomStream(1))
    data = mesh.to_dict()
    assert len(data["vertices"]) == 21
    assert len(data["walls"]) == 8
    assert len(data["roofs"]) == 4
    assert all(len(t) == 3 for t in data["walls"] + data["roofs"])


def test_mesh_rejects_mismatched_uvs():
    """UVs must stay parallel to vertices"""
    with pytest.raises(ValueError):
        assembly.Mesh([(0.0, 0.0, 0.0)], [], [], [])
