"""
Building generation: footprint + position + random stream -> mesh + openings.

Draw order for one building:
    1. footprint index (only when no footprint is supplied)
    2. wall texture coin flip, then roof texture coin flip
    3. one height per occupied cell, row-major
    4. per occupied cell (row-major), per floor, per exterior face in
       FACE_ORDER: outcome draw, then variant draw when an asset is chosen

Batches reuse one stream, so a batch is reproducible as a whole.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .assembly import Cell, Mesh, assemble_footprint
from .faces import exterior_directions
from .footprints import Footprint, FootprintCatalog
from .openings import (
    AssetHost,
    AssetPool,
    Opening,
    OpeningPlacer,
    PlacementWarning,
    SlotKey,
)
from .seeds import RandomStream

logger = logging.getLogger(__name__)

DEFAULT_WALL_TEXTURES = ("wall_brick", "wall_plaster")
DEFAULT_ROOF_TEXTURES = ("roof_tile", "roof_slate")

Vec3 = Tuple[float, float, float]


class MaterialsHint:
    """Texture names for the wall and roof submeshes; binding is up to the host."""

    __slots__ = ("wall_texture", "roof_texture")

    def __init__(self, wall_texture: str, roof_texture: str):
        self.wall_texture = wall_texture
        self.roof_texture = roof_texture

    def to_dict(self) -> Dict[str, str]:
        return {"wall_texture": self.wall_texture, "roof_texture": self.roof_texture}


class Building:
    """Result of one building generation."""

    def __init__(
        self,
        footprint: Footprint,
        position: Vec3,
        mesh: Mesh,
        heights: Dict[Cell, float],
        materials: MaterialsHint,
        openings: List[Opening],
        warnings: List[PlacementWarning],
    ):
        self.footprint = footprint
        self.position = position
        self.mesh = mesh
        self.heights = heights
        self.materials = materials
        self.openings = openings
        self.warnings = warnings

    def to_dict(self) -> Dict[str, Any]:
        return {
            "footprint": self.footprint.to_dict(),
            "position": list(self.position),
            "mesh": self.mesh.to_dict(),
            "heights": [
                {"cell": [row, col], "height": height}
                for (row, col), height in sorted(self.heights.items())
            ],
            "materials": self.materials.to_dict(),
            "openings": [o.to_dict() for o in self.openings],
            "warnings": [w.to_dict() for w in self.warnings],
        }


def _pick(options: Sequence[str], stream: RandomStream) -> str:
    # coin flip between two configured textures
    return options[0] if stream.coin() else options[1]


class BuildingGenerator:
    """Composes catalog, mesh assembly and opening placement."""

    def __init__(
        self,
        catalog: FootprintCatalog,
        door_pool: AssetPool,
        window_pool: AssetPool,
        host: AssetHost,
        wall_textures: Sequence[str] = DEFAULT_WALL_TEXTURES,
        roof_textures: Sequence[str] = DEFAULT_ROOF_TEXTURES,
    ):
        if len(wall_textures) != 2 or len(roof_textures) != 2:
            raise ValueError("exactly two wall and two roof textures are required")
        self.catalog = catalog
        self.host = host
        self.placer = OpeningPlacer(door_pool, window_pool, host)
        self.wall_textures = tuple(wall_textures)
        self.roof_textures = tuple(roof_textures)

    def generate(
        self,
        stream: Union[RandomStream, int],
        position: Sequence[float] = (0.0, 0.0, 0.0),
        footprint: Optional[Footprint] = None,
    ) -> Building:
        """
        Generate one building at `position`.

        Args:
            stream: Shared random stream, advanced in the documented order,
                or an int seed for a fresh stream
            position: World-space offset of the building origin
            footprint: Explicit footprint; drawn from the catalog when None

        Returns:
            Building with local-space mesh and world-space openings
        """
        if not isinstance(stream, RandomStream):
            stream = RandomStream(stream)
        if footprint is None:
            footprint = self.catalog.choose(stream)
        origin = (float(position[0]), float(position[1]), float(position[2]))

        materials = MaterialsHint(
            _pick(self.wall_textures, stream),
            _pick(self.roof_textures, stream),
        )

        mesh, heights = assemble_footprint(footprint, stream)
        openings, warnings = self.place_openings(footprint, heights, stream, origin)

        logger.debug(
            "Generated %s at %s: %d cells, %d openings, %d warnings",
            footprint.name,
            origin,
            len(heights),
            len(openings),
            len(warnings),
        )
        return Building(footprint, origin, mesh, heights, materials, openings, warnings)

    def place_openings(
        self,
        footprint: Footprint,
        heights: Dict[Cell, float],
        stream: RandomStream,
        origin: Vec3,
    ) -> Tuple[List[Opening], List[PlacementWarning]]:
        """Run the placer over every exterior slot of every occupied cell."""
        occupied = set()
        openings: List[Opening] = []
        warnings: List[PlacementWarning] = []

        for row, col in footprint.occupied_cells():
            directions = exterior_directions(footprint, row, col)
            for floor in range(math.floor(heights[(row, col)])):
                for direction in directions:
                    slot = SlotKey(row, col, floor, direction)
                    opening = self.placer.place(
                        slot, floor == 0, stream, occupied, origin, warnings
                    )
                    if opening is not None:
                        openings.append(opening)

        return openings, warnings

    def generate_batch(self, seed: int, count: int, spacing: float = 4.0) -> List[Building]:
        """Generate `count` buildings along +X from one seeded stream."""
        stream = RandomStream(seed)
        return [self.generate(stream, (i * spacing, 0.0, 0.0)) for i in range(count)]

    def realize(self, building: Building) -> List[Any]:
        """Hand every opening to the host for instantiation, in order."""
        return [
            self.host.instantiate(opening.asset_id, opening.position, opening.yaw)
            for opening in building.openings
        ]
