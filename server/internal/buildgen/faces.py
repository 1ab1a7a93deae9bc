"""
Exterior face analysis over footprint grids.
"""

from enum import Enum
from typing import List, Tuple

from .footprints import Footprint


class Direction(Enum):
    """Wall face directions as (d_row, d_col, yaw_degrees).

    Yaw is the rotation about +Y that turns an asset's +Z forward vector
    toward the opposite of the face direction (yaw 90 turns +Z into +X).
    """

    FORWARD = (1, 0, 180.0)  # +Z
    BACK = (-1, 0, 0.0)  # -Z
    RIGHT = (0, 1, -90.0)  # +X
    LEFT = (0, -1, 90.0)  # -X

    @property
    def d_row(self) -> int:
        return self.value[0]

    @property
    def d_col(self) -> int:
        return self.value[1]

    @property
    def yaw(self) -> float:
        return self.value[2]

    @property
    def vector(self) -> Tuple[float, float, float]:
        """World-space unit vector (x, y, z); columns map to X, rows to Z."""
        return (float(self.d_col), 0.0, float(self.d_row))

    def neighbor(self, row: int, col: int) -> Tuple[int, int]:
        return row + self.d_row, col + self.d_col


# Order in which faces of a cell are visited during opening placement.
FACE_ORDER = (Direction.FORWARD, Direction.BACK, Direction.RIGHT, Direction.LEFT)


def is_exterior(footprint: Footprint, row: int, col: int) -> bool:
    """
    True if (row, col) is outside the grid or unoccupied.

    Called with a neighbor's coordinates to decide whether the face
    looking at that neighbor is an outside wall.
    """
    if row < 0 or row >= footprint.depth or col < 0 or col >= footprint.width:
        return True
    return footprint.rows[row][col] == 0


def exterior_directions(footprint: Footprint, row: int, col: int) -> List[Direction]:
    """Exterior faces of cell (row, col), in FACE_ORDER."""
    return [d for d in FACE_ORDER if is_exterior(footprint, *d.neighbor(row, col))]
