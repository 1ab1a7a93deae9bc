"""
Footprint grids and the catalog buildings draw them from.

A footprint is a rectangular 0/1 occupancy grid. Rows run along +Z and
columns along +X, so cell (row, col) occupies the unit square whose
minimum corner is (x=col, z=row).
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

import shapely.geometry as sg
import shapely.ops as so

from .seeds import RandomStream

logger = logging.getLogger(__name__)

# __file__ = server/internal/buildgen/footprints.py
# config lives at server/config
_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"
DEFAULT_CATALOG_PATH = _CONFIG_DIR / "footprints.json"

# 2 rectangular, 4 concave
DEFAULT_FOOTPRINTS: List[Tuple[str, List[List[int]]]] = [
    ("rect_2x3", [
        [1, 1, 1],
        [1, 1, 1],
    ]),
    ("rect_3x3", [
        [1, 1, 1],
        [1, 1, 1],
        [1, 1, 1],
    ]),
    ("l_shape", [
        [1, 0, 0],
        [1, 1, 1],
    ]),
    ("u_shape", [
        [1, 1, 1],
        [1, 0, 1],
    ]),
    ("notch", [
        [1, 1, 1],
        [1, 1, 0],
    ]),
    ("step", [
        [1, 1, 1],
        [1, 1, 1],
        [1, 0, 0],
    ]),
]


class FootprintError(ValueError):
    """Raised for a malformed footprint grid or catalog entry."""


class Footprint:
    """Immutable rectangular occupancy grid."""

    __slots__ = ("_rows", "name")

    def __init__(self, rows: Sequence[Sequence[int]], name: Optional[str] = None):
        label = name or "footprint"
        if not isinstance(rows, (list, tuple)):
            raise FootprintError(f"{label}: grid is not a sequence of rows")
        for row_index, row in enumerate(rows):
            if not isinstance(row, (list, tuple)):
                raise FootprintError(f"{label}: row {row_index} is not a sequence")
        if not rows or not rows[0]:
            raise FootprintError(f"{label}: grid has no cells")

        width = len(rows[0])
        normalized = []
        for row_index, row in enumerate(rows):
            if len(row) != width:
                raise FootprintError(
                    f"{label}: row {row_index} has {len(row)} cells, expected {width}"
                )
            for value in row:
                # bool is accepted as an int subclass
                if value not in (0, 1):
                    raise FootprintError(f"{label}: cell value {value!r} is not 0 or 1")
            normalized.append(tuple(int(v) for v in row))

        if not any(any(row) for row in normalized):
            raise FootprintError(f"{label}: no occupied cells")

        self._rows: Tuple[Tuple[int, ...], ...] = tuple(normalized)
        self.name = name

    @property
    def rows(self) -> Tuple[Tuple[int, ...], ...]:
        return self._rows

    @property
    def depth(self) -> int:
        """Number of rows (Z extent)."""
        return len(self._rows)

    @property
    def width(self) -> int:
        """Number of columns (X extent)."""
        return len(self._rows[0])

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.depth and 0 <= col < self.width

    def is_occupied(self, row: int, col: int) -> bool:
        return self.in_bounds(row, col) and self._rows[row][col] == 1

    def occupied_cells(self) -> List[Tuple[int, int]]:
        """Occupied (row, col) pairs in row-major order."""
        return [
            (row, col)
            for row in range(self.depth)
            for col in range(self.width)
            if self._rows[row][col] == 1
        ]

    def outline(self):
        """Union of the occupied unit cells as a shapely geometry (x=col, y=row)."""
        cells = [sg.box(col, row, col + 1, row + 1) for row, col in self.occupied_cells()]
        return so.unary_union(cells)

    def is_concave(self) -> bool:
        outline = self.outline()
        return outline.area < outline.convex_hull.area - 1e-9

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "rows": [list(row) for row in self._rows],
            "width": self.width,
            "depth": self.depth,
            "occupied_cells": len(self.occupied_cells()),
            "concave": self.is_concave(),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Footprint):
            return NotImplemented
        return self._rows == other._rows

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"Footprint(name={self.name!r}, rows={[list(r) for r in self._rows]!r})"


class FootprintCatalog:
    """Ordered, replaceable list of footprints a building can be drawn from."""

    def __init__(self, footprints: Sequence[Footprint]):
        if not footprints:
            raise FootprintError("footprint catalog is empty")
        self._footprints: List[Footprint] = list(footprints)

    @classmethod
    def default(cls) -> "FootprintCatalog":
        return cls([Footprint(rows, name=name) for name, rows in DEFAULT_FOOTPRINTS])

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> "FootprintCatalog":
        entries = data.get("footprints")
        if not isinstance(entries, list):
            raise FootprintError("catalog data must contain a 'footprints' list")

        footprints = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict) or "rows" not in entry:
                raise FootprintError(f"catalog entry {index} has no 'rows'")
            footprints.append(Footprint(entry["rows"], name=entry.get("name") or f"footprint_{index}"))
        return cls(footprints)

    @classmethod
    def from_json(cls, path) -> "FootprintCatalog":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Footprint catalog not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_data(data)

    def choose(self, stream: RandomStream) -> Footprint:
        """Pick one footprint uniformly at random (one draw)."""
        return self._footprints[stream.index(len(self._footprints))]

    def get(self, name: str) -> Optional[Footprint]:
        for footprint in self._footprints:
            if footprint.name == name:
                return footprint
        return None

    def names(self) -> List[Optional[str]]:
        return [footprint.name for footprint in self._footprints]

    def __len__(self) -> int:
        return len(self._footprints)

    def __iter__(self) -> Iterator[Footprint]:
        return iter(self._footprints)

    def __getitem__(self, index: int) -> Footprint:
        return self._footprints[index]


def load_catalog(path=None) -> FootprintCatalog:
    """Load the catalog from a JSON file, or fall back to the built-in footprints."""
    if path is None:
        return FootprintCatalog.default()
    catalog = FootprintCatalog.from_json(path)
    logger.debug("Loaded %d footprints from %s", len(catalog), path)
    return catalog
