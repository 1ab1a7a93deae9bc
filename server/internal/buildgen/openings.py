"""
Door and window placement on exterior wall faces.

Every (cell, floor, direction) slot on an exterior face gets one uniform
draw r in [0, 1):

    ground floor, r < 0.3, doors available   -> door
    otherwise r < 0.6, windows available     -> window
    otherwise                                -> nothing

Both thresholds apply to the same draw, so the ground floor splits
0.3 door / 0.3 window / 0.4 nothing while upper floors get 0.6 window.
A second draw picks the variant within the chosen pool.

The placer only computes anchors. Asset bounds come from the host through
the AssetHost capability, and instantiation is left to the host as well.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Set, Tuple

from .faces import Direction
from .seeds import RandomStream

logger = logging.getLogger(__name__)

DOOR = "door"
WINDOW = "window"

DOOR_THRESHOLD = 0.3
WINDOW_THRESHOLD = 0.6

# __file__ = server/internal/buildgen/openings.py
DEFAULT_ASSETS_PATH = Path(__file__).resolve().parents[2] / "config" / "opening-assets.json"

Vec3 = Tuple[float, float, float]


class AssetBoundsError(LookupError):
    """Raised by a host when an asset has no usable bounding box."""


class SlotKey(NamedTuple):
    """One placement opportunity: a cell face at a given floor."""

    row: int
    col: int
    floor: int
    direction: Direction


class AssetPool:
    """Ordered pool of interchangeable asset ids for one opening kind."""

    def __init__(self, kind: str, asset_ids: Sequence[str] = ()):
        self.kind = kind
        self.asset_ids: Tuple[str, ...] = tuple(asset_ids)

    def pick(self, stream: RandomStream) -> Tuple[int, str]:
        """Uniformly pick a variant; returns (index, asset_id)."""
        index = stream.index(len(self.asset_ids))
        return index, self.asset_ids[index]

    def __len__(self) -> int:
        return len(self.asset_ids)

    def __repr__(self) -> str:
        return f"AssetPool({self.kind!r}, {list(self.asset_ids)!r})"


class AssetHost:
    """Capability supplied by the embedding application."""

    def resolve_asset_bounds(self, asset_id: str) -> Tuple[float, float]:
        """Return (height, depth) of the asset, or raise AssetBoundsError."""
        raise NotImplementedError

    def instantiate(self, asset_id: str, position: Vec3, yaw: float) -> Any:
        raise NotImplementedError


class StaticAssetHost(AssetHost):
    """Host backed by a fixed id -> (height, depth) table; records instantiations."""

    def __init__(self, bounds: Optional[Dict[str, Optional[Tuple[float, float]]]] = None):
        self.bounds = dict(bounds or {})
        self.instances: List[Dict[str, Any]] = []

    def resolve_asset_bounds(self, asset_id: str) -> Tuple[float, float]:
        size = self.bounds.get(asset_id)
        if size is None:
            raise AssetBoundsError(f"no bounding box for asset {asset_id!r}")
        height, depth = size
        if height <= 0 or depth < 0:
            raise AssetBoundsError(f"invalid bounding box for asset {asset_id!r}: {size}")
        return float(height), float(depth)

    def instantiate(self, asset_id: str, position: Vec3, yaw: float) -> Dict[str, Any]:
        instance = {"asset_id": asset_id, "position": list(position), "yaw": yaw}
        self.instances.append(instance)
        return instance


class Opening:
    """A placed door or window."""

    __slots__ = ("kind", "variant", "asset_id", "position", "yaw", "slot")

    def __init__(self, kind: str, variant: int, asset_id: str, position: Vec3, yaw: float, slot: SlotKey):
        self.kind = kind
        self.variant = variant
        self.asset_id = asset_id
        self.position = position
        self.yaw = yaw
        self.slot = slot

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "variant": self.variant,
            "asset_id": self.asset_id,
            "position": list(self.position),
            "yaw": self.yaw,
            "cell": [self.slot.row, self.slot.col],
            "floor": self.slot.floor,
            "direction": self.slot.direction.name.lower(),
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Opening):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self) -> str:
        return f"Opening({self.kind}#{self.variant} {self.asset_id!r} at {self.position}, yaw={self.yaw})"


class PlacementWarning:
    """A slot whose opening was chosen but could not be placed."""

    __slots__ = ("slot", "asset_id", "reason")

    def __init__(self, slot: SlotKey, asset_id: str, reason: str):
        self.slot = slot
        self.asset_id = asset_id
        self.reason = reason

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cell": [self.slot.row, self.slot.col],
            "floor": self.slot.floor,
            "direction": self.slot.direction.name.lower(),
            "asset_id": self.asset_id,
            "reason": self.reason,
        }


def roll_outcome(r: float, ground_floor: bool, has_doors: bool, has_windows: bool) -> Optional[str]:
    """Map one uniform draw to DOOR, WINDOW or None."""
    if ground_floor and r < DOOR_THRESHOLD and has_doors:
        return DOOR
    if r < WINDOW_THRESHOLD and has_windows:
        return WINDOW
    return None


def face_anchor(origin: Sequence[float], slot: SlotKey, asset_height: float, asset_depth: float) -> Vec3:
    """
    World position for an asset whose pivot sits at its base center.

    Starts at the center of the unit wall face on the slot's floor, drops
    to the asset's base and pushes it out by half its depth.
    """
    dx, _, dz = slot.direction.vector
    center_x = origin[0] + slot.col + 0.5 + dx * 0.5
    center_y = origin[1] + slot.floor + 0.5
    center_z = origin[2] + slot.row + 0.5 + dz * 0.5

    lift = asset_height / 2.0 - 0.5
    push = asset_depth / 2.0
    return (center_x + dx * push, center_y + lift, center_z + dz * push)


class OpeningPlacer:
    """Decides and positions openings for one building's exterior slots."""

    def __init__(self, door_pool: AssetPool, window_pool: AssetPool, host: AssetHost):
        self.door_pool = door_pool
        self.window_pool = window_pool
        self.host = host

    def place(
        self,
        slot: SlotKey,
        ground_floor: bool,
        stream: RandomStream,
        occupied: Set[SlotKey],
        origin: Sequence[float] = (0.0, 0.0, 0.0),
        warnings: Optional[List[PlacementWarning]] = None,
    ) -> Optional[Opening]:
        """
        Try to place a door or window on one slot.

        Args:
            slot: Cell, floor and face being decided
            ground_floor: Whether doors are allowed on this slot
            stream: Shared random stream
            occupied: Slots already holding an opening; updated on success
            origin: World-space position of the building
            warnings: Collects slots skipped for missing asset bounds

        Returns:
            The Opening, or None when nothing is placed
        """
        if slot in occupied:
            return None

        kind = roll_outcome(
            stream.value(), ground_floor, len(self.door_pool) > 0, len(self.window_pool) > 0
        )
        if kind is None:
            return None

        pool = self.door_pool if kind == DOOR else self.window_pool
        variant, asset_id = pool.pick(stream)

        try:
            height, depth = self.host.resolve_asset_bounds(asset_id)
        except AssetBoundsError as e:
            logger.warning("Skipping %s at %s: %s", kind, slot, e)
            if warnings is not None:
                warnings.append(PlacementWarning(slot, asset_id, str(e)))
            return None

        position = face_anchor(origin, slot, height, depth)
        occupied.add(slot)
        return Opening(kind, variant, asset_id, position, slot.direction.yaw, slot)


def load_opening_assets(path=None) -> Tuple[AssetPool, AssetPool, StaticAssetHost]:
    """
    Load door and window pools from JSON.

    Format: {"doors": [{"id": ..., "height": ..., "depth": ...}], "windows": [...]}.
    Entries without height/depth stay in their pool but have no bounds;
    entries without an id raise ValueError.

    Returns:
        (door_pool, window_pool, host)
    """
    path = Path(path) if path is not None else DEFAULT_ASSETS_PATH
    if not path.exists():
        raise FileNotFoundError(f"Opening assets not found: {path}")

    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)

    bounds: Dict[str, Optional[Tuple[float, float]]] = {}
    pools = {}
    for kind, key in ((DOOR, "doors"), (WINDOW, "windows")):
        ids = []
        for index, entry in enumerate(data.get(key, [])):
            asset_id = entry.get("id") if isinstance(entry, dict) else None
            if not asset_id:
                raise ValueError(f"{path}: {key}[{index}] has no 'id'")
            ids.append(asset_id)
            if entry.get("height") is not None and entry.get("depth") is not None:
                bounds[asset_id] = (float(entry["height"]), float(entry["depth"]))
            else:
                bounds[asset_id] = None
        pools[kind] = AssetPool(kind, ids)

    logger.debug("Loaded %d doors, %d windows from %s", len(pools[DOOR]), len(pools[WINDOW]), path)
    return pools[DOOR], pools[WINDOW], StaticAssetHost(bounds)
